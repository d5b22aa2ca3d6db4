"""Data models for C0 case reports"""

from c0diff.models.case import C0TestCase
from c0diff.models.result import CaseReport, FileCaseResult

__all__ = ["C0TestCase", "CaseReport", "FileCaseResult"]
