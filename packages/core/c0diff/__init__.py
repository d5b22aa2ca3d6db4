"""
c0diff - Side-by-side diffs and C0 test cases for changed branches
"""

from c0diff.coverage.cases import generate_c0_cases
from c0diff.coverage.scope import extract_scopes
from c0diff.diff.parser import parse_unified_diff
from c0diff.diff.side_by_side import build_side_by_side
from c0diff.models.case import C0TestCase
from c0diff.models.result import CaseReport, FileCaseResult
from c0diff.reporters.markdown_reporter import MarkdownReporter
from c0diff.scanner.case_scanner import CaseScanner

__version__ = "0.1.0"

__all__ = [
    "parse_unified_diff",
    "build_side_by_side",
    "extract_scopes",
    "generate_c0_cases",
    "C0TestCase",
    "CaseReport",
    "FileCaseResult",
    "MarkdownReporter",
    "CaseScanner",
]
