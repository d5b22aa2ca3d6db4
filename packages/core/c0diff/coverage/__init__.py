"""Scope tracking, branch extraction and C0 case generation."""

from c0diff.coverage.scope import ScopeEntry, extract_scopes
from c0diff.coverage.branches import BranchInfo, BranchKind, extract_branches, match_branch
from c0diff.coverage.cases import dedupe_cases, expand_branch, generate_c0_cases

__all__ = [
    "ScopeEntry",
    "extract_scopes",
    "BranchInfo",
    "BranchKind",
    "extract_branches",
    "match_branch",
    "dedupe_cases",
    "expand_branch",
    "generate_c0_cases",
]
