"""C0 (branch coverage) case generation for changed lines."""

from __future__ import annotations

from typing import Iterable, Iterator, List

from c0diff.coverage.branches import BranchInfo, BranchKind, extract_branches
from c0diff.coverage.scope import extract_scopes
from c0diff.models.case import C0TestCase

TRUE_SUFFIX = " → true"
FALSE_SUFFIX = " → false"


def expand_branch(branch: BranchInfo) -> List[C0TestCase]:
    """Expand one branch into the cases needed to cover it.

    ``if``/``else if`` need both outcomes. A bare ``else`` is the false
    outcome of the preceding ``if`` and adds nothing. ``switch``, ``case``
    and ``default`` yield one case each, verbatim.
    """
    if branch.kind in (BranchKind.IF, BranchKind.ELSE_IF):
        return [
            C0TestCase(branch.class_name, branch.method_name, branch.condition + TRUE_SUFFIX),
            C0TestCase(branch.class_name, branch.method_name, branch.condition + FALSE_SUFFIX),
        ]
    if branch.kind == BranchKind.ELSE:
        return []
    return [C0TestCase(branch.class_name, branch.method_name, branch.condition)]


def dedupe_cases(cases: Iterable[C0TestCase]) -> List[C0TestCase]:
    """Drop repeated (class, method, condition) triples, keeping first occurrences in order."""
    seen = set()
    unique: List[C0TestCase] = []
    for case in cases:
        if case.key in seen:
            continue
        seen.add(case.key)
        unique.append(case)
    return unique


def _expand_all(branches: Iterable[BranchInfo]) -> Iterator[C0TestCase]:
    for branch in branches:
        yield from expand_branch(branch)


def split_source_lines(source_text: str) -> List[str]:
    return [line.rstrip("\r") for line in source_text.split("\n")]


def generate_c0_cases(source_text: str, changed_line_numbers: Iterable[int]) -> List[C0TestCase]:
    """Generate deduplicated C0 cases for branches touched by changed lines.

    Args:
        source_text: Full new-revision source of one file.
        changed_line_numbers: 1-based line numbers changed in that file.

    Returns:
        Cases in discovery order, each (class, method, condition) at most once.
    """
    changed = list(changed_line_numbers)
    if not changed or not source_text:
        return []
    lines = split_source_lines(source_text)
    scopes = extract_scopes(lines)
    return dedupe_cases(_expand_all(extract_branches(lines, scopes, changed)))
