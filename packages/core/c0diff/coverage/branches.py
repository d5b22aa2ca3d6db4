"""Branch construct detection inside changed methods."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import re
from typing import AbstractSet, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from c0diff.coverage.lexer import LexMode, ScannedLine, scan_line
from c0diff.coverage.scope import ScopeEntry, close_frames

logger = logging.getLogger(__name__)


class BranchKind(str, Enum):
    """Branch constructs recognised at the start of a line"""
    IF = "if"
    ELSE_IF = "else_if"
    ELSE = "else"
    SWITCH = "switch"
    CASE = "case"
    DEFAULT = "default"


# Evaluated in order; "else if" must win over both "if" and "else".
BRANCH_MATCHERS: Tuple[Tuple[BranchKind, re.Pattern], ...] = (
    (BranchKind.ELSE_IF, re.compile(r"^else\s+if\s*\(")),
    (BranchKind.IF, re.compile(r"^if\s*\(")),
    (BranchKind.ELSE, re.compile(r"^else\s*\{?$")),
    (BranchKind.SWITCH, re.compile(r"^switch\s*\(")),
    (BranchKind.CASE, re.compile(r"^case\s+(.+?):")),
    (BranchKind.DEFAULT, re.compile(r"^default\s*:")),
)

_CONDITION_KEYWORDS = {
    BranchKind.IF: "if",
    BranchKind.ELSE_IF: "else if",
    BranchKind.SWITCH: "switch",
}


@dataclass(frozen=True)
class BranchHeader:
    kind: BranchKind
    condition: str


@dataclass(frozen=True)
class BranchInfo:
    """A branch construct and the brace depth it was opened at."""

    class_name: str
    method_name: str
    kind: BranchKind
    condition: str
    start_line: int
    brace_depth: int


@dataclass(frozen=True)
class BranchState:
    mode: LexMode = LexMode.CODE
    depth: int = 0
    stack: Tuple[BranchInfo, ...] = ()


def extract_condition(code: str, raw: str, start: int) -> Optional[str]:
    """Text between the ``(`` ending at ``start`` and its matching ``)``.

    Parentheses are balanced on the code-only text so ones inside strings or
    comments are ignored; the returned text is sliced from the raw line.
    Returns None when the parenthesis is not closed on this line.
    """
    depth = 1
    for end in range(start, len(code)):
        if code[end] == "(":
            depth += 1
        elif code[end] == ")":
            depth -= 1
            if depth == 0:
                return raw[start:end].strip()
    return None


def match_branch(code: str, raw: str) -> Optional[BranchHeader]:
    """Classify the branch construct a line starts with.

    Args:
        code: Code-only text with leading whitespace removed.
        raw: Raw text aligned with ``code``.

    Returns:
        The matched header, or None for any other line.
    """
    for kind, pattern in BRANCH_MATCHERS:
        match = pattern.match(code)
        if not match:
            continue
        if kind in _CONDITION_KEYWORDS:
            keyword = _CONDITION_KEYWORDS[kind]
            condition = extract_condition(code, raw, match.end())
            if condition is None:
                logger.debug("Unbalanced parenthesis in %r", raw)
                return BranchHeader(kind, f"{keyword} (...)")
            return BranchHeader(kind, f"{keyword} ({condition})")
        if kind == BranchKind.CASE:
            label = raw[match.start(1) : match.end(1)].strip()
            return BranchHeader(kind, f"case {label}:")
        if kind == BranchKind.DEFAULT:
            return BranchHeader(kind, "default:")
        return BranchHeader(kind, "else")
    return None


def find_branch(scanned: ScannedLine) -> Optional[Tuple[BranchHeader, int]]:
    """Locate the branch header a line starts with, or the first one after a ``{``.

    Returns the header and the number of braces still open in front of it.
    """
    code, raw = scanned.trimmed()
    header = match_branch(code, raw)
    if header is not None:
        return header, 0

    opening = -1
    while True:
        opening = code.find("{", opening + 1)
        if opening < 0:
            return None
        rest = code[opening + 1 :]
        offset = opening + 1 + len(rest) - len(rest.lstrip())
        header = match_branch(code[offset:], raw[offset:])
        if header is not None:
            before = code[:offset]
            return header, before.count("{") - before.count("}")


def _touches(changed_lines: AbstractSet[int], start: int, end: int) -> bool:
    return any(start <= line <= end for line in changed_lines)


def changed_methods(
    scopes: Sequence[ScopeEntry], changed_lines: Iterable[int]
) -> Set[Tuple[str, str]]:
    """(class, method) pairs that contain at least one changed line."""
    methods: Set[Tuple[str, str]] = set()
    for line_num in changed_lines:
        if 1 <= line_num <= len(scopes):
            entry = scopes[line_num - 1]
            if entry.class_name is not None and entry.method_name is not None:
                methods.add((entry.class_name, entry.method_name))
    return methods


def step_branches(
    state: BranchState,
    line: str,
    line_num: int,
    scope: Optional[ScopeEntry],
    changed_lines: AbstractSet[int],
) -> Tuple[BranchState, List[BranchInfo]]:
    """Advance the branch state over one line.

    ``scope`` is the line's attribution when it lies inside a changed method,
    otherwise None; only such lines are checked for branch headers.

    Returns the new state and the branches accepted on this line.
    """
    scanned = scan_line(line, state.mode)
    if scanned.is_directive:
        return state, []

    stack = list(state.stack)
    accepted: List[BranchInfo] = []
    opened: Optional[BranchInfo] = None

    found = find_branch(scanned) if scope is not None else None
    if found is not None:
        header, nesting = found
        opened = BranchInfo(
            class_name=scope.class_name,
            method_name=scope.method_name,
            kind=header.kind,
            condition=header.condition,
            start_line=line_num,
            brace_depth=state.depth + nesting,
        )
        # An edited condition counts even when its body is untouched.
        if line_num not in changed_lines:
            stack.append(opened)

    depth = state.depth + scanned.brace_delta
    if "}" in scanned.code:
        for closed in close_frames(stack, depth):
            if _touches(changed_lines, closed.start_line, line_num):
                accepted.append(closed)

    if opened is not None and line_num in changed_lines:
        accepted.append(opened)

    return BranchState(mode=scanned.mode_after, depth=depth, stack=tuple(stack)), accepted


def extract_branches(
    source_lines: Sequence[str],
    scopes: Sequence[ScopeEntry],
    changed_lines: Iterable[int],
) -> Iterator[BranchInfo]:
    """Yield branches whose header or body contains a changed line.

    Args:
        source_lines: One file's source lines.
        scopes: Output of ``extract_scopes`` for the same lines.
        changed_lines: 1-based changed line numbers.
    """
    changed = frozenset(changed_lines)
    methods = changed_methods(scopes, changed)
    if not methods:
        return

    state = BranchState()
    for index, line in enumerate(source_lines):
        entry = scopes[index] if index < len(scopes) else None
        in_scope = (
            entry is not None and (entry.class_name, entry.method_name) in methods
        )
        state, accepted = step_branches(
            state, line, index + 1, entry if in_scope else None, changed
        )
        yield from accepted

    last_line = len(source_lines)
    for branch in reversed(state.stack):
        if _touches(changed, branch.start_line, last_line):
            yield branch
