"""Per-line class/method attribution by brace-depth tracking.

This is a lexer-level heuristic, not a grammar: brace-less bodies and
signatures spread over several lines are not specially handled.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import List, Optional, Sequence, Tuple

from c0diff.coverage.lexer import LexMode, ScannedLine, scan_line

CLASS_DECLARATION_RE = re.compile(
    r"(?:^|\s)(?:record\s+(?:struct|class)|class|struct|record|interface)\s+(\w+)"
)

# Candidate method name: identifier, optional (one level nested) generic list, "("
_METHOD_NAME_RE = re.compile(r"\b(\w+)\s*(?:<[^<>()]*(?:<[^<>()]*>[^<>()]*)*>)?\s*\(")
# Modifiers and return type in front of the name
_METHOD_PREFIX_RE = re.compile(r"[\w<>\[\]?,.@\s]*\s")

NON_METHOD_KEYWORDS = (
    "if", "else", "for", "foreach", "while", "do", "switch", "case", "catch",
    "using", "lock", "fixed", "return", "throw", "yield", "var", "new", "await",
    "nameof", "typeof", "sizeof", "default", "checked", "unchecked", "goto",
    "in", "is", "as", "when", "where", "namespace",
)
_NON_METHOD_START_RE = re.compile(r"^(?:%s)\b" % "|".join(NON_METHOD_KEYWORDS))

ACCESSOR_NAMES = frozenset({"get", "set", "init", "add", "remove"})

_TYPE_DECLARATION_RE = r"\b(?:class|struct|record|enum|interface)\s+%s\b"


@dataclass(frozen=True)
class ScopeEntry:
    """Nearest enclosing class and method of one source line."""

    class_name: Optional[str] = None
    method_name: Optional[str] = None


@dataclass(frozen=True)
class ScopeFrame:
    kind: str  # "class" or "method"
    name: str
    brace_depth: int
    previous_class: Optional[str]
    previous_method: Optional[str]


@dataclass(frozen=True)
class ScopeState:
    """Everything carried from one line to the next."""

    mode: LexMode = LexMode.CODE
    depth: int = 0
    stack: Tuple[ScopeFrame, ...] = ()
    class_name: Optional[str] = None
    method_name: Optional[str] = None

    @property
    def entry(self) -> ScopeEntry:
        return ScopeEntry(self.class_name, self.method_name)


def match_class_name(code: str) -> Optional[str]:
    """Name declared by a class/struct/record/interface line, if any."""
    match = CLASS_DECLARATION_RE.search(code)
    return match.group(1) if match else None


def match_method_name(code: str) -> Optional[str]:
    """Name declared by a method signature line, if any.

    Args:
        code: Code-only text of the line with leading whitespace removed.
    """
    if not code.strip():
        return None
    if _NON_METHOD_START_RE.match(code):
        return None
    if "=>" in code and "(" not in code:
        return None

    match = _METHOD_NAME_RE.search(code)
    if not match:
        return None
    prefix = code[: match.start()]
    if not re.search(r"\w", prefix) or not _METHOD_PREFIX_RE.fullmatch(prefix):
        return None

    name = match.group(1)
    if name in ACCESSOR_NAMES:
        return None
    if re.search(_TYPE_DECLARATION_RE % re.escape(name), code):
        return None
    return name


def close_frames(stack: List, depth: int) -> List:
    """Pop every frame opened at or deeper than ``depth``; return them in pop order.

    Frames are anything carrying a ``brace_depth``: scope frames and open branches.
    """
    closed = []
    while stack and stack[-1].brace_depth >= depth:
        closed.append(stack.pop())
    return closed


def step_scope(state: ScopeState, line: str) -> Tuple[ScopeState, ScopeEntry, ScannedLine]:
    """Advance the scope state over one raw line.

    Returns the new state, the attribution for this line (taken after the
    line's own declaration and braces are applied, except that a declaration
    whose body also closes on the line keeps the scope it opened) and the
    lexed line.
    """
    scanned = scan_line(line, state.mode)
    if scanned.is_directive:
        return state, state.entry, scanned

    code, _ = scanned.trimmed()
    stack = list(state.stack)
    class_name = state.class_name
    method_name = state.method_name
    opened: Optional[ScopeFrame] = None

    declared_class = match_class_name(code)
    if declared_class:
        opened = ScopeFrame("class", declared_class, state.depth, class_name, method_name)
        class_name = declared_class
        method_name = None
    else:
        declared_method = match_method_name(code)
        if declared_method and class_name is not None:
            opened = ScopeFrame("method", declared_method, state.depth, class_name, method_name)
            method_name = declared_method
    if opened is not None:
        stack.append(opened)
    declared = ScopeEntry(class_name, method_name)

    depth = state.depth + scanned.brace_delta
    closed: List[ScopeFrame] = []
    # Only a closing brace ends a scope; a header whose "{" is on the next line stays open.
    if "}" in scanned.code:
        closed = close_frames(stack, depth)
        for frame in closed:
            class_name = frame.previous_class
            method_name = frame.previous_method

    new_state = ScopeState(
        mode=scanned.mode_after,
        depth=depth,
        stack=tuple(stack),
        class_name=class_name,
        method_name=method_name,
    )
    # A declaration line belongs to the scope it opens, even a body closed on that line.
    entry = declared if any(frame is opened for frame in closed) else new_state.entry
    return new_state, entry, scanned


def track_scopes(source_lines: Sequence[str]) -> Tuple[ScopeState, List[ScopeEntry]]:
    """Fold ``step_scope`` over a file, returning the final state and per-line entries."""
    state = ScopeState()
    entries: List[ScopeEntry] = []
    for line in source_lines:
        state, entry, _ = step_scope(state, line)
        entries.append(entry)
    return state, entries


def extract_scopes(source_lines: Sequence[str]) -> List[ScopeEntry]:
    """Attribute every source line to its enclosing class and method.

    Args:
        source_lines: One file's source, one entry per line.

    Returns:
        A ScopeEntry per input line; both names are None outside any class.
    """
    _, entries = track_scopes(source_lines)
    return entries
