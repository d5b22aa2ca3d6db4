"""Unified diff parsing for a single file's patch."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import re
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


HUNK_HEADER_RE = re.compile(
    r"^@@\s+-(?P<old_start>\d+)(?:,(?P<old_count>\d+))?\s+\+(?P<new_start>\d+)"
    r"(?:,(?P<new_count>\d+))?\s+@@"
)


class MalformedHunkHeaderError(ValueError):
    """Raised when an ``@@`` line does not carry parsable line ranges."""


class DiffLineType(str, Enum):
    """Kinds of lines inside a single-file patch"""
    CONTEXT = "context"
    ADDED = "added"
    DELETED = "deleted"
    HUNK = "hunk"


_MARKERS = {
    DiffLineType.CONTEXT: " ",
    DiffLineType.ADDED: "+",
    DiffLineType.DELETED: "-",
    DiffLineType.HUNK: "",
}


@dataclass(frozen=True)
class DiffLine:
    """Represents a single line of a parsed patch.

    Added lines carry only ``new_line_num``, deleted lines only ``old_line_num``,
    context lines both. Hunk lines carry the raw header text and no numbers.
    """

    type: DiffLineType
    content: str
    old_line_num: Optional[int] = None
    new_line_num: Optional[int] = None

    @property
    def marker(self) -> str:
        return _MARKERS[self.type]

    def to_patch_line(self) -> str:
        """Rebuild the patch line this entry was parsed from."""
        return f"{self.marker}{self.content}"


@dataclass(frozen=True)
class HunkHeader:
    """Line ranges announced by an ``@@ -a,b +c,d @@`` header."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int

    @property
    def first_old_line(self) -> int:
        # A zero-length range names the line *before* the change.
        return self.old_start + 1 if self.old_count == 0 else self.old_start

    @property
    def first_new_line(self) -> int:
        return self.new_start + 1 if self.new_count == 0 else self.new_start


@dataclass
class FilePatch:
    """One file's section of a multi-file patch."""

    old_path: Optional[str]
    new_path: Optional[str]
    patch_text: str
    is_new: bool = False
    is_deleted: bool = False
    is_renamed: bool = False

    @property
    def path(self) -> Optional[str]:
        return self.new_path or self.old_path


def _split_lines(text: str) -> List[str]:
    lines = [line.rstrip("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_hunk_header(line: str) -> HunkHeader:
    """Parse a hunk header line.

    Raises:
        MalformedHunkHeaderError: If the line has no valid ``-a,b +c,d`` ranges.
    """
    match = HUNK_HEADER_RE.match(line)
    if not match:
        raise MalformedHunkHeaderError(f"Malformed hunk header: {line!r}")
    return HunkHeader(
        old_start=int(match.group("old_start")),
        old_count=int(match.group("old_count") or 1),
        new_start=int(match.group("new_start")),
        new_count=int(match.group("new_count") or 1),
    )


def parse_unified_diff(patch_text: str) -> List[DiffLine]:
    """Parse one file's unified diff into an ordered line sequence.

    Lines before the first valid hunk header (``diff --git``, ``---``, ``+++``,
    mode lines) are skipped. A malformed hunk header is logged and ignored;
    the body lines that follow it are skipped until the next valid header.

    Args:
        patch_text: Raw patch for exactly one file.

    Returns:
        DiffLine entries for every hunk header and hunk body line.
    """
    lines: List[DiffLine] = []
    old_line = 0
    new_line = 0
    in_hunk = False

    for line in _split_lines(patch_text):
        if line.startswith("@@"):
            try:
                header = parse_hunk_header(line)
            except MalformedHunkHeaderError as exc:
                logger.warning("Skipping hunk: %s", exc)
                in_hunk = False
                continue
            old_line = header.old_start
            new_line = header.new_start
            in_hunk = True
            lines.append(DiffLine(DiffLineType.HUNK, line))
            continue

        if not in_hunk:
            continue

        prefix = line[:1]
        content = line[1:]

        if prefix == "+":
            lines.append(DiffLine(DiffLineType.ADDED, content, new_line_num=new_line))
            new_line += 1
        elif prefix == "-":
            lines.append(DiffLine(DiffLineType.DELETED, content, old_line_num=old_line))
            old_line += 1
        elif prefix == " " or line == "":
            lines.append(
                DiffLine(
                    DiffLineType.CONTEXT,
                    content,
                    old_line_num=old_line,
                    new_line_num=new_line,
                )
            )
            old_line += 1
            new_line += 1
        # "\ No newline at end of file" and other unprefixed lines carry no content

    return lines


def changed_line_numbers(diff_lines: Sequence[DiffLine]) -> List[int]:
    """New-file line numbers touched by added lines, in patch order."""
    return [
        line.new_line_num
        for line in diff_lines
        if line.type == DiffLineType.ADDED and line.new_line_num is not None
    ]


def diff_stats(diff_lines: Sequence[DiffLine]) -> Dict[str, int]:
    """Count added and deleted lines."""
    added = sum(1 for line in diff_lines if line.type == DiffLineType.ADDED)
    deleted = sum(1 for line in diff_lines if line.type == DiffLineType.DELETED)
    return {"added": added, "deleted": deleted}


def _strip_diff_prefix(path: str) -> Optional[str]:
    path = path.split("\t", 1)[0].strip()
    if path.startswith("a/") or path.startswith("b/"):
        path = path[2:]
    if path in ("/dev/null", "dev/null"):
        return None
    return path or None


def split_patch(patch_text: str) -> List[FilePatch]:
    """Split a multi-file ``git diff`` output into per-file patches.

    Args:
        patch_text: Output of ``git diff`` covering any number of files.

    Returns:
        FilePatch records in patch order, each holding its own section text.
    """
    patches: List[FilePatch] = []
    current: Optional[FilePatch] = None
    section: List[str] = []
    in_hunk = False

    def _finish() -> None:
        if current is not None:
            current.patch_text = "\n".join(section) + "\n"
            patches.append(current)

    for line in _split_lines(patch_text):
        if line.startswith("diff --git"):
            _finish()
            parts = line.split()
            current = FilePatch(
                old_path=_strip_diff_prefix(parts[2]) if len(parts) > 2 else None,
                new_path=_strip_diff_prefix(parts[3]) if len(parts) > 3 else None,
                patch_text="",
            )
            section = [line]
            in_hunk = False
            continue

        if current is None:
            continue
        section.append(line)

        if line.startswith("@@"):
            in_hunk = True
            continue
        if in_hunk:
            continue

        if line.startswith("new file mode"):
            current.is_new = True
        elif line.startswith("deleted file mode"):
            current.is_deleted = True
        elif line.startswith("rename from "):
            current.old_path = line[len("rename from ") :].strip() or current.old_path
            current.is_renamed = True
        elif line.startswith("rename to "):
            current.new_path = line[len("rename to ") :].strip() or current.new_path
            current.is_renamed = True
        elif line.startswith("--- "):
            old_path = _strip_diff_prefix(line[4:])
            if old_path is None:
                current.old_path = None
                current.is_new = True
        elif line.startswith("+++ "):
            new_path = _strip_diff_prefix(line[4:])
            if new_path is None:
                current.new_path = None
                current.is_deleted = True

    _finish()
    return patches
