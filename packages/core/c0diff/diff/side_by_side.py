"""Side-by-side reconstruction of a whole file from a sparse unified diff."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Sequence

from c0diff.diff.parser import (
    DiffLine,
    DiffLineType,
    MalformedHunkHeaderError,
    parse_hunk_header,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SideBySideLine:
    """One aligned row. A ``None`` line number marks a padding cell."""

    left_line_num: Optional[int]
    left_content: str
    right_line_num: Optional[int]
    right_content: str
    left_type: DiffLineType = DiffLineType.CONTEXT
    right_type: DiffLineType = DiffLineType.CONTEXT


def split_file_lines(content: Optional[bytes], encoding: str = "utf-8") -> List[str]:
    """Decode file content and split it into lines.

    Absent content (file missing at that revision) yields no lines. A final
    newline does not produce a trailing empty line.
    """
    if content is None:
        return []
    text = content.decode(encoding, errors="replace")
    lines = [line.rstrip("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _line_at(lines: Sequence[str], one_based: int) -> str:
    if 1 <= one_based <= len(lines):
        return lines[one_based - 1]
    return ""


def build_side_by_side(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    diff_lines: Sequence[DiffLine],
) -> List[SideBySideLine]:
    """Align the full old and new file contents using a parsed diff.

    Unchanged regions the diff omits are copied from the file contents, so
    every line of both files appears exactly once on its side.

    Args:
        old_lines: Complete old file, one entry per line.
        new_lines: Complete new file, one entry per line.
        diff_lines: Output of ``parse_unified_diff`` for the same file.

    Returns:
        Rows spanning the entire file.
    """
    rows: List[SideBySideLine] = []
    old_pos = 1
    new_pos = 1
    i = 0

    while i < len(diff_lines):
        line = diff_lines[i]

        if line.type == DiffLineType.HUNK:
            try:
                header = parse_hunk_header(line.content)
            except MalformedHunkHeaderError as exc:
                logger.warning("Cannot backfill before hunk: %s", exc)
                i += 1
                continue
            while old_pos < header.first_old_line or new_pos < header.first_new_line:
                take_old = old_pos < header.first_old_line
                take_new = new_pos < header.first_new_line
                rows.append(
                    SideBySideLine(
                        left_line_num=old_pos if take_old else None,
                        left_content=_line_at(old_lines, old_pos) if take_old else "",
                        right_line_num=new_pos if take_new else None,
                        right_content=_line_at(new_lines, new_pos) if take_new else "",
                    )
                )
                if take_old:
                    old_pos += 1
                if take_new:
                    new_pos += 1
            i += 1
            continue

        if line.type == DiffLineType.CONTEXT:
            rows.append(
                SideBySideLine(
                    left_line_num=line.old_line_num,
                    left_content=line.content,
                    right_line_num=line.new_line_num,
                    right_content=line.content,
                )
            )
            old_pos = (line.old_line_num or old_pos) + 1
            new_pos = (line.new_line_num or new_pos) + 1
            i += 1
            continue

        # Within a change block unified diff lists deletions before additions.
        deleted: List[DiffLine] = []
        added: List[DiffLine] = []
        while i < len(diff_lines) and diff_lines[i].type == DiffLineType.DELETED:
            deleted.append(diff_lines[i])
            i += 1
        while i < len(diff_lines) and diff_lines[i].type == DiffLineType.ADDED:
            added.append(diff_lines[i])
            i += 1

        for j in range(max(len(deleted), len(added))):
            left = deleted[j] if j < len(deleted) else None
            right = added[j] if j < len(added) else None
            rows.append(
                SideBySideLine(
                    left_line_num=left.old_line_num if left else None,
                    left_content=left.content if left else "",
                    right_line_num=right.new_line_num if right else None,
                    right_content=right.content if right else "",
                    left_type=DiffLineType.DELETED if left else DiffLineType.CONTEXT,
                    right_type=DiffLineType.ADDED if right else DiffLineType.CONTEXT,
                )
            )

        if deleted:
            old_pos = (deleted[-1].old_line_num or old_pos) + 1
        if added:
            new_pos = (added[-1].new_line_num or new_pos) + 1

    while old_pos <= len(old_lines) or new_pos <= len(new_lines):
        has_old = old_pos <= len(old_lines)
        has_new = new_pos <= len(new_lines)
        rows.append(
            SideBySideLine(
                left_line_num=old_pos if has_old else None,
                left_content=old_lines[old_pos - 1] if has_old else "",
                right_line_num=new_pos if has_new else None,
                right_content=new_lines[new_pos - 1] if has_new else "",
            )
        )
        if has_old:
            old_pos += 1
        if has_new:
            new_pos += 1

    return rows
