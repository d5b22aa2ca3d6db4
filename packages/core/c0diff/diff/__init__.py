"""Unified diff parsing, side-by-side alignment and git access."""

from c0diff.diff.parser import (
    DiffLine,
    DiffLineType,
    FilePatch,
    HunkHeader,
    MalformedHunkHeaderError,
    changed_line_numbers,
    diff_stats,
    parse_hunk_header,
    parse_unified_diff,
    split_patch,
)
from c0diff.diff.side_by_side import SideBySideLine, build_side_by_side, split_file_lines
from c0diff.diff.extractor import (
    ChangedFile,
    get_changed_files,
    get_changed_line_numbers,
    get_file_content,
    get_file_diff,
    validate_git_ref,
    validate_git_revision,
)

__all__ = [
    "DiffLine",
    "DiffLineType",
    "FilePatch",
    "HunkHeader",
    "MalformedHunkHeaderError",
    "changed_line_numbers",
    "diff_stats",
    "parse_hunk_header",
    "parse_unified_diff",
    "split_patch",
    "SideBySideLine",
    "build_side_by_side",
    "split_file_lines",
    "ChangedFile",
    "get_changed_files",
    "get_changed_line_numbers",
    "get_file_content",
    "get_file_diff",
    "validate_git_ref",
    "validate_git_revision",
]
