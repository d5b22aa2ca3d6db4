"""Git helpers that fetch patches and file contents for the core."""

from dataclasses import dataclass
from pathlib import Path
import re
import subprocess
from typing import List, Optional, Sequence

from c0diff.diff.parser import DiffLine, changed_line_numbers, split_patch

# Git ref validation pattern: allows alphanumeric, dots, slashes, hyphens, underscores,
# tildes (for parent refs like HEAD~1), and carets (for commit refs like HEAD^2).
# Blocks shell metacharacters and other potentially dangerous characters.
GIT_REF_PATTERN = re.compile(r"^[\w./@^~-]+$")

_STATUS_NAMES = {
    "A": "added",
    "M": "modified",
    "D": "deleted",
    "R": "renamed",
    "C": "copied",
}


@dataclass
class ChangedFile:
    """A file touched between two revisions."""

    path: str
    status: str
    old_path: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return self.status == "added"

    @property
    def is_deleted(self) -> bool:
        return self.status == "deleted"


def _validate_single_git_ref(ref: str, original_ref: str) -> None:
    """Validate one git ref token (non-range)."""
    if ref.startswith("-"):
        raise ValueError(f"Invalid git ref: {original_ref!r} (option-style refs are not allowed)")
    if not GIT_REF_PATTERN.match(ref):
        raise ValueError(f"Invalid git ref: {original_ref!r} (contains invalid characters)")


def validate_git_ref(ref: str) -> None:
    """Validate a git ref to prevent command injection.

    Args:
        ref: Git reference (branch name, commit hash, range like abc123~1..def456)

    Raises:
        ValueError: If the ref contains invalid characters
    """
    if not ref:
        raise ValueError("Git ref cannot be empty")
    if "...." in ref:
        raise ValueError(f"Invalid git ref: {ref!r} (malformed range syntax)")

    separator = "..." if "..." in ref else ".." if ".." in ref else None
    if separator is None:
        _validate_single_git_ref(ref, ref)
        return

    parts = ref.split(separator)
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Invalid git ref: {ref!r} (malformed range syntax)")
    for part in parts:
        if separator == "..." and ".." in part:
            raise ValueError(f"Invalid git ref: {ref!r} (malformed range syntax)")
        _validate_single_git_ref(part, ref)


def validate_git_revision(ref: str) -> None:
    """Validate a git ref that must name one revision, not a range.

    Raises:
        ValueError: If the ref is invalid or contains ``..``
    """
    validate_git_ref(ref)
    if ".." in ref:
        raise ValueError(f"Invalid git revision: {ref!r} (ranges are not allowed)")


def _validate_repo_path(file_path: str) -> None:
    if not file_path or file_path.startswith("-") or "\x00" in file_path:
        raise ValueError(f"Invalid file path: {file_path!r}")


def _run_git(repo: Path, args: List[str], what: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        stderr = result.stderr.strip() or f"Unknown git {what} error"
        raise RuntimeError(f"git {what} failed: {stderr}")
    return result.stdout


def get_file_diff(
    repo: Path,
    old_rev: str,
    new_rev: str,
    file_path: str,
    context_lines: int = 3,
    old_path: Optional[str] = None,
) -> str:
    """Get the unified diff of one file between two revisions.

    The result may be empty, e.g. for a pure rename.

    Args:
        repo: Repository root
        old_rev: Old revision
        new_rev: New revision
        file_path: Path of the file at ``new_rev``
        context_lines: Unchanged lines around each hunk
        old_path: Path at ``old_rev`` when the file was renamed or copied
    """
    validate_git_revision(old_rev)
    validate_git_revision(new_rev)
    _validate_repo_path(file_path)
    if context_lines < 0:
        raise ValueError("context_lines must not be negative")

    if old_path is None or old_path == file_path:
        return _run_git(
            repo,
            ["diff", "--no-color", f"-U{context_lines}", old_rev, new_rev, "--", file_path],
            "diff",
        )

    _validate_repo_path(old_path)
    output = _run_git(
        repo,
        [
            "diff",
            "--no-color",
            "-C",
            "--find-copies-harder",
            f"-U{context_lines}",
            old_rev,
            new_rev,
            "--",
            old_path,
            file_path,
        ],
        "diff",
    )
    # Both paths are in the pathspec; keep only the section that ends at file_path.
    for file_patch in split_patch(output):
        if file_patch.new_path == file_path:
            return file_patch.patch_text
    return ""


def get_file_content(repo: Path, rev: str, file_path: str) -> Optional[bytes]:
    """Get a file's raw content at a revision, or None if it does not exist there."""
    validate_git_revision(rev)
    _validate_repo_path(file_path)
    result = subprocess.run(
        ["git", "show", f"{rev}:{file_path}"],
        cwd=repo,
        capture_output=True,
        check=False,
    )
    if result.returncode != 0:
        return None
    return result.stdout


def get_changed_files(repo: Path, base: str, head: str) -> List[ChangedFile]:
    """List files changed between two revisions with their change status."""
    validate_git_revision(base)
    validate_git_revision(head)
    output = _run_git(
        repo,
        ["diff", "--no-color", "--name-status", "-M", base, head],
        "diff",
    )

    files: List[ChangedFile] = []
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 2 or not parts[0]:
            continue
        status = _STATUS_NAMES.get(parts[0][0], "modified")
        if status in ("renamed", "copied") and len(parts) >= 3:
            files.append(ChangedFile(path=parts[2], status=status, old_path=parts[1]))
        else:
            files.append(ChangedFile(path=parts[1], status=status))
    return files


def get_changed_line_numbers(
    diff_lines: Sequence[DiffLine], new_line_count: int, is_new: bool = False
) -> List[int]:
    """Derive the new-file line numbers touched by a diff.

    A brand-new file counts as changed on every line.
    """
    if is_new:
        return list(range(1, new_line_count + 1))
    return changed_line_numbers(diff_lines)
