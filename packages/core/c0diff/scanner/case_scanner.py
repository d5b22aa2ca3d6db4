"""Runs the diff and C0 pipelines against a git repository."""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from c0diff.config import DiffConfig, LanguageConfig
from c0diff.coverage.cases import generate_c0_cases
from c0diff.diff.extractor import (
    ChangedFile,
    get_changed_files,
    get_changed_line_numbers,
    get_file_content,
    get_file_diff,
)
from c0diff.diff.parser import DiffLine, FilePatch, diff_stats, parse_unified_diff, split_patch
from c0diff.diff.side_by_side import SideBySideLine, build_side_by_side, split_file_lines
from c0diff.models.result import CaseReport, FileCaseResult

logger = logging.getLogger(__name__)


@dataclass
class FileDiffView:
    """Everything needed to render one file's diff"""

    file_path: str
    diff_lines: List[DiffLine] = field(default_factory=list)
    rows: List[SideBySideLine] = field(default_factory=list)

    @property
    def stats(self) -> Dict[str, int]:
        return diff_stats(self.diff_lines)

    @property
    def summary(self) -> str:
        stats = self.stats
        return f"+{stats['added']} -{stats['deleted']}"


def _patch_status(file_patch: FilePatch) -> str:
    if file_patch.is_new:
        return "added"
    if file_patch.is_renamed:
        return "renamed"
    return "modified"


class CaseScanner:
    """Fetches revisions through git and feeds them to the core."""

    def __init__(self, repo: Path, context_lines: Optional[int] = None):
        self.repo = Path(repo)
        self.context_lines = (
            DiffConfig.get_context_lines() if context_lines is None else context_lines
        )
        self.encoding = DiffConfig.get_encoding()

    def _lines_at(self, rev: str, file_path: str) -> List[str]:
        return split_file_lines(get_file_content(self.repo, rev, file_path), self.encoding)

    def side_by_side(
        self, base: str, head: str, file_path: str, old_path: Optional[str] = None
    ) -> FileDiffView:
        """Build the full side-by-side view of one file between two revisions.

        ``old_path`` names the file at ``base`` when it was renamed or copied.
        """
        patch = get_file_diff(
            self.repo, base, head, file_path, self.context_lines, old_path=old_path
        )
        diff_lines = parse_unified_diff(patch)
        rows = build_side_by_side(
            self._lines_at(base, old_path or file_path),
            self._lines_at(head, file_path),
            diff_lines,
        )
        return FileDiffView(file_path=file_path, diff_lines=diff_lines, rows=rows)

    def scan_file(self, base: str, head: str, changed: ChangedFile) -> FileCaseResult:
        """Generate C0 cases for a single changed file."""
        result = FileCaseResult(file_path=changed.path, status=changed.status)
        new_lines = self._lines_at(head, changed.path)
        if not new_lines:
            return result

        patch = get_file_diff(
            self.repo, base, head, changed.path, self.context_lines, old_path=changed.old_path
        )
        diff_lines = parse_unified_diff(patch)
        result.changed_lines = get_changed_line_numbers(
            diff_lines, len(new_lines), is_new=changed.is_new
        )
        result.cases = generate_c0_cases("\n".join(new_lines), result.changed_lines)
        logger.debug(
            "%s: %d changed lines, %d cases",
            changed.path,
            len(result.changed_lines),
            len(result.cases),
        )
        return result

    def scan(
        self, base: str, head: str, only_files: Optional[Sequence[str]] = None
    ) -> CaseReport:
        """
        Generate C0 cases for every supported file changed between two revisions.

        Args:
            base: Old revision
            head: New revision
            only_files: Restrict the scan to these repository-relative paths

        Returns:
            CaseReport with one entry per analysed file
        """
        report = CaseReport(base=base, head=head)
        wanted = set(only_files) if only_files else None

        for changed in get_changed_files(self.repo, base, head):
            if wanted is not None and changed.path not in wanted:
                continue
            if changed.is_deleted:
                logger.debug("Skipping deleted file %s", changed.path)
                continue
            if not LanguageConfig.is_supported(changed.path):
                logger.debug("Skipping unsupported file %s", changed.path)
                continue
            report.files.append(self.scan_file(base, head, changed))

        return report

    def scan_patch(self, patch_text: str) -> CaseReport:
        """
        Generate C0 cases from a multi-file patch against the working tree.

        The new side of every file is read from disk under the repository root.

        Args:
            patch_text: Output of ``git diff`` or a saved patch file

        Returns:
            CaseReport with one entry per analysed file
        """
        report = CaseReport()

        for file_patch in split_patch(patch_text):
            path = file_patch.new_path
            if file_patch.is_deleted or not path:
                continue
            if not LanguageConfig.is_supported(path):
                logger.debug("Skipping unsupported file %s", path)
                continue

            file_path = self.repo / path
            try:
                content = file_path.read_bytes()
            except OSError as exc:
                logger.warning("Cannot read %s: %s", file_path, exc)
                continue
            new_lines = split_file_lines(content, self.encoding)

            diff_lines = parse_unified_diff(file_patch.patch_text)
            changed_lines = get_changed_line_numbers(
                diff_lines, len(new_lines), is_new=file_patch.is_new
            )
            report.files.append(
                FileCaseResult(
                    file_path=path,
                    status=_patch_status(file_patch),
                    changed_lines=changed_lines,
                    cases=generate_c0_cases("\n".join(new_lines), changed_lines),
                )
            )

        return report
