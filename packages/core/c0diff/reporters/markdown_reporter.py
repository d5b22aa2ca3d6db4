"""Markdown output reporter"""

from pathlib import Path
from typing import List, Optional, Union

from c0diff.models.case import C0TestCase
from c0diff.models.result import CaseReport


def _escape_cell(value: Optional[str]) -> str:
    return (value or "").replace("|", "\\|")


def collapse_repeated_names(cases: List[C0TestCase]) -> List[List[str]]:
    """
    Turn cases into table rows, blanking class/method cells that repeat the row above.

    A method cell is only blanked while the class is unchanged too.
    """
    rows = []
    previous_class = previous_method = None
    for index, case in enumerate(cases):
        same_class = index > 0 and case.class_name == previous_class
        same_method = same_class and case.method_name == previous_method
        rows.append(
            [
                "" if same_class else (case.class_name or ""),
                "" if same_method else (case.method_name or ""),
                case.branch_condition,
            ]
        )
        previous_class, previous_method = case.class_name, case.method_name
    return rows


class MarkdownReporter:
    """Saves C0 case reports to Markdown files"""

    @staticmethod
    def save(report: CaseReport, output_path: Union[str, Path]) -> None:
        """
        Save a case report to a Markdown file

        Args:
            report: CaseReport to save
            output_path: Path to output Markdown file
        """
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(MarkdownReporter.generate(report), encoding="utf-8")

    @staticmethod
    def generate(report: CaseReport) -> str:
        """
        Generate markdown content from a case report

        Args:
            report: CaseReport to convert to markdown

        Returns:
            Markdown formatted string
        """
        lines = ["# C0 Test Cases", ""]
        if report.base or report.head:
            lines.append(f"**Base:** `{report.base}`  ")
            lines.append(f"**Head:** `{report.head}`  ")
        lines.append(f"**Files Analyzed:** {len(report.files)}  ")
        lines.append(f"**Total Cases:** {report.total_cases}  ")
        lines.append("")

        if report.total_cases == 0:
            lines.append("No branch changes found.")
            lines.append("")
            return "\n".join(lines)

        for file_result in report.files_with_cases:
            lines.append(f"## `{file_result.file_path}`")
            lines.append("")
            lines.append("| # | Class | Method | Branch Condition |")
            lines.append("|---|-------|--------|------------------|")
            for number, row in enumerate(collapse_repeated_names(file_result.cases), 1):
                cells = " | ".join(_escape_cell(cell) for cell in row)
                lines.append(f"| {number} | {cells} |")
            lines.append("")

        return "\n".join(lines)
