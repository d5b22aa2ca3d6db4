"""Repository scanning for side-by-side views and C0 cases."""

from c0diff.scanner.case_scanner import CaseScanner, FileDiffView

__all__ = ["CaseScanner", "FileDiffView"]
