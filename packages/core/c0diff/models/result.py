"""C0 case report data model"""

from dataclasses import dataclass, field
from typing import List, Optional

from c0diff.models.case import C0TestCase


@dataclass
class FileCaseResult:
    """C0 cases generated for one changed file"""

    file_path: str
    changed_lines: List[int] = field(default_factory=list)
    cases: List[C0TestCase] = field(default_factory=list)
    status: str = "modified"

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "file_path": self.file_path,
            "status": self.status,
            "changed_lines": list(self.changed_lines),
            "cases": [case.to_dict() for case in self.cases],
        }


@dataclass
class CaseReport:
    """C0 cases for every analysed file between two revisions"""

    base: Optional[str] = None
    head: Optional[str] = None
    files: List[FileCaseResult] = field(default_factory=list)

    @property
    def total_cases(self) -> int:
        return sum(len(f.cases) for f in self.files)

    @property
    def files_with_cases(self) -> List[FileCaseResult]:
        return [f for f in self.files if f.cases]

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "base": self.base,
            "head": self.head,
            "files": [f.to_dict() for f in self.files],
            "summary": {
                "files_analyzed": len(self.files),
                "files_with_cases": len(self.files_with_cases),
                "total_cases": self.total_cases,
            },
        }
