"""C0 test case data model"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class C0TestCase:
    """One branch outcome that a test has to exercise"""

    class_name: Optional[str]
    method_name: Optional[str]
    branch_condition: str

    @property
    def key(self) -> Tuple[Optional[str], Optional[str], str]:
        """Identity used for de-duplication"""
        return (self.class_name, self.method_name, self.branch_condition)

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "class_name": self.class_name,
            "method_name": self.method_name,
            "branch_condition": self.branch_condition,
        }
