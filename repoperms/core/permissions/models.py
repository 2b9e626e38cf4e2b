"""Assignment models"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MutationOutcome(str, Enum):
    """Result of a mutation; the notices are not failures"""

    APPLIED = "applied"
    ALREADY_PRESENT = "already_present"
    NOT_PRESENT = "not_present"

    @property
    def is_notice(self) -> bool:
        return self is not MutationOutcome.APPLIED


@dataclass(frozen=True)
class Assignment:
    """A (role, user) pair for one repository"""

    role: str
    user: str

    def to_line(self) -> str:
        """Canonical persisted form"""
        return f"{self.role} {self.user}\n"

    @classmethod
    def from_line(cls, line: str) -> Optional["Assignment"]:
        """Parse a persisted line; blank or single-token lines yield None"""
        fields = line.split()
        if len(fields) < 2:
            return None
        return cls(role=fields[0], user=fields[1])

    def __str__(self) -> str:
        return f"{self.role} {self.user}"


@dataclass(frozen=True)
class MutationResult:
    outcome: MutationOutcome
    repo_id: str
    assignment: Optional[Assignment] = None
    count: Optional[int] = None

    @property
    def message(self) -> str:
        if self.outcome is MutationOutcome.ALREADY_PRESENT:
            return f"'{self.assignment}' already present"
        if self.outcome is MutationOutcome.NOT_PRESENT:
            return f"'{self.assignment}' not present"
        if self.assignment is not None:
            return f"'{self.assignment}' updated"
        return f"{self.count} assignment(s) written"
