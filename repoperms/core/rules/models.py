"""Rule models"""

from pydantic import BaseModel, ConfigDict, Field

BRANCH_PREFIX = "refs/heads/"
MATCH_ALL_REF = "refs/.*"
ANY_REF_TOKEN = "(any)"


class RawRule(BaseModel):
    """A rule as declared in the access configuration.

    ``group_id`` names the group that owns the rule; it is only a role once
    the resolver has checked it against the role catalog.
    """

    model_config = ConfigDict(frozen=True)

    order: int
    permission: str
    ref_pattern: str
    group_id: str


class Rule(BaseModel):
    """A rule that applies to a repository through a recognized role"""

    model_config = ConfigDict(frozen=True)

    order: int = Field(..., description="Evaluation and display precedence, ascending")
    permission: str
    ref_pattern: str
    role: str

    def for_display(self) -> "Rule":
        """Return a copy with the ref pattern in its human-readable form"""
        return self.model_copy(update={"ref_pattern": display_ref(self.ref_pattern)})

    def to_dict(self) -> dict:
        return {
            "order": self.order,
            "permission": self.permission,
            "ref": self.ref_pattern,
            "role": self.role,
        }


def display_ref(ref_pattern: str) -> str:
    if ref_pattern == MATCH_ALL_REF:
        return ANY_REF_TOKEN
    if ref_pattern.startswith(BRANCH_PREFIX):
        return ref_pattern[len(BRANCH_PREFIX):]
    return ref_pattern
