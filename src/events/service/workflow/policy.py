"""The multi-level approval ladder."""

from dataclasses import dataclass

from accounts.roles import AppRole
from events.models import ApprovalLevel


@dataclass(frozen=True)
class LevelPolicy:
    level: int
    required_roles: tuple[str, ...]
    rule: str = ApprovalLevel.Rule.OR


APPROVAL_POLICY: tuple[LevelPolicy, ...] = (
    LevelPolicy(1, (AppRole.DEPARTMENT_DIRECTOR, AppRole.ACADEMIC_ADVISOR), ApprovalLevel.Rule.AND),
    LevelPolicy(2, (AppRole.GENERAL_DIRECTOR,), ApprovalLevel.Rule.OR),
    LevelPolicy(3, (AppRole.VICE_PRESIDENT,), ApprovalLevel.Rule.OR),
    LevelPolicy(4, (AppRole.PRESIDENT,), ApprovalLevel.Rule.OR),
)
