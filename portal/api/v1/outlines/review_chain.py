"""
Outline review chain: class_advisor -> ug_coordinator -> co_chairman -> chairman.
Approval moves to the next stage; rejection at any stage ends the outline.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

from portal.core.enums import OutlineStatus, ReviewDecision, ReviewerRole
from portal.core.exceptions import ValidationServiceError


class ChainStep(NamedTuple):
    next_status: OutlineStatus
    next_role: Optional[ReviewerRole]


REVIEW_CHAIN: Mapping[ReviewerRole, ChainStep] = MappingProxyType(
    {
        ReviewerRole.CLASS_ADVISOR: ChainStep(OutlineStatus.COORDINATOR_REVIEW, ReviewerRole.UG_COORDINATOR),
        ReviewerRole.UG_COORDINATOR: ChainStep(OutlineStatus.CO_CHAIRMAN_REVIEW, ReviewerRole.CO_CHAIRMAN),
        ReviewerRole.CO_CHAIRMAN: ChainStep(OutlineStatus.CHAIRMAN_REVIEW, ReviewerRole.CHAIRMAN),
        ReviewerRole.CHAIRMAN: ChainStep(OutlineStatus.APPROVED, None),
    }
)

# Entry point of every new outline version.
INITIAL_STEP = ChainStep(OutlineStatus.SUBMITTED, ReviewerRole.CLASS_ADVISOR)

REJECTED_STEP = ChainStep(OutlineStatus.REJECTED, None)


def _as_reviewer_role(role: str) -> Optional[ReviewerRole]:
    try:
        return ReviewerRole(role)
    except ValueError:
        return None


def next_step(reviewer_role: str, decision: ReviewDecision) -> ChainStep:
    """Return the (status, reviewer) pair that follows a decision taken at `reviewer_role`."""
    if decision == ReviewDecision.REJECTED:
        return REJECTED_STEP
    step = REVIEW_CHAIN.get(_as_reviewer_role(reviewer_role))
    if step is None:
        raise ValidationServiceError(f"Invalid reviewer role: {reviewer_role}")
    return step
