"""Unit tests for the outline review chain table."""

import pytest

from portal.api.v1.outlines.review_chain import (
    INITIAL_STEP,
    REVIEW_CHAIN,
    next_step,
)
from portal.core.enums import IN_REVIEW_STATUSES, OutlineStatus, ReviewDecision, ReviewerRole
from portal.core.exceptions import ValidationServiceError


def test_chain_order() -> None:
    """Approving from the entry point walks advisor -> coordinator -> co-chairman -> chairman -> approved."""
    role = INITIAL_STEP.next_role
    visited = []
    statuses = []
    while role is not None:
        visited.append(role)
        step = next_step(role.value, ReviewDecision.APPROVED)
        statuses.append(step.next_status)
        role = step.next_role
    assert visited == [
        ReviewerRole.CLASS_ADVISOR,
        ReviewerRole.UG_COORDINATOR,
        ReviewerRole.CO_CHAIRMAN,
        ReviewerRole.CHAIRMAN,
    ]
    assert statuses == [
        OutlineStatus.COORDINATOR_REVIEW,
        OutlineStatus.CO_CHAIRMAN_REVIEW,
        OutlineStatus.CHAIRMAN_REVIEW,
        OutlineStatus.APPROVED,
    ]


@pytest.mark.parametrize("role", list(ReviewerRole))
def test_reject_from_any_stage_is_terminal(role: ReviewerRole) -> None:
    step = next_step(role.value, ReviewDecision.REJECTED)
    assert step.next_status == OutlineStatus.REJECTED
    assert step.next_role is None


def test_unknown_role_cannot_approve() -> None:
    with pytest.raises(ValidationServiceError):
        next_step("teacher", ReviewDecision.APPROVED)


def test_reviewer_present_exactly_while_in_review() -> None:
    steps = [INITIAL_STEP, *REVIEW_CHAIN.values(), next_step("chairman", ReviewDecision.REJECTED)]
    for step in steps:
        assert (step.next_role is not None) == (step.next_status in IN_REVIEW_STATUSES)
