import logging
from typing import Dict, FrozenSet

from app.core.exceptions import ConstraintError, ConstraintReason
from app.models.form import FormStatus

logger = logging.getLogger(__name__)

# Nothing leads back to DRAFT.
TRANSITIONS: Dict[FormStatus, FrozenSet[FormStatus]] = {
    FormStatus.DRAFT: frozenset({FormStatus.PUBLISHED}),
    FormStatus.PUBLISHED: frozenset({FormStatus.CLOSED}),
    FormStatus.CLOSED: frozenset({FormStatus.PUBLISHED}),
}


def can_transition(current: FormStatus, target: FormStatus) -> bool:
    return FormStatus(target) in TRANSITIONS[FormStatus(current)]


def transition(current: FormStatus, target: FormStatus) -> FormStatus:
    """Return ``target`` if the move is legal, else raise ConstraintError.

    Asking for the status a form already has is a no-op.
    """
    current, target = FormStatus(current), FormStatus(target)
    if current == target:
        return current
    if not can_transition(current, target):
        logger.info("Rejected status transition %s -> %s", current.value, target.value)
        raise ConstraintError(
            ConstraintReason.INVALID_TRANSITION,
            f"Cannot change form status from {current.value} to {target.value}",
        )
    return target


def publish(current: FormStatus) -> FormStatus:
    """Publish a draft, or reopen a closed form."""
    return transition(current, FormStatus.PUBLISHED)


def close(current: FormStatus) -> FormStatus:
    return transition(current, FormStatus.CLOSED)


def ensure_accepts_responses(status: FormStatus) -> None:
    status = FormStatus(status)
    if status == FormStatus.PUBLISHED:
        return
    if status == FormStatus.DRAFT:
        raise ConstraintError(
            ConstraintReason.NOT_PUBLISHED,
            "This form has not been published yet and is not accepting responses",
        )
    raise ConstraintError(
        ConstraintReason.CLOSED,
        "This form is closed and no longer accepting responses",
    )
