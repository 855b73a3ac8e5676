import pytest

from app.core.exceptions import ConstraintError, ConstraintReason
from app.models.form import FormStatus
from app.services import form_lifecycle


@pytest.mark.parametrize("current, target", [
    (FormStatus.DRAFT, FormStatus.PUBLISHED),
    (FormStatus.PUBLISHED, FormStatus.CLOSED),
    (FormStatus.CLOSED, FormStatus.PUBLISHED),
])
def test_allowed_transitions(current, target):
    assert form_lifecycle.can_transition(current, target)
    assert form_lifecycle.transition(current, target) == target


@pytest.mark.parametrize("current, target", [
    (FormStatus.PUBLISHED, FormStatus.DRAFT),
    (FormStatus.CLOSED, FormStatus.DRAFT),
    (FormStatus.DRAFT, FormStatus.CLOSED),
])
def test_rejected_transitions(current, target):
    assert not form_lifecycle.can_transition(current, target)
    with pytest.raises(ConstraintError) as exc_info:
        form_lifecycle.transition(current, target)
    assert exc_info.value.reason == ConstraintReason.INVALID_TRANSITION


def test_same_status_is_noop():
    for status in FormStatus:
        assert form_lifecycle.transition(status, status) == status


def test_accepts_string_values():
    assert form_lifecycle.transition("DRAFT", "PUBLISHED") == FormStatus.PUBLISHED


def test_publish_and_close_helpers():
    status = form_lifecycle.publish(FormStatus.DRAFT)
    status = form_lifecycle.close(status)
    assert status == FormStatus.CLOSED
    assert form_lifecycle.publish(status) == FormStatus.PUBLISHED


def test_response_gate():
    form_lifecycle.ensure_accepts_responses(FormStatus.PUBLISHED)

    with pytest.raises(ConstraintError) as draft:
        form_lifecycle.ensure_accepts_responses(FormStatus.DRAFT)
    assert draft.value.reason == ConstraintReason.NOT_PUBLISHED

    with pytest.raises(ConstraintError) as closed:
        form_lifecycle.ensure_accepts_responses(FormStatus.CLOSED)
    assert closed.value.reason == ConstraintReason.CLOSED
