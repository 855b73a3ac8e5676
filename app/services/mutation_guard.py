"""Rules for editing a form's question set once responses exist.

Answers point at questions by id, so anything that would orphan an answer or
change what it means (adding a question respondents never saw, deleting one,
changing its input type) is refused as soon as a form has a response.
Reordering and cosmetic edits are always fine.
"""
import enum
import logging
from typing import NamedTuple, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import ConstraintError, ConstraintReason, NotFoundError
from app.models.form import Question, QuestionType
from app.models.response import Response

logger = logging.getLogger(__name__)


class EditKind(str, enum.Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    REORDER = "reorder"


class GuardDecision(NamedTuple):
    allowed: bool
    reason: Optional[ConstraintReason] = None
    message: Optional[str] = None


ALLOW = GuardDecision(True)

_DENIALS = {
    EditKind.ADD: (
        ConstraintReason.ADD_BLOCKED,
        "Cannot add questions to a form that already has submissions. "
        "Existing responses would be missing an answer for the new question.",
    ),
    EditKind.DELETE: (
        ConstraintReason.DELETE_BLOCKED,
        "Cannot delete questions from a form that already has submissions. "
        "This would invalidate existing responses.",
    ),
    EditKind.UPDATE: (
        ConstraintReason.TYPE_CHANGE_BLOCKED,
        "Cannot change question type for a form that already has submissions. "
        "This would invalidate existing responses.",
    ),
}


def evaluate_edit(response_count: int, edit_kind: EditKind, type_changed: bool = False) -> GuardDecision:
    """Decide whether a structural edit is allowed.

    Pure function of its arguments; callers are responsible for passing a
    response count read inside the same transaction as the edit.
    """
    if response_count <= 0 or edit_kind == EditKind.REORDER:
        return ALLOW
    if edit_kind == EditKind.UPDATE and not type_changed:
        return ALLOW

    reason, message = _DENIALS[edit_kind]
    return GuardDecision(False, reason, message)


def ensure_allowed(decision: GuardDecision) -> None:
    if not decision.allowed:
        logger.info("Structural edit rejected: %s", decision.reason.value)
        raise ConstraintError(decision.reason, decision.message)


class MutationGuard:
    """Guard checks backed by a fresh response count from the database."""

    @staticmethod
    def response_count(db: Session, form_id: str) -> int:
        return db.query(func.count(Response.id)).filter(Response.form_id == form_id).scalar() or 0

    @staticmethod
    def _owning_question(db: Session, question_id: str) -> Question:
        question = db.query(Question).filter(Question.id == question_id).first()
        if not question:
            raise NotFoundError("Question not found")
        return question

    @staticmethod
    def can_add_question(db: Session, form_id: str) -> GuardDecision:
        return evaluate_edit(MutationGuard.response_count(db, form_id), EditKind.ADD)

    @staticmethod
    def can_delete_question(db: Session, question_id: str) -> GuardDecision:
        question = MutationGuard._owning_question(db, question_id)
        return evaluate_edit(MutationGuard.response_count(db, question.form_id), EditKind.DELETE)

    @staticmethod
    def can_change_question_type(db: Session, question_id: str, new_type: QuestionType) -> GuardDecision:
        question = MutationGuard._owning_question(db, question_id)
        type_changed = QuestionType(new_type) != question.question_type
        return evaluate_edit(
            MutationGuard.response_count(db, question.form_id),
            EditKind.UPDATE,
            type_changed=type_changed,
        )

    @staticmethod
    def can_reorder_questions(db: Session, form_id: str, ordered_ids: Sequence[str]) -> GuardDecision:
        # positions are not referenced by answers
        return evaluate_edit(MutationGuard.response_count(db, form_id), EditKind.REORDER)
