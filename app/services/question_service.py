from sqlalchemy.orm import Session
from sqlalchemy import func
import logging
import uuid
from typing import List, Dict, Optional, Sequence

from app.core.database import transaction
from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.form import Form, Question, QuestionType
from app.schemas.forms import QuestionCreate, QuestionUpdate
from app.services.form_service import FormService
from app.services.mutation_guard import MutationGuard, ensure_allowed

logger = logging.getLogger(__name__)


class QuestionService:
    @staticmethod
    def _validate_text(text: Optional[str]) -> str:
        text = (text or "").strip()
        if not text:
            raise InvalidInputError("Question text is required")
        return text

    @staticmethod
    def _normalize_options(question_type: QuestionType, options: Optional[List[str]]) -> List[str]:
        """Options a question of ``question_type`` should store.

        Choice questions need at least one non-blank option; free-text
        questions never keep any.
        """
        question_type = QuestionType(question_type)
        if not question_type.has_options:
            return []

        options = list(options or [])
        if not options:
            raise InvalidInputError(f"{question_type.value} questions require at least one option")
        if any(not isinstance(o, str) or not o.strip() for o in options):
            raise InvalidInputError("Options must be non-empty strings")
        return options

    @staticmethod
    def _load_question(db: Session, question_id: str, owner_id: Optional[str] = None) -> Question:
        query = db.query(Question).filter(Question.id == question_id)
        if owner_id is not None:
            query = query.join(Form, Question.form_id == Form.id).filter(Form.user_id == owner_id)

        question = query.first()
        if not question:
            raise NotFoundError("Question not found")
        return question

    @staticmethod
    def _next_order(db: Session, form_id: str) -> int:
        current_max = db.query(func.max(Question.order)).filter(Question.form_id == form_id).scalar()
        return (current_max or 0) + 1

    @staticmethod
    def _renumber(questions: Sequence[Question]) -> None:
        for index, question in enumerate(questions):
            question.order = index + 1

    @staticmethod
    def _move(db: Session, question: Question, position: int) -> None:
        """Put ``question`` at 1-based ``position`` and renumber its siblings."""
        siblings = (
            db.query(Question)
            .filter(Question.form_id == question.form_id, Question.id != question.id)
            .order_by(Question.order, Question.id)
            .all()
        )
        position = max(1, min(position, len(siblings) + 1))
        siblings.insert(position - 1, question)
        QuestionService._renumber(siblings)

    @staticmethod
    def get_question(db: Session, question_id: str, owner_id: Optional[str] = None) -> Dict:
        return FormService.question_to_dict(QuestionService._load_question(db, question_id, owner_id))

    @staticmethod
    def list_questions(db: Session, form_id: str, owner_id: Optional[str] = None) -> List[Dict]:
        FormService.load_form(db, form_id, owner_id)
        questions = db.query(Question).filter(Question.form_id == form_id).order_by(Question.order, Question.id).all()
        return [FormService.question_to_dict(q) for q in questions]

    @staticmethod
    def add_question(db: Session, form_id: str, data: QuestionCreate, owner_id: Optional[str] = None) -> Dict:
        text = QuestionService._validate_text(data.question_text)
        options = QuestionService._normalize_options(data.question_type, data.options)

        with transaction(db):
            form = FormService.load_form(db, form_id, owner_id, lock=True)
            ensure_allowed(MutationGuard.can_add_question(db, form_id))

            question = Question(
                id=str(uuid.uuid4()),
                form_id=form_id,
                question_text=text,
                question_type=QuestionType(data.question_type),
                options=options,
                required=data.required,
                order=QuestionService._next_order(db, form_id),
            )
            db.add(question)
            FormService.touch(form)

        db.refresh(question)
        logger.info("Added question %s to form %s at position %s", question.id, form_id, question.order)
        return FormService.question_to_dict(question)

    @staticmethod
    def update_question(db: Session, question_id: str, changes: QuestionUpdate, owner_id: Optional[str] = None) -> Dict:
        data = changes.model_dump(exclude_unset=True, exclude_none=True)

        if "question_text" in data:
            data["question_text"] = QuestionService._validate_text(data["question_text"])

        position = data.pop("order", None)

        with transaction(db):
            question = QuestionService._load_question(db, question_id, owner_id)
            form = FormService.load_form(db, question.form_id, lock=True)

            if "question_type" in data:
                ensure_allowed(MutationGuard.can_change_question_type(db, question_id, data["question_type"]))

            new_type = QuestionType(data.get("question_type", question.question_type))
            if "question_type" in data or "options" in data:
                data["options"] = QuestionService._normalize_options(
                    new_type, data.get("options", question.options)
                )

            for field, value in data.items():
                setattr(question, field, value)
            if position is not None:
                QuestionService._move(db, question, position)
                data["order"] = position
            if data:
                FormService.touch(form)

        db.refresh(question)
        logger.info("Updated question %s (%s)", question_id, ", ".join(sorted(data)) or "no changes")
        return FormService.question_to_dict(question)

    @staticmethod
    def remove_question(db: Session, question_id: str, owner_id: Optional[str] = None) -> str:
        with transaction(db):
            question = QuestionService._load_question(db, question_id, owner_id)
            form = FormService.load_form(db, question.form_id, lock=True)
            ensure_allowed(MutationGuard.can_delete_question(db, question_id))

            form_id = question.form_id
            db.delete(question)

            remaining = (
                db.query(Question)
                .filter(Question.form_id == form_id, Question.id != question_id)
                .order_by(Question.order, Question.id)
                .all()
            )
            QuestionService._renumber(remaining)
            FormService.touch(form)

        logger.info("Removed question %s from form %s", question_id, form_id)
        return form_id

    @staticmethod
    def reorder_questions(
        db: Session, form_id: str, ordered_ids: Sequence[str], owner_id: Optional[str] = None
    ) -> List[Dict]:
        """Give each listed question order index+1, all in one commit.

        ``ordered_ids`` must name every question of the form exactly once so
        orders stay contiguous from 1.
        """
        ordered_ids = list(ordered_ids)
        if len(set(ordered_ids)) != len(ordered_ids):
            raise InvalidInputError("Question ids must not repeat")

        with transaction(db):
            form = FormService.load_form(db, form_id, owner_id, lock=True)
            ensure_allowed(MutationGuard.can_reorder_questions(db, form_id, ordered_ids))

            questions = {q.id: q for q in db.query(Question).filter(Question.form_id == form_id).all()}
            if set(ordered_ids) != set(questions):
                raise InvalidInputError("Question ids must match the form's current questions exactly")

            QuestionService._renumber([questions[question_id] for question_id in ordered_ids])
            FormService.touch(form)

        logger.info("Reordered %s questions of form %s", len(ordered_ids), form_id)
        return QuestionService.list_questions(db, form_id)
