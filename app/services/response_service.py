from sqlalchemy.orm import Session, selectinload
import json
import logging
import uuid
from typing import Any, List, Dict, Optional, Sequence, Union

from app.core.database import transaction
from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.form import Form, Question
from app.models.response import Answer, Response
from app.schemas.forms import AnswerInput
from app.services import form_lifecycle
from app.services.form_service import FormService

logger = logging.getLogger(__name__)

Payload = Union[str, List[str]]


def encode_payload(payload: Payload) -> str:
    return json.dumps(payload)


def decode_payload(value: str) -> Any:
    return json.loads(value)


def _is_blank(payload: Payload) -> bool:
    if isinstance(payload, str):
        return not payload.strip()
    return not any(item.strip() for item in payload)


class ResponseService:
    @staticmethod
    def _validate_answers(questions: Dict[str, Question], answers: Sequence[AnswerInput]) -> None:
        """Answers must target this form's questions, once each, and cover every required one."""
        seen = set()
        for item in answers:
            if item.question_id not in questions:
                raise InvalidInputError(f"Question {item.question_id} does not belong to this form")
            if item.question_id in seen:
                raise InvalidInputError(f"Question {item.question_id} was answered more than once")
            seen.add(item.question_id)

        answered = {item.question_id for item in answers if not _is_blank(item.answer)}
        missing = [q for q in questions.values() if q.required and q.id not in answered]
        if missing:
            missing.sort(key=lambda q: q.order)
            raise InvalidInputError(
                "Missing answers for required questions: " + ", ".join(q.question_text for q in missing)
            )

    @staticmethod
    def _response_to_dict(response: Response) -> Dict:
        answers = sorted(
            response.answers,
            key=lambda a: (a.question.order if a.question else 0, a.question_id),
        )
        return {
            "id": response.id,
            "form_id": response.form_id,
            "created_at": response.created_at,
            "answers": [{
                "id": a.id,
                "question_id": a.question_id,
                "question_text": a.question.question_text if a.question else None,
                "question_type": a.question.question_type if a.question else None,
                "answer": decode_payload(a.value),
            } for a in answers]
        }

    @staticmethod
    def submit_response(db: Session, form_id: str, answers: Sequence[AnswerInput]) -> Dict:
        """Store one response with all of its answers, or nothing at all."""
        with transaction(db):
            form = FormService.load_form(db, form_id, lock=True)
            form_lifecycle.ensure_accepts_responses(form.status)

            questions = {q.id: q for q in db.query(Question).filter(Question.form_id == form_id).all()}
            ResponseService._validate_answers(questions, answers)

            response = Response(id=str(uuid.uuid4()), form_id=form_id)
            db.add(response)
            for item in answers:
                db.add(Answer(
                    id=str(uuid.uuid4()),
                    response_id=response.id,
                    question_id=item.question_id,
                    value=encode_payload(item.answer),
                ))

        logger.info("Stored response %s for form %s with %s answers", response.id, form_id, len(answers))
        return ResponseService.get_response(db, response.id)

    @staticmethod
    def list_responses(db: Session, form_id: str, owner_id: Optional[str] = None) -> List[Dict]:
        FormService.load_form(db, form_id, owner_id)
        responses = (
            db.query(Response)
            .options(selectinload(Response.answers).selectinload(Answer.question))
            .filter(Response.form_id == form_id)
            .order_by(Response.created_at.desc(), Response.id.desc())
            .all()
        )
        return [ResponseService._response_to_dict(r) for r in responses]

    @staticmethod
    def get_response(db: Session, response_id: str, owner_id: Optional[str] = None) -> Dict:
        query = (
            db.query(Response)
            .options(selectinload(Response.answers).selectinload(Answer.question))
            .filter(Response.id == response_id)
        )
        if owner_id is not None:
            query = query.join(Form, Response.form_id == Form.id).filter(Form.user_id == owner_id)

        response = query.first()
        if not response:
            raise NotFoundError("Response not found")
        return ResponseService._response_to_dict(response)
