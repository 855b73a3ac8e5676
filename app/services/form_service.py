from sqlalchemy.orm import Session
from sqlalchemy import func, select
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Tuple

from app.core.database import transaction
from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.form import Form, FormStatus, Question
from app.models.response import Response
from app.schemas.forms import FormCreate, FormUpdate, SortField, SortOrder
from app.services import form_lifecycle
from app.services.mutation_guard import MutationGuard

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    SortField.CREATED_AT: Form.created_at,
    SortField.UPDATED_AT: Form.updated_at,
    SortField.TITLE: func.lower(Form.title),
}


def _question_count_subquery():
    return select(func.count(Question.id)).where(Question.form_id == Form.id).correlate(Form).scalar_subquery()


def _response_count_subquery():
    return select(func.count(Response.id)).where(Response.form_id == Form.id).correlate(Form).scalar_subquery()


class FormService:
    @staticmethod
    def _clean_title(title: Optional[str]) -> str:
        title = (title or "").strip()
        if not title:
            raise InvalidInputError("Form title is required")
        return title

    @staticmethod
    def question_to_dict(question: Question) -> Dict[str, Any]:
        return {
            "id": question.id,
            "form_id": question.form_id,
            "question_text": question.question_text,
            "question_type": question.question_type,
            "options": list(question.options or []),
            "required": bool(question.required),
            "order": question.order,
            "created_at": question.created_at,
            "updated_at": question.updated_at,
        }

    @staticmethod
    def _form_to_dict(form: Form, question_count: int, response_count: int) -> Dict[str, Any]:
        return {
            "id": form.id,
            "title": form.title,
            "description": form.description,
            "status": form.status,
            "user_id": form.user_id,
            "created_at": form.created_at,
            "updated_at": form.updated_at,
            "question_count": question_count or 0,
            "response_count": response_count or 0,
        }

    @staticmethod
    def load_form(db: Session, form_id: str, owner_id: Optional[str] = None, lock: bool = False) -> Form:
        """Fetch a form, optionally restricted to its owner and row-locked.

        A lock is held until the caller's transaction ends, which serializes
        structural edits, status changes and submissions on the same form.
        """
        query = db.query(Form).filter(Form.id == form_id)
        if owner_id is not None:
            query = query.filter(Form.user_id == owner_id)
        if lock:
            query = query.with_for_update()

        form = query.first()
        if not form:
            raise NotFoundError("Form not found")
        return form

    @staticmethod
    def touch(form: Form) -> None:
        # question edits count as edits of the parent form
        form.updated_at = datetime.now(timezone.utc)

    @staticmethod
    def count_responses(db: Session, form_id: str) -> int:
        return MutationGuard.response_count(db, form_id)

    @staticmethod
    def create_form(db: Session, data: FormCreate, owner_id: str) -> Dict:
        title = FormService._clean_title(data.title)

        form = Form(
            id=str(uuid.uuid4()),
            title=title,
            description=data.description,
            status=FormStatus.DRAFT,
            user_id=owner_id,
        )
        with transaction(db):
            db.add(form)

        db.refresh(form)
        logger.info("Created form %s for user %s", form.id, owner_id)
        return FormService._form_to_dict(form, 0, 0)

    @staticmethod
    def list_forms(
        db: Session,
        owner_id: str,
        search: Optional[str] = None,
        status: Optional[FormStatus] = None,
        sort_by: SortField = SortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Tuple[List[Dict], int]:
        query = db.query(
            Form,
            _question_count_subquery().label("question_count"),
            _response_count_subquery().label("response_count"),
        ).filter(Form.user_id == owner_id)

        if search:
            query = query.filter(func.lower(Form.title).contains(search.lower(), autoescape=True))
        if status:
            query = query.filter(Form.status == FormStatus(status))

        column = SORT_COLUMNS[SortField(sort_by)]
        if SortOrder(sort_order) == SortOrder.ASC:
            query = query.order_by(column.asc(), Form.id.asc())
        else:
            query = query.order_by(column.desc(), Form.id.desc())

        rows = query.all()
        forms = [FormService._form_to_dict(form, q_count, r_count) for form, q_count, r_count in rows]
        return forms, len(forms)

    @staticmethod
    def get_form(db: Session, form_id: str, viewer_id: Optional[str] = None) -> Dict:
        """Form with its ordered questions.

        Owners always see their forms; other users only see published ones,
        without the response count.
        """
        form = FormService.load_form(db, form_id)
        is_owner = viewer_id is None or form.user_id == viewer_id
        if not is_owner and form.status != FormStatus.PUBLISHED:
            raise NotFoundError("Form not found")

        result = FormService._form_to_dict(form, len(form.questions), FormService.count_responses(db, form.id))
        if not is_owner:
            result["response_count"] = None
        result["questions"] = [FormService.question_to_dict(q) for q in form.questions]
        return result

    @staticmethod
    def update_form(db: Session, form_id: str, changes: FormUpdate, owner_id: Optional[str] = None) -> Dict:
        data = changes.model_dump(exclude_unset=True)

        if "title" in data:
            data["title"] = FormService._clean_title(data["title"])

        with transaction(db):
            form = FormService.load_form(db, form_id, owner_id, lock=True)

            if "title" in data:
                form.title = data["title"]
            if "description" in data:
                form.description = data["description"]
            if data.get("status") is not None:
                previous = form.status
                form.status = form_lifecycle.transition(form.status, data["status"])
                if form.status != previous:
                    logger.info("Form %s status %s -> %s", form_id, previous.value, form.status.value)

        return FormService.get_form(db, form_id)

    @staticmethod
    def delete_form(db: Session, form_id: str, owner_id: Optional[str] = None) -> str:
        with transaction(db):
            form = FormService.load_form(db, form_id, owner_id, lock=True)
            title = form.title
            db.delete(form)

        logger.info("Deleted form %s", form_id)
        return title

    @staticmethod
    def get_form_stats(db: Session, owner_id: str) -> Dict[str, int]:
        counts = dict(
            db.query(Form.status, func.count(Form.id))
            .filter(Form.user_id == owner_id)
            .group_by(Form.status)
            .all()
        )
        total_responses = (
            db.query(func.count(Response.id))
            .join(Form, Response.form_id == Form.id)
            .filter(Form.user_id == owner_id)
            .scalar()
        ) or 0

        return {
            "total_forms": sum(counts.values()),
            "draft_forms": counts.get(FormStatus.DRAFT, 0),
            "published_forms": counts.get(FormStatus.PUBLISHED, 0),
            "closed_forms": counts.get(FormStatus.CLOSED, 0),
            "total_responses": total_responses,
        }
