from fastapi import APIRouter, Depends, Request, BackgroundTasks
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.forms import QuestionCreate, QuestionUpdate, QuestionOut, ReorderRequest
from app.services.activity_service import ActivityService
from app.services.question_service import QuestionService

router = APIRouter()

@router.get("/{form_id}/questions", response_model=List[QuestionOut])
def list_questions(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return QuestionService.list_questions(db, form_id, owner_id=current_user.id)


@router.post("/{form_id}/questions", response_model=QuestionOut)
def add_question(
    form_id: str,
    question: QuestionCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    created = QuestionService.add_question(db, form_id, question, owner_id=current_user.id)

    ActivityService.log(
        action="CREATE",
        entity_type="question",
        entity_id=created["id"],
        user_id=current_user.id,
        details={"form_id": form_id, "question_type": created["question_type"].value},
        request=request,
        background_tasks=background_tasks
    )
    return created


@router.put("/{form_id}/questions/reorder", response_model=List[QuestionOut])
def reorder_questions(
    form_id: str,
    body: ReorderRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    questions = QuestionService.reorder_questions(db, form_id, body.question_ids, owner_id=current_user.id)

    ActivityService.log(
        action="REORDER",
        entity_type="form",
        entity_id=form_id,
        user_id=current_user.id,
        details={"question_ids": body.question_ids},
        request=request,
        background_tasks=background_tasks
    )
    return questions


@router.get("/questions/{question_id}", response_model=QuestionOut)
def get_question(
    question_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return QuestionService.get_question(db, question_id, owner_id=current_user.id)


@router.patch("/questions/{question_id}", response_model=QuestionOut)
def update_question(
    question_id: str,
    question: QuestionUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    updated = QuestionService.update_question(db, question_id, question, owner_id=current_user.id)

    ActivityService.log(
        action="UPDATE",
        entity_type="question",
        entity_id=question_id,
        user_id=current_user.id,
        details={"updated_fields": sorted(question.model_fields_set)},
        request=request,
        background_tasks=background_tasks
    )
    return updated


@router.delete("/questions/{question_id}")
def delete_question(
    question_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    form_id = QuestionService.remove_question(db, question_id, owner_id=current_user.id)

    ActivityService.log(
        action="DELETE",
        entity_type="question",
        entity_id=question_id,
        user_id=current_user.id,
        details={"form_id": form_id},
        request=request,
        background_tasks=background_tasks
    )
    return {"message": "Question deleted successfully"}
