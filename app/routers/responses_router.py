from fastapi import APIRouter, Depends, Request, BackgroundTasks
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.exceptions import NotFoundError
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.forms import AnswerInput, ResponseOut
from app.services.activity_service import ActivityService
from app.services.response_service import ResponseService

router = APIRouter()

@router.post("/{form_id}/responses", response_model=ResponseOut)
def submit_response(
    form_id: str,
    answers: List[AnswerInput],
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    # Any signed-in user may respond; ownership is not required.
    response = ResponseService.submit_response(db, form_id, answers)

    ActivityService.log(
        action="SUBMIT",
        entity_type="response",
        entity_id=response["id"],
        user_id=current_user.id,
        details={"form_id": form_id, "answers": len(answers)},
        request=request,
        background_tasks=background_tasks
    )
    return response


@router.get("/{form_id}/responses", response_model=List[ResponseOut])
def list_responses(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return ResponseService.list_responses(db, form_id, owner_id=current_user.id)


@router.get("/{form_id}/responses/{response_id}", response_model=ResponseOut)
def get_response(
    form_id: str,
    response_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    response = ResponseService.get_response(db, response_id, owner_id=current_user.id)
    if response["form_id"] != form_id:
        raise NotFoundError("Response not found")
    return response
