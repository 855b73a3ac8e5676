from fastapi import APIRouter, Depends, Query, Request, BackgroundTasks
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.security import get_current_user
from app.models.form import FormStatus
from app.models.user import User
from app.schemas.forms import (
    FormCreate, FormUpdate, FormOut, FormDetailOut, FormListOut, FormStatsOut, SortField, SortOrder,
)
from app.services.activity_service import ActivityService
from app.services.form_service import FormService

router = APIRouter()

@router.get("", response_model=FormListOut)
@router.get("/", response_model=FormListOut, include_in_schema=False)
def list_forms(
    search: Optional[str] = None,
    status: Optional[FormStatus] = None,
    sort_by: SortField = Query(SortField.CREATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    forms, total = FormService.list_forms(db, current_user.id, search, status, sort_by, sort_order)
    return FormListOut(forms=forms, total=total)


@router.get("/stats", response_model=FormStatsOut)
def get_form_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return FormService.get_form_stats(db, current_user.id)


@router.get("/{form_id}", response_model=FormDetailOut)
def get_form(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return FormService.get_form(db, form_id, viewer_id=current_user.id)


@router.post("", response_model=FormOut)
@router.post("/", response_model=FormOut, include_in_schema=False)
def create_form(
    form: FormCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    created_form = FormService.create_form(db, form, current_user.id)

    ActivityService.log(
        action="CREATE",
        entity_type="form",
        entity_id=created_form["id"],
        user_id=current_user.id,
        details={"title": created_form["title"]},
        request=request,
        background_tasks=background_tasks
    )
    return created_form


@router.patch("/{form_id}", response_model=FormDetailOut)
def update_form(
    form_id: str,
    form: FormUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    updated_form = FormService.update_form(db, form_id, form, owner_id=current_user.id)

    ActivityService.log(
        action="UPDATE",
        entity_type="form",
        entity_id=form_id,
        user_id=current_user.id,
        details={"title": updated_form["title"], "updated_fields": sorted(form.model_fields_set)},
        request=request,
        background_tasks=background_tasks
    )
    return updated_form


@router.delete("/{form_id}")
def delete_form(
    form_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a form together with its questions and responses"""
    title = FormService.delete_form(db, form_id, owner_id=current_user.id)

    ActivityService.log(
        action="DELETE",
        entity_type="form",
        entity_id=form_id,
        user_id=current_user.id,
        details={"title": title},
        request=request,
        background_tasks=background_tasks
    )
    return {"message": "Form deleted successfully"}
