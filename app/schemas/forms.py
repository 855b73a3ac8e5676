"""Request and response shapes for forms, questions and responses.

Field names are camelCase on the wire and snake_case in Python. Update
models only carry the fields a client actually sent; services read them
with ``model_dump(exclude_unset=True)`` so an omitted field keeps its
stored value.
"""
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.form import FormStatus, QuestionType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SortField(str, Enum):
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    TITLE = "title"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ---- requests ----

class FormCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class FormUpdate(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[FormStatus] = None


class QuestionCreate(CamelModel):
    question_text: str = Field(..., min_length=1)
    question_type: QuestionType
    options: List[str] = []
    required: bool = False


class QuestionUpdate(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    question_text: Optional[str] = Field(None, min_length=1)
    question_type: Optional[QuestionType] = None
    options: Optional[List[str]] = None
    required: Optional[bool] = None
    order: Optional[int] = Field(None, ge=1)


class ReorderRequest(CamelModel):
    question_ids: List[str]


class AnswerInput(CamelModel):
    question_id: str
    answer: Union[str, List[str]]


# ---- responses ----

class QuestionOut(CamelModel):
    id: str
    form_id: str
    question_text: str
    question_type: QuestionType
    options: List[str]
    required: bool
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FormOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    status: FormStatus
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    question_count: int = 0
    response_count: Optional[int] = 0


class FormDetailOut(FormOut):
    questions: List[QuestionOut] = []


class FormListOut(CamelModel):
    forms: List[FormOut]
    total: int


class FormStatsOut(CamelModel):
    total_forms: int
    draft_forms: int
    published_forms: int
    closed_forms: int
    total_responses: int


class AnswerOut(CamelModel):
    id: str
    question_id: str
    question_text: Optional[str] = None
    question_type: Optional[QuestionType] = None
    answer: Any


class ResponseOut(CamelModel):
    id: str
    form_id: str
    created_at: Optional[datetime] = None
    answers: List[AnswerOut]
