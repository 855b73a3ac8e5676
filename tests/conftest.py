import uuid
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from app.main import app
from app.core import database
from app.core.database import get_db
from app.core.security import get_current_user
from app.models import Base, FormStatus, QuestionType, User
from app.schemas.forms import AnswerInput, FormCreate, FormUpdate, QuestionCreate
from app.services.form_service import FormService
from app.services.question_service import QuestionService
from app.services.response_service import ResponseService

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(monkeypatch):
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(database, "SessionLocal", TestingSessionLocal)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _make_user(db, email):
    user = User(id=str(uuid.uuid4()), email=email, username=email.split("@")[0], hashed_password="not-a-real-hash")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def user(db):
    return _make_user(db, "owner@example.com")


@pytest.fixture
def other_user(db):
    return _make_user(db, "respondent@example.com")


@pytest.fixture
def make_form(db, user):
    def _make_form(title="Customer Feedback Survey", status=FormStatus.DRAFT, owner=None, description=None):
        owner = owner or user
        form = FormService.create_form(db, FormCreate(title=title, description=description), owner.id)
        if status in (FormStatus.PUBLISHED, FormStatus.CLOSED):
            FormService.update_form(db, form["id"], FormUpdate(status=FormStatus.PUBLISHED))
        if status == FormStatus.CLOSED:
            FormService.update_form(db, form["id"], FormUpdate(status=FormStatus.CLOSED))
        return form
    return _make_form


@pytest.fixture
def add_question(db):
    def _add_question(form_id, text="What is your name?", question_type=QuestionType.SHORT_ANSWER, options=None, required=False):
        return QuestionService.add_question(db, form_id, QuestionCreate(
            question_text=text,
            question_type=question_type,
            options=options or [],
            required=required,
        ))
    return _add_question


@pytest.fixture
def submit(db):
    def _submit(form_id, answers):
        return ResponseService.submit_response(
            db, form_id, [AnswerInput(question_id=qid, answer=value) for qid, value in answers]
        )
    return _submit


@pytest.fixture
def client(db, user):
    state = {"user": user}

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: state["user"]

    with patch("app.services.activity_service.ActivityService.log_task"):
        with TestClient(app) as c:
            c.auth_state = state
            yield c

    app.dependency_overrides.clear()
