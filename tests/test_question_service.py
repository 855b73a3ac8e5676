from datetime import datetime

import pytest

from app.core.exceptions import ConstraintError, ConstraintReason, InvalidInputError, NotFoundError
from app.models.form import Form, FormStatus, Question, QuestionType
from app.schemas.forms import QuestionCreate, QuestionUpdate
from app.services.form_service import FormService
from app.services.question_service import QuestionService


def test_orders_assigned_sequentially(make_form, add_question):
    form = make_form()
    first = add_question(form["id"], "First")
    second = add_question(form["id"], "Second")
    third = add_question(form["id"], "Third")

    assert [first["order"], second["order"], third["order"]] == [1, 2, 3]


def test_order_follows_current_max(db, make_form, add_question):
    form = make_form()
    add_question(form["id"], "First")
    second = add_question(form["id"], "Second")
    db.query(Question).filter(Question.id == second["id"]).update({Question.order: 7})
    db.commit()

    assert add_question(form["id"], "Third")["order"] == 8


def test_checkbox_options_round_trip(db, make_form, add_question):
    form = make_form()
    created = add_question(form["id"], "Pick some", QuestionType.CHECKBOX, ["A", "B"])

    fetched = QuestionService.get_question(db, created["id"])
    assert fetched["question_type"] == QuestionType.CHECKBOX
    assert fetched["options"] == ["A", "B"]


def test_free_text_questions_drop_options(make_form, add_question):
    form = make_form()
    created = add_question(form["id"], "Comments", QuestionType.LONG_ANSWER, ["ignored"])
    assert created["options"] == []


@pytest.mark.parametrize("question_type", [QuestionType.MULTIPLE_CHOICE, QuestionType.CHECKBOX, QuestionType.DROPDOWN])
def test_choice_questions_require_options(db, make_form, question_type):
    form = make_form()
    with pytest.raises(InvalidInputError):
        QuestionService.add_question(db, form["id"], QuestionCreate(
            question_text="Pick one", question_type=question_type, options=[]
        ))
    assert db.query(Question).count() == 0


def test_blank_option_rejected(db, make_form):
    form = make_form()
    with pytest.raises(InvalidInputError):
        QuestionService.add_question(db, form["id"], QuestionCreate(
            question_text="Pick one", question_type=QuestionType.DROPDOWN, options=["Yes", "  "]
        ))


def test_blank_question_text_rejected(db, make_form):
    form = make_form()
    with pytest.raises(InvalidInputError):
        QuestionService.add_question(db, form["id"], QuestionCreate(
            question_text="   ", question_type=QuestionType.SHORT_ANSWER
        ))


def test_add_to_missing_form(db):
    with pytest.raises(NotFoundError):
        QuestionService.add_question(db, "missing", QuestionCreate(
            question_text="Hello", question_type=QuestionType.SHORT_ANSWER
        ))


def test_partial_update_keeps_other_fields(db, make_form, add_question):
    form = make_form()
    created = add_question(form["id"], "Favourite colour", QuestionType.DROPDOWN, ["Red", "Blue"], required=True)

    updated = QuestionService.update_question(db, created["id"], QuestionUpdate(question_text="Favourite color"))

    assert updated["question_text"] == "Favourite color"
    assert updated["question_type"] == QuestionType.DROPDOWN
    assert updated["options"] == ["Red", "Blue"]
    assert updated["required"] is True
    assert updated["order"] == 1


def test_type_change_allowed_without_responses(db, make_form, add_question):
    form = make_form()
    created = add_question(form["id"])

    updated = QuestionService.update_question(db, created["id"], QuestionUpdate(
        question_type=QuestionType.MULTIPLE_CHOICE, options=["Yes", "No"]
    ))
    assert updated["question_type"] == QuestionType.MULTIPLE_CHOICE
    assert updated["options"] == ["Yes", "No"]


def test_type_change_to_choice_needs_options(db, make_form, add_question):
    form = make_form()
    created = add_question(form["id"])

    with pytest.raises(InvalidInputError):
        QuestionService.update_question(db, created["id"], QuestionUpdate(question_type=QuestionType.CHECKBOX))
    assert QuestionService.get_question(db, created["id"])["question_type"] == QuestionType.SHORT_ANSWER


def test_structural_edits_blocked_after_response(db, make_form, add_question, submit):
    form = make_form(status=FormStatus.PUBLISHED)
    q1 = add_question(form["id"], "Name")
    submit(form["id"], [(q1["id"], "Ada")])

    with pytest.raises(ConstraintError) as add_err:
        add_question(form["id"], "Another")
    assert add_err.value.reason == ConstraintReason.ADD_BLOCKED

    with pytest.raises(ConstraintError) as delete_err:
        QuestionService.remove_question(db, q1["id"])
    assert delete_err.value.reason == ConstraintReason.DELETE_BLOCKED

    with pytest.raises(ConstraintError) as type_err:
        QuestionService.update_question(db, q1["id"], QuestionUpdate(question_type=QuestionType.LONG_ANSWER))
    assert type_err.value.reason == ConstraintReason.TYPE_CHANGE_BLOCKED

    updated = QuestionService.update_question(db, q1["id"], QuestionUpdate(
        question_text="Full name", required=True, question_type=QuestionType.SHORT_ANSWER
    ))
    assert updated["question_text"] == "Full name"
    assert updated["required"] is True
    assert db.query(Question).count() == 1


def test_options_editable_after_response(db, make_form, add_question, submit):
    form = make_form(status=FormStatus.PUBLISHED)
    q1 = add_question(form["id"], "Pick", QuestionType.MULTIPLE_CHOICE, ["A", "B"])
    submit(form["id"], [(q1["id"], "A")])

    updated = QuestionService.update_question(db, q1["id"], QuestionUpdate(options=["A", "B", "C"]))
    assert updated["options"] == ["A", "B", "C"]


def test_remove_question_renumbers_rest(db, make_form, add_question):
    form = make_form()
    q1 = add_question(form["id"], "One")
    q2 = add_question(form["id"], "Two")
    q3 = add_question(form["id"], "Three")

    QuestionService.remove_question(db, q2["id"])

    remaining = QuestionService.list_questions(db, form["id"])
    assert [(q["id"], q["order"]) for q in remaining] == [(q1["id"], 1), (q3["id"], 2)]


def test_remove_missing_question(db):
    with pytest.raises(NotFoundError):
        QuestionService.remove_question(db, "missing")


def test_reorder_is_idempotent(db, make_form, add_question):
    form = make_form()
    ids = [add_question(form["id"], f"Q{i}")["id"] for i in range(3)]
    new_order = [ids[2], ids[0], ids[1]]

    first = QuestionService.reorder_questions(db, form["id"], new_order)
    second = QuestionService.reorder_questions(db, form["id"], new_order)

    expected = [(qid, index + 1) for index, qid in enumerate(new_order)]
    assert [(q["id"], q["order"]) for q in first] == expected
    assert [(q["id"], q["order"]) for q in second] == expected


def test_reorder_allowed_after_response(db, make_form, add_question, submit):
    form = make_form(status=FormStatus.PUBLISHED)
    q1 = add_question(form["id"], "One")
    q2 = add_question(form["id"], "Two")
    submit(form["id"], [(q1["id"], "x")])

    result = QuestionService.reorder_questions(db, form["id"], [q2["id"], q1["id"]])
    assert [q["id"] for q in result] == [q2["id"], q1["id"]]


@pytest.mark.parametrize("build", [
    lambda ids: ids[:1],
    lambda ids: ids + ["unknown"],
    lambda ids: [ids[0], ids[0]],
])
def test_reorder_requires_exact_question_set(db, make_form, add_question, build):
    form = make_form()
    ids = [add_question(form["id"], "One")["id"], add_question(form["id"], "Two")["id"]]

    with pytest.raises(InvalidInputError):
        QuestionService.reorder_questions(db, form["id"], build(ids))

    assert [q["order"] for q in QuestionService.list_questions(db, form["id"])] == [1, 2]


def test_owner_scoping(db, make_form, add_question, other_user):
    form = make_form()
    q1 = add_question(form["id"])

    with pytest.raises(NotFoundError):
        QuestionService.update_question(db, q1["id"], QuestionUpdate(question_text="Hijack"), owner_id=other_user.id)
    with pytest.raises(NotFoundError):
        QuestionService.reorder_questions(db, form["id"], [q1["id"]], owner_id=other_user.id)


@pytest.mark.parametrize("position, expected", [
    (1, ["Two", "One", "Three"]),
    (3, ["One", "Three", "Two"]),
    (99, ["One", "Three", "Two"]),
])
def test_update_order_moves_question(db, make_form, add_question, position, expected):
    form = make_form()
    add_question(form["id"], "One")
    second = add_question(form["id"], "Two")
    add_question(form["id"], "Three")

    updated = QuestionService.update_question(db, second["id"], QuestionUpdate(order=position))

    questions = QuestionService.list_questions(db, form["id"])
    assert [q["question_text"] for q in questions] == expected
    assert [q["order"] for q in questions] == [1, 2, 3]
    assert updated["order"] == expected.index("Two") + 1


@pytest.mark.parametrize("edit", [
    lambda db, form_id, q: QuestionService.add_question(db, form_id, QuestionCreate(
        question_text="Extra", question_type=QuestionType.SHORT_ANSWER
    )),
    lambda db, form_id, q: QuestionService.update_question(db, q["id"], QuestionUpdate(required=True)),
    lambda db, form_id, q: QuestionService.remove_question(db, q["id"]),
    lambda db, form_id, q: QuestionService.reorder_questions(db, form_id, [q["id"]]),
])
def test_question_edits_touch_form(db, make_form, add_question, edit):
    form = make_form()
    question = add_question(form["id"], "One")
    long_ago = datetime(2000, 1, 1)
    db.query(Form).filter(Form.id == form["id"]).update({Form.updated_at: long_ago})
    db.commit()

    edit(db, form["id"], question)

    assert FormService.get_form(db, form["id"])["updated_at"] > long_ago
