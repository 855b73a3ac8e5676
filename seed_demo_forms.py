import sys
import os

# Add current directory to path so we can import app modules
sys.path.append(os.getcwd())

from app.core.database import SessionLocal
from app.models.form import FormStatus, QuestionType
from app.models.user import User
from app.schemas.forms import FormCreate, FormUpdate, QuestionCreate
from app.services.auth_service import AuthService
from app.services.form_service import FormService
from app.services.question_service import QuestionService

DEMO_EMAIL = os.getenv("DEMO_EMAIL", "john@example.com")
DEMO_PASSWORD = os.getenv("DEMO_PASSWORD", "password123")

DEMO_FORMS = [
    {
        "title": "Customer Feedback Survey",
        "description": "Help us improve our services by providing your valuable feedback.",
        "publish": True,
        "questions": [
            ("What is your full name?", QuestionType.SHORT_ANSWER, [], True),
            ("How satisfied are you with our service?", QuestionType.MULTIPLE_CHOICE,
             ["Very Satisfied", "Satisfied", "Neutral", "Dissatisfied", "Very Dissatisfied"], True),
            ("Which features do you use most often?", QuestionType.CHECKBOX,
             ["Dashboard", "Reports", "Settings", "API Integration", "Mobile App"], False),
            ("Please provide any additional comments or suggestions.", QuestionType.LONG_ANSWER, [], False),
        ],
    },
    {
        "title": "Event Registration Form",
        "description": "Register for our upcoming tech conference.",
        "publish": False,
        "questions": [
            ("Email Address", QuestionType.SHORT_ANSWER, [], True),
            ("Which track are you interested in?", QuestionType.DROPDOWN,
             ["Web Development", "Mobile Development", "Data Science", "DevOps", "UI/UX Design"], True),
        ],
    },
]

def seed_demo_forms():
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == DEMO_EMAIL).first()
        if not user:
            print(f"Creating demo user: {DEMO_EMAIL}")
            user = AuthService.register_user(DEMO_EMAIL, DEMO_PASSWORD, db, username="demo")

        existing, _ = FormService.list_forms(db, user.id)
        existing_titles = {f["title"] for f in existing}

        for demo in DEMO_FORMS:
            if demo["title"] in existing_titles:
                print(f"Form '{demo['title']}' already exists")
                continue

            print(f"Inserting form: {demo['title']}")
            form = FormService.create_form(
                db, FormCreate(title=demo["title"], description=demo["description"]), user.id
            )
            for text, question_type, options, required in demo["questions"]:
                QuestionService.add_question(db, form["id"], QuestionCreate(
                    question_text=text, question_type=question_type, options=options, required=required
                ))
            if demo["publish"]:
                FormService.update_form(db, form["id"], FormUpdate(status=FormStatus.PUBLISHED))

        print("Demo form seeding completed successfully.")

    except Exception as e:
        print(f"Error seeding demo forms: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    seed_demo_forms()
