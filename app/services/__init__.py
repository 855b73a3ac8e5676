from .auth_service import AuthService
from .activity_service import ActivityService
from .form_service import FormService
from .question_service import QuestionService
from .response_service import ResponseService
from .mutation_guard import MutationGuard

__all__ = ["AuthService", "ActivityService", "FormService", "QuestionService", "ResponseService", "MutationGuard"]
