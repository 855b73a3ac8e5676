from .base import Base
from .user import User
from .form import Form, Question, FormStatus, QuestionType, CHOICE_TYPES
from .response import Response, Answer
from .activity_log import ActivityLog

__all__ = [
    'Base', 'User', 'Form', 'Question', 'FormStatus', 'QuestionType', 'CHOICE_TYPES',
    'Response', 'Answer', 'ActivityLog'
]
