from enum import Enum


class ConstraintReason(str, Enum):
    ADD_BLOCKED = "question_add_blocked"
    DELETE_BLOCKED = "question_delete_blocked"
    TYPE_CHANGE_BLOCKED = "question_type_change_blocked"
    NOT_PUBLISHED = "form_not_published"
    CLOSED = "form_closed"
    INVALID_TRANSITION = "invalid_status_transition"


class FormsError(Exception):
    """Base class for errors raised by the form services."""

    status_code = 400
    error_code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FormsError):
    """Raised when a referenced form, question or response does not exist."""

    status_code = 404
    error_code = "not_found"


class ConstraintError(FormsError):
    """Raised when a guard or lifecycle rule rejects an operation."""

    status_code = 409

    def __init__(self, reason: ConstraintReason, message: str):
        super().__init__(message)
        self.reason = reason

    @property
    def error_code(self) -> str:
        return self.reason.value


class InvalidInputError(FormsError):
    """Raised when input fails validation before anything is written."""

    status_code = 422
    error_code = "validation_error"
