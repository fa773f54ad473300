"""
Exception classes shared by the services and the HTTP layer.
"""

from fastapi import HTTPException, status


class AceAIError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class CredentialError(AceAIError):
    """Model-service credential problems (missing or rejected)."""


class CredentialMissingError(CredentialError):
    """Raised before any model call when no API key is configured."""
    def __init__(self, message: str = "LLM API key is missing"):
        super().__init__(
            message=message,
            detail="Set DASHSCOPE_API_KEY in the environment or .env file and restart the server.",
        )


class CredentialInvalidError(CredentialError):
    """Raised when the model service rejects the configured API key."""
    def __init__(self, body: str = ""):
        super().__init__(message="LLM API key was rejected", detail=body or None)


class LLMServiceError(AceAIError):
    """Raised when the model service answers with a non-success status."""
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(message=f"LLM service error: {status_code}", detail=body)


class LLMConnectionError(AceAIError):
    """Raised when the model service cannot be reached."""
    def __init__(self, original_error: str):
        super().__init__(message="Could not reach the LLM service", detail=original_error)


class StorageError(AceAIError):
    """Raised when the knowledge store fails to read or write."""
    def __init__(self, operation: str, original_error: str):
        self.operation = operation
        super().__init__(message=f"Knowledge store {operation} failed", detail=original_error)


class SessionNotFoundError(AceAIError):
    def __init__(self, session_id: str):
        super().__init__(message=f"Quiz session '{session_id}' not found")


class UnknownQuestionError(AceAIError):
    """Raised when an answer references a question outside the session."""
    def __init__(self, session_id: str, question_id: str):
        super().__init__(
            message=f"Question '{question_id}' is not part of session '{session_id}'",
        )


class AnswerNotRecordedError(AceAIError):
    def __init__(self, session_id: str, question_id: str):
        super().__init__(
            message=f"No answer recorded for question '{question_id}' in session '{session_id}'",
        )


class SessionCompletedError(AceAIError):
    """Raised when answers are changed or graded after the session was finished."""
    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session '{session_id}' is already finished",
        )


_STATUS_BY_ERROR: list[tuple[type[AceAIError], int]] = [
    (CredentialError, status.HTTP_401_UNAUTHORIZED),
    (LLMServiceError, status.HTTP_502_BAD_GATEWAY),
    (LLMConnectionError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND),
    (UnknownQuestionError, 422),
    (AnswerNotRecordedError, status.HTTP_409_CONFLICT),
    (SessionCompletedError, status.HTTP_409_CONFLICT),
]


# ── Utility: convert to HTTPException ────────────────────

def app_error_to_http(error: AceAIError, status_code: int | None = None) -> HTTPException:
    """Convert an AceAIError to an HTTPException with consistent JSON body."""
    if status_code is None:
        status_code = status.HTTP_400_BAD_REQUEST
        for error_type, mapped_status in _STATUS_BY_ERROR:
            if isinstance(error, error_type):
                status_code = mapped_status
                break
    return HTTPException(
        status_code=status_code,
        detail={
            "error": error.message,
            "detail": error.detail,
            "type": type(error).__name__,
        },
    )
