"""
Application Exceptions

Every error the API reports on purpose is a BookFinderError. Services raise
them; the handlers registered in app.main render them as

    {"message": "...", "errors": [{"field": "...", "message": "..."}]}

with the status code carried by the exception class.

Taxonomy:
- ValidationError    400  malformed or out-of-range input
- ConflictError      400  duplicate username, email or favorite
- UnauthorizedError  401  missing/invalid/expired token, bad credentials
- NotFoundError      404  favorite not present
- UpstreamError      500  external catalog failure
- InternalError      500  anything unexpected, including database failures
"""

from fastapi import status


class BookFinderError(Exception):
    """Base class for errors rendered to the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        field: str | None = None,
        detail: str | None = None,
    ) -> None:
        """
        Args:
            message: Top-level message for the client
            errors: Field-level errors, each {"field": ..., "message": ...}
            field: Shortcut for a single field-level error
            detail: Message for the single field-level error (defaults to
                message)
        """
        self.message = message or self.default_message
        self.errors = list(errors or [])
        if field is not None:
            self.errors.append({"field": field, "message": detail or self.message})
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class ValidationError(BookFinderError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class ConflictError(BookFinderError):
    # The public contract reports duplicates as 400, not 409
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class UnauthorizedError(BookFinderError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidTokenError(UnauthorizedError):
    default_message = "Invalid token."


class TokenExpiredError(UnauthorizedError):
    default_message = "Token expired."


class NotFoundError(BookFinderError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UpstreamError(BookFinderError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Please try again later"


class InternalError(BookFinderError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
