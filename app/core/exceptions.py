# app/core/exceptions.py
from fastapi import status


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        self.details = details
        super().__init__(message)


class InvalidSubmissionException(AppException):
    """Raised when an order inquiry fails validation or trips the honeypot."""

    def __init__(self, message: str = "Invalid submission"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class RateLimitExceededException(AppException):
    """Raised when a client has used up its submission quota."""

    def __init__(
        self,
        message: str = "Too many submissions. Please try again later.",
    ):
        super().__init__(
            message,
            status.HTTP_429_TOO_MANY_REQUESTS,
            details={"rateLimited": True},
        )


class PersistenceException(AppException):
    """Raised for database errors. The message is for logs, not clients."""

    def __init__(self, message: str = "A database error occurred."):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class AuthenticationException(AppException):
    def __init__(self, message: str = "Authentication failed. Please try again."):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class NotFoundException(AppException):
    def __init__(self, message: str = "Resource not found."):
        super().__init__(message, status.HTTP_404_NOT_FOUND)
