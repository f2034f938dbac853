"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  9xxx: System
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        details: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        super().__init__(message)


# --- 1xxx: Auth/User ---

class UserNotFoundError(AppError):
    def __init__(self, user_id: int) -> None:
        super().__init__(1001, f"User not found: {user_id}", 404)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid credentials", 401)


class InvalidTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Invalid or expired token", 401)


class AccessDeniedError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Access denied", 403)


# --- 9xxx: System ---

class ValidationFailedError(AppError):
    """Input rejected before any store or cache access.

    ``details`` holds the list of ``{"field": ..., "message": ...}`` dicts.
    """

    def __init__(self, errors: list[dict[str, str]], message: str = "Validation error") -> None:
        super().__init__(9001, message, 400, details=errors)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
