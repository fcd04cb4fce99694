"""
Error taxonomy shared by the store, the token engine and the HTTP layer.

Every failure leaves the engine as exactly one of these classes; the
FastAPI exception handlers in ``whalewake.main`` map them to status codes.
"""
from typing import Optional


class AppError(Exception):
    default_message = "application error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    default_message = "invalid input"


class ConflictError(AppError):
    default_message = "resource already exists"


class NotFoundError(AppError):
    default_message = "resource not found"


class UnauthorizedError(AppError):
    default_message = "not authenticated"


class ForbiddenError(AppError):
    default_message = "not allowed"


class InternalError(AppError):
    default_message = "internal error"


class OperationCancelled(AppError):
    default_message = "operation cancelled"


# =====================================================
# TOKEN ERRORS
# =====================================================

class TokenError(AppError):
    default_message = "token error"


class MissingKeyError(TokenError):
    default_message = "invalid token symmetric key"


class InvalidTokenError(TokenError):
    default_message = "invalid token"


class ExpiredTokenError(TokenError):
    default_message = "token has expired"
