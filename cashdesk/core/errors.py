"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; the handlers registered in ``main.py`` turn them into
the standard error envelope using ``status_code`` and ``code``.
"""
from fastapi import status

from cashdesk.utils.error_codes import ERROR_CODES


class CashdeskError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = ERROR_CODES["SERVER_ERROR"]
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(CashdeskError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ERROR_CODES["VALIDATION_ERROR"]
    default_message = "Invalid input"


class DuplicateError(CashdeskError):
    status_code = status.HTTP_409_CONFLICT
    code = ERROR_CODES["CONFLICT"]
    default_message = "Record already exists"


class NotFoundError(CashdeskError):
    status_code = status.HTTP_404_NOT_FOUND
    code = ERROR_CODES["NOT_FOUND"]
    default_message = "Record not found"


class AuthError(CashdeskError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = ERROR_CODES["UNAUTHORIZED"]
    default_message = "Unauthorized"


class MissingToken(AuthError):
    default_message = "Access token required"


class InvalidToken(AuthError):
    code = ERROR_CODES["INVALID_TOKEN"]
    default_message = "Invalid or expired token"


class InvalidCredentials(AuthError):
    code = ERROR_CODES["INVALID_CREDENTIALS"]
    default_message = "Invalid credentials"


class Forbidden(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    code = ERROR_CODES["FORBIDDEN"]
    default_message = "You do not have access to this resource"


class StorageError(CashdeskError):
    default_message = "Database error"
