from fastapi import status


class AppError(Exception):
    """Base application error, rendered as a ResponseModel with a matching HTTP status"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_msg: str = "Internal Server Error"

    def __init__(self, msg: str = None):
        self.msg = msg or self.default_msg
        super().__init__(self.msg)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_msg = "Invalid request data"


class DuplicateUserError(ValidationError):
    default_msg = "User already exists"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_msg = "Unauthorized"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_msg = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_msg = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_msg = "Conflict"


class PayloadTooLargeError(AppError):
    status_code = 413
    default_msg = "File too large"
