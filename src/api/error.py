from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


# Stable error code -> HTTP status classification shared by all routers
ERROR_STATUS = {
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_IMAGE": status.HTTP_400_BAD_REQUEST,
    "USER_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "EMAIL_ALREADY_VERIFIED": status.HTTP_409_CONFLICT,
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_RESET_CODE": status.HTTP_400_BAD_REQUEST,
    "INVALID_TOKEN": status.HTTP_400_BAD_REQUEST,
    "RESET_CODE_EXPIRED": status.HTTP_410_GONE,
    "TOKEN_EXPIRED": status.HTTP_410_GONE,
    "MAIL_DELIVERY_FAILED": status.HTTP_502_BAD_GATEWAY,
    "STORAGE_FAILURE": status.HTTP_502_BAD_GATEWAY,
}


def raise_for_error(error: Error):
    """Translate a use case Error into the exception the app handlers render"""
    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
