import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class CustomException(Exception):
    http_code: int
    code: str
    message: str

    def __init__(self, http_code: int = None, code: str = None, message: str = None):
        self.http_code = http_code if http_code else 500
        self.code = code if code else str(self.http_code)
        self.message = message
        super().__init__(message)


class UnauthenticatedException(CustomException):
    def __init__(self, message: str = 'Could not validate credentials'):
        super().__init__(http_code=401, code='401', message=message)


class ForbiddenException(CustomException):
    def __init__(self, message: str = 'Permission denied'):
        super().__init__(http_code=403, code='403', message=message)


class ValidateException(CustomException):
    def __init__(self, message: str, http_code: int = 400):
        super().__init__(http_code=http_code, code=str(http_code), message=message)


class InvalidTransitionException(ValidateException):
    def __init__(self, message: str):
        super().__init__(message=message, http_code=409)


class NotFoundException(CustomException):
    def __init__(self, message: str = 'Not found'):
        super().__init__(http_code=404, code='404', message=message)


class StoreException(CustomException):
    """Persistence failure. The cause is logged, never returned to the caller."""

    def __init__(self, message: str = 'Storage failure'):
        super().__init__(http_code=500, code='500', message=message)


async def http_exception_handler(request: Request, exc: CustomException):
    return JSONResponse(
        status_code=exc.http_code,
        content=jsonable_encoder({'success': False, 'code': exc.code, 'message': exc.message})
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = get_message_validation(errors)
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({'success': False, 'code': '422', 'message': message, 'data': errors})
    )


def get_message_validation(errors) -> str:
    if not errors:
        return 'Invalid request'
    first = errors[0]
    location = '.'.join(str(part) for part in first.get('loc', ()) if part != 'body')
    return f"{location}: {first.get('msg')}" if location else first.get('msg', 'Invalid request')
