import logging
from collections.abc import Sequence

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from eduplatform.core import messages

logger = logging.getLogger(__name__)

LOCATIONS = {
    'path': 'params',
    'query': 'query',
    'body': 'body',
    'header': 'headers',
    'cookie': 'cookies',
}
NUMERIC_ERROR_TYPES = {'int_parsing', 'int_type', 'int_from_float', 'float_parsing', 'float_type'}


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell whether an integrity error comes from a unique constraint/index."""
    error_msg = str(exc.orig) if getattr(exc, 'orig', None) is not None else str(exc)
    error_msg = error_msg.lower()
    return 'unique' in error_msg or 'duplicate key' in error_msg


def with_detail(prefix: str, exc: Exception) -> str:
    return f'{prefix}{exc}'


def _error_message(error: dict) -> str:
    error_type = error.get('type', '')
    if error_type == 'string_type':
        return messages.STRING_PARAMETER
    if error_type in NUMERIC_ERROR_TYPES:
        return messages.NUMERIC_PARAMETER
    if error_type == 'value_error':
        ctx_error = (error.get('ctx') or {}).get('error')
        if ctx_error is not None:
            return str(ctx_error)
        return error.get('msg', '').removeprefix('Value error, ')
    return error.get('msg', messages.UNEXPECTED_ERROR)


def format_validation_errors(errors: Sequence[dict]) -> list[dict]:
    """Turn pydantic errors into ``{msg, param, location, value}`` entries.

    Missing fields of one location share a single message listing all of them,
    so a body without ``id`` and ``title`` yields two entries reading
    ``Please send required fields: id,title``.
    """
    missing: dict[str, list[str]] = {}
    parsed = []
    for error in errors:
        loc = tuple(error.get('loc', ()))
        location = LOCATIONS.get(str(loc[0]), str(loc[0])) if loc else 'body'
        param = '.'.join(str(part) for part in loc[1:]) or location
        parsed.append((error, location, param))
        if error.get('type') == 'missing':
            missing.setdefault(location, []).append(param)

    formatted = []
    for error, location, param in parsed:
        if error.get('type') == 'missing':
            msg = messages.required_fields(','.join(missing[location]))
            value = None
        else:
            msg = _error_message(error)
            value = error.get('input')
        formatted.append({'msg': msg, 'param': param, 'location': location, 'value': value})
    return formatted


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({'errors': format_validation_errors(exc.errors())}),
    )


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder({'errors': exc.detail}),
        headers=getattr(exc, 'headers', None),
    )


async def unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error while processing request')
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'errors': with_detail(f'{messages.UNEXPECTED_ERROR}: ', exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
