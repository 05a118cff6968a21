"""
Exception handlers.

Module code raises ``SprintDeskError`` subclasses; their base class
decides the status code. Anything else is logged with its traceback and
answered with a generic 500. Responses use the standard ``ErrorResponse``.
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import AuthenticationError, SprintDeskError

from .models.errors import ErrorResponse, ValidationErrorResponse

logger = logging.getLogger(__name__)


async def sprintdesk_error_handler(request: Request, exc: SprintDeskError) -> JSONResponse:
    status_code = exc.status_code
    if status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    else:
        logger.debug("%s %s rejected: %s (%s)", request.method, request.url.path, exc.message, exc.code)

    body = ErrorResponse(
        error=HTTPStatus(status_code).phrase,
        detail=exc.message,
        code=exc.code,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = ValidationErrorResponse(detail=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=422, content=body.model_dump())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "%s %s raised %s", request.method, request.url.path, type(exc).__name__, exc_info=exc
    )
    body = ErrorResponse(
        error=HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
        detail="Internal server error",
        code="INTERNAL_ERROR",
    )
    return JSONResponse(status_code=500, content=body.model_dump())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SprintDeskError, sprintdesk_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
