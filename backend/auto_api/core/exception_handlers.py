"""
Exception handlers for the REST transport.

AppException subclasses are HTTPExceptions and need no handler. Request
validation errors are answered with 400 instead of FastAPI's default 422,
which is reserved for the duplicate chassis number.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.config.logging import auto_api_logger as logger


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(
        "Request validation failed",
        path=request.url.path,
        errors=len(exc.errors()),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
