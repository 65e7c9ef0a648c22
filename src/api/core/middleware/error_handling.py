import logging
import re

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.core.exceptions import AppError
from src.api.core.response import error_response

logger = logging.getLogger(__name__)


def _field_errors(exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(loc), "message": err.get("msg")})
    return errors


def register_exception_handlers(app):

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return error_response(400, "Validation error", errors=_field_errors(exc))

    @app.exception_handler(AppError)
    async def app_exception_handler(request: Request, exc: AppError):
        return error_response(exc.status_code, exc.detail, error_code=exc.code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError):
        msg = str(exc.orig) if exc.orig else str(exc)
        if "duplicate key value violates unique constraint" in msg:
            m = re.search(r"Key \((.*?)\)=\((.*?)\)", msg)
            if m:
                field, value = m.groups()
                msg = f"Duplicate entry: {field} = {value}"
            else:
                msg = "Duplicate key violation"
        elif "UNIQUE constraint failed" in msg:
            # sqlite: "UNIQUE constraint failed: products.slug"
            msg = f"Duplicate entry: {msg.split(':', 1)[-1].strip()}"
        else:
            msg = "Conflict with existing data"
        return error_response(409, msg, error_code="CONFLICT")

    @app.exception_handler(OperationalError)
    async def operational_exception_handler(request: Request, exc: OperationalError):
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
        return error_response(503, "Database unavailable, try again later")

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "Internal Server Error")
