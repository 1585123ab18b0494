"""Error taxonomy and the exception handlers that render it.

Services raise AppError subclasses; handlers never build error responses by
hand. Every error body has the shape {"error": "<localized message>"}, and
request validation failures add a "fields" mapping.

Persistence failures (SQLAlchemyError) and any other unexpected exception are
logged with the full traceback and answered with a 500 naming the failed
operation — the cause never reaches the client.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tasktrack.messages import DEFAULT_LOCALE, translate

logger = structlog.get_logger()


class AppError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code = 500
    message_key = "errors.internal"

    def __init__(self, **params):
        super().__init__(self.message_key)
        self.params = params


class ValidationFailedError(AppError):
    status_code = 400
    message_key = "validation.failed"


class EmailTakenError(AppError):
    status_code = 409
    message_key = "auth.email_taken"


class InvalidCredentialsError(AppError):
    """Unknown email and wrong password share this error on purpose."""

    status_code = 401
    message_key = "auth.invalid_credentials"


class UnauthenticatedError(AppError):
    status_code = 401
    message_key = "auth.unauthenticated"


class NotLoggedInError(UnauthenticatedError):
    """No session cookie on /auth/me, which answers "not logged in"."""

    message_key = "auth.not_logged_in"


class InvalidTokenError(AppError):
    status_code = 401
    message_key = "auth.invalid_token"


class UserNotFoundError(AppError):
    status_code = 404
    message_key = "auth.user_not_found"


class TaskNotFoundError(AppError):
    """Raised for missing tasks AND tasks owned by someone else."""

    status_code = 404
    message_key = "tasks.not_found"


# ─── Validation message mapping ──────────────────────────

# (field, pydantic error type) → catalog key
_FIELD_MESSAGES: dict[tuple[str, str], str] = {
    ("email", "missing"): "validation.email_required",
    ("email", "string_pattern_mismatch"): "validation.email",
    ("email", "string_too_long"): "validation.email",
    ("password", "missing"): "validation.password_required",
    ("password", "string_too_short"): "validation.password_min",
    ("title", "missing"): "validation.title_required",
    ("title", "string_too_short"): "validation.title_required",
    ("title", "string_too_long"): "validation.title_max",
    ("content", "string_too_long"): "validation.content_max",
}


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def validation_messages(errors, locale: str) -> dict[str, str]:
    """Collapse pydantic errors into one localized message per field."""
    fields: dict[str, str] = {}
    for err in errors:
        field = _field_name(tuple(err.get("loc", ())))
        if field in fields:
            continue
        leaf = field.rsplit(".", 1)[-1]
        ctx = err.get("ctx") or {}
        key = _FIELD_MESSAGES.get((leaf, err.get("type", "")))
        if key:
            fields[field] = translate(
                key,
                locale,
                min=ctx.get("min_length", ""),
                max=ctx.get("max_length", ""),
            )
        elif str(ctx.get("error", "")) == "not_null":
            fields[field] = translate("validation.not_null", locale)
        elif err.get("type") == "missing":
            fields[field] = translate("validation.required", locale)
        elif locale == DEFAULT_LOCALE and err.get("msg"):
            # pydantic's own messages are English
            fields[field] = err["msg"]
        else:
            fields[field] = translate("validation.invalid", locale)
    return fields


# ─── Handlers ────────────────────────────────────────────


def _locale(request: Request) -> str:
    settings = getattr(request.app.state, "settings", None)
    return settings.locale if settings else DEFAULT_LOCALE


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": translate(exc.message_key, _locale(request), **exc.params)},
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    locale = _locale(request)
    return JSONResponse(
        status_code=400,
        content={
            "error": translate("validation.failed", locale),
            "fields": validation_messages(exc.errors(), locale),
        },
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    locale = _locale(request)
    if exc.status_code == 404:
        message = translate("errors.not_found", locale)
    elif exc.status_code == 405:
        message = translate("errors.method_not_allowed", locale)
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


# route name → message for a failure inside that operation
_FAILURE_MESSAGES: dict[str, str] = {
    "list_tasks": "tasks.list_failed",
    "get_task": "tasks.get_failed",
    "create_task": "tasks.create_failed",
    "update_task": "tasks.update_failed",
    "delete_task": "tasks.delete_failed",
    "bulk_update_status": "tasks.bulk_failed",
}


def _internal_error(request: Request, event: str, exc: Exception) -> JSONResponse:
    logger.exception(
        event,
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    route = request.scope.get("route")
    key = _FAILURE_MESSAGES.get(getattr(route, "name", ""), "errors.internal")
    return JSONResponse(
        status_code=500,
        content={"error": translate(key, _locale(request))},
    )


async def database_error_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    return _internal_error(request, "request.database_error", exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort, e.g. driver errors SQLAlchemy does not wrap."""
    return _internal_error(request, "request.unhandled_error", exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
