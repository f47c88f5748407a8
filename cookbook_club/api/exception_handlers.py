"""Map domain exceptions to HTTP responses with an ErrorResponse body."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from cookbook_club.errors import (
    DomainError,
    DomainValidationError,
    DuplicateResourceError,
    ForbiddenError,
    NotFoundError,
    PreconditionFailedError,
    SnapshotError,
    UnauthorizedError,
)
from cookbook_club.schemas.error import ErrorResponse


def _error_response(
    status_code: int, exc: DomainError, issues: list[str] | None = None
) -> JSONResponse:
    body = ErrorResponse(detail=str(exc), code=exc.code, issues=issues)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def validation_error_handler(_request: Request, exc: DomainValidationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


def snapshot_error_handler(_request: Request, exc: SnapshotError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc, issues=exc.issues or None)


def unauthorized_error_handler(_request: Request, exc: UnauthorizedError) -> JSONResponse:
    return _error_response(status.HTTP_401_UNAUTHORIZED, exc)


def forbidden_error_handler(_request: Request, exc: ForbiddenError) -> JSONResponse:
    return _error_response(status.HTTP_403_FORBIDDEN, exc)


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


def precondition_failed_error_handler(
    _request: Request, exc: PreconditionFailedError
) -> JSONResponse:
    return _error_response(status.HTTP_409_CONFLICT, exc)


def duplicate_resource_error_handler(
    _request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    return _error_response(status.HTTP_409_CONFLICT, exc)


def register_exception_handlers(app):
    """Attach one handler per domain exception class to the app."""
    app.add_exception_handler(DomainValidationError, validation_error_handler)
    app.add_exception_handler(SnapshotError, snapshot_error_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_error_handler)
    app.add_exception_handler(ForbiddenError, forbidden_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(PreconditionFailedError, precondition_failed_error_handler)
    app.add_exception_handler(DuplicateResourceError, duplicate_resource_error_handler)
