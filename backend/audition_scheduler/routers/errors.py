from typing import Any, Callable

from fastapi import HTTPException, status

from ..domain.errors import ConflictError, DomainError, NotFoundError, ValidationError


def http_error_for(exc: DomainError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "validation failed", "errors": exc.errors},
        )
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="unexpected domain error")


def audit_or_500(emit: Callable[..., None], **fields: Any) -> None:
    try:
        emit(**fields)
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failure") from exc
