from __future__ import annotations


class DomainError(Exception):
    """Base class for expected failures raised by usecases."""


class NotFoundError(DomainError):
    pass


class ValidationError(DomainError):
    """Malformed input. Always tagged with the offending field(s)."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.errors: dict[str, list[str]] = {field: [message]}

    @property
    def fields(self) -> list[str]:
        return list(self.errors)


class ConflictError(DomainError):
    pass


class SlotAlreadyClaimedError(ConflictError):
    pass
