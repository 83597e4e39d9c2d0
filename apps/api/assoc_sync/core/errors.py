from __future__ import annotations

from typing import Any


class AssociationSyncError(Exception):
    """Fatal error for a sync run.

    The reconciler fills in `cursor` and `page_number` for the page that was in
    flight so the caller can tell where the run stopped.
    """

    def __init__(
        self,
        message: str,
        *,
        cursor: str | None = None,
        page_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cursor = cursor
        self.page_number = page_number
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "cursor": self.cursor,
            "page_number": self.page_number,
            "details": self.details,
        }


class TransportError(AssociationSyncError):
    """Network failure or non-2xx status from the passthrough or the upstream CRM."""


class DecodeError(AssociationSyncError):
    """Response body could not be parsed into the expected page shape."""


class PersistenceError(AssociationSyncError):
    """The replace transaction failed or ran past its timeout; nothing was applied."""
