from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.orm import Session

from assoc_sync.core.config import AssociationSyncConfig
from assoc_sync.core.errors import AssociationSyncError
from assoc_sync.services.associations.store import replace_page_associations
from assoc_sync.services.passthrough.models import ContactPage

logger = logging.getLogger(__name__)


class PageReader(Protocol):
    def fetch_page(self, cursor: str | None = None) -> ContactPage: ...


class SyncState(str, enum.Enum):
    START = "start"
    FETCHING_PAGE = "fetching_page"
    APPLYING_PAGE = "applying_page"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SyncRunResult:
    state: SyncState
    pages: int
    contacts: int
    edges_inserted: int
    elapsed_ms: int

    @property
    def message(self) -> str:
        return f"Successfully copied associations in {self.elapsed_ms}ms"

    def to_dict(self) -> dict[str, object]:
        return {
            "state": self.state.value,
            "pages": self.pages,
            "contacts": self.contacts,
            "edges_inserted": self.edges_inserted,
            "elapsed_ms": self.elapsed_ms,
            "body": self.message,
        }


class AssociationReconciler:
    """Walks every contacts page and replaces the stored edges page by page.

    Pages are fetched strictly one after another; each page is committed before
    the next cursor is followed, so a failed run keeps every page it finished.
    Any fetch or persistence error aborts the run and is re-raised with the
    in-flight cursor and page number attached.
    """

    def __init__(
        self,
        config: AssociationSyncConfig,
        reader: PageReader,
        session_factory: Callable[[], Session],
    ) -> None:
        self.config = config
        self.reader = reader
        self.session_factory = session_factory
        self.state = SyncState.START

    def run_full_sync(self) -> SyncRunResult:
        started = time.monotonic()
        self.state = SyncState.START
        cursor: str | None = None
        page_number = 0
        contacts = 0
        inserted = 0

        while True:
            page_number += 1
            try:
                self.state = SyncState.FETCHING_PAGE
                logger.info("association_page_fetching", extra={"cursor": cursor, "page_number": page_number})
                page = self.reader.fetch_page(cursor)

                self.state = SyncState.APPLYING_PAGE
                count = replace_page_associations(self.session_factory, self.config, page.records)
            except AssociationSyncError as exc:
                self.state = SyncState.FAILED
                exc.cursor = cursor
                exc.page_number = page_number
                logger.error(
                    "association_sync_failed",
                    extra={
                        "cursor": cursor,
                        "page_number": page_number,
                        "error": type(exc).__name__,
                        "detail": exc.message,
                    },
                )
                raise
            except Exception:
                self.state = SyncState.FAILED
                logger.exception(
                    "association_sync_failed",
                    extra={"cursor": cursor, "page_number": page_number, "error": "unexpected"},
                )
                raise

            contacts += len(page.records)
            inserted += count
            logger.info(
                "association_page_applied",
                extra={
                    "page_number": page_number,
                    "contacts": len(page.records),
                    "upserted": count,
                    "next_cursor": page.next_cursor,
                },
            )
            if not page.next_cursor:
                break
            cursor = page.next_cursor

        self.state = SyncState.DONE
        result = SyncRunResult(
            state=self.state,
            pages=page_number,
            contacts=contacts,
            edges_inserted=inserted,
            elapsed_ms=int((time.monotonic() - started) * 1000),
        )
        logger.info("association_sync_done", extra=result.to_dict())
        return result
