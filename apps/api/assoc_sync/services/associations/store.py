from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Sequence

from sqlalchemy import delete, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from assoc_sync.core.config import AssociationSyncConfig
from assoc_sync.core.errors import PersistenceError
from assoc_sync.db.pg.models import ContactToAccount
from assoc_sync.services.associations.edges import AssociationEdge, edges_for_page
from assoc_sync.services.passthrough.models import CrmContact

logger = logging.getLogger(__name__)


class AssociationStore:
    """Edge primitives bound to one session; the caller owns the transaction."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def delete_edges(self, customer_id: str, contact_ids: Iterable[str]) -> int:
        ids = sorted(set(contact_ids))
        if not ids:
            return 0
        result = self.db.execute(
            delete(ContactToAccount)
            .where(ContactToAccount.customer_id == customer_id)
            .where(ContactToAccount.contact_id.in_(ids))
        )
        return max(result.rowcount or 0, 0)

    def insert_edges(self, edges: Sequence[AssociationEdge]) -> int:
        if not edges:
            return 0
        self.db.execute(insert(ContactToAccount), [edge.as_row() for edge in edges])
        return len(edges)

    def list_edges(self, customer_id: str, contact_ids: Iterable[str] | None = None) -> list[ContactToAccount]:
        stmt = select(ContactToAccount).where(ContactToAccount.customer_id == customer_id)
        if contact_ids is not None:
            stmt = stmt.where(ContactToAccount.contact_id.in_(sorted(set(contact_ids))))
        stmt = stmt.order_by(ContactToAccount.contact_id, ContactToAccount.account_id)
        return list(self.db.scalars(stmt).all())


def _apply_transaction_budgets(db: Session, config: AssociationSyncConfig) -> None:
    if db.get_bind().dialect.name != "postgresql":
        return
    lock_ms = int(config.tx_max_wait_seconds * 1000)
    statement_ms = int(config.tx_timeout_seconds * 1000)
    db.execute(text(f"SET LOCAL lock_timeout = '{lock_ms}ms'"))
    db.execute(text(f"SET LOCAL statement_timeout = '{statement_ms}ms'"))


def replace_page_associations(
    session_factory: Callable[[], Session],
    config: AssociationSyncConfig,
    contacts: Sequence[CrmContact],
) -> int:
    """Atomically swap the stored edges for every contact in `contacts`.

    Deletes all edges of the page's contacts for the tenant, inserts the edges
    derived from the page, and commits once. Returns the inserted row count.
    Re-applying the same page leaves the same edge set behind.
    """
    contact_ids, edges = edges_for_page(config.customer_id, contacts)
    if not contact_ids:
        return 0

    db = session_factory()
    started = time.monotonic()
    try:
        with db.begin():
            _apply_transaction_budgets(db, config)
            store = AssociationStore(db)
            deleted = store.delete_edges(config.customer_id, contact_ids)
            inserted = store.insert_edges(edges)
            elapsed = time.monotonic() - started
            if elapsed > config.tx_timeout_seconds:
                raise PersistenceError(
                    "Association replace transaction exceeded its timeout",
                    details={"elapsed_seconds": round(elapsed, 3), "timeout_seconds": config.tx_timeout_seconds},
                )
    except PersistenceError:
        raise
    except SQLAlchemyError as exc:
        raise PersistenceError(
            f"Association replace transaction failed: {exc.__class__.__name__}",
            details={"contacts": len(contact_ids), "edges": len(edges)},
        ) from exc
    finally:
        db.close()

    logger.info(
        "association_page_replaced",
        extra={"contacts": len(contact_ids), "deleted": deleted, "inserted": inserted},
    )
    return inserted


def replace_contact_associations(
    session_factory: Callable[[], Session],
    config: AssociationSyncConfig,
    contact: CrmContact,
) -> int:
    return replace_page_associations(session_factory, config, [contact])
