from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select

from assoc_sync.core.config import AssociationSyncConfig
from assoc_sync.db.pg.base import Base
from assoc_sync.db.pg import models as _models  # noqa: F401
from assoc_sync.db.pg.models import ContactToAccount
from assoc_sync.db.pg.session import SessionLocal, engine
from assoc_sync.services.passthrough.models import ContactPage, CrmContact

CUSTOMER_ID = "customer-1"


def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def sync_config(**overrides) -> AssociationSyncConfig:
    values = {
        "base_url": "https://passthrough.test",
        "api_key": "test-api-key",
        "customer_id": CUSTOMER_ID,
        "provider_name": "hubspot",
    }
    values.update(overrides)
    return AssociationSyncConfig(**values)


def contact_payload(contact_id: str, *company_ids: str, association_type: str = "contact_to_company") -> dict:
    payload: dict = {
        "id": contact_id,
        "properties": {"email": f"{contact_id}@example.com"},
        "createdAt": "2024-03-01T10:00:00.000Z",
        "updatedAt": "2024-03-02T10:00:00.000Z",
        "archived": False,
    }
    if company_ids:
        payload["associations"] = {
            "companies": {"results": [{"id": company_id, "type": association_type} for company_id in company_ids]}
        }
    return payload


def make_contact(contact_id: str, *company_ids: str) -> CrmContact:
    return CrmContact.model_validate(contact_payload(contact_id, *company_ids))


def page_body(contacts: list[dict], after: str | None = None) -> dict:
    body: dict = {"results": contacts}
    if after is not None:
        body["paging"] = {"next": {"after": after, "link": f"https://api.example.test/contacts?after={after}"}}
    return body


class StubReader:
    """Serves pre-built pages keyed by cursor; an exception value is raised instead."""

    def __init__(self, pages: dict[str | None, ContactPage | Exception]) -> None:
        self.pages = pages
        self.calls: list[str | None] = []

    def fetch_page(self, cursor: str | None = None) -> ContactPage:
        self.calls.append(cursor)
        outcome = self.pages[cursor]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def seed_edges(*edges: tuple[str, str], customer_id: str = CUSTOMER_ID) -> None:
    db = SessionLocal()
    try:
        for contact_id, account_id in edges:
            db.add(
                ContactToAccount(
                    customer_id=customer_id,
                    contact_id=contact_id,
                    account_id=account_id,
                    metadata_json={"type": "seeded"},
                    last_modified_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
                )
            )
        db.commit()
    finally:
        db.close()


def stored_edges(customer_id: str = CUSTOMER_ID) -> set[tuple[str, str]]:
    db = SessionLocal()
    try:
        rows = db.scalars(select(ContactToAccount).where(ContactToAccount.customer_id == customer_id)).all()
        return {(row.contact_id, row.account_id) for row in rows}
    finally:
        db.close()


def stored_rows(customer_id: str = CUSTOMER_ID) -> list[tuple[str, str, str | None]]:
    db = SessionLocal()
    try:
        rows = db.scalars(
            select(ContactToAccount)
            .where(ContactToAccount.customer_id == customer_id)
            .order_by(ContactToAccount.contact_id, ContactToAccount.account_id)
        ).all()
        return [(row.contact_id, row.account_id, (row.metadata_json or {}).get("type")) for row in rows]
    finally:
        db.close()
