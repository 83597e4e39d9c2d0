from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from assoc_sync.services.passthrough.models import CrmContact


@dataclass(frozen=True)
class AssociationEdge:
    customer_id: str
    contact_id: str
    account_id: str
    association_type: str | None = None
    last_modified_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc), compare=False)

    def as_row(self) -> dict[str, object]:
        return {
            "customer_id": self.customer_id,
            "contact_id": self.contact_id,
            "account_id": self.account_id,
            "metadata_json": {"type": self.association_type},
            "last_modified_at": self.last_modified_at,
        }


def edges_for_contact(customer_id: str, contact: CrmContact, modified_at: datetime | None = None) -> list[AssociationEdge]:
    stamp = modified_at or datetime.now(timezone.utc)
    edges: list[AssociationEdge] = []
    seen: set[tuple[str, str | None]] = set()
    for company in contact.company_associations():
        key = (company.id, company.type)
        if key in seen:
            continue
        seen.add(key)
        edges.append(
            AssociationEdge(
                customer_id=customer_id,
                contact_id=contact.id,
                account_id=company.id,
                association_type=company.type,
                last_modified_at=stamp,
            )
        )
    return edges


def edges_for_page(customer_id: str, contacts: Iterable[CrmContact]) -> tuple[list[str], list[AssociationEdge]]:
    """Return the page's contact ids (the delete scope) and the edges to insert.

    A contact listed twice in a page contributes its last occurrence only.
    """
    stamp = datetime.now(timezone.utc)
    by_contact: dict[str, list[AssociationEdge]] = {}
    for contact in contacts:
        by_contact[contact.id] = edges_for_contact(customer_id, contact, stamp)
    edges = [edge for contact_edges in by_contact.values() for edge in contact_edges]
    return list(by_contact), edges
