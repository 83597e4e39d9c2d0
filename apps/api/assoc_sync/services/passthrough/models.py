from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


HttpMethod = Literal["GET", "POST", "PATCH", "PUT", "DELETE"]


class PassthroughRequest(BaseModel):
    path: str
    method: HttpMethod = "GET"
    query: dict[str, Any] | None = None
    body: dict[str, Any] | None = None


class PassthroughEnvelope(BaseModel):
    """What the passthrough endpoint wraps around the upstream CRM response."""

    url: str | None = None
    status: int
    headers: dict[str, Any] | None = None
    body: Any = None


class CompanyAssociation(BaseModel):
    id: str
    type: str | None = None


class CompanyAssociationList(BaseModel):
    results: list[CompanyAssociation] = Field(default_factory=list)


class ContactAssociations(BaseModel):
    companies: CompanyAssociationList | None = None


class CrmContact(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    # Opaque; carried through but never inspected.
    properties: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    archived: bool = False
    associations: ContactAssociations | None = None

    def company_associations(self) -> list[CompanyAssociation]:
        if self.associations is None or self.associations.companies is None:
            return []
        return list(self.associations.companies.results)


class PagingNext(BaseModel):
    after: str | None = None
    link: str | None = None


class Paging(BaseModel):
    next: PagingNext | None = None


class ContactsPageBody(BaseModel):
    results: list[CrmContact]
    paging: Paging | None = None

    @property
    def next_cursor(self) -> str | None:
        if self.paging is None or self.paging.next is None:
            return None
        return self.paging.next.after or None


class ContactPage(BaseModel):
    records: list[CrmContact]
    next_cursor: str | None = None
