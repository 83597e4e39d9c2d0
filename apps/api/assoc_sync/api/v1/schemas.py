from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AssociationEdgeOut(BaseModel):
    contact_id: str
    account_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    last_modified_at: datetime


class ContactAssociationsResponse(BaseModel):
    customer_id: str
    contact_id: str
    associations: list[AssociationEdgeOut] = Field(default_factory=list)


class ContactReplaceResponse(BaseModel):
    contact_id: str
    inserted: int


class SyncJobResponse(BaseModel):
    job_id: str
    status: str
    result: dict[str, Any] | None = None
