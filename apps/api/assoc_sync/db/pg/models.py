from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from assoc_sync.db.pg.base import Base


class ContactToAccount(Base):
    __tablename__ = "contact_to_account"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    customer_id: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_id: Mapped[str] = mapped_column(String(128), nullable=False)
    account_id: Mapped[str] = mapped_column(String(128), nullable=False)
    # `metadata` is reserved on declarative classes.
    metadata_json: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)
    last_modified_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


Index("ix_contact_to_account_customer_contact", ContactToAccount.customer_id, ContactToAccount.contact_id)
