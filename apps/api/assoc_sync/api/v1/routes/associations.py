from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from assoc_sync.api.v1.deps import get_db, get_sync_config
from assoc_sync.api.v1.schemas import AssociationEdgeOut, ContactAssociationsResponse, ContactReplaceResponse
from assoc_sync.core.config import AssociationSyncConfig
from assoc_sync.core.errors import PersistenceError
from assoc_sync.core.security import require_webhook_secret
from assoc_sync.db.pg.session import SessionLocal
from assoc_sync.services.associations.store import AssociationStore, replace_contact_associations
from assoc_sync.services.passthrough.models import CrmContact

router = APIRouter(prefix="/associations", tags=["associations"])
logger = logging.getLogger(__name__)


@router.post(
    "/contacts",
    response_model=ContactReplaceResponse,
    dependencies=[Depends(require_webhook_secret)],
)
def replace_contact(
    contact: CrmContact,
    config: AssociationSyncConfig = Depends(get_sync_config),
) -> ContactReplaceResponse:
    """Apply one pushed contact record using the same replace as the full sweep."""
    try:
        inserted = replace_contact_associations(SessionLocal, config, contact)
    except PersistenceError as exc:
        logger.error("contact_association_replace_failed", extra={"contact_id": contact.id, "detail": exc.message})
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.to_dict()) from exc
    return ContactReplaceResponse(contact_id=contact.id, inserted=inserted)


@router.get("/contacts/{contact_id}", response_model=ContactAssociationsResponse)
def list_contact_associations(
    contact_id: str,
    db: Session = Depends(get_db),
    config: AssociationSyncConfig = Depends(get_sync_config),
) -> ContactAssociationsResponse:
    rows = AssociationStore(db).list_edges(config.customer_id, [contact_id])
    return ContactAssociationsResponse(
        customer_id=config.customer_id,
        contact_id=contact_id,
        associations=[
            AssociationEdgeOut(
                contact_id=row.contact_id,
                account_id=row.account_id,
                metadata=row.metadata_json or {},
                last_modified_at=row.last_modified_at,
            )
            for row in rows
        ],
    )
