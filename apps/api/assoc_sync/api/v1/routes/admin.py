from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from assoc_sync.api.v1.schemas import SyncJobResponse
from assoc_sync.core.errors import AssociationSyncError, PersistenceError
from assoc_sync.core.security import require_webhook_secret
from assoc_sync.workers.queue import enqueue_job

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_webhook_secret)])


@router.post("/sync_associations", response_model=SyncJobResponse)
def sync_associations() -> SyncJobResponse:
    try:
        dispatched = enqueue_job("sync_contact_associations")
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.to_dict()) from exc
    except AssociationSyncError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.to_dict()) from exc
    return SyncJobResponse(**dispatched)
