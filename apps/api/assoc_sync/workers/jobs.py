from __future__ import annotations

import logging

from assoc_sync.core.config import AssociationSyncConfig, get_settings
from assoc_sync.db.pg.session import SessionLocal
from assoc_sync.services.associations.reconcile import AssociationReconciler
from assoc_sync.services.passthrough.contacts import ContactPageReader

logger = logging.getLogger(__name__)


def build_reconciler(config: AssociationSyncConfig) -> AssociationReconciler:
    return AssociationReconciler(config, ContactPageReader(config), SessionLocal)


def sync_contact_associations() -> dict:
    """Scheduler entry point: one full pagination sweep.

    Errors propagate so the queue (or cron wrapper) records the run as failed
    and decides whether to run it again.
    """
    settings = get_settings()
    if not settings.association_sync_enabled:
        return {"sync": "disabled"}

    config = AssociationSyncConfig.from_settings(settings)
    logger.info(
        "association_sync_started",
        extra={"customer_id": config.customer_id, "provider_name": config.provider_name},
    )
    result = build_reconciler(config).run_full_sync()
    return result.to_dict()
