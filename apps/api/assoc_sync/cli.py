from __future__ import annotations

import argparse
import json
import sys

from assoc_sync.core.errors import AssociationSyncError
from assoc_sync.core.logging import configure_logging
from assoc_sync.db.pg.base import Base
from assoc_sync.db.pg import models as _models  # noqa: F401
from assoc_sync.db.pg.session import engine
from assoc_sync.workers.jobs import sync_contact_associations
from assoc_sync.workers.queue import enqueue_job


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run one full contact-to-company association sync.")
    parser.add_argument("--enqueue", action="store_true", help="Hand the run to the rq worker instead of running here.")
    args = parser.parse_args(argv)

    configure_logging()
    if args.enqueue:
        print(json.dumps(enqueue_job("sync_contact_associations"), default=str))
        return 0

    Base.metadata.create_all(bind=engine)
    try:
        summary = sync_contact_associations()
    except AssociationSyncError as exc:
        print(json.dumps(exc.to_dict(), default=str), file=sys.stderr)
        return 1
    except ValueError as exc:
        print(json.dumps({"error": "ConfigurationError", "message": str(exc)}), file=sys.stderr)
        return 1
    print(json.dumps(summary, default=str))
    return 0
