from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from assoc_sync.core.config import Settings, get_settings


def _sqlalchemy_dsn(dsn: str) -> str:
    if dsn.startswith("postgresql://"):
        return dsn.replace("postgresql://", "postgresql+psycopg://", 1)
    return dsn


def _engine_options(settings: Settings, dsn: str) -> dict[str, object]:
    options: dict[str, object] = {"future": True, "pool_pre_ping": True}
    if not dsn.startswith("postgresql+psycopg://"):
        return options
    # pool_timeout is the replace transaction's max-wait budget.
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.association_tx_max_wait_seconds,
        pool_recycle=settings.db_pool_recycle_seconds,
    )
    return options


settings = get_settings()
dsn = _sqlalchemy_dsn(settings.pg_dsn)
engine = create_engine(dsn, **_engine_options(settings, dsn))
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
