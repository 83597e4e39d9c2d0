from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, HTTPException, status

from assoc_sync.core.config import AssociationSyncConfig, Settings, get_settings
from assoc_sync.db.pg.session import SessionLocal


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_settings_dep() -> Settings:
    return get_settings()


def get_sync_config(settings: Settings = Depends(get_settings_dep)) -> AssociationSyncConfig:
    try:
        return AssociationSyncConfig.from_settings(settings)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
