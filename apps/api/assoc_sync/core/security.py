from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException, status

from assoc_sync.core.config import Settings, get_settings


def verify_webhook_secret(settings: Settings, secret_header: str | None) -> None:
    expected = settings.sync_webhook_secret
    if not expected:
        return
    if not secret_header:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing webhook secret")
    if not secrets.compare_digest(secret_header.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook secret")


def require_webhook_secret(
    x_webhook_secret: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    verify_webhook_secret(settings, x_webhook_secret)
