from __future__ import annotations

import pytest

from assoc_sync.core.config import get_settings

WEBHOOK_SECRET = "test-webhook-secret"


@pytest.fixture
def sync_env(monkeypatch):
    monkeypatch.setenv("PASSTHROUGH_BASE_URL", "https://passthrough.test")
    monkeypatch.setenv("PASSTHROUGH_API_KEY", "test-api-key")
    monkeypatch.setenv("CUSTOMER_ID", "customer-1")
    monkeypatch.setenv("PROVIDER_NAME", "hubspot")
    monkeypatch.setenv("QUEUE_MODE", "inline")
    monkeypatch.setenv("SYNC_WEBHOOK_SECRET", WEBHOOK_SECRET)
    get_settings.cache_clear()
    yield {"X-Webhook-Secret": WEBHOOK_SECRET}
    get_settings.cache_clear()
