from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from assoc_sync.core.errors import DecodeError, TransportError
from assoc_sync.services.passthrough.models import HttpMethod, PassthroughEnvelope, PassthroughRequest

logger = logging.getLogger(__name__)

PASSTHROUGH_PATH = "/actions/v2/passthrough"


def _drop_empty(query: dict[str, Any] | None) -> dict[str, Any] | None:
    if query is None:
        return None
    return {key: value for key, value in query.items() if value is not None}


class PassthroughClient:
    """Sends CRM requests through the integration platform's passthrough action.

    Holds nothing between calls beyond the credentials; every call opens its own
    HTTP client.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def get_headers(self, customer_id: str, provider_name: str) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "x-customer-id": customer_id,
            "x-provider-name": provider_name,
            "Content-Type": "application/json",
        }

    def passthrough(
        self,
        *,
        path: str,
        method: HttpMethod,
        customer_id: str,
        provider_name: str,
        query: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> PassthroughEnvelope:
        request = PassthroughRequest(path=path, method=method, query=_drop_empty(query), body=body)
        url = f"{self._base_url}{PASSTHROUGH_PATH}"
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    url,
                    headers=self.get_headers(customer_id, provider_name),
                    json=request.model_dump(),
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"Passthrough returned HTTP {exc.response.status_code}",
                details={"url": url, "path": path, "status": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Passthrough request failed: {exc}",
                details={"url": url, "path": path},
            ) from exc
        except (httpx.InvalidURL, ValueError) as exc:
            # Bad base URL, or header values httpx cannot encode (UnicodeEncodeError).
            raise TransportError(
                f"Passthrough request could not be built: {exc.__class__.__name__}",
                details={"url": url, "path": path},
            ) from exc

        try:
            envelope = PassthroughEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            # json.JSONDecodeError is a ValueError.
            raise DecodeError(
                "Passthrough response is not a valid envelope",
                details={"url": url, "path": path},
            ) from exc

        if not 200 <= envelope.status < 300:
            logger.warning(
                "passthrough_upstream_error_status",
                extra={"path": path, "upstream_status": envelope.status, "upstream_url": envelope.url},
            )
            raise TransportError(
                f"Upstream CRM returned HTTP {envelope.status}",
                details={"url": envelope.url, "path": path, "status": envelope.status},
            )
        return envelope
