from __future__ import annotations

import logging

from pydantic import ValidationError

from assoc_sync.core.config import AssociationSyncConfig
from assoc_sync.core.errors import DecodeError
from assoc_sync.services.passthrough.client import PassthroughClient
from assoc_sync.services.passthrough.models import ContactPage, ContactsPageBody

logger = logging.getLogger(__name__)

CONTACTS_PATH = "/crm/v3/objects/contacts"
COMPANY_ASSOCIATION = "company"


class ContactPageReader:
    """Reads one page of CRM contacts, with company associations inlined."""

    def __init__(self, config: AssociationSyncConfig, client: PassthroughClient | None = None) -> None:
        self._config = config
        self._client = client or PassthroughClient(
            config.base_url,
            config.api_key,
            timeout=config.request_timeout_seconds,
        )

    def build_query(self, cursor: str | None) -> dict[str, str]:
        query = {
            "limit": str(self._config.page_size),
            "associations": COMPANY_ASSOCIATION,
        }
        if cursor:
            query["after"] = cursor
        return query

    def fetch_page(self, cursor: str | None = None) -> ContactPage:
        envelope = self._client.passthrough(
            path=CONTACTS_PATH,
            method="GET",
            query=self.build_query(cursor),
            customer_id=self._config.customer_id,
            provider_name=self._config.provider_name,
        )
        try:
            body = ContactsPageBody.model_validate(envelope.body)
        except ValidationError as exc:
            raise DecodeError(
                "Contacts page body does not match the expected shape",
                cursor=cursor,
                details={"path": CONTACTS_PATH, "errors": exc.errors(include_url=False, include_context=False, include_input=False)[:5]},
            ) from exc

        logger.info(
            "contacts_page_fetched",
            extra={"cursor": cursor, "records": len(body.results), "next_cursor": body.next_cursor},
        )
        return ContactPage(records=body.results, next_cursor=body.next_cursor)
