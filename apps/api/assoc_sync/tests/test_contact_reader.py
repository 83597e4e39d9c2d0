from __future__ import annotations

import json

import httpx
import pytest

from assoc_sync.core.errors import DecodeError
from assoc_sync.services.passthrough.client import PassthroughClient
from assoc_sync.services.passthrough.contacts import ContactPageReader
from assoc_sync.tests.helpers import contact_payload, page_body, sync_config


def _reader(handler, **overrides) -> ContactPageReader:
    config = sync_config(**overrides)
    client = PassthroughClient(config.base_url, config.api_key, transport=httpx.MockTransport(handler))
    return ContactPageReader(config, client)


def _envelope(body: object, status: int = 200) -> httpx.Response:
    return httpx.Response(200, json={"url": "https://crm.test/contacts", "status": status, "headers": {}, "body": body})


def test_first_page_request_omits_cursor() -> None:
    queries: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        queries.append(json.loads(request.content)["query"])
        return _envelope(page_body([contact_payload("c1", "a1")], after="cursor-2"))

    page = _reader(handler).fetch_page()

    assert queries == [{"limit": "100", "associations": "company"}]
    assert [record.id for record in page.records] == ["c1"]
    assert page.next_cursor == "cursor-2"
    assert [company.id for company in page.records[0].company_associations()] == ["a1"]


def test_cursor_is_passed_back_verbatim_and_page_size_is_configurable() -> None:
    queries: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        queries.append(json.loads(request.content)["query"])
        return _envelope(page_body([contact_payload("c9")]))

    page = _reader(handler, page_size=25).fetch_page("MTIzNDU=")

    assert queries == [{"limit": "25", "associations": "company", "after": "MTIzNDU="}]
    assert page.next_cursor is None


def test_contact_without_associations_has_no_companies() -> None:
    page = _reader(lambda request: _envelope(page_body([contact_payload("c2")]))).fetch_page()

    assert page.records[0].associations is None
    assert page.records[0].company_associations() == []


def test_properties_bag_is_carried_opaquely() -> None:
    payload = contact_payload("c3")
    payload["properties"] = {"hs_object_id": "c3", "nested": {"anything": [1, 2, 3]}}

    page = _reader(lambda request: _envelope(page_body([payload]))).fetch_page()

    assert page.records[0].properties == payload["properties"]


def test_paging_without_after_ends_pagination() -> None:
    body = {"results": [contact_payload("c1")], "paging": {"next": {"link": "https://crm.test/next"}}}

    page = _reader(lambda request: _envelope(body)).fetch_page()

    assert page.next_cursor is None


def test_body_without_results_raises_decode_error_with_cursor() -> None:
    reader = _reader(lambda request: _envelope({"message": "unexpected"}))

    with pytest.raises(DecodeError) as excinfo:
        reader.fetch_page("cursor-7")

    assert excinfo.value.cursor == "cursor-7"
    assert excinfo.value.details["path"] == "/crm/v3/objects/contacts"


def test_record_missing_id_raises_decode_error() -> None:
    bad = contact_payload("c1")
    del bad["id"]

    with pytest.raises(DecodeError):
        _reader(lambda request: _envelope(page_body([bad]))).fetch_page()


def test_record_without_timestamps_raises_decode_error() -> None:
    bare = {"id": "c1", "associations": {"companies": {"results": [{"id": "a1"}]}}}

    with pytest.raises(DecodeError) as excinfo:
        _reader(lambda request: _envelope(page_body([bare]))).fetch_page()

    missing = {tuple(error["loc"]) for error in excinfo.value.details["errors"]}
    assert ("results", 0, "createdAt") in missing
    assert ("results", 0, "updatedAt") in missing
