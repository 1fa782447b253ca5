"""
Tests for the legal analysis workflow.
"""
import asyncio
import base64

import pytest
from fastapi import HTTPException

from evalegal.services.documents import DocumentFetchError, DocumentTooLargeError
from evalegal.services.llm import AICompletionError

REQUEST = {
    "chat_id": "123",
    "deal_id": "DL-77",
    "file_url": "https://example.com/contract.pdf",
    "task": "Анализ условий",
}


def _process(controller, **overrides):
    return asyncio.run(controller.process_legal_request(**{**REQUEST, **overrides}))


def test_returns_ai_answer_and_requests_resources(make_controller, fetcher, ai_client):
    answer = _process(make_controller())

    assert answer == "Готовый отчёт"
    fetcher.fetch.assert_awaited_once_with("https://example.com/contract.pdf")
    ai_client.generate.assert_awaited_once_with(
        "Анализ условий", "DL-77", base64.b64encode(b"%PDF-1.4 binary").decode("ascii")
    )


@pytest.mark.parametrize(
    "field, detail",
    [("chat_id", "chatId required"), ("file_url", "fileUrl required")],
)
def test_missing_required_field_is_rejected(make_controller, fetcher, ai_client, field, detail):
    with pytest.raises(HTTPException) as exc_info:
        _process(make_controller(), **{field: ""})

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == detail
    fetcher.fetch.assert_not_awaited()
    ai_client.generate.assert_not_awaited()


def test_chat_outside_allowlist_is_forbidden(make_controller, fetcher, ai_client):
    with pytest.raises(HTTPException) as exc_info:
        _process(make_controller(allowlist=["1", "2"]), chat_id="3")

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "chat not allowed"
    fetcher.fetch.assert_not_awaited()
    ai_client.generate.assert_not_awaited()


def test_empty_allowlist_admits_any_chat(make_controller):
    controller = make_controller(allowlist=[])

    assert controller.is_chat_allowed("anything")
    assert _process(controller, chat_id="987654") == "Готовый отчёт"


def test_allowlist_compares_string_form(make_controller):
    controller = make_controller(allowlist=[1, "2"])

    assert controller.is_chat_allowed("1")
    assert controller.is_chat_allowed(2)
    assert not controller.is_chat_allowed("3")


def test_oversized_document_stops_before_ai(make_controller, fetcher, ai_client):
    fetcher.fetch.side_effect = DocumentTooLargeError("document exceeds the 20 MB limit")

    with pytest.raises(HTTPException) as exc_info:
        _process(make_controller())

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "document exceeds the 20 MB limit"
    ai_client.generate.assert_not_awaited()


def test_download_failure_maps_to_400(make_controller):
    controller = make_controller()
    controller.document_fetcher.fetch.side_effect = DocumentFetchError(
        "document download failed with HTTP 404"
    )

    with pytest.raises(HTTPException) as exc_info:
        _process(controller)

    assert exc_info.value.status_code == 400


def test_ai_failure_maps_to_500(make_controller, ai_client):
    ai_client.generate.side_effect = AICompletionError("AI request failed")

    with pytest.raises(HTTPException) as exc_info:
        _process(make_controller())

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "AI request failed"
