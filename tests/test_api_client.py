# tests/test_api_client.py
import json

import httpx
import pytest
from conftest import make_view

from preference_center.api.schemas import TopicUpdate, UpdateRequest
from preference_center.clients.api_client import APIError, PreferencesAPI


def make_api(handler) -> PreferencesAPI:
    return PreferencesAPI("http://testserver", transport=httpx.MockTransport(handler))


def test_fetch_parses_preferences_view():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/preferences/MQ==/data"
        return httpx.Response(200, json=make_view().to_wire())

    view = make_api(handler).fetch("MQ==")

    assert view == make_view()


def test_fetch_raises_api_error_with_server_message():
    api = make_api(lambda request: httpx.Response(404, json={"error": "Customer not found"}))

    with pytest.raises(APIError, match="Customer not found") as exc_info:
        api.fetch("MQ==")

    assert exc_info.value.status_code == 404


def test_fetch_rejects_unexpected_shape():
    api = make_api(lambda request: httpx.Response(200, json={"preferences": {"topics": []}}))

    with pytest.raises(APIError, match="Unexpected preferences response"):
        api.fetch("MQ==")


def test_network_failure_becomes_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    with pytest.raises(APIError, match="connection refused") as exc_info:
        make_api(handler).fetch("MQ==")

    assert exc_info.value.status_code is None


def test_submit_posts_camel_case_payload():
    sent = {}

    def handler(request: httpx.Request) -> httpx.Response:
        sent["method"] = request.method
        sent["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "message": "ok"})

    result = make_api(handler).submit(
        "MQ==",
        UpdateRequest(globally_unsubscribed=True, topics=[TopicUpdate(id=2, subscribed=False)]),
    )

    assert sent == {
        "method": "POST",
        "body": {"globallyUnsubscribed": True, "topics": [{"id": 2, "subscribed": False}]},
    }
    assert result == {"success": True, "message": "ok"}


def test_submit_raises_on_server_error():
    api = make_api(lambda request: httpx.Response(500, json={"success": False, "error": "Update Failed"}))

    with pytest.raises(APIError, match="Update Failed") as exc_info:
        api.submit("MQ==", UpdateRequest(topics=[]))

    assert exc_info.value.status_code == 500
