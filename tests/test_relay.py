import requests

from fcm_relay.config import Config
from fcm_relay.models import ServiceAccountConfig
from fcm_relay.relay import RELAY_FAILURE_TEXT, send_message


class DummyResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    @property
    def ok(self):
        return self.status_code < 400


def _config():
    return Config(
        service_account=ServiceAccountConfig(issuer="svc@example.com", private_key="key"),
        fcm_project_id="puff-push",
        cors_profile="wildcard",
        allowed_origins=("https://puff.pages.dev",),
        log_level="INFO",
        firestore_project_id=None,
        registration_collection="registrations",
        http_timeout=20,
    )


def test_send_message_builds_payload(monkeypatch):
    captured = {}

    def fake_post(url, json, headers, timeout):
        captured["url"] = url
        captured["json"] = json
        captured["headers"] = headers
        return DummyResponse('{"name": "projects/puff-push/messages/1"}')

    monkeypatch.setattr("fcm_relay.relay.requests.post", fake_post)

    result = send_message("tok1", "hello", "ya29.token", _config())

    assert result == '{"name": "projects/puff-push/messages/1"}'
    assert captured["url"] == "https://fcm.googleapis.com/v1/projects/puff-push/messages:send"
    assert captured["headers"]["Authorization"] == "Bearer ya29.token"
    assert captured["json"] == {"message": {"token": "tok1", "data": {"message": "hello"}}}


def test_send_message_returns_error_body_unchanged(monkeypatch):
    monkeypatch.setattr(
        "fcm_relay.relay.requests.post",
        lambda *args, **kwargs: DummyResponse('{"error": {"code": 404}}', status_code=404),
    )

    assert send_message("tok1", "hello", "ya29.token", _config()) == '{"error": {"code": 404}}'


def test_send_message_swallows_transport_errors(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("connection reset")

    monkeypatch.setattr("fcm_relay.relay.requests.post", fake_post)

    assert send_message("tok1", "hello", "ya29.token", _config()) == RELAY_FAILURE_TEXT
