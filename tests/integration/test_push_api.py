from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient
from firebase_admin import exceptions

from fcm_notifier.config import Settings, get_settings
from fcm_notifier.main import app
from fcm_notifier.notifications.contracts import InitializationError

_SECRET = "test-secret"


def _settings(api_secret: str | None = _SECRET) -> Settings:
  return Settings(
    environment="test",
    service_account_path="./firebase-service-account.json",
    app_name="[DEFAULT]",
    log_level="INFO",
    log_dir=None,
    log_max_bytes=1024,
    log_backup_count=0,
    api_secret=api_secret,
    max_payload_bytes=4096,
  )


def _body(**overrides) -> dict:
  body = {"deviceToken": "valid-device-token-12345", "title": "Hello", "body": "World"}
  body.update(overrides)
  return body


@pytest.fixture
def api_client(monkeypatch, fake_app):
  monkeypatch.setattr("fcm_notifier.api.routes.push.initialize_firebase", lambda: fake_app)
  app.dependency_overrides[get_settings] = lambda: _settings()
  try:
    yield TestClient(app)
  finally:
    app.dependency_overrides.clear()


def test_health_reports_ok(api_client):
  response = api_client.get("/health")

  assert response.status_code == 200
  assert response.json()["status"] == "ok"


def test_send_requires_secret(api_client, sent_messages):
  response = api_client.post("/v1/push/send", json=_body())

  assert response.status_code == 403
  assert sent_messages == []


def test_send_rejects_everything_when_secret_unset(api_client, sent_messages):
  app.dependency_overrides[get_settings] = lambda: _settings(api_secret=None)

  response = api_client.post("/v1/push/send", json=_body(), headers={"x-notifier-secret": _SECRET})

  assert response.status_code == 403
  assert sent_messages == []


def test_send_success(api_client, sent_messages):
  response = api_client.post("/v1/push/send", json=_body(data={"a": "1"}, options={"badge": 3, "priority": "normal", "contentAvailable": True}), headers={"x-notifier-secret": _SECRET})

  assert response.status_code == 200
  assert response.json() == {"success": True, "messageId": "projects/test-project/messages/msg-123"}
  message = sent_messages[0]["message"]
  assert message.data == {"a": "1"}
  assert message.apns.headers["apns-priority"] == "5"
  assert message.apns.payload.aps.content_available is True


def test_send_rejects_blank_title_with_400(api_client, sent_messages):
  response = api_client.post("/v1/push/send", json=_body(title="   "), headers={"x-notifier-secret": _SECRET})

  assert response.status_code == 400
  assert response.json()["success"] is False
  assert "title" in response.json()["error"]
  assert sent_messages == []


def test_send_rejects_negative_badge_with_400(api_client, sent_messages):
  response = api_client.post("/v1/push/send", json=_body(options={"badge": -1}), headers={"x-notifier-secret": _SECRET})

  assert response.status_code == 400
  assert "positive number" in response.json()["error"]


def test_send_rejects_unknown_priority_with_400(api_client, sent_messages):
  response = api_client.post("/v1/push/send", json=_body(options={"priority": "invalid"}), headers={"x-notifier-secret": _SECRET})

  assert response.status_code == 400
  assert response.json() == {"success": False, "error": 'Priority must be either "high" or "normal"'}
  assert sent_messages == []


def test_send_maps_provider_rejection_to_502(api_client, monkeypatch):
  def _reject(message, dry_run=False, app=None):
    raise exceptions.UnauthenticatedError("Request had invalid authentication credentials.")

  monkeypatch.setattr("fcm_notifier.notifications.client.messaging.send", _reject)

  response = api_client.post("/v1/push/send", json=_body(), headers={"x-notifier-secret": _SECRET})

  assert response.status_code == 502
  assert response.json() == {"success": False, "error": "Firebase authentication failed"}


def test_send_dry_run(api_client, sent_messages):
  response = api_client.post("/v1/push/send", json=_body(dryRun=True), headers={"x-notifier-secret": _SECRET})

  assert response.status_code == 200
  assert sent_messages[0]["dry_run"] is True


def test_send_returns_503_when_firebase_is_unconfigured(api_client, monkeypatch, sent_messages):
  def _fail():
    raise InitializationError("Service account file not found at path: ./firebase-service-account.json", "./firebase-service-account.json")

  monkeypatch.setattr("fcm_notifier.api.routes.push.initialize_firebase", _fail)

  response = api_client.post("/v1/push/send", json=_body(), headers={"x-notifier-secret": _SECRET})

  assert response.status_code == 503
  assert response.json() == {"detail": "Push delivery is not configured"}
  assert sent_messages == []


def test_firebase_initialization_runs_off_the_event_loop(api_client, monkeypatch, fake_app, sent_messages):
  seen = {}

  def _initialize():
    try:
      asyncio.get_running_loop()
      seen["on_loop"] = True
    except RuntimeError:
      seen["on_loop"] = False
    return fake_app

  monkeypatch.setattr("fcm_notifier.api.routes.push.initialize_firebase", _initialize)

  response = api_client.post("/v1/push/send", json=_body(), headers={"x-notifier-secret": _SECRET})

  assert response.status_code == 200
  assert seen == {"on_loop": False}


def test_startup_survives_missing_credentials(monkeypatch):
  calls = {"logging": 0}

  def _fail():
    raise InitializationError("Service account file not found at path: ./firebase-service-account.json", "./firebase-service-account.json")

  def _count_logging(settings):
    calls["logging"] += 1

  monkeypatch.setattr("fcm_notifier.core.lifespan.initialize_firebase", _fail)
  monkeypatch.setattr("fcm_notifier.core.lifespan.initialize_logging", _count_logging)

  with TestClient(app) as client:
    response = client.get("/health")

  assert response.status_code == 200
  assert response.json()["firebase"] is False
  assert calls["logging"] == 1
