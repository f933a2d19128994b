"""Push notification client backed by Firebase Cloud Messaging."""

from __future__ import annotations

import logging
from pathlib import Path

import firebase_admin
from firebase_admin import messaging
from starlette.concurrency import run_in_threadpool

from fcm_notifier.config import get_settings
from fcm_notifier.core.firebase import FirebaseAppHolder, create_firebase_app, get_default_holder
from fcm_notifier.notifications.contracts import InitializationError, NotificationOptions, NotificationPayload, NotificationResult
from fcm_notifier.notifications.errors import describe_send_error
from fcm_notifier.notifications.message_builder import build_message
from fcm_notifier.notifications.validation import validate_notification

logger = logging.getLogger(__name__)


class NotificationClient:
  """Sends APNs-flavoured FCM notifications through one Firebase app.

  `send` never raises: validation failures, provider rejections and transport
  errors all come back as a failed `NotificationResult`.
  """

  def __init__(self, app: firebase_admin.App, *, max_payload_bytes: int | None = None) -> None:
    self._app = app
    self._max_payload_bytes = max_payload_bytes if max_payload_bytes is not None else get_settings().max_payload_bytes

  @property
  def app(self) -> firebase_admin.App:
    return self._app

  async def send(self, device_token: str, payload: NotificationPayload, options: NotificationOptions | None = None) -> NotificationResult:
    """Validate, build and submit a notification for a single device."""
    return await self._deliver(device_token, payload, options, dry_run=False)

  async def send_dry_run(self, device_token: str, payload: NotificationPayload, options: NotificationOptions | None = None) -> NotificationResult:
    """Run the full pipeline with FCM validate-only mode; nothing reaches the device."""
    return await self._deliver(device_token, payload, options, dry_run=True)

  async def _deliver(self, device_token: str, payload: NotificationPayload, options: NotificationOptions | None, *, dry_run: bool) -> NotificationResult:
    failure = validate_notification(device_token, payload, options, max_payload_bytes=self._max_payload_bytes)
    if failure is not None:
      logger.error("Notification validation failed [%s]: %s", failure.code.value, failure.message)
      return NotificationResult.failed(failure.message)

    try:
      message = build_message(device_token, payload, options)
      message_id = await run_in_threadpool(messaging.send, message, dry_run=dry_run, app=self._app)
    except Exception as exc:  # noqa: BLE001
      return NotificationResult.failed(describe_send_error(exc))

    logger.debug("Notification sent app=%s message_id=%s dry_run=%s", self._app.name, message_id, dry_run)
    return NotificationResult.ok(message_id)


def create_notification_client(service_account_path: str | Path, app_name: str | None = None) -> NotificationClient:
  """Create a client bound to its own Firebase app.

  Raises `InitializationError` when the credentials cannot be loaded.
  """
  app = create_firebase_app(service_account_path, app_name)
  return NotificationClient(app)


async def send_notification(device_token: str, payload: NotificationPayload, options: NotificationOptions | None = None, *, holder: FirebaseAppHolder | None = None) -> NotificationResult:
  """Send through the default Firebase app, initializing it on first use."""
  holder = holder or get_default_holder()
  try:
    app = holder.initialize()
  except InitializationError as exc:
    logger.error("Notification send failed: %s", exc)
    return NotificationResult.failed(str(exc))

  return await NotificationClient(app).send(device_token, payload, options)
