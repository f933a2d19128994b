"""Routes for sending push notifications."""

from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.concurrency import run_in_threadpool

from fcm_notifier.config import Settings, get_settings
from fcm_notifier.core.firebase import initialize_firebase
from fcm_notifier.notifications.client import NotificationClient
from fcm_notifier.notifications.contracts import NotificationOptions, NotificationPayload, NotificationResult
from fcm_notifier.notifications.validation import validate_notification

router = APIRouter()
logger = logging.getLogger(__name__)


class SendOptionsRequest(BaseModel):
  """APNs delivery options; omitted fields are left out of the message."""

  badge: int | None = None
  sound: str | None = Field(default=None, max_length=256)
  priority: str | None = Field(default=None, max_length=16)
  content_available: bool = Field(default=False, alias="contentAvailable")
  mutable_content: bool = Field(default=False, alias="mutableContent")
  model_config = ConfigDict(extra="forbid", populate_by_name=True)


class SendNotificationRequest(BaseModel):
  """Request body for a single-device send."""

  device_token: str = Field(min_length=1, max_length=4096, alias="deviceToken")
  title: str
  body: str
  data: dict[str, str] | None = None
  options: SendOptionsRequest | None = None
  dry_run: bool = Field(default=False, alias="dryRun")
  model_config = ConfigDict(extra="forbid", populate_by_name=True)

  def to_payload(self) -> NotificationPayload:
    return NotificationPayload(title=self.title, body=self.body, data=self.data)

  def to_options(self) -> NotificationOptions | None:
    if self.options is None:
      return None
    return NotificationOptions(
      badge=self.options.badge, sound=self.options.sound, priority=self.options.priority, content_available=self.options.content_available, mutable_content=self.options.mutable_content
    )


def require_api_secret(settings: Annotated[Settings, Depends(get_settings)], x_notifier_secret: str | None = Header(default=None)) -> None:
  """Reject callers without the shared secret; refuse everything when no secret is configured."""
  if not settings.api_secret:
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Push API authentication is not configured.")
  if not secrets.compare_digest(x_notifier_secret or "", settings.api_secret):
    logger.warning("Unauthorized access attempt to /v1/push/send")
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid notifier secret.")


@router.post("/send", dependencies=[Depends(require_api_secret)])
async def send_push(payload: SendNotificationRequest, settings: Annotated[Settings, Depends(get_settings)]) -> JSONResponse:
  """Send one notification.

  Schema errors return 422. Rejected field values return 400 and delivery
  failures return 502, both with the result body.
  """
  failure = validate_notification(payload.device_token, payload.to_payload(), payload.to_options(), max_payload_bytes=settings.max_payload_bytes)
  if failure is not None:
    logger.info("Rejected push request [%s]: %s", failure.code.value, failure.message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=NotificationResult.failed(failure.message).to_dict())

  # Raises InitializationError (mapped to 503) when credentials are unusable.
  app = await run_in_threadpool(initialize_firebase)
  client = NotificationClient(app, max_payload_bytes=settings.max_payload_bytes)

  if payload.dry_run:
    result = await client.send_dry_run(payload.device_token, payload.to_payload(), payload.to_options())
  else:
    result = await client.send(payload.device_token, payload.to_payload(), payload.to_options())

  status_code = status.HTTP_200_OK if result.success else status.HTTP_502_BAD_GATEWAY
  return JSONResponse(status_code=status_code, content=result.to_dict())
