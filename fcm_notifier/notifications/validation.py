"""Input validation for outbound notifications."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from fcm_notifier.config import DEFAULT_MAX_PAYLOAD_BYTES
from fcm_notifier.notifications.contracts import NotificationErrorCode, NotificationOptions, NotificationPayload, Priority

_PRIORITY_VALUES = {priority.value for priority in Priority}


@dataclass(frozen=True)
class ValidationFailure:
  """First rule a notification request broke."""

  code: NotificationErrorCode
  message: str


def payload_size_bytes(payload: NotificationPayload) -> int:
  """Return the UTF-8 size of the compact JSON encoding of a payload."""
  encoded = json.dumps(payload.to_dict(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
  return len(encoded)


def _is_blank(value: Any) -> bool:
  return not isinstance(value, str) or value.strip() == ""


def validate_device_token(token: Any) -> ValidationFailure | None:
  if _is_blank(token):
    return ValidationFailure(NotificationErrorCode.INVALID_TOKEN, "Device token must be a non-empty string")
  return None


def validate_payload(payload: Any, *, max_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES) -> ValidationFailure | None:
  if not isinstance(payload, NotificationPayload):
    return ValidationFailure(NotificationErrorCode.INVALID_PAYLOAD, "Notification payload must provide a title and body")

  if _is_blank(payload.title):
    return ValidationFailure(NotificationErrorCode.INVALID_PAYLOAD, "Notification title is required and must be a non-empty string")

  if _is_blank(payload.body):
    return ValidationFailure(NotificationErrorCode.INVALID_PAYLOAD, "Notification body is required and must be a non-empty string")

  try:
    size = payload_size_bytes(payload)
  except (TypeError, ValueError) as exc:
    return ValidationFailure(NotificationErrorCode.INVALID_PAYLOAD, f"Notification payload must be JSON serializable: {exc}")

  if size > max_bytes:
    return ValidationFailure(NotificationErrorCode.PAYLOAD_TOO_LARGE, f"Notification payload exceeds size limit ({size} bytes > {max_bytes} bytes)")

  return None


def validate_options(options: Any) -> ValidationFailure | None:
  if options is None:
    return None

  if not isinstance(options, NotificationOptions):
    return ValidationFailure(NotificationErrorCode.INVALID_OPTIONS, "Notification options must be a NotificationOptions instance")

  # bool is an int subclass; a True badge is a caller mistake, not a count.
  if options.badge is not None and (isinstance(options.badge, bool) or not isinstance(options.badge, int) or options.badge < 0):
    return ValidationFailure(NotificationErrorCode.INVALID_OPTIONS, "Badge must be a positive number")

  if options.priority is not None and (not isinstance(options.priority, str) or _priority_value(options.priority) not in _PRIORITY_VALUES):
    return ValidationFailure(NotificationErrorCode.INVALID_OPTIONS, 'Priority must be either "high" or "normal"')

  return None


def validate_notification(device_token: Any, payload: Any, options: Any = None, *, max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES) -> ValidationFailure | None:
  """Return the first failed rule (token, then payload, then options), or None when valid."""
  return validate_device_token(device_token) or validate_payload(payload, max_bytes=max_payload_bytes) or validate_options(options)


def _priority_value(priority: Priority | str) -> str:
  if isinstance(priority, Priority):
    return priority.value
  return priority
