"""Contracts for push notification delivery."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Priority(str, Enum):
  """APNs delivery priority."""

  HIGH = "high"
  NORMAL = "normal"


class NotificationErrorCode(str, Enum):
  """Codes attached to notification validation failures."""

  INVALID_TOKEN = "INVALID_TOKEN"
  INVALID_PAYLOAD = "INVALID_PAYLOAD"
  PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
  INVALID_OPTIONS = "INVALID_OPTIONS"


@dataclass(frozen=True)
class NotificationPayload:
  """User-visible notification content."""

  title: str
  body: str
  data: dict[str, str] | None = None

  def to_dict(self) -> dict[str, Any]:
    """Return the payload as plain JSON values, omitting absent data."""
    payload: dict[str, Any] = {"title": self.title, "body": self.body}
    if self.data is not None:
      payload["data"] = self.data
    return payload


@dataclass(frozen=True)
class NotificationOptions:
  """APNs delivery hints layered onto a payload."""

  badge: int | None = None
  sound: str | None = None
  priority: Priority | str | None = None
  content_available: bool = False
  mutable_content: bool = False


@dataclass(frozen=True)
class NotificationResult:
  """Terminal outcome of a single send."""

  success: bool
  message_id: str | None = None
  error: str | None = None

  @classmethod
  def ok(cls, message_id: str) -> NotificationResult:
    return cls(success=True, message_id=message_id)

  @classmethod
  def failed(cls, error: str) -> NotificationResult:
    return cls(success=False, error=error)

  def to_dict(self) -> dict[str, Any]:
    """Return the camelCase wire shape, omitting unset fields."""
    result: dict[str, Any] = {"success": self.success}
    if self.message_id is not None:
      result["messageId"] = self.message_id
    if self.error is not None:
      result["error"] = self.error
    return result

  def raise_for_error(self) -> None:
    """Raise `NotificationError` when the send failed."""
    if not self.success:
      raise NotificationError(self.error or "Failed to send notification")


class FcmNotifierError(Exception):
  """Base class for all notifier failures."""


class InitializationError(FcmNotifierError):
  """Raised when Firebase credentials cannot be loaded or the app cannot be created."""

  def __init__(self, message: str, path: str | None = None) -> None:
    super().__init__(message)
    self.path = path


class NotificationError(FcmNotifierError):
  """Raised by callers that prefer exceptions over failed results."""

  def __init__(self, message: str, code: NotificationErrorCode | str | None = None) -> None:
    super().__init__(message)
    self.code = code

