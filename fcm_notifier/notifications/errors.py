"""Translation of Firebase messaging failures into caller-facing messages."""

from __future__ import annotations

import logging

from firebase_admin import exceptions as firebase_exceptions

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or unregistered device token"
DEFAULT_FAILURE_MESSAGE = "Failed to send notification"

# Canonical Firebase error codes, plus the `messaging/*` codes used by the Node SDK and relayed by proxies.
ERROR_MESSAGES: dict[str, str] = {
  firebase_exceptions.NOT_FOUND: INVALID_TOKEN_MESSAGE,
  firebase_exceptions.INVALID_ARGUMENT: "Invalid notification payload or options",
  firebase_exceptions.UNAUTHENTICATED: "Firebase authentication failed",
  firebase_exceptions.UNAVAILABLE: "Firebase messaging service is temporarily unavailable",
  firebase_exceptions.INTERNAL: "Internal Firebase error occurred",
  "messaging/invalid-registration-token": INVALID_TOKEN_MESSAGE,
  "messaging/registration-token-not-registered": INVALID_TOKEN_MESSAGE,
  "messaging/invalid-argument": "Invalid notification payload or options",
  "messaging/authentication-error": "Firebase authentication failed",
  "messaging/server-unavailable": "Firebase messaging service is temporarily unavailable",
  "messaging/internal-error": "Internal Firebase error occurred",
}


def _error_code(exc: BaseException) -> str | None:
  code = getattr(exc, "code", None)
  if isinstance(code, str) and code:
    return code
  return None


def _mentions_registration_token(exc: BaseException) -> bool:
  # FCM reports malformed tokens as INVALID_ARGUMENT with a token-specific message.
  return "registration token" in str(exc).lower()


def describe_send_error(exc: BaseException) -> str:
  """Return the caller-facing message for a failed send and log the failure."""
  code = _error_code(exc)
  if code is None:
    message = str(exc) or DEFAULT_FAILURE_MESSAGE
    logger.error("Notification send failed: %s", message)
    return message

  if code == firebase_exceptions.INVALID_ARGUMENT and _mentions_registration_token(exc):
    message = INVALID_TOKEN_MESSAGE
  else:
    message = ERROR_MESSAGES.get(code) or str(exc) or DEFAULT_FAILURE_MESSAGE

  logger.error("Notification send failed [%s]: %s", code, message)
  return message
