"""Construction of FCM messages with an APNs extension block."""

from __future__ import annotations

from firebase_admin import messaging

from fcm_notifier.notifications.contracts import NotificationOptions, NotificationPayload, Priority

APNS_PRIORITY_HEADER = "apns-priority"
APNS_PRIORITY_HIGH = "10"
APNS_PRIORITY_NORMAL = "5"


def apns_priority(options: NotificationOptions | None) -> str:
  """Map a delivery priority onto the APNs header value; only "normal" lowers urgency."""
  priority = options.priority if options is not None else None
  if priority == Priority.NORMAL:
    return APNS_PRIORITY_NORMAL
  return APNS_PRIORITY_HIGH


def build_aps(payload: NotificationPayload, options: NotificationOptions | None) -> messaging.Aps:
  """Build the `aps` dictionary; unset options stay None so the SDK omits them."""
  options = options or NotificationOptions()
  return messaging.Aps(
    alert=messaging.ApsAlert(title=payload.title, body=payload.body),
    badge=options.badge,
    sound=options.sound or None,
    content_available=True if options.content_available else None,
    mutable_content=True if options.mutable_content else None,
  )


def build_message(device_token: str, payload: NotificationPayload, options: NotificationOptions | None = None) -> messaging.Message:
  """Build the FCM message for a single device token."""
  apns = messaging.APNSConfig(headers={APNS_PRIORITY_HEADER: apns_priority(options)}, payload=messaging.APNSPayload(aps=build_aps(payload, options)))
  return messaging.Message(
    token=device_token,
    notification=messaging.Notification(title=payload.title, body=payload.body),
    data=payload.data,
    apns=apns,
  )
