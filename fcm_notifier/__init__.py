"""Push notifications to Apple devices through Firebase Cloud Messaging."""

from fcm_notifier.core.firebase import FirebaseAppHolder, create_firebase_app, get_firebase_app, initialize_firebase, is_initialized, load_service_account
from fcm_notifier.notifications.client import NotificationClient, create_notification_client, send_notification
from fcm_notifier.notifications.contracts import (
  FcmNotifierError,
  InitializationError,
  NotificationError,
  NotificationErrorCode,
  NotificationOptions,
  NotificationPayload,
  NotificationResult,
  Priority,
)

__version__ = "0.1.0"

__all__ = [
  "FcmNotifierError",
  "FirebaseAppHolder",
  "InitializationError",
  "NotificationClient",
  "NotificationError",
  "NotificationErrorCode",
  "NotificationOptions",
  "NotificationPayload",
  "NotificationResult",
  "Priority",
  "create_firebase_app",
  "create_notification_client",
  "get_firebase_app",
  "initialize_firebase",
  "is_initialized",
  "load_service_account",
  "send_notification",
]
