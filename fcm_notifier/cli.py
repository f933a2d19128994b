"""Send a single notification from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from fcm_notifier.config import get_settings
from fcm_notifier.core.logging import initialize_logging
from fcm_notifier.notifications.client import create_notification_client
from fcm_notifier.notifications.contracts import InitializationError, NotificationOptions, NotificationPayload, NotificationResult

logger = logging.getLogger(__name__)


def _parse_data(pairs: list[str]) -> dict[str, str] | None:
  if not pairs:
    return None
  data: dict[str, str] = {}
  for pair in pairs:
    key, sep, value = pair.partition("=")
    if not sep or not key:
      raise argparse.ArgumentTypeError(f"--data expects key=value, got {pair!r}")
    data[key] = value
  return data


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(prog="fcm-notify", description="Send a push notification to one device through FCM.")
  parser.add_argument("--credentials", help="Service account JSON path (defaults to FIREBASE_SERVICE_ACCOUNT_PATH).")
  parser.add_argument("--app-name", help="Firebase app name; a unique name is generated when omitted.")
  parser.add_argument("--token", required=True, help="FCM device token.")
  parser.add_argument("--title", required=True)
  parser.add_argument("--body", required=True)
  parser.add_argument("--data", action="append", default=[], metavar="KEY=VALUE", help="Custom data entry; repeatable.")
  parser.add_argument("--badge", type=int)
  parser.add_argument("--sound")
  parser.add_argument("--priority", choices=["high", "normal"])
  parser.add_argument("--content-available", action="store_true")
  parser.add_argument("--mutable-content", action="store_true")
  parser.add_argument("--dry-run", action="store_true", help="Validate with FCM without delivering.")
  return parser


async def run(args: argparse.Namespace) -> NotificationResult:
  """Create a client for the requested credentials and send once."""
  credentials_path = args.credentials or get_settings().service_account_path
  try:
    client = create_notification_client(credentials_path, args.app_name)
  except InitializationError as exc:
    logger.error("Could not initialize Firebase: %s", exc)
    return NotificationResult.failed(str(exc))

  payload = NotificationPayload(title=args.title, body=args.body, data=_parse_data(args.data))
  options = NotificationOptions(badge=args.badge, sound=args.sound, priority=args.priority, content_available=args.content_available, mutable_content=args.mutable_content)
  if args.dry_run:
    return await client.send_dry_run(args.token, payload, options)
  return await client.send(args.token, payload, options)


def main(argv: list[str] | None = None) -> int:
  parser = build_parser()
  args = parser.parse_args(argv)
  try:
    _parse_data(args.data)
  except argparse.ArgumentTypeError as exc:
    parser.error(str(exc))

  initialize_logging(get_settings())
  result = asyncio.run(run(args))
  print(json.dumps(result.to_dict()))
  return 0 if result.success else 1


if __name__ == "__main__":
  sys.exit(main())
