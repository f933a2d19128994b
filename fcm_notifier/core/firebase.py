"""Firebase Admin SDK credential loading and app lifecycle."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import firebase_admin
from firebase_admin import credentials

from fcm_notifier.config import Settings, get_settings
from fcm_notifier.notifications.contracts import InitializationError
from fcm_notifier.utils.ids import generate_app_name

logger = logging.getLogger(__name__)

REQUIRED_SERVICE_ACCOUNT_FIELDS = ("project_id", "private_key", "client_email")


@dataclass(frozen=True)
class ServiceAccount:
  """Validated service-account descriptor."""

  project_id: str
  private_key: str
  client_email: str
  raw: Mapping[str, Any] = field(repr=False, hash=False, compare=False)


def resolve_service_account_path(explicit: str | Path | None = None, settings: Settings | None = None) -> str:
  """Return the credential path: argument, then environment, then the default file."""
  if explicit:
    return str(explicit)
  return (settings or get_settings()).service_account_path


def resolve_app_name(explicit: str | None = None, settings: Settings | None = None) -> str:
  """Return the app name: argument, then environment, then Firebase's default name."""
  if explicit:
    return explicit
  return (settings or get_settings()).app_name


def load_service_account(path: str | Path) -> ServiceAccount:
  """Read and validate a service-account JSON file."""
  path_str = str(path)
  if not Path(path_str).is_file():
    raise InitializationError(f"Service account file not found at path: {path_str}", path_str)

  try:
    raw = json.loads(Path(path_str).read_text(encoding="utf-8"))
  except (OSError, UnicodeDecodeError, ValueError) as exc:
    raise InitializationError(f"Failed to parse service account JSON: {exc}", path_str) from exc

  if not isinstance(raw, dict):
    raise InitializationError("Failed to parse service account JSON: expected a JSON object", path_str)

  missing = [name for name in REQUIRED_SERVICE_ACCOUNT_FIELDS if not raw.get(name)]
  if missing:
    raise InitializationError(f"Service account JSON is missing required fields: {', '.join(missing)}", path_str)

  return ServiceAccount(project_id=raw["project_id"], private_key=raw["private_key"], client_email=raw["client_email"], raw=raw)


def _get_or_create_app(service_account: ServiceAccount, app_name: str, path: str) -> firebase_admin.App:
  """Return the registered app for `app_name`, creating it from the descriptor when absent."""
  try:
    try:
      return firebase_admin.get_app(app_name)
    except ValueError:
      # get_app raises ValueError when no app is registered under the name.
      pass

    cred = credentials.Certificate(dict(service_account.raw))
    app = firebase_admin.initialize_app(cred, name=app_name)
    logger.info("Firebase app initialized name=%s project_id=%s", app_name, service_account.project_id)
    return app
  except Exception as exc:  # noqa: BLE001
    raise InitializationError(f"Failed to initialize Firebase Admin SDK: {exc}", path) from exc


def create_firebase_app(service_account_path: str | Path, app_name: str | None = None) -> firebase_admin.App:
  """Create a caller-owned Firebase app.

  Each call without `app_name` registers an independently named app so several
  credentials can be used side by side. Passing a name that is already
  registered returns that app unchanged.
  """
  path = str(service_account_path)
  service_account = load_service_account(path)
  final_name = app_name or generate_app_name()
  return _get_or_create_app(service_account, final_name, path)


class FirebaseAppHolder:
  """Owns at most one Firebase app for its lifetime.

  The first successful `initialize` wins. Later calls return the cached app
  even when they pass a different path or name.
  """

  def __init__(self, settings: Settings | None = None) -> None:
    self._settings = settings
    self._app: firebase_admin.App | None = None
    self._lock = threading.Lock()

  def is_initialized(self) -> bool:
    return self._app is not None

  def get_app(self) -> firebase_admin.App:
    """Return the cached app or raise when `initialize` has not succeeded yet."""
    if self._app is None:
      raise InitializationError("Firebase has not been initialized. Call initialize_firebase() first.")
    return self._app

  def initialize(self, service_account_path: str | Path | None = None, app_name: str | None = None) -> firebase_admin.App:
    """Return the cached app, initializing it on first use."""
    if self._app is not None:
      return self._app

    with self._lock:
      # Another thread may have finished while this one waited on the lock.
      if self._app is not None:
        return self._app

      settings = self._settings or get_settings()
      path = resolve_service_account_path(service_account_path, settings)
      name = resolve_app_name(app_name, settings)
      service_account = load_service_account(path)
      self._app = _get_or_create_app(service_account, name, path)
      return self._app

  def reset(self, *, delete_app: bool = False) -> None:
    """Drop the cached app, optionally deleting it from the SDK registry."""
    with self._lock:
      app, self._app = self._app, None
    if delete_app and app is not None:
      firebase_admin.delete_app(app)


_default_holder = FirebaseAppHolder()


def get_default_holder() -> FirebaseAppHolder:
  return _default_holder


def initialize_firebase(service_account_path: str | Path | None = None, app_name: str | None = None) -> firebase_admin.App:
  """Initialize the process default Firebase app."""
  return _default_holder.initialize(service_account_path, app_name)


def is_initialized() -> bool:
  """Check whether the process default Firebase app is ready."""
  return _default_holder.is_initialized()


def get_firebase_app() -> firebase_admin.App:
  """Return the process default Firebase app."""
  return _default_holder.get_app()
