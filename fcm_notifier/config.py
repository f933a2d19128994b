"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
DEFAULT_SERVICE_ACCOUNT_PATH = "./firebase-service-account.json"
DEFAULT_APP_NAME = "[DEFAULT]"
DEFAULT_MAX_PAYLOAD_BYTES = 4096


def load_environment(path: Path | None = None) -> bool:
  """Load a .env file without overriding variables already set; returns False when nothing was loaded."""
  return load_dotenv(dotenv_path=path or DEFAULT_ENV_PATH, override=False)


load_environment()

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
  """Typed settings for the notifier."""

  environment: str
  service_account_path: str
  app_name: str
  log_level: str
  log_dir: str | None
  log_max_bytes: int
  log_backup_count: int
  api_secret: str | None
  max_payload_bytes: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("FCM_NOTIFIER_ENV", "development").strip().lower()

  # Resolution order for credentials: explicit caller argument, then env, then the repo-local default.
  service_account_path = _optional_str(os.getenv("FIREBASE_SERVICE_ACCOUNT_PATH")) or DEFAULT_SERVICE_ACCOUNT_PATH
  app_name = _optional_str(os.getenv("FIREBASE_APP_NAME")) or DEFAULT_APP_NAME

  log_level = (os.getenv("FCM_NOTIFIER_LOG_LEVEL") or "INFO").strip().upper()
  if log_level not in _LOG_LEVELS:
    raise ValueError(f"FCM_NOTIFIER_LOG_LEVEL must be one of {', '.join(sorted(_LOG_LEVELS))}.")

  log_max_bytes = _parse_int("FCM_NOTIFIER_LOG_MAX_BYTES", "5242880")  # 5MB default
  if log_max_bytes <= 0:
    raise ValueError("FCM_NOTIFIER_LOG_MAX_BYTES must be a positive integer.")

  log_backup_count = _parse_int("FCM_NOTIFIER_LOG_BACKUP_COUNT", "5")
  if log_backup_count < 0:
    raise ValueError("FCM_NOTIFIER_LOG_BACKUP_COUNT must be zero or a positive integer.")

  max_payload_bytes = _parse_int("FCM_NOTIFIER_MAX_PAYLOAD_BYTES", str(DEFAULT_MAX_PAYLOAD_BYTES))
  if max_payload_bytes <= 0:
    raise ValueError("FCM_NOTIFIER_MAX_PAYLOAD_BYTES must be a positive integer.")

  return Settings(
    environment=environment,
    service_account_path=service_account_path,
    app_name=app_name,
    log_level=log_level,
    log_dir=_optional_str(os.getenv("FCM_NOTIFIER_LOG_DIR")),
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    api_secret=_optional_str(os.getenv("FCM_NOTIFIER_API_SECRET")),
    max_payload_bytes=max_payload_bytes,
  )


def _parse_int(name: str, default: str) -> int:
  raw = os.getenv(name)
  if raw is None or raw.strip() == "":
    raw = default
  try:
    return int(raw)
  except ValueError as exc:
    raise ValueError(f"{name} must be an integer.") from exc


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value
