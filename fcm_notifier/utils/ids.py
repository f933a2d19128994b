"""Identifier utilities."""

from __future__ import annotations

import secrets
import string
import time

_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def generate_suffix(size: int = 9) -> str:
  """Return a short random base36 suffix."""
  return "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(size))


def generate_app_name(prefix: str = "notification-client") -> str:
  """Return a Firebase app name unique to this call."""
  return f"{prefix}-{int(time.time() * 1000)}-{generate_suffix()}"
