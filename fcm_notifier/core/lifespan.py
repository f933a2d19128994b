import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fcm_notifier.config import get_settings
from fcm_notifier.core.firebase import initialize_firebase
from fcm_notifier.core.logging import initialize_logging
from fcm_notifier.notifications.contracts import InitializationError


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Set up logging and the default Firebase app before serving requests."""
  settings = get_settings()
  logger = logging.getLogger("fcm_notifier.core.lifespan")

  initialize_logging(settings)

  try:
    initialize_firebase()
    logger.info("Startup complete - Firebase ready environment=%s", settings.environment)
  except InitializationError as exc:
    # Keep serving /health; send requests retry initialization and report 503 until credentials are fixed.
    logger.warning("Firebase initialization deferred path=%s error=%s", exc.path, exc)

  if not settings.api_secret:
    logger.warning("FCM_NOTIFIER_API_SECRET is not set; /v1/push/send will reject every request.")

  yield
