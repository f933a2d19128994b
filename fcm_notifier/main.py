from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from fcm_notifier import __version__
from fcm_notifier.api.routes import push
from fcm_notifier.core.exceptions import global_exception_handler, http_exception_handler, initialization_exception_handler, request_validation_exception_handler
from fcm_notifier.core.firebase import is_initialized
from fcm_notifier.core.lifespan import lifespan
from fcm_notifier.notifications.contracts import InitializationError

app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(InitializationError, initialization_exception_handler)


@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str | bool]:
  """Return a simple health status."""
  return {"status": "ok", "version": __version__, "firebase": is_initialized()}


app.include_router(push.router, prefix="/v1/push", tags=["push"])
