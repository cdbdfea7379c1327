import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI

from unishare.core.database import dispose_engine
from unishare.core.firebase import initialize_firebase
from unishare.core.logging import _initialize_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Set up logging and Firebase once uvicorn has started, and dispose the engine on shutdown."""
  from unishare.config import get_settings

  settings = get_settings()
  logger = logging.getLogger("unishare.core.lifespan")

  try:
    _initialize_logging(settings)
    logger.info("Startup complete - logging verified.")
    logger.info("Dispatch provider=%s functions_base_url=%s database=%s", settings.dispatch_provider, settings.functions_base_url or "<unset>", _redact_dsn(settings.pg_dsn))
    initialize_firebase()
  except Exception:
    # Log initialization failures but allow the app to continue starting.
    logger.warning("Startup initialization failed.", exc_info=True)

  yield

  await dispose_engine()


def _redact_dsn(raw: str | None) -> str:
  """Redact credentials from a DSN while keeping host/db visible."""
  if not raw:
    return "<unset>"

  parsed = urlparse(raw)
  if not parsed.scheme:
    return "<invalid>"

  user = parsed.username or ""
  host = parsed.hostname or ""
  port = f":{parsed.port}" if parsed.port else ""
  netloc = f"{user}@{host}{port}" if user else f"{host}{port}"
  database = parsed.path.lstrip("/")
  path = f"/{database}" if database else ""
  return f"{parsed.scheme}://{netloc}{path}"
