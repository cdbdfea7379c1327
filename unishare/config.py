"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from unishare.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)

_DISPATCH_PROVIDERS = {"http", "gcp"}


@dataclass(frozen=True)
class Settings:
  """Typed settings for the UniShare jobs service."""

  environment: str
  allowed_origins: tuple[str, ...]
  debug: bool
  log_max_bytes: int
  log_backup_count: int
  log_http_4xx: bool
  pg_dsn: str | None
  pg_connect_timeout: int
  firebase_project_id: str | None
  firebase_service_account_json_path: str | None
  functions_base_url: str | None
  dispatch_provider: str
  dispatch_timeout_seconds: float
  cloud_tasks_queue_path: str | None
  task_secret: str | None
  documents_bucket: str
  gcs_storage_host: str | None
  gcp_project_id: str | None


@dataclass(frozen=True)
class DatabaseSettings:
  """Typed settings for database connectivity."""

  debug: bool
  pg_dsn: str | None
  pg_connect_timeout: int


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  if not raw:
    raise ValueError("UNISHARE_ALLOWED_ORIGINS must be set to one or more origins.")

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if not origins:
    raise ValueError("UNISHARE_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    raise ValueError("UNISHARE_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("UNISHARE_ENV", "development").lower()

  # Toggle verbose SQL echo and diagnostics in non-production environments.
  debug = _parse_bool(os.getenv("UNISHARE_DEBUG"))

  log_max_bytes = int(os.getenv("UNISHARE_LOG_MAX_BYTES", "5242880"))  # 5MB default
  if log_max_bytes <= 0:
    raise ValueError("UNISHARE_LOG_MAX_BYTES must be a positive integer.")

  log_backup_count = int(os.getenv("UNISHARE_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("UNISHARE_LOG_BACKUP_COUNT must be zero or a positive integer.")

  # Allow opt-in logging of 4xx HTTPExceptions for diagnostics.
  log_http_4xx = _parse_bool(os.getenv("UNISHARE_LOG_HTTP_4XX"))

  pg_connect_timeout = int(os.getenv("UNISHARE_PG_CONNECT_TIMEOUT", "5"))
  if pg_connect_timeout <= 0:
    raise ValueError("UNISHARE_PG_CONNECT_TIMEOUT must be a positive integer.")

  dispatch_provider = (os.getenv("UNISHARE_DISPATCH_PROVIDER") or "http").strip().lower()
  if dispatch_provider not in _DISPATCH_PROVIDERS:
    raise ValueError("UNISHARE_DISPATCH_PROVIDER must be 'http' or 'gcp'.")

  dispatch_timeout_seconds = float(os.getenv("UNISHARE_DISPATCH_TIMEOUT_SECONDS", "30"))
  if dispatch_timeout_seconds <= 0:
    raise ValueError("UNISHARE_DISPATCH_TIMEOUT_SECONDS must be positive.")

  cloud_tasks_queue_path = _optional_str(os.getenv("UNISHARE_CLOUD_TASKS_QUEUE_PATH"))
  if dispatch_provider == "gcp" and not cloud_tasks_queue_path:
    raise ValueError("UNISHARE_CLOUD_TASKS_QUEUE_PATH must be set when the gcp dispatch provider is selected.")

  functions_base_url = _optional_str(os.getenv("UNISHARE_FUNCTIONS_BASE_URL"))
  if functions_base_url:
    functions_base_url = functions_base_url.rstrip("/")

  return Settings(
    environment=environment,
    allowed_origins=_parse_origins(os.getenv("UNISHARE_ALLOWED_ORIGINS")),
    debug=debug,
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    log_http_4xx=log_http_4xx,
    pg_dsn=os.getenv("UNISHARE_PG_DSN") or os.getenv("DATABASE_URL"),
    pg_connect_timeout=pg_connect_timeout,
    firebase_project_id=_optional_str(os.getenv("FIREBASE_PROJECT_ID")),
    firebase_service_account_json_path=_optional_str(os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON_PATH")),
    functions_base_url=functions_base_url,
    dispatch_provider=dispatch_provider,
    dispatch_timeout_seconds=dispatch_timeout_seconds,
    cloud_tasks_queue_path=cloud_tasks_queue_path,
    task_secret=_optional_str(os.getenv("UNISHARE_TASK_SECRET")),
    documents_bucket=os.getenv("UNISHARE_DOCUMENTS_BUCKET", "document-uploads"),
    gcs_storage_host=_optional_str(os.getenv("GCS_STORAGE_HOST")),
    gcp_project_id=_optional_str(os.getenv("GCP_PROJECT_ID")),
  )


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
  """Load database settings without requiring web-runtime configuration like CORS."""
  # Keep database configuration isolated so migrations don't require unrelated env vars.
  debug = _parse_bool(os.getenv("UNISHARE_DEBUG"))
  pg_connect_timeout = int(os.getenv("UNISHARE_PG_CONNECT_TIMEOUT", "5"))
  if pg_connect_timeout <= 0:
    raise ValueError("UNISHARE_PG_CONNECT_TIMEOUT must be a positive integer.")

  pg_dsn = os.getenv("UNISHARE_PG_DSN") or os.getenv("DATABASE_URL")

  return DatabaseSettings(debug=debug, pg_dsn=pg_dsn, pg_connect_timeout=pg_connect_timeout)


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value
