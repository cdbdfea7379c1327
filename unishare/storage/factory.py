from unishare.config import Settings
from unishare.storage.entitlements_repo import EntitlementsRepository
from unishare.storage.inputs_repo import StudyInputsRepository
from unishare.storage.jobs_repo import JobsRepository
from unishare.storage.postgres_entitlements_repo import PostgresEntitlementsRepository
from unishare.storage.postgres_inputs_repo import PostgresStudyInputsRepository
from unishare.storage.postgres_jobs_repo import PostgresJobsRepository


def _require_dsn(settings: Settings) -> None:
  if not settings.pg_dsn:
    raise ValueError("UNISHARE_PG_DSN must be set to enable Postgres persistence.")


def _get_jobs_repo(settings: Settings) -> JobsRepository:
  """Return the active jobs repository."""
  _require_dsn(settings)
  return PostgresJobsRepository()


def _get_inputs_repo(settings: Settings) -> StudyInputsRepository:
  """Return the active documents/recordings repository."""
  _require_dsn(settings)
  return PostgresStudyInputsRepository()


def _get_entitlements_repo(settings: Settings) -> EntitlementsRepository:
  """Return the active entitlements repository."""
  _require_dsn(settings)
  return PostgresEntitlementsRepository()
