"""Shared fixtures: in-memory repositories, a recording dispatcher and an authenticated client."""

from __future__ import annotations

import os
from collections.abc import Collection
from dataclasses import replace
from datetime import datetime
from typing import Any, Literal

# Ensure required settings are available before importing the app.
os.environ.setdefault("UNISHARE_ALLOWED_ORIGINS", "http://localhost:3000")
os.environ.setdefault("UNISHARE_FUNCTIONS_BASE_URL", "https://functions.test")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from unishare.api.deps import get_dispatcher, get_document_storage, get_entitlements_repo, get_inputs_repo, get_jobs_repo  # noqa: E402
from unishare.core.security import Identity, get_current_identity  # noqa: E402
from unishare.jobs.models import JobKind, JobRecord, JobStatus  # noqa: E402
from unishare.main import app  # noqa: E402
from unishare.services.tasks.interface import FunctionRequest  # noqa: E402
from unishare.storage.entitlements_repo import SubscriptionRecord, TemporaryAccessRecord  # noqa: E402
from unishare.storage.inputs_repo import DocumentRecord, RecordingRecord  # noqa: E402
from unishare.utils.ids import utc_now_iso  # noqa: E402

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def anyio_backend() -> str:
  return "asyncio"


class InMemoryJobsRepo:
  """In-memory jobs repository mirroring the owner-scoped Postgres queries."""

  def __init__(self) -> None:
    self.jobs: dict[str, JobRecord] = {}
    self.fail_deletes = False

  async def create_job(self, record: JobRecord) -> None:
    self.jobs[record.job_id] = record

  async def get_job(self, job_id: str, *, user_id: str, kind: JobKind | None = None) -> JobRecord | None:
    record = self.jobs.get(job_id)
    if record is None or record.user_id != user_id:
      return None
    if kind is not None and record.kind != kind:
      return None
    return record

  async def find_job(self, job_id: str) -> JobRecord | None:
    return self.jobs.get(job_id)

  async def update_status(
    self,
    job_id: str,
    *,
    status: JobStatus,
    expected_statuses: Collection[str],
    result: Any | None = None,
    error_message: str | None = None,
    completed_at: str | None = None,
  ) -> JobRecord | None:
    record = self.jobs.get(job_id)
    if record is None or record.status not in expected_statuses:
      return None
    changes: dict[str, Any] = {"status": status, "updated_at": utc_now_iso()}
    if result is not None:
      changes["result"] = result
    if error_message is not None:
      changes["error_message"] = error_message
    if completed_at is not None:
      changes["completed_at"] = completed_at
    updated = replace(record, **changes)
    self.jobs[job_id] = updated
    return updated

  async def delete_job(self, job_id: str, *, user_id: str, kind: JobKind | None = None) -> int:
    if self.fail_deletes:
      raise RuntimeError("database unavailable")
    record = await self.get_job(job_id, user_id=user_id, kind=kind)
    if record is None:
      return 0
    del self.jobs[job_id]
    return 1

  async def list_completed(self, *, user_id: str, kind: JobKind, operation_type: str, order_by: Literal["completed_at", "created_at"] = "completed_at") -> list[JobRecord]:
    matches = [job for job in self.jobs.values() if job.user_id == user_id and job.kind == kind and job.operation_type == operation_type and job.status == "completed"]
    return sorted(matches, key=lambda job: getattr(job, order_by) or "", reverse=True)

  async def delete_jobs(self, job_ids: Collection[str], *, user_id: str) -> int:
    removed = 0
    for job_id in list(job_ids):
      record = self.jobs.get(job_id)
      if record is not None and record.user_id == user_id:
        del self.jobs[job_id]
        removed += 1
    return removed

  def seed(self, **overrides: Any) -> JobRecord:
    """Insert a job with sensible defaults and return it."""
    timestamp = "2026-01-01T00:00:00Z"
    values: dict[str, Any] = {
      "job_id": f"job-{len(self.jobs) + 1}",
      "user_id": USER_ID,
      "kind": "document_study_tools",
      "operation_type": "quiz",
      "status": "pending",
      "created_at": timestamp,
      "updated_at": timestamp,
    }
    values.update(overrides)
    record = JobRecord(**values)
    self.jobs[record.job_id] = record
    return record


class InMemoryInputsRepo:
  def __init__(self) -> None:
    self.documents: list[DocumentRecord] = []
    self.recordings: list[RecordingRecord] = []

  async def get_document(self, document_id: str, *, user_id: str) -> DocumentRecord | None:
    return next((doc for doc in self.documents if doc.id == document_id and doc.user_id == user_id), None)

  async def list_documents(self, document_ids: Collection[str], *, user_id: str, status: str | None = None) -> list[DocumentRecord]:
    wanted = set(document_ids)
    return [doc for doc in self.documents if doc.id in wanted and doc.user_id == user_id and (status is None or doc.status == status)]

  async def list_recordings(self, recording_ids: Collection[str], *, user_id: str) -> list[RecordingRecord]:
    wanted = set(recording_ids)
    return [rec for rec in self.recordings if rec.id in wanted and rec.user_id == user_id]


class InMemoryEntitlementsRepo:
  def __init__(self) -> None:
    self.subscription: SubscriptionRecord | None = None
    self.temporary_access: TemporaryAccessRecord | None = None
    self.error: Exception | None = None

  async def get_active_subscription(self, user_id: str) -> SubscriptionRecord | None:
    if self.error is not None:
      raise self.error
    if self.subscription is not None and self.subscription.user_id == user_id:
      return self.subscription
    return None

  async def get_latest_temporary_access(self, user_id: str, *, now: datetime) -> TemporaryAccessRecord | None:
    if self.error is not None:
      raise self.error
    grant = self.temporary_access
    if grant is not None and grant.user_id == user_id and grant.expires_at > now:
      return grant
    return None

  def grant_subscription(self, user_id: str = USER_ID) -> None:
    self.subscription = SubscriptionRecord(user_id=user_id, status="active", current_period_end=None)


class RecordingDispatcher:
  """Dispatcher double that records requests and optionally fails."""

  def __init__(self) -> None:
    self.requests: list[FunctionRequest] = []
    self.error: Exception | None = None

  async def dispatch(self, request: FunctionRequest) -> None:
    self.requests.append(request)
    if self.error is not None:
      raise self.error


class InMemoryDocumentStorage:
  """Object store double keyed by storage path."""

  def __init__(self) -> None:
    self.objects: dict[str, bytes] = {}
    self.error: Exception | None = None

  async def download(self, object_name: str) -> bytes:
    if self.error is not None:
      raise self.error
    return self.objects[object_name]


class FakeAuth:
  """Mutable caller identity so tests can switch users between requests."""

  def __init__(self) -> None:
    self.identity: Identity | None = Identity(user_id=USER_ID, access_token="token-user-1")

  def login(self, user_id: str) -> None:
    self.identity = Identity(user_id=user_id, access_token=f"token-{user_id}")


@pytest.fixture
def jobs_repo() -> InMemoryJobsRepo:
  return InMemoryJobsRepo()


@pytest.fixture
def inputs_repo() -> InMemoryInputsRepo:
  return InMemoryInputsRepo()


@pytest.fixture
def entitlements_repo() -> InMemoryEntitlementsRepo:
  return InMemoryEntitlementsRepo()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
  return RecordingDispatcher()


@pytest.fixture
def document_storage() -> InMemoryDocumentStorage:
  return InMemoryDocumentStorage()


@pytest.fixture
def auth() -> FakeAuth:
  return FakeAuth()


@pytest.fixture
async def async_client(jobs_repo, inputs_repo, entitlements_repo, dispatcher, document_storage, auth):
  from fastapi import HTTPException, status

  async def _identity() -> Identity:
    if auth.identity is None:
      raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return auth.identity

  app.dependency_overrides[get_current_identity] = _identity
  app.dependency_overrides[get_jobs_repo] = lambda: jobs_repo
  app.dependency_overrides[get_inputs_repo] = lambda: inputs_repo
  app.dependency_overrides[get_entitlements_repo] = lambda: entitlements_repo
  app.dependency_overrides[get_dispatcher] = lambda: dispatcher
  app.dependency_overrides[get_document_storage] = lambda: document_storage
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
    yield client
  app.dependency_overrides.clear()
