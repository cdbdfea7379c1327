"""Storage interfaces for study-tool jobs."""

from __future__ import annotations

from collections.abc import Collection
from typing import Any, Literal, Protocol

from unishare.jobs.models import JobKind, JobRecord, JobStatus


class JobsRepository(Protocol):
  """Repository contract for job persistence.

  Every user-facing method takes `user_id` and filters on it together with the
  job id; that equality filter is the only access control on job rows.
  """

  async def create_job(self, record: JobRecord) -> None:
    """Persist an initial job record."""

  async def get_job(self, job_id: str, *, user_id: str, kind: JobKind | None = None) -> JobRecord | None:
    """Fetch a job owned by `user_id`, or None when absent or foreign."""

  async def find_job(self, job_id: str) -> JobRecord | None:
    """Fetch a job by id without owner scoping (internal callers only)."""

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
    """Set a new status only while the current status is one of `expected_statuses`.

    Returns the updated record, or None when the row is missing or its status
    no longer matches.
    """

  async def delete_job(self, job_id: str, *, user_id: str, kind: JobKind | None = None) -> int:
    """Delete a job owned by `user_id`; returns the number of rows removed."""

  async def list_completed(self, *, user_id: str, kind: JobKind, operation_type: str, order_by: Literal["completed_at", "created_at"] = "completed_at") -> list[JobRecord]:
    """Return completed jobs for one operation, newest first."""

  async def delete_jobs(self, job_ids: Collection[str], *, user_id: str) -> int:
    """Delete several jobs owned by `user_id`; returns the number of rows removed."""
