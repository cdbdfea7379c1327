"""Postgres-backed repository for study-tool jobs using SQLAlchemy."""

from __future__ import annotations

from collections.abc import Collection
from typing import Any, Literal

from sqlalchemy import delete, select, update

from unishare.core.database import get_session_factory
from unishare.jobs.models import JobKind, JobRecord, JobStatus
from unishare.schema.jobs import StudyJob
from unishare.storage.jobs_repo import JobsRepository
from unishare.utils.ids import utc_now_iso


class PostgresJobsRepository(JobsRepository):
  """Persist jobs to Postgres using SQLAlchemy."""

  def __init__(self) -> None:
    self._session_factory = get_session_factory()
    if self._session_factory is None:
      raise RuntimeError("Database not initialized")

  async def create_job(self, record: JobRecord) -> None:
    async with self._session_factory() as session:
      session.add(
        StudyJob(
          id=record.job_id,
          user_id=record.user_id,
          kind=record.kind,
          operation_type=record.operation_type,
          status=record.status,
          input_ids=list(record.input_ids),
          parameters=dict(record.parameters),
          result=record.result,
          error_message=record.error_message,
          created_at=record.created_at,
          updated_at=record.updated_at,
          completed_at=record.completed_at,
        )
      )
      await session.commit()

  async def get_job(self, job_id: str, *, user_id: str, kind: JobKind | None = None) -> JobRecord | None:
    async with self._session_factory() as session:
      stmt = select(StudyJob).where(StudyJob.id == job_id, StudyJob.user_id == user_id)
      if kind is not None:
        stmt = stmt.where(StudyJob.kind == kind)
      row = (await session.execute(stmt)).scalar_one_or_none()
      if row is None:
        return None
      return self._model_to_record(row)

  async def find_job(self, job_id: str) -> JobRecord | None:
    async with self._session_factory() as session:
      row = await session.get(StudyJob, job_id)
      if row is None:
        return None
      return self._model_to_record(row)

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
    values: dict[str, Any] = {"status": status, "updated_at": utc_now_iso()}
    if result is not None:
      values["result"] = result
    if error_message is not None:
      values["error_message"] = error_message
    if completed_at is not None:
      values["completed_at"] = completed_at
    async with self._session_factory() as session:
      # Single conditional UPDATE so a concurrent transition cannot be overwritten backwards.
      stmt = update(StudyJob).where(StudyJob.id == job_id, StudyJob.status.in_(tuple(expected_statuses))).values(**values).returning(StudyJob)
      row = (await session.execute(stmt)).scalar_one_or_none()
      await session.commit()
      if row is None:
        return None
      return self._model_to_record(row)

  async def delete_job(self, job_id: str, *, user_id: str, kind: JobKind | None = None) -> int:
    async with self._session_factory() as session:
      stmt = delete(StudyJob).where(StudyJob.id == job_id, StudyJob.user_id == user_id)
      if kind is not None:
        stmt = stmt.where(StudyJob.kind == kind)
      result = await session.execute(stmt)
      await session.commit()
      return int(result.rowcount or 0)

  async def list_completed(self, *, user_id: str, kind: JobKind, operation_type: str, order_by: Literal["completed_at", "created_at"] = "completed_at") -> list[JobRecord]:
    sort_column = StudyJob.completed_at if order_by == "completed_at" else StudyJob.created_at
    async with self._session_factory() as session:
      stmt = (
        select(StudyJob)
        .where(StudyJob.user_id == user_id, StudyJob.kind == kind, StudyJob.operation_type == operation_type, StudyJob.status == "completed")
        .order_by(sort_column.desc().nulls_last())
      )
      rows = (await session.execute(stmt)).scalars().all()
      return [self._model_to_record(row) for row in rows]

  async def delete_jobs(self, job_ids: Collection[str], *, user_id: str) -> int:
    ids = list(job_ids)
    if not ids:
      return 0
    async with self._session_factory() as session:
      result = await session.execute(delete(StudyJob).where(StudyJob.id.in_(ids), StudyJob.user_id == user_id))
      await session.commit()
      return int(result.rowcount or 0)

  def _model_to_record(self, row: StudyJob) -> JobRecord:
    return JobRecord(
      job_id=row.id,
      user_id=row.user_id,
      kind=row.kind,
      operation_type=row.operation_type,
      status=row.status,
      created_at=row.created_at,
      updated_at=row.updated_at,
      input_ids=list(row.input_ids or []),
      parameters=dict(row.parameters or {}),
      result=row.result,
      error_message=row.error_message,
      completed_at=row.completed_at,
    )
