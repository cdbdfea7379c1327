from __future__ import annotations

import pytest

from unishare.jobs.dispatch import run_dispatch
from unishare.services.tasks.interface import FunctionRequest


def _request(job_id: str) -> FunctionRequest:
  return FunctionRequest(function_name="essay-generator", access_token="token", body={"operation": "analyze", "jobId": job_id, "userId": "user-1"})


@pytest.mark.anyio
async def test_successful_dispatch_leaves_job_pending(jobs_repo, dispatcher) -> None:
  record = jobs_repo.seed(kind="essay")

  await run_dispatch(dispatcher, jobs_repo, _request(record.job_id), job_id=record.job_id, failure_prefix="Failed to start analysis")

  assert jobs_repo.jobs[record.job_id].status == "pending"
  assert len(dispatcher.requests) == 1


@pytest.mark.anyio
async def test_dispatch_failure_marks_pending_job_failed(jobs_repo, dispatcher) -> None:
  record = jobs_repo.seed()
  dispatcher.error = RuntimeError("Processing function failed: 500 - boom")

  await run_dispatch(dispatcher, jobs_repo, _request(record.job_id), job_id=record.job_id, failure_prefix="Failed to start processing")

  failed = jobs_repo.jobs[record.job_id]
  assert failed.status == "failed"
  assert failed.error_message == "Failed to start processing: Processing function failed: 500 - boom"


@pytest.mark.anyio
async def test_dispatch_failure_without_message_uses_exception_name(jobs_repo, dispatcher) -> None:
  record = jobs_repo.seed()
  dispatcher.error = TimeoutError()

  await run_dispatch(dispatcher, jobs_repo, _request(record.job_id), job_id=record.job_id, failure_prefix="Failed to start processing")

  assert jobs_repo.jobs[record.job_id].error_message == "Failed to start processing: TimeoutError"


@pytest.mark.anyio
async def test_dispatch_failure_does_not_override_progressed_job(jobs_repo, dispatcher) -> None:
  """A function that already picked the job up keeps its state."""
  record = jobs_repo.seed(status="processing")
  dispatcher.error = RuntimeError("late failure")

  await run_dispatch(dispatcher, jobs_repo, _request(record.job_id), job_id=record.job_id, failure_prefix="Failed to start processing")

  assert jobs_repo.jobs[record.job_id].status == "processing"
  assert jobs_repo.jobs[record.job_id].error_message is None


@pytest.mark.anyio
async def test_dispatch_swallows_storage_errors(jobs_repo, dispatcher) -> None:
  record = jobs_repo.seed()
  dispatcher.error = RuntimeError("boom")

  async def _broken_update(*args, **kwargs):
    raise RuntimeError("database unavailable")

  jobs_repo.update_status = _broken_update

  await run_dispatch(dispatcher, jobs_repo, _request(record.job_id), job_id=record.job_id, failure_prefix="Failed to start processing")

  assert jobs_repo.jobs[record.job_id].status == "pending"
