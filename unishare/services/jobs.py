"""Generic submission, status, deletion and progress handling for study-tool jobs."""

import logging
from typing import Any

from fastapi import BackgroundTasks, HTTPException, status

from unishare.api.models import JobDeletedResponse, JobStatusCallbackRequest, JobSubmittedResponse
from unishare.core.security import Identity
from unishare.jobs.dispatch import run_dispatch
from unishare.jobs.models import TERMINAL_STATUSES, JobFeature, JobRecord, is_allowed_transition
from unishare.services.tasks.interface import FunctionDispatcher, FunctionRequest
from unishare.storage.jobs_repo import JobsRepository
from unishare.utils.ids import generate_job_id, utc_now_iso

logger = logging.getLogger(__name__)

_JOB_NOT_FOUND_MSG = "Job not found"


def _job_not_found() -> HTTPException:
  return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_JOB_NOT_FOUND_MSG)


async def create_pending_job(
  feature: JobFeature,
  *,
  identity: Identity,
  operation_type: str,
  input_ids: list[str],
  parameters: dict[str, Any],
  repo: JobsRepository,
  create_error: str = "Failed to create processing job",
) -> JobRecord:
  """Persist a new `pending` job owned by the caller."""
  timestamp = utc_now_iso()
  record = JobRecord(
    job_id=generate_job_id(),
    user_id=identity.user_id,
    kind=feature.kind,
    operation_type=operation_type,
    status="pending",
    created_at=timestamp,
    updated_at=timestamp,
    input_ids=list(input_ids),
    parameters=dict(parameters),
  )

  try:
    await repo.create_job(record)
  except Exception as exc:
    logger.error("Failed to create %s job for user %s: %s", feature.kind, identity.user_id, exc, exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=create_error) from exc

  logger.info("Created %s job %s (operation=%s, user=%s)", feature.kind, record.job_id, operation_type, identity.user_id)
  return record


def schedule_dispatch(
  feature: JobFeature,
  record: JobRecord,
  *,
  identity: Identity,
  dispatch_body: dict[str, Any],
  repo: JobsRepository,
  dispatcher: FunctionDispatcher,
  background_tasks: BackgroundTasks,
  failure_prefix: str | None = None,
) -> None:
  """Hand a created job to its processing function once the response has been sent."""
  request = FunctionRequest(function_name=feature.function_name, access_token=identity.access_token, body={**dispatch_body, "jobId": record.job_id, "userId": identity.user_id})
  # Background tasks run after the response, so dispatch never delays or fails the submission.
  background_tasks.add_task(run_dispatch, dispatcher, repo, request, job_id=record.job_id, failure_prefix=failure_prefix or feature.failure_prefix)


async def submit_job(
  feature: JobFeature,
  *,
  identity: Identity,
  operation_type: str,
  input_ids: list[str],
  parameters: dict[str, Any],
  dispatch_body: dict[str, Any],
  message: str,
  repo: JobsRepository,
  dispatcher: FunctionDispatcher,
  background_tasks: BackgroundTasks,
  create_error: str = "Failed to create processing job",
  failure_prefix: str | None = None,
) -> JobSubmittedResponse:
  """Persist a pending job and schedule its dispatch after the response is sent.

  Callers have already authenticated, checked entitlements and validated inputs.
  `dispatch_body` holds the function-specific fields; the job and owner ids are
  added here.
  """
  record = await create_pending_job(feature, identity=identity, operation_type=operation_type, input_ids=input_ids, parameters=parameters, repo=repo, create_error=create_error)
  schedule_dispatch(feature, record, identity=identity, dispatch_body=dispatch_body, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks, failure_prefix=failure_prefix)
  return JobSubmittedResponse(job_id=record.job_id, status="pending", message=message)


def job_status_payload(record: JobRecord) -> dict[str, Any]:
  """Shape a job for polling clients; result and error only appear in their terminal state."""
  payload: dict[str, Any] = {
    "jobId": record.job_id,
    "status": record.status,
    "operationType": record.operation_type,
    "createdAt": record.created_at,
    "updatedAt": record.updated_at,
    "inputIds": list(record.input_ids),
  }

  if record.status == "completed" and record.result is not None:
    payload["result"] = record.result
    payload["completedAt"] = record.completed_at

  if record.status == "failed" and record.error_message:
    payload["error"] = record.error_message

  return payload


async def get_job_status(feature: JobFeature, job_id: str, *, identity: Identity, repo: JobsRepository) -> dict[str, Any]:
  """Fetch a job owned by the caller; foreign and missing jobs are indistinguishable."""
  record = await repo.get_job(job_id, user_id=identity.user_id, kind=feature.kind)
  if record is None:
    raise _job_not_found()
  return job_status_payload(record)


async def delete_job(feature: JobFeature, job_id: str, *, identity: Identity, repo: JobsRepository) -> JobDeletedResponse:
  """Delete a job owned by the caller."""
  try:
    existing = await repo.get_job(job_id, user_id=identity.user_id, kind=feature.kind)
    if existing is None:
      logger.info("Delete requested for missing or foreign %s job %s (user=%s)", feature.kind, job_id, identity.user_id)
      raise _job_not_found()

    deleted = await repo.delete_job(job_id, user_id=identity.user_id, kind=feature.kind)
  except HTTPException:
    raise
  except Exception as exc:
    logger.error("Failed to delete %s job %s: %s", feature.kind, job_id, exc, exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete job") from exc

  if deleted == 0:
    # Removed concurrently between the lookup and the delete.
    raise _job_not_found()

  logger.info("Deleted %s job %s (user=%s)", feature.kind, job_id, identity.user_id)
  return JobDeletedResponse()


async def apply_status_callback(job_id: str, update: JobStatusCallbackRequest, *, repo: JobsRepository) -> JobRecord:
  """Apply a processing function's progress report, enforcing the job lifecycle."""
  if update.status == "completed" and update.result is None:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Completed jobs require a result")
  if update.status == "failed" and not update.error:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed jobs require an error message")

  current = await repo.find_job(job_id)
  if current is None:
    raise _job_not_found()

  if not is_allowed_transition(current.status, update.status):
    raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Cannot transition job from {current.status} to {update.status}")

  completed_at = utc_now_iso() if update.status in TERMINAL_STATUSES else None
  updated = await repo.update_status(
    job_id,
    status=update.status,
    expected_statuses=(current.status,),
    result=update.result if update.status == "completed" else None,
    error_message=update.error if update.status == "failed" else None,
    completed_at=completed_at,
  )
  if updated is None:
    # Another writer moved the job between the read and the conditional update.
    raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Job status changed concurrently")

  logger.info("Job %s moved %s -> %s", job_id, current.status, updated.status)
  return updated
