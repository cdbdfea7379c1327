from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status

from unishare.api.deps import get_jobs_repo
from unishare.api.models import JobStatusCallbackRequest, JobStatusCallbackResponse
from unishare.config import Settings, get_settings
from unishare.services import jobs as job_service
from unishare.storage.jobs_repo import JobsRepository

router = APIRouter()
logger = logging.getLogger(__name__)


def require_task_secret(
  settings: Annotated[Settings, Depends(get_settings)], authorization: str | None = Header(default=None), x_unishare_task_secret: str | None = Header(default=None)
) -> None:
  """Authenticate processing functions with the shared task secret."""
  if not settings.task_secret:
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Task authentication is not configured.")
  expected_auth = f"Bearer {settings.task_secret}"
  shared_secret_valid = secrets.compare_digest((x_unishare_task_secret or ""), settings.task_secret)
  bearer_valid = secrets.compare_digest((authorization or ""), expected_auth)
  if not shared_secret_valid and not bearer_valid:
    logger.warning("Unauthorized access attempt to the job status callback")
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid task secret.")


@router.post("/jobs/{job_id}/status", response_model=JobStatusCallbackResponse, dependencies=[Depends(require_task_secret)])
async def report_job_status(job_id: str, payload: JobStatusCallbackRequest, repo: Annotated[JobsRepository, Depends(get_jobs_repo)]) -> JobStatusCallbackResponse:
  """Record progress reported by a processing function."""
  logger.info("Received status %s for job %s", payload.status, job_id)
  record = await job_service.apply_status_callback(job_id, payload, repo=repo)
  return JobStatusCallbackResponse(job_id=record.job_id, status=record.status, updated_at=record.updated_at)
