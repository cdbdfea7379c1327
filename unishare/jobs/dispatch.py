"""Detached hand-off of a freshly created job to its processing function."""

from __future__ import annotations

import logging

from unishare.services.tasks.interface import FunctionDispatcher, FunctionRequest
from unishare.storage.jobs_repo import JobsRepository

logger = logging.getLogger(__name__)


async def run_dispatch(dispatcher: FunctionDispatcher, repo: JobsRepository, request: FunctionRequest, *, job_id: str, failure_prefix: str) -> None:
  """Dispatch one job and record a delivery failure on its row.

  Runs after the submitting response has been sent, so it never raises: any
  dispatcher error is written to the job as `failed`, but only while the job is
  still `pending`. A function that already moved the job on keeps its state.
  """
  try:
    await dispatcher.dispatch(request)
    return
  except Exception as exc:  # noqa: BLE001
    failure_text = str(exc) or type(exc).__name__
    logger.error("Dispatch failed for job %s: %s", job_id, failure_text)
    error_message = f"{failure_prefix}: {failure_text}"

  try:
    updated = await repo.update_status(job_id, status="failed", expected_statuses=("pending",), error_message=error_message)
  except Exception:  # noqa: BLE001
    logger.exception("Failed to record dispatch failure for job %s", job_id)
    return

  if updated is None:
    logger.warning("Job %s left pending state before the dispatch failure was recorded", job_id)
  else:
    logger.info("Updated job %s status to failed", job_id)
