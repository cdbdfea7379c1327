from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from unishare.config import get_settings

OTHER_USER_ID = "user-2"


@pytest.mark.anyio
async def test_pending_job_status_omits_result_and_error(async_client, jobs_repo) -> None:
  record = jobs_repo.seed(job_id="job-a", input_ids=["doc-1"])

  response = await async_client.get(f"/api/documents/study-tools/status/{record.job_id}")

  assert response.status_code == 200
  assert response.json() == {
    "jobId": "job-a",
    "status": "pending",
    "operationType": "quiz",
    "createdAt": "2026-01-01T00:00:00Z",
    "updatedAt": "2026-01-01T00:00:00Z",
    "inputIds": ["doc-1"],
  }


@pytest.mark.anyio
async def test_completed_job_returns_result_unchanged(async_client, jobs_repo) -> None:
  result = {"questions": [{"question": "2 + 2?", "answer": "4", "hint": None}], "meta": {"difficulty": "easy"}}
  jobs_repo.seed(job_id="job-done", kind="essay", operation_type="analyze", status="completed", result=result, completed_at="2026-01-01T00:05:00Z")

  response = await async_client.get("/api/essay/status/job-done")

  assert response.status_code == 200
  body = response.json()
  assert body["result"] == result
  assert body["completedAt"] == "2026-01-01T00:05:00Z"
  assert "error" not in body


@pytest.mark.anyio
async def test_failed_job_reports_error(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-failed", kind="lecture_study_tools", status="failed", error_message="Failed to start processing: boom")

  response = await async_client.get("/api/lectures/study-tools/status/job-failed")

  body = response.json()
  assert body["status"] == "failed"
  assert body["error"] == "Failed to start processing: boom"
  assert "result" not in body
  assert "completedAt" not in body


@pytest.mark.anyio
async def test_status_of_foreign_job_is_not_found(async_client, jobs_repo) -> None:
  """Another user's job is indistinguishable from a missing one."""
  jobs_repo.seed(job_id="job-foreign", user_id=OTHER_USER_ID)

  foreign = await async_client.get("/api/documents/study-tools/status/job-foreign")
  missing = await async_client.get("/api/documents/study-tools/status/job-missing")

  assert foreign.status_code == 404
  assert missing.status_code == 404
  assert foreign.json()["error"] == "Job not found"
  assert missing.json()["error"] == foreign.json()["error"]


@pytest.mark.anyio
async def test_status_is_scoped_to_the_feature(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-essay", kind="essay", operation_type="outline")

  response = await async_client.get("/api/documents/study-tools/status/job-essay")

  assert response.status_code == 404


@pytest.mark.anyio
async def test_delete_job_then_repeat_is_not_found(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-del", kind="document_processing", operation_type="process")

  first = await async_client.delete("/api/documents/process/status/job-del")
  second = await async_client.delete("/api/documents/process/status/job-del")

  assert first.status_code == 200
  assert first.json() == {"success": True, "message": "Job deleted successfully"}
  assert second.status_code == 404
  assert second.json()["error"] == "Job not found"
  assert jobs_repo.jobs == {}


@pytest.mark.anyio
async def test_delete_foreign_job_leaves_it_in_place(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-foreign", kind="essay", user_id=OTHER_USER_ID)

  response = await async_client.delete("/api/essay/status/job-foreign")

  assert response.status_code == 404
  assert "job-foreign" in jobs_repo.jobs


@pytest.mark.anyio
async def test_delete_storage_error_returns_500(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-x", kind="essay")
  jobs_repo.fail_deletes = True

  response = await async_client.delete("/api/essay/status/job-x")

  assert response.status_code == 500
  assert response.json()["error"] == "Failed to delete job"


@pytest.mark.anyio
async def test_dispatch_network_error_marks_job_failed(async_client, jobs_repo, dispatcher) -> None:
  """The submission still answers pending; the failure shows up on the next poll."""
  dispatcher.error = ConnectionError("connection refused")

  response = await async_client.post("/api/essay/analyze", json={"content": "An essay."})

  assert response.status_code == 200
  assert response.json()["status"] == "pending"
  job_id = response.json()["jobId"]
  record = jobs_repo.jobs[job_id]
  assert record.status == "failed"
  assert record.error_message == "Failed to start analysis: connection refused"

  polled = await async_client.get(f"/api/essay/status/{job_id}")
  assert polled.json()["error"] == "Failed to start analysis: connection refused"


@pytest.mark.anyio
async def test_status_callback_drives_job_to_completion(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-cb")
  headers = {"x-unishare-task-secret": "test-task-secret"}

  with patch.dict(os.environ, {"UNISHARE_TASK_SECRET": "test-task-secret"}):
    get_settings.cache_clear()
    try:
      processing = await async_client.post("/internal/jobs/job-cb/status", json={"status": "processing"}, headers=headers)
      completed = await async_client.post("/internal/jobs/job-cb/status", json={"status": "completed", "result": {"summary": "done"}}, headers=headers)
      regress = await async_client.post("/internal/jobs/job-cb/status", json={"status": "processing"}, headers=headers)
    finally:
      get_settings.cache_clear()

  assert processing.status_code == 200
  assert processing.json()["status"] == "processing"
  assert completed.status_code == 200
  assert regress.status_code == 409

  record = jobs_repo.jobs["job-cb"]
  assert record.status == "completed"
  assert record.result == {"summary": "done"}
  assert record.completed_at is not None

  polled = await async_client.get("/api/documents/study-tools/status/job-cb")
  assert polled.json()["result"] == {"summary": "done"}


@pytest.mark.anyio
async def test_status_callback_validation(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-v")

  with patch.dict(os.environ, {"UNISHARE_TASK_SECRET": "test-task-secret"}):
    get_settings.cache_clear()
    try:
      wrong_secret = await async_client.post("/internal/jobs/job-v/status", json={"status": "processing"}, headers={"authorization": "Bearer nope"})
      skip_processing = await async_client.post("/internal/jobs/job-v/status", json={"status": "completed", "result": {}}, headers={"authorization": "Bearer test-task-secret"})
      failed_without_error = await async_client.post("/internal/jobs/job-v/status", json={"status": "failed"}, headers={"authorization": "Bearer test-task-secret"})
      unknown = await async_client.post("/internal/jobs/job-missing/status", json={"status": "processing"}, headers={"authorization": "Bearer test-task-secret"})
    finally:
      get_settings.cache_clear()

  assert wrong_secret.status_code == 403
  assert skip_processing.status_code == 409
  assert failed_without_error.status_code == 400
  assert unknown.status_code == 404
  assert jobs_repo.jobs["job-v"].status == "pending"


@pytest.mark.anyio
async def test_status_callback_disabled_without_secret(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-n")

  with patch.dict(os.environ, {"UNISHARE_TASK_SECRET": ""}):
    get_settings.cache_clear()
    try:
      response = await async_client.post("/internal/jobs/job-n/status", json={"status": "processing"}, headers={"authorization": "Bearer "})
    finally:
      get_settings.cache_clear()

  assert response.status_code == 403
