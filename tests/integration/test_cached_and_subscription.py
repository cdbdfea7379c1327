from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest

from unishare.storage.entitlements_repo import TemporaryAccessRecord

QUIZ_PARAMETERS = {"questionCount": 10, "questionTypes": ["multiple-choice", "true-false", "short-answer"], "difficulty": "medium"}


@pytest.mark.anyio
async def test_cached_document_result_matches_input_set(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-old", status="completed", input_ids=["doc-2", "doc-1"], parameters=QUIZ_PARAMETERS, result={"v": 1}, completed_at="2026-01-01T00:00:00Z")
  jobs_repo.seed(job_id="job-new", status="completed", input_ids=["doc-1", "doc-2"], parameters=QUIZ_PARAMETERS, result={"v": 2}, completed_at="2026-01-02T00:00:00Z")
  jobs_repo.seed(job_id="job-superset", status="completed", input_ids=["doc-1", "doc-2", "doc-3"], parameters=QUIZ_PARAMETERS, result={"v": 3}, completed_at="2026-01-03T00:00:00Z")

  response = await async_client.get("/api/documents/study-tools/cached", params={"operation_type": "quiz", "document_ids": json.dumps(["doc-1", "doc-2"])})

  assert response.status_code == 200
  assert response.json() == {"cached": True, "result": {"v": 2}, "jobId": "job-new", "completedAt": "2026-01-02T00:00:00Z"}


@pytest.mark.anyio
async def test_cached_document_result_respects_quiz_options(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-a", status="completed", input_ids=["doc-1"], parameters=QUIZ_PARAMETERS, result={"v": 1}, completed_at="2026-01-01T00:00:00Z")

  response = await async_client.get("/api/documents/study-tools/cached", params={"operation_type": "quiz", "document_ids": '["doc-1"]', "question_count": 5})

  assert response.json() == {"cached": False}


@pytest.mark.anyio
async def test_cached_document_lookup_parameter_errors(async_client) -> None:
  missing = await async_client.get("/api/documents/study-tools/cached", params={"operation_type": "quiz"})
  malformed = await async_client.get("/api/documents/study-tools/cached", params={"operation_type": "quiz", "document_ids": "doc-1"})

  assert missing.status_code == 400
  assert missing.json()["error"] == "Missing required parameters"
  assert malformed.status_code == 400
  assert malformed.json()["error"] == "Invalid document_ids format"


@pytest.mark.anyio
async def test_cached_lecture_quiz_backfills_difficulty(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-l", kind="lecture_study_tools", status="completed", input_ids=["rec-1", "rec-2"], parameters={"difficulty": "hard"}, result={"questions": []}, created_at="2026-01-01T00:00:00Z")

  response = await async_client.get("/api/lectures/study-tools/cached", params={"operation_type": "quiz", "recording_ids": '["rec-1"]'})

  assert response.status_code == 200
  assert response.json() == {"questions": [], "difficulty": "hard"}


@pytest.mark.anyio
async def test_cached_lecture_result_absent_returns_null(async_client) -> None:
  response = await async_client.get("/api/lectures/study-tools/cached", params={"operation_type": "flashcards", "recording_ids": '["rec-1"]'})

  assert response.status_code == 200
  assert response.json() is None


@pytest.mark.anyio
async def test_delete_cached_lecture_results(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-1", kind="lecture_study_tools", operation_type="notes", status="completed", input_ids=["rec-1"], parameters={"style": "outline"}, result={})
  jobs_repo.seed(job_id="job-2", kind="lecture_study_tools", operation_type="notes", status="completed", input_ids=["rec-1"], parameters={"style": "structured"}, result={})

  response = await async_client.delete("/api/lectures/study-tools/cached", params={"operation_type": "notes", "recording_ids": '["rec-1"]', "style": "outline"})

  assert response.status_code == 200
  assert response.json() == {"success": True, "deleted": 1}
  assert list(jobs_repo.jobs) == ["job-2"]


@pytest.mark.anyio
async def test_subscription_status_without_access(async_client) -> None:
  response = await async_client.get("/api/user/subscription-status")

  assert response.status_code == 200
  assert response.json() == {"hasScholarPlus": False, "subscriptionType": "none"}


@pytest.mark.anyio
async def test_subscription_status_with_temporary_grant(async_client, entitlements_repo) -> None:
  expires_at = datetime.now(UTC) + timedelta(hours=5, minutes=30)
  entitlements_repo.temporary_access = TemporaryAccessRecord(user_id="user-1", expires_at=expires_at, points_spent=200, access_duration_hours=24)

  response = await async_client.get("/api/user/subscription-status")

  body = response.json()
  assert body["hasScholarPlus"] is True
  assert body["subscriptionType"] == "temporary"
  assert body["remainingHours"] == 6
  assert body["temporaryAccess"]["pointsSpent"] == 200
  assert body["temporaryAccess"]["accessDurationHours"] == 24


@pytest.mark.anyio
async def test_cached_document_summary_matches_requested_type(async_client, jobs_repo) -> None:
  jobs_repo.seed(job_id="job-brief", operation_type="summary", status="completed", input_ids=["doc-1"], parameters={"summaryType": "brief"}, result={"summary": "short"}, completed_at="2026-01-01T00:00:00Z")

  default = await async_client.get("/api/documents/study-tools/cached", params={"operation_type": "summary", "document_ids": '["doc-1"]'})
  brief = await async_client.get("/api/documents/study-tools/cached", params={"operation_type": "summary", "document_ids": '["doc-1"]', "summary_type": "brief"})

  assert default.json() == {"cached": False}
  assert brief.json()["jobId"] == "job-brief"
