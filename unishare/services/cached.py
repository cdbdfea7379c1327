"""Reuse of completed study-tool results for identical requests."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from fastapi import HTTPException, status

from unishare.api.models import DEFAULT_QUESTION_TYPES
from unishare.core.security import Identity
from unishare.jobs.models import DOCUMENT_STUDY_TOOLS, LECTURE_STUDY_TOOLS, JobRecord
from unishare.storage.jobs_repo import JobsRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedLookup:
  """Parsed cache query: which operation over which inputs, with which options."""

  operation_type: str
  input_ids: list[str]
  question_count: int = 10
  difficulty: str = "medium"
  question_types: list[str] = field(default_factory=lambda: list(DEFAULT_QUESTION_TYPES))
  count: int = 10
  style: str | None = None
  summary_type: str = "comprehensive"


def parse_id_list(raw: str | None, *, field_name: str) -> list[str]:
  """Decode a JSON array of ids passed as a query string value."""
  try:
    parsed = json.loads(raw or "")
  except ValueError as exc:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {field_name} format") from exc
  if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {field_name} format")
  return parsed


def parse_question_types(raw: str | None) -> list[str]:
  """Decode requested question types, keeping the defaults when absent or malformed."""
  if not raw:
    return list(DEFAULT_QUESTION_TYPES)
  try:
    parsed = json.loads(raw)
  except ValueError:
    return list(DEFAULT_QUESTION_TYPES)
  if not isinstance(parsed, list):
    return list(DEFAULT_QUESTION_TYPES)
  return [str(item) for item in parsed]


def require_lookup_params(operation_type: str | None, raw_ids: str | None) -> None:
  if not operation_type or not raw_ids:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required parameters")


def _parameters_match(parameters: Mapping[str, Any], lookup: CachedLookup) -> bool:
  """Compare stored operation options with the requested ones."""
  if lookup.operation_type == "quiz":
    stored_types = parameters.get("questionTypes") or []
    return parameters.get("questionCount") == lookup.question_count and parameters.get("difficulty") == lookup.difficulty and set(lookup.question_types) <= set(stored_types)
  if lookup.operation_type == "flashcards":
    return parameters.get("difficulty") == lookup.difficulty and parameters.get("count") == lookup.count
  if lookup.operation_type == "notes":
    return parameters.get("style") == (lookup.style or "structured")
  if lookup.operation_type == "summary":
    stored_type = parameters.get("summaryType")
    return stored_type is None or stored_type == lookup.summary_type
  return True


def match_document_job(jobs: list[JobRecord], lookup: CachedLookup) -> JobRecord | None:
  """Pick the first job over exactly the requested documents, in any order."""
  wanted = sorted(lookup.input_ids)
  for job in jobs:
    if not job.result or not _parameters_match(job.parameters, lookup):
      continue
    if sorted(job.input_ids) == wanted:
      return job
  return None


def match_lecture_jobs(jobs: list[JobRecord], lookup: CachedLookup) -> list[JobRecord]:
  """Return the jobs whose recordings include every requested recording."""
  wanted = set(lookup.input_ids)
  matches: list[JobRecord] = []
  for job in jobs:
    if not wanted <= set(job.input_ids):
      continue
    # Lecture results are reused regardless of options, except for the notes style.
    if lookup.operation_type == "notes" and lookup.style and job.parameters.get("style") != lookup.style:
      continue
    matches.append(job)
  return matches


async def find_cached_document_result(lookup: CachedLookup, *, identity: Identity, repo: JobsRepository) -> dict[str, Any]:
  try:
    jobs = await repo.list_completed(user_id=identity.user_id, kind=DOCUMENT_STUDY_TOOLS.kind, operation_type=lookup.operation_type, order_by="completed_at")
  except Exception as exc:
    logger.error("Error querying cached jobs for user %s: %s", identity.user_id, exc, exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to search cached results") from exc

  job = match_document_job(jobs, lookup)
  if job is None:
    return {"cached": False}

  logger.info("Found cached result for %s operation: %s", lookup.operation_type, job.job_id)
  return {"cached": True, "result": job.result, "jobId": job.job_id, "completedAt": job.completed_at}


async def find_cached_lecture_result(lookup: CachedLookup, *, identity: Identity, repo: JobsRepository) -> Any | None:
  try:
    jobs = await repo.list_completed(user_id=identity.user_id, kind=LECTURE_STUDY_TOOLS.kind, operation_type=lookup.operation_type, order_by="created_at")
  except Exception as exc:
    logger.error("Error fetching cached lecture result for user %s: %s", identity.user_id, exc, exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching cached result") from exc

  matches = match_lecture_jobs(jobs, lookup)
  if not matches:
    logger.info("No cached %s result found", lookup.operation_type)
    return None

  job = matches[0]
  result = job.result
  # Older quiz results lack the difficulty they were generated with.
  if lookup.operation_type == "quiz" and isinstance(result, dict) and not result.get("difficulty") and job.parameters.get("difficulty"):
    result = {**result, "difficulty": job.parameters["difficulty"]}

  logger.info("Found cached %s result: %s", lookup.operation_type, job.job_id)
  return result


async def delete_cached_lecture_results(lookup: CachedLookup, *, identity: Identity, repo: JobsRepository) -> int:
  try:
    jobs = await repo.list_completed(user_id=identity.user_id, kind=LECTURE_STUDY_TOOLS.kind, operation_type=lookup.operation_type, order_by="created_at")
    matches = match_lecture_jobs(jobs, lookup)
    deleted = await repo.delete_jobs([job.job_id for job in matches], user_id=identity.user_id)
  except Exception as exc:
    logger.error("Error deleting cached lecture results for user %s: %s", identity.user_id, exc, exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting cached results") from exc

  logger.info("Deleted %s cached %s results", deleted, lookup.operation_type)
  return deleted
