from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from unishare.jobs.models import JobStatus

DEFAULT_QUESTION_TYPES = ["multiple-choice", "true-false", "short-answer"]


def _to_camel(string: str) -> str:
  """Convert snake_case to camelCase so the API accepts frontend-style payloads."""
  parts = string.split("_")
  if not parts:
    return string
  return parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


class CamelModel(BaseModel):
  model_config = ConfigDict(populate_by_name=True, extra="ignore", alias_generator=_to_camel)


# Required inputs are optional here so missing values produce the feature's own 400 message.


class ProcessDocumentRequest(CamelModel):
  document_id: StrictStr | None = None


class DocumentQuizRequest(CamelModel):
  document_ids: list[StrictStr] | None = None
  question_count: int = 10
  question_types: list[StrictStr] = Field(default_factory=lambda: list(DEFAULT_QUESTION_TYPES))
  difficulty: StrictStr = "medium"


class DocumentSummaryRequest(CamelModel):
  document_ids: list[StrictStr] | None = None
  summary_type: StrictStr = "comprehensive"


class EssayAnalyzeRequest(CamelModel):
  content: str | None = None
  title: str | None = None
  prompt: str | None = None
  rubric: Any | None = None
  custom_rubric: Any | None = None
  essay_type: str | None = None
  target_word_count: int | None = None
  academic_level: str | None = None


class EssayOutlineRequest(CamelModel):
  prompt: str | None = None
  essay_type: str | None = None
  word_count: int | None = None
  academic_level: str | None = None
  citation_style: str | None = None
  requirements: list[Any] | None = None


class EssayContentRequest(EssayOutlineRequest):
  outline: str | None = None


class LectureQuizRequest(CamelModel):
  recording_ids: list[StrictStr] | None = None
  question_count: int = 10
  question_types: list[StrictStr] = Field(default_factory=lambda: list(DEFAULT_QUESTION_TYPES))
  difficulty: StrictStr = "medium"


class LectureFlashcardsRequest(CamelModel):
  recording_ids: list[StrictStr] | None = None
  difficulty: StrictStr = "medium"
  count: int = 10


class JobSubmittedResponse(CamelModel):
  """Immediate answer to a job submission; the caller polls with `job_id`."""

  success: bool = True
  job_id: StrictStr
  status: JobStatus = "pending"
  message: StrictStr


class ProcessedDocumentResponse(CamelModel):
  """Returned instead of a job when a document needs no processing."""

  success: bool = True
  content: str | None = None
  page_count: int | None = None
  text_chunks: list[Any] = Field(default_factory=list)


class JobDeletedResponse(CamelModel):
  success: bool = True
  message: StrictStr = "Job deleted successfully"


class CachedResultsDeletedResponse(CamelModel):
  success: bool = True
  deleted: int = 0


class TemporaryAccessInfo(CamelModel):
  expires_at: str
  points_spent: int
  access_duration_hours: int


class SubscriptionStatusResponse(CamelModel):
  has_scholar_plus: bool
  subscription_type: Literal["regular", "temporary", "none"]
  temporary_access: TemporaryAccessInfo | None = None
  remaining_hours: int | None = None


class JobStatusCallbackRequest(CamelModel):
  """Progress report sent by a processing function."""

  status: JobStatus
  result: Any | None = None
  error: StrictStr | None = None
  model_config = ConfigDict(populate_by_name=True, extra="forbid", alias_generator=_to_camel)


class JobStatusCallbackResponse(CamelModel):
  job_id: StrictStr
  status: JobStatus
  updated_at: StrictStr
