"""Domain models for asynchronous AI study-tool jobs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

JobStatus = Literal["pending", "processing", "completed", "failed"]
JobKind = Literal["document_processing", "document_study_tools", "essay", "lecture_study_tools"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "failed"})

# Monotonic lifecycle; terminal states have no outgoing edges.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
  "pending": frozenset({"processing", "failed"}),
  "processing": frozenset({"completed", "failed"}),
  "completed": frozenset(),
  "failed": frozenset(),
}


def is_allowed_transition(current: str, target: str) -> bool:
  """Return True when `current -> target` is an edge of the job lifecycle."""
  return target in ALLOWED_TRANSITIONS.get(current, frozenset())


@dataclass
class JobRecord:
  """One persisted unit of AI-assisted processing work."""

  job_id: str
  user_id: str
  kind: JobKind
  operation_type: str
  status: JobStatus
  created_at: str
  updated_at: str
  input_ids: list[str] = field(default_factory=list)
  parameters: dict[str, Any] = field(default_factory=dict)
  result: Any | None = None
  error_message: str | None = None
  completed_at: str | None = None


@dataclass(frozen=True)
class JobFeature:
  """Static wiring for one job kind: which external function processes it and how failures read."""

  kind: JobKind
  function_name: str
  failure_prefix: str = "Failed to start processing"


DOCUMENT_PROCESSING = JobFeature(kind="document_processing", function_name="document-processor")
DOCUMENT_STUDY_TOOLS = JobFeature(kind="document_study_tools", function_name="document-study-tools")
ESSAY = JobFeature(kind="essay", function_name="essay-generator", failure_prefix="Failed to start analysis")
LECTURE_STUDY_TOOLS = JobFeature(kind="lecture_study_tools", function_name="lecture-study-tools")

FEATURES: dict[str, JobFeature] = {feature.kind: feature for feature in (DOCUMENT_PROCESSING, DOCUMENT_STUDY_TOOLS, ESSAY, LECTURE_STUDY_TOOLS)}
