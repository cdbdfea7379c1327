"""Storage interfaces for the documents and recordings jobs operate on."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class DocumentRecord:
  id: str
  user_id: str
  name: str
  status: str
  source: str
  type: str | None = None
  size: int | None = None
  storage_path: str | None = None
  original_url: str | None = None
  content: str | None = None
  page_count: int | None = None
  text_chunks: list[Any] | None = None


@dataclass(frozen=True)
class RecordingRecord:
  id: str
  user_id: str
  title: str
  transcript: str | None = None

  @property
  def has_transcript(self) -> bool:
    return bool(self.transcript and self.transcript.strip())


class StudyInputsRepository(Protocol):
  """Read-only, owner-scoped lookups over job inputs."""

  async def get_document(self, document_id: str, *, user_id: str) -> DocumentRecord | None:
    """Fetch one document owned by `user_id`."""

  async def list_documents(self, document_ids: Collection[str], *, user_id: str, status: str | None = None) -> list[DocumentRecord]:
    """Return the subset of `document_ids` owned by `user_id`, optionally in one status."""

  async def list_recordings(self, recording_ids: Collection[str], *, user_id: str) -> list[RecordingRecord]:
    """Return the subset of `recording_ids` owned by `user_id`."""
