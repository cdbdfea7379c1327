from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import select

from unishare.core.database import get_session_factory
from unishare.schema.sql import Document, LectureRecording
from unishare.storage.inputs_repo import DocumentRecord, RecordingRecord, StudyInputsRepository


class PostgresStudyInputsRepository(StudyInputsRepository):
  """Look up documents and lecture recordings in Postgres."""

  def __init__(self) -> None:
    self._session_factory = get_session_factory()
    if self._session_factory is None:
      raise RuntimeError("Database not initialized")

  async def get_document(self, document_id: str, *, user_id: str) -> DocumentRecord | None:
    async with self._session_factory() as session:
      stmt = select(Document).where(Document.id == document_id, Document.user_id == user_id)
      row = (await session.execute(stmt)).scalar_one_or_none()
      return _document_to_record(row) if row is not None else None

  async def list_documents(self, document_ids: Collection[str], *, user_id: str, status: str | None = None) -> list[DocumentRecord]:
    ids = list(document_ids)
    if not ids:
      return []
    async with self._session_factory() as session:
      stmt = select(Document).where(Document.id.in_(ids), Document.user_id == user_id)
      if status is not None:
        stmt = stmt.where(Document.status == status)
      rows = (await session.execute(stmt)).scalars().all()
      return [_document_to_record(row) for row in rows]

  async def list_recordings(self, recording_ids: Collection[str], *, user_id: str) -> list[RecordingRecord]:
    ids = list(recording_ids)
    if not ids:
      return []
    async with self._session_factory() as session:
      stmt = select(LectureRecording).where(LectureRecording.id.in_(ids), LectureRecording.user_id == user_id)
      rows = (await session.execute(stmt)).scalars().all()
      return [RecordingRecord(id=row.id, user_id=row.user_id, title=row.title, transcript=row.transcript) for row in rows]


def _document_to_record(row: Document) -> DocumentRecord:
  return DocumentRecord(
    id=row.id,
    user_id=row.user_id,
    name=row.name,
    status=row.status,
    source=row.source,
    type=row.type,
    size=row.size,
    storage_path=row.storage_path,
    original_url=row.original_url,
    content=row.content,
    page_count=row.page_count,
    text_chunks=row.text_chunks,
  )
