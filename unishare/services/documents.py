"""Document processing and document study-tool submissions."""

import base64
import logging

from fastapi import BackgroundTasks, HTTPException, status

from unishare.api.models import DocumentQuizRequest, DocumentSummaryRequest, JobSubmittedResponse, ProcessDocumentRequest, ProcessedDocumentResponse
from unishare.core.security import Identity
from unishare.jobs.models import DOCUMENT_PROCESSING, DOCUMENT_STUDY_TOOLS
from unishare.services.jobs import create_pending_job, schedule_dispatch, submit_job
from unishare.services.storage_client import DocumentStorageClient
from unishare.services.tasks.interface import FunctionDispatcher
from unishare.storage.inputs_repo import DocumentRecord, StudyInputsRepository
from unishare.storage.jobs_repo import JobsRepository

logger = logging.getLogger(__name__)

_STORAGE_ERROR_MSG = "Failed to retrieve file from storage"


def _bad_request(detail: str) -> HTTPException:
  return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def process_document(
  request: ProcessDocumentRequest,
  *,
  identity: Identity,
  inputs: StudyInputsRepository,
  storage: DocumentStorageClient,
  repo: JobsRepository,
  dispatcher: FunctionDispatcher,
  background_tasks: BackgroundTasks,
) -> JobSubmittedResponse | ProcessedDocumentResponse:
  """Start text extraction for an uploaded document, or return content that is already available."""
  document_id = (request.document_id or "").strip()
  if not document_id:
    raise _bad_request("Document ID is required")

  document = await inputs.get_document(document_id, user_id=identity.user_id)
  if document is None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

  if document.status == "ready":
    return ProcessedDocumentResponse(content=document.content, page_count=document.page_count, text_chunks=list(document.text_chunks or []))

  # Pasted text needs no extraction.
  if document.source == "text":
    chunks = [{"content": document.content, "page": 1}] if document.content else []
    return ProcessedDocumentResponse(content=document.content, page_count=1, text_chunks=chunks)

  if document.source == "youtube":
    return await _submit_youtube(document, identity=identity, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)

  if not document.storage_path:
    raise _bad_request("Document storage path not found")

  record = await create_pending_job(
    DOCUMENT_PROCESSING,
    identity=identity,
    operation_type="process",
    input_ids=[document.id],
    parameters={"filename": document.name, "fileType": document.type, "fileSize": document.size, "storagePath": document.storage_path},
    repo=repo,
  )

  try:
    file_bytes = await storage.download(document.storage_path)
  except Exception as exc:
    logger.error("Failed to download %s for job %s: %s", document.storage_path, record.job_id, exc, exc_info=True)
    await _mark_retrieval_failed(record.job_id, repo=repo)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=_STORAGE_ERROR_MSG) from exc

  schedule_dispatch(
    DOCUMENT_PROCESSING,
    record,
    identity=identity,
    dispatch_body={
      "documentId": document.id,
      "filename": document.name,
      "fileType": document.type,
      "fileSize": document.size,
      "base64Content": base64.b64encode(file_bytes).decode("ascii"),
    },
    repo=repo,
    dispatcher=dispatcher,
    background_tasks=background_tasks,
  )
  return JobSubmittedResponse(job_id=record.job_id, status="pending", message="Document processing started. Please check status using the job ID.")


async def _mark_retrieval_failed(job_id: str, *, repo: JobsRepository) -> None:
  # The job never reaches a function, so close it instead of leaving it pending.
  try:
    await repo.update_status(job_id, status="failed", expected_statuses=("pending",), error_message=_STORAGE_ERROR_MSG)
  except Exception:  # noqa: BLE001
    logger.exception("Failed to mark job %s as failed after a storage error", job_id)


async def _submit_youtube(document: DocumentRecord, *, identity: Identity, repo: JobsRepository, dispatcher: FunctionDispatcher, background_tasks: BackgroundTasks) -> JobSubmittedResponse:
  return await submit_job(
    DOCUMENT_PROCESSING,
    identity=identity,
    operation_type="process",
    input_ids=[document.id],
    parameters={"filename": document.name, "fileType": document.type, "source": "youtube", "originalUrl": document.original_url},
    dispatch_body={
      "documentId": document.id,
      "filename": document.name,
      "fileType": document.type,
      "source": "youtube",
      "originalUrl": document.original_url,
    },
    message="YouTube video processing started. Please check status using the job ID.",
    repo=repo,
    dispatcher=dispatcher,
    background_tasks=background_tasks,
    failure_prefix="Failed to start YouTube processing",
  )


async def _require_ready_documents(document_ids: list[str] | None, *, identity: Identity, inputs: StudyInputsRepository) -> list[str]:
  """Validate that the referenced documents exist, belong to the caller and are ready."""
  if not document_ids:
    raise _bad_request("Missing document IDs")

  try:
    documents = await inputs.list_documents(document_ids, user_id=identity.user_id, status="ready")
  except Exception as exc:  # noqa: BLE001
    logger.error("Document lookup failed for user %s: %s", identity.user_id, exc, exc_info=True)
    documents = []

  if not documents:
    raise _bad_request("No valid documents found")

  return list(document_ids)


async def generate_quiz(
  request: DocumentQuizRequest,
  *,
  identity: Identity,
  inputs: StudyInputsRepository,
  repo: JobsRepository,
  dispatcher: FunctionDispatcher,
  background_tasks: BackgroundTasks,
) -> JobSubmittedResponse:
  """Queue quiz generation over one or more ready documents."""
  document_ids = await _require_ready_documents(request.document_ids, identity=identity, inputs=inputs)
  parameters = request.model_dump(by_alias=True, exclude={"document_ids"})
  return await submit_job(
    DOCUMENT_STUDY_TOOLS,
    identity=identity,
    operation_type="quiz",
    input_ids=document_ids,
    parameters=parameters,
    dispatch_body={
      "operation": "quiz",
      "documentIds": document_ids,
      "questionCount": request.question_count,
      "questionTypes": request.question_types,
      "quizDifficulty": request.difficulty,
    },
    message="Quiz generation started. Please check status using the job ID.",
    repo=repo,
    dispatcher=dispatcher,
    background_tasks=background_tasks,
  )


async def generate_summary(
  request: DocumentSummaryRequest,
  *,
  identity: Identity,
  inputs: StudyInputsRepository,
  repo: JobsRepository,
  dispatcher: FunctionDispatcher,
  background_tasks: BackgroundTasks,
) -> JobSubmittedResponse:
  """Queue summary generation over one or more ready documents."""
  document_ids = await _require_ready_documents(request.document_ids, identity=identity, inputs=inputs)
  parameters = request.model_dump(by_alias=True, exclude={"document_ids"})
  return await submit_job(
    DOCUMENT_STUDY_TOOLS,
    identity=identity,
    operation_type="summary",
    input_ids=document_ids,
    parameters=parameters,
    dispatch_body={"operation": "summary", "documentIds": document_ids, **parameters},
    message="Summary generation started. Please check status using the job ID.",
    repo=repo,
    dispatcher=dispatcher,
    background_tasks=background_tasks,
  )
