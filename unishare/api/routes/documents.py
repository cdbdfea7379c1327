from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends

from unishare.api.deps import get_dispatcher, get_document_storage, get_inputs_repo, get_jobs_repo, require_scholar_plus
from unishare.api.models import DocumentQuizRequest, DocumentSummaryRequest, JobDeletedResponse, JobSubmittedResponse, ProcessDocumentRequest, ProcessedDocumentResponse
from unishare.core.security import Identity, get_current_identity
from unishare.jobs.models import DOCUMENT_PROCESSING, DOCUMENT_STUDY_TOOLS
from unishare.services import cached as cached_service
from unishare.services import documents as document_service
from unishare.services import jobs as job_service
from unishare.services.storage_client import DocumentStorageClient
from unishare.services.tasks.interface import FunctionDispatcher
from unishare.storage.inputs_repo import StudyInputsRepository
from unishare.storage.jobs_repo import JobsRepository

router = APIRouter()


@router.post("/process", response_model=None)
async def process_document(  # noqa: B008
  request: ProcessDocumentRequest,
  background_tasks: BackgroundTasks,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  inputs: StudyInputsRepository = Depends(get_inputs_repo),  # noqa: B008
  storage: DocumentStorageClient = Depends(get_document_storage),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
  dispatcher: FunctionDispatcher = Depends(get_dispatcher),  # noqa: B008
) -> JobSubmittedResponse | ProcessedDocumentResponse:
  """Start text extraction for a document, or return its content when already available."""
  return await document_service.process_document(request, identity=identity, inputs=inputs, storage=storage, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)


@router.get("/process/status/{job_id}")
async def get_processing_status(  # noqa: B008
  job_id: str,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> dict[str, Any]:
  return await job_service.get_job_status(DOCUMENT_PROCESSING, job_id, identity=identity, repo=repo)


@router.delete("/process/status/{job_id}", response_model=JobDeletedResponse)
async def delete_processing_job(  # noqa: B008
  job_id: str,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> JobDeletedResponse:
  return await job_service.delete_job(DOCUMENT_PROCESSING, job_id, identity=identity, repo=repo)


@router.post("/generate-quiz", response_model=JobSubmittedResponse)
async def generate_quiz(  # noqa: B008
  request: DocumentQuizRequest,
  background_tasks: BackgroundTasks,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  inputs: StudyInputsRepository = Depends(get_inputs_repo),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
  dispatcher: FunctionDispatcher = Depends(get_dispatcher),  # noqa: B008
) -> JobSubmittedResponse:
  """Queue quiz generation over ready documents."""
  return await document_service.generate_quiz(request, identity=identity, inputs=inputs, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)


@router.post("/generate-summary", response_model=JobSubmittedResponse)
async def generate_summary(  # noqa: B008
  request: DocumentSummaryRequest,
  background_tasks: BackgroundTasks,
  identity: Identity = Depends(require_scholar_plus),  # noqa: B008
  inputs: StudyInputsRepository = Depends(get_inputs_repo),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
  dispatcher: FunctionDispatcher = Depends(get_dispatcher),  # noqa: B008
) -> JobSubmittedResponse:
  """Queue summary generation over ready documents (Scholar+)."""
  return await document_service.generate_summary(request, identity=identity, inputs=inputs, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)


@router.get("/study-tools/status/{job_id}")
async def get_study_tool_status(  # noqa: B008
  job_id: str,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> dict[str, Any]:
  return await job_service.get_job_status(DOCUMENT_STUDY_TOOLS, job_id, identity=identity, repo=repo)


@router.delete("/study-tools/status/{job_id}", response_model=JobDeletedResponse)
async def delete_study_tool_job(  # noqa: B008
  job_id: str,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> JobDeletedResponse:
  return await job_service.delete_job(DOCUMENT_STUDY_TOOLS, job_id, identity=identity, repo=repo)


@router.get("/study-tools/cached")
async def get_cached_study_tool(  # noqa: B008
  operation_type: str | None = None,
  document_ids: str | None = None,
  question_count: int = 10,
  difficulty: str = "medium",
  question_types: str | None = None,
  count: int = 10,
  style: str | None = None,
  summary_type: str = "comprehensive",
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> dict[str, Any]:
  """Return the newest completed result for the same documents and options, if any."""
  cached_service.require_lookup_params(operation_type, document_ids)
  lookup = cached_service.CachedLookup(
    operation_type=operation_type,
    input_ids=cached_service.parse_id_list(document_ids, field_name="document_ids"),
    question_count=question_count,
    difficulty=difficulty,
    question_types=cached_service.parse_question_types(question_types),
    count=count,
    style=style,
    summary_type=summary_type,
  )
  return await cached_service.find_cached_document_result(lookup, identity=identity, repo=repo)
