from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends

from unishare.api.deps import get_dispatcher, get_inputs_repo, get_jobs_repo, require_scholar_plus
from unishare.api.models import CachedResultsDeletedResponse, JobDeletedResponse, JobSubmittedResponse, LectureFlashcardsRequest, LectureQuizRequest
from unishare.core.security import Identity, get_current_identity
from unishare.jobs.models import LECTURE_STUDY_TOOLS
from unishare.services import cached as cached_service
from unishare.services import jobs as job_service
from unishare.services import lectures as lecture_service
from unishare.services.tasks.interface import FunctionDispatcher
from unishare.storage.inputs_repo import StudyInputsRepository
from unishare.storage.jobs_repo import JobsRepository

router = APIRouter()


@router.post("/generate-quiz", response_model=JobSubmittedResponse)
async def generate_quiz(  # noqa: B008
  request: LectureQuizRequest,
  background_tasks: BackgroundTasks,
  identity: Identity = Depends(require_scholar_plus),  # noqa: B008
  inputs: StudyInputsRepository = Depends(get_inputs_repo),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
  dispatcher: FunctionDispatcher = Depends(get_dispatcher),  # noqa: B008
) -> JobSubmittedResponse:
  """Queue quiz generation from lecture transcripts (Scholar+)."""
  return await lecture_service.generate_quiz(request, identity=identity, inputs=inputs, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)


@router.post("/generate-flashcards", response_model=JobSubmittedResponse)
async def generate_flashcards(  # noqa: B008
  request: LectureFlashcardsRequest,
  background_tasks: BackgroundTasks,
  identity: Identity = Depends(require_scholar_plus),  # noqa: B008
  inputs: StudyInputsRepository = Depends(get_inputs_repo),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
  dispatcher: FunctionDispatcher = Depends(get_dispatcher),  # noqa: B008
) -> JobSubmittedResponse:
  """Queue flashcard generation from lecture transcripts (Scholar+)."""
  return await lecture_service.generate_flashcards(request, identity=identity, inputs=inputs, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)


@router.get("/study-tools/status/{job_id}")
async def get_study_tool_status(  # noqa: B008
  job_id: str,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> dict[str, Any]:
  return await job_service.get_job_status(LECTURE_STUDY_TOOLS, job_id, identity=identity, repo=repo)


@router.delete("/study-tools/status/{job_id}", response_model=JobDeletedResponse)
async def delete_study_tool_job(  # noqa: B008
  job_id: str,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> JobDeletedResponse:
  return await job_service.delete_job(LECTURE_STUDY_TOOLS, job_id, identity=identity, repo=repo)


def _lecture_lookup(operation_type: str | None, recording_ids: str | None, style: str | None) -> cached_service.CachedLookup:
  cached_service.require_lookup_params(operation_type, recording_ids)
  return cached_service.CachedLookup(operation_type=operation_type, input_ids=cached_service.parse_id_list(recording_ids, field_name="recording_ids"), style=style)


@router.get("/study-tools/cached")
async def get_cached_study_tool(  # noqa: B008
  operation_type: str | None = None,
  recording_ids: str | None = None,
  style: str | None = None,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> Any:
  """Return the newest completed result covering the requested recordings, or null."""
  lookup = _lecture_lookup(operation_type, recording_ids, style)
  return await cached_service.find_cached_lecture_result(lookup, identity=identity, repo=repo)


@router.delete("/study-tools/cached", response_model=CachedResultsDeletedResponse)
async def delete_cached_study_tools(  # noqa: B008
  operation_type: str | None = None,
  recording_ids: str | None = None,
  style: str | None = None,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> CachedResultsDeletedResponse:
  """Drop completed results for the requested recordings so they can be regenerated."""
  lookup = _lecture_lookup(operation_type, recording_ids, style)
  deleted = await cached_service.delete_cached_lecture_results(lookup, identity=identity, repo=repo)
  return CachedResultsDeletedResponse(deleted=deleted)
