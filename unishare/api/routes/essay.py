from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends

from unishare.api.deps import get_dispatcher, get_jobs_repo, require_scholar_plus
from unishare.api.models import EssayAnalyzeRequest, EssayContentRequest, EssayOutlineRequest, JobDeletedResponse, JobSubmittedResponse
from unishare.core.security import Identity, get_current_identity
from unishare.jobs.models import ESSAY
from unishare.services import essays as essay_service
from unishare.services import jobs as job_service
from unishare.services.tasks.interface import FunctionDispatcher
from unishare.storage.jobs_repo import JobsRepository

router = APIRouter()


@router.post("/analyze", response_model=JobSubmittedResponse)
async def analyze_essay(  # noqa: B008
  request: EssayAnalyzeRequest,
  background_tasks: BackgroundTasks,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
  dispatcher: FunctionDispatcher = Depends(get_dispatcher),  # noqa: B008
) -> JobSubmittedResponse:
  """Queue feedback on a written essay."""
  return await essay_service.analyze_essay(request, identity=identity, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)


@router.post("/generate-outline", response_model=JobSubmittedResponse)
async def generate_outline(  # noqa: B008
  request: EssayOutlineRequest,
  background_tasks: BackgroundTasks,
  identity: Identity = Depends(require_scholar_plus),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
  dispatcher: FunctionDispatcher = Depends(get_dispatcher),  # noqa: B008
) -> JobSubmittedResponse:
  """Queue outline generation for an essay prompt (Scholar+)."""
  return await essay_service.generate_outline(request, identity=identity, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)


@router.post("/generate-content", response_model=JobSubmittedResponse)
async def generate_content(  # noqa: B008
  request: EssayContentRequest,
  background_tasks: BackgroundTasks,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
  dispatcher: FunctionDispatcher = Depends(get_dispatcher),  # noqa: B008
) -> JobSubmittedResponse:
  """Queue essay drafting from a prompt and outline."""
  return await essay_service.generate_content(request, identity=identity, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)


@router.get("/status/{job_id}")
async def get_essay_job_status(  # noqa: B008
  job_id: str,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> dict[str, Any]:
  return await job_service.get_job_status(ESSAY, job_id, identity=identity, repo=repo)


@router.delete("/status/{job_id}", response_model=JobDeletedResponse)
async def delete_essay_job(  # noqa: B008
  job_id: str,
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: JobsRepository = Depends(get_jobs_repo),  # noqa: B008
) -> JobDeletedResponse:
  return await job_service.delete_job(ESSAY, job_id, identity=identity, repo=repo)
