"""Essay analysis, outline and content generation submissions."""

from typing import Any

from fastapi import BackgroundTasks, HTTPException, status

from unishare.api.models import EssayAnalyzeRequest, EssayContentRequest, EssayOutlineRequest, JobSubmittedResponse
from unishare.core.security import Identity
from unishare.jobs.models import ESSAY
from unishare.services.jobs import submit_job
from unishare.services.tasks.interface import FunctionDispatcher
from unishare.storage.jobs_repo import JobsRepository

_CREATE_ERROR = "Failed to create analysis job"


def _is_blank(value: str | None) -> bool:
  return value is None or value.strip() == ""


def _writing_parameters(request: EssayOutlineRequest) -> dict[str, Any]:
  return {
    "prompt": (request.prompt or "").strip(),
    "essayType": request.essay_type,
    "wordCount": request.word_count,
    "academicLevel": request.academic_level,
    "citationStyle": request.citation_style,
    "requirements": list(request.requirements or []),
  }


async def _submit_essay(operation: str, parameters: dict[str, Any], message: str, *, identity: Identity, repo: JobsRepository, dispatcher: FunctionDispatcher, background_tasks: BackgroundTasks) -> JobSubmittedResponse:
  # Essay jobs carry their text in parameters and reference no stored inputs.
  return await submit_job(
    ESSAY,
    identity=identity,
    operation_type=operation,
    input_ids=[],
    parameters=parameters,
    dispatch_body={"operation": operation, **parameters},
    message=message,
    repo=repo,
    dispatcher=dispatcher,
    background_tasks=background_tasks,
    create_error=_CREATE_ERROR,
  )


async def analyze_essay(request: EssayAnalyzeRequest, *, identity: Identity, repo: JobsRepository, dispatcher: FunctionDispatcher, background_tasks: BackgroundTasks) -> JobSubmittedResponse:
  if _is_blank(request.content):
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Essay content is required")

  parameters = {
    "content": request.content.strip(),
    "title": request.title or "Untitled Essay",
    "prompt": request.prompt or "",
    "rubric": request.rubric or None,
    "customRubric": request.custom_rubric or None,
    "essayType": request.essay_type,
    "targetWordCount": request.target_word_count,
    "academicLevel": request.academic_level,
  }
  return await _submit_essay("analyze", parameters, "Essay analysis started. Please check status using the job ID.", identity=identity, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)


async def generate_outline(request: EssayOutlineRequest, *, identity: Identity, repo: JobsRepository, dispatcher: FunctionDispatcher, background_tasks: BackgroundTasks) -> JobSubmittedResponse:
  if _is_blank(request.prompt):
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")

  return await _submit_essay(
    "outline", _writing_parameters(request), "Outline generation started. Please check status using the job ID.", identity=identity, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks
  )


async def generate_content(request: EssayContentRequest, *, identity: Identity, repo: JobsRepository, dispatcher: FunctionDispatcher, background_tasks: BackgroundTasks) -> JobSubmittedResponse:
  if _is_blank(request.prompt) or _is_blank(request.outline):
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt and outline are required")

  parameters = _writing_parameters(request)
  parameters["outline"] = request.outline.strip()
  return await _submit_essay("content", parameters, "Content generation started. Please check status using the job ID.", identity=identity, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks)
