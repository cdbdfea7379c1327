"""Lecture study-tool submissions (quiz, flashcards) over recorded transcripts."""

import logging
from typing import Any

from fastapi import BackgroundTasks, HTTPException, status

from unishare.api.models import JobSubmittedResponse, LectureFlashcardsRequest, LectureQuizRequest
from unishare.core.security import Identity
from unishare.jobs.models import LECTURE_STUDY_TOOLS
from unishare.services.jobs import submit_job
from unishare.services.tasks.interface import FunctionDispatcher
from unishare.storage.inputs_repo import StudyInputsRepository
from unishare.storage.jobs_repo import JobsRepository

logger = logging.getLogger(__name__)


async def _require_transcripts(recording_ids: list[str] | None, *, tool: str, requirement: str, identity: Identity, inputs: StudyInputsRepository) -> list[str]:
  """Validate that at least one referenced recording is owned by the caller and has a transcript."""
  if not recording_ids:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing recording IDs")

  try:
    recordings = await inputs.list_recordings(recording_ids, user_id=identity.user_id)
  except Exception as exc:  # noqa: BLE001
    logger.error("Recording lookup failed for user %s: %s", identity.user_id, exc, exc_info=True)
    recordings = []

  if not recordings:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid recordings found")

  if not any(recording.has_transcript for recording in recordings):
    titles = ", ".join(recording.title for recording in recordings)
    raise HTTPException(
      status_code=status.HTTP_400_BAD_REQUEST,
      detail={
        "error": "No transcript available",
        "message": (
          f'The recording "{titles}" doesn\'t have a transcript. To generate {tool}, please record a new lecture with speech or manually add a transcript to your recording.'
        ),
        "details": requirement,
      },
    )

  return list(recording_ids)


async def _submit_lecture(operation: str, recording_ids: list[str], parameters: dict[str, Any], message: str, *, identity: Identity, repo: JobsRepository, dispatcher: FunctionDispatcher, background_tasks: BackgroundTasks) -> JobSubmittedResponse:
  return await submit_job(
    LECTURE_STUDY_TOOLS,
    identity=identity,
    operation_type=operation,
    input_ids=recording_ids,
    parameters=parameters,
    dispatch_body={"operation": operation, "recordingIds": recording_ids, **parameters},
    message=message,
    repo=repo,
    dispatcher=dispatcher,
    background_tasks=background_tasks,
  )


async def generate_quiz(
  request: LectureQuizRequest,
  *,
  identity: Identity,
  inputs: StudyInputsRepository,
  repo: JobsRepository,
  dispatcher: FunctionDispatcher,
  background_tasks: BackgroundTasks,
) -> JobSubmittedResponse:
  recording_ids = await _require_transcripts(request.recording_ids, tool="a quiz", requirement="Quiz generation requires transcript content to create questions from your lecture content.", identity=identity, inputs=inputs)
  parameters = request.model_dump(by_alias=True, exclude={"recording_ids"})
  return await _submit_lecture(
    "quiz", recording_ids, parameters, "Quiz generation started. Please check status using the job ID.", identity=identity, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks
  )


async def generate_flashcards(
  request: LectureFlashcardsRequest,
  *,
  identity: Identity,
  inputs: StudyInputsRepository,
  repo: JobsRepository,
  dispatcher: FunctionDispatcher,
  background_tasks: BackgroundTasks,
) -> JobSubmittedResponse:
  recording_ids = await _require_transcripts(request.recording_ids, tool="flashcards", requirement="Flashcards require transcript content to analyze and create study materials from your lecture content.", identity=identity, inputs=inputs)
  parameters = request.model_dump(by_alias=True, exclude={"recording_ids"})
  return await _submit_lecture(
    "flashcards", recording_ids, parameters, "Flashcard generation started. Please check status using the job ID.", identity=identity, repo=repo, dispatcher=dispatcher, background_tasks=background_tasks
  )
