from __future__ import annotations

import json
import logging

from google.cloud import tasks_v2
from starlette.concurrency import run_in_threadpool

from unishare.config import Settings
from unishare.services.tasks.interface import FunctionDispatcher, FunctionRequest

logger = logging.getLogger(__name__)


class CloudTasksDispatcher(FunctionDispatcher):
  """Enqueues processing-function calls onto a Google Cloud Tasks queue.

  Delivery is at-least-once and retries follow the queue configuration, so a
  successful `dispatch` only means the task was accepted by the queue.
  """

  def __init__(self, settings: Settings) -> None:
    self.settings = settings
    self.client = tasks_v2.CloudTasksClient()

  def _build_task(self, request: FunctionRequest) -> dict:
    if not self.settings.functions_base_url:
      raise RuntimeError("Functions base URL not configured, strictly required for CloudTasksDispatcher.")

    return {
      "http_request": {
        "http_method": tasks_v2.HttpMethod.POST,
        "url": f"{self.settings.functions_base_url}/{request.function_name}",
        "headers": {"Content-Type": "application/json", "Authorization": f"Bearer {request.access_token}"},
        "body": json.dumps(request.body).encode(),
      }
    }

  async def dispatch(self, request: FunctionRequest) -> None:
    parent = self.settings.cloud_tasks_queue_path
    if not parent:
      raise RuntimeError("Cloud Tasks queue path not configured.")

    task = self._build_task(request)
    job_id = request.body.get("jobId")
    try:
      # The client is synchronous; keep it off the event loop.
      response = await run_in_threadpool(self.client.create_task, request={"parent": parent, "task": task})
    except Exception as e:
      logger.error("Failed to enqueue task for job %s: %s", job_id, e, exc_info=True)
      raise

    logger.info("Enqueued task %s for job %s", response.name, job_id)
