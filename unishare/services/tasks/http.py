from __future__ import annotations

import logging

import httpx

from unishare.config import Settings
from unishare.services.tasks.interface import FunctionDispatcher, FunctionRequest

logger = logging.getLogger(__name__)


class FunctionCallError(RuntimeError):
  """Raised when a processing function answers with a non-2xx status."""

  def __init__(self, status_code: int, body: str) -> None:
    super().__init__(f"Processing function failed: {status_code} - {body}")
    self.status_code = status_code
    self.body = body


class HttpFunctionDispatcher(FunctionDispatcher):
  """Invokes processing functions with a single direct HTTP POST."""

  def __init__(self, settings: Settings) -> None:
    self.settings = settings

  def _function_url(self, function_name: str) -> str:
    if not self.settings.functions_base_url:
      raise RuntimeError("Functions base URL not configured, strictly required for HttpFunctionDispatcher.")
    return f"{self.settings.functions_base_url}/{function_name}"

  async def dispatch(self, request: FunctionRequest) -> None:
    url = self._function_url(request.function_name)
    headers = {"authorization": f"Bearer {request.access_token}"}

    # Never trust environment proxy variables for function dispatch.
    async with httpx.AsyncClient(trust_env=False) as client:
      logger.info("Dispatching job %s to %s", request.body.get("jobId"), url)
      try:
        response = await client.post(url, json=request.body, headers=headers, timeout=self.settings.dispatch_timeout_seconds)
      except httpx.RequestError as e:
        logger.error("Failed to reach processing function %s for job %s: %s", request.function_name, request.body.get("jobId"), e)
        raise

    if not response.is_success:
      logger.error("Processing function %s returned %s for job %s: %s", request.function_name, response.status_code, request.body.get("jobId"), response.text)
      raise FunctionCallError(response.status_code, response.text)

    logger.info("Processing function %s accepted job %s", request.function_name, request.body.get("jobId"))
