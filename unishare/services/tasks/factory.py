from __future__ import annotations

from unishare.config import Settings
from unishare.services.tasks.gcp import CloudTasksDispatcher
from unishare.services.tasks.http import HttpFunctionDispatcher
from unishare.services.tasks.interface import FunctionDispatcher


def get_function_dispatcher(settings: Settings) -> FunctionDispatcher:
  """Factory to get the configured function dispatcher."""
  if settings.dispatch_provider == "gcp":
    return CloudTasksDispatcher(settings)
  return HttpFunctionDispatcher(settings)
