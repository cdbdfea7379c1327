from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class FunctionRequest:
  """One invocation of an external processing function."""

  function_name: str
  access_token: str
  body: dict[str, Any] = field(default_factory=dict)


class FunctionDispatcher(Protocol):
  """Interface for handing a job to its external processing function."""

  async def dispatch(self, request: FunctionRequest) -> None:
    """Deliver the request, raising when the function or queue rejects it."""
    ...
