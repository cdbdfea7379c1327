"""Unit tests for API exception sanitization behavior."""

from __future__ import annotations

import json
import logging

import pytest
from starlette.requests import Request

from unishare.core.exceptions import _error_payload, _sanitize_validation_errors, global_exception_handler


def test_sanitize_validation_errors_removes_input_and_serializes_exception_ctx() -> None:
  """Ensure validation errors stay JSON-serializable and redact raw request payloads."""
  errors = [{"type": "value_error", "loc": ("body",), "msg": "Value error, Invalid document id.", "input": {"documentIds": ["doc-1"]}, "ctx": {"error": ValueError("Invalid document id."), "input": {"documentIds": ["doc-1"]}}}]
  sanitized = _sanitize_validation_errors(errors)
  assert "input" not in sanitized[0]
  assert sanitized[0]["ctx"]["error"] == "ValueError: Invalid document id."
  assert "input" not in sanitized[0]["ctx"]


def test_error_payload_wraps_strings_and_passes_structured_details() -> None:
  assert _error_payload("Job not found") == {"error": "Job not found"}
  assert _error_payload("Job not found", request_id="req-1") == {"error": "Job not found", "requestId": "req-1"}

  structured = {"error": "No transcript available", "message": "Record again.", "details": "Transcript required."}
  assert _error_payload(structured) == structured


@pytest.mark.anyio
async def test_global_exception_handler_logs_under_module_logger(caplog) -> None:
  request = Request({"type": "http", "method": "GET", "path": "/api/essay/status/job-1", "headers": [], "query_string": b""})

  with caplog.at_level(logging.ERROR, logger="unishare.core.exceptions"):
    response = await global_exception_handler(request, RuntimeError("boom"))

  assert response.status_code == 500
  assert json.loads(response.body) == {"error": "Internal server error"}
  assert any(record.name == "unishare.core.exceptions" for record in caplog.records)
