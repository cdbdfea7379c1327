"""Identifier and timestamp helpers."""

from __future__ import annotations

import time
import uuid

DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def generate_job_id() -> str:
  """Return a new job identifier."""
  return str(uuid.uuid4())


def utc_now_iso() -> str:
  """Return the current UTC time in the persisted timestamp format."""
  return time.strftime(DATE_FORMAT, time.gmtime())
