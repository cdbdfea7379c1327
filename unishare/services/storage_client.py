"""Object storage access for uploaded study documents."""

from __future__ import annotations

import os
from urllib.parse import urlparse, urlunparse

from google.auth.credentials import AnonymousCredentials
from google.cloud import storage
from starlette.concurrency import run_in_threadpool

from unishare.config import Settings


class DocumentStorageClient:
  """Reads uploaded document bytes from GCS or the local emulator."""

  def __init__(self, settings: Settings) -> None:
    self._bucket_name = settings.documents_bucket
    self._storage_host = settings.gcs_storage_host
    self._project_id = settings.gcp_project_id
    self._client: storage.Client | None = None

  @property
  def bucket_name(self) -> str:
    return self._bucket_name

  def _get_client(self) -> storage.Client:
    # Built on first use so requests that never touch storage need no credentials.
    if self._client is None:
      if self._storage_host:
        emulator_endpoint = _normalize_emulator_endpoint(self._storage_host)
        os.environ["GCS_STORAGE_EMULATOR_HOST"] = emulator_endpoint
        self._client = storage.Client(project=self._project_id or "local-dev", credentials=AnonymousCredentials(), client_options={"api_endpoint": emulator_endpoint})
      else:
        self._client = storage.Client(project=self._project_id)
    return self._client

  async def download(self, object_name: str) -> bytes:
    """Download the stored bytes for one uploaded document."""
    client = self._get_client()
    blob = client.bucket(self._bucket_name).blob(object_name)
    return await run_in_threadpool(blob.download_as_bytes)


def build_storage_client(settings: Settings) -> DocumentStorageClient:
  """Create a storage client for the configured documents bucket."""
  return DocumentStorageClient(settings)


def _normalize_emulator_endpoint(raw_endpoint: str) -> str:
  """Keep only scheme, host and port of an emulator endpoint."""
  parsed = urlparse(raw_endpoint)
  if not parsed.scheme or not parsed.netloc:
    return raw_endpoint.rstrip("/")
  return urlunparse((parsed.scheme, parsed.netloc, "", "", "", "")).rstrip("/")
