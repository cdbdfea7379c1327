"""Shared FastAPI dependencies for repositories, dispatch and entitlement enforcement."""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status

from unishare.config import Settings, get_settings
from unishare.core.security import Identity, get_current_identity
from unishare.services.entitlements import has_scholar_plus_access
from unishare.services.storage_client import DocumentStorageClient, build_storage_client
from unishare.services.tasks.factory import get_function_dispatcher
from unishare.services.tasks.interface import FunctionDispatcher
from unishare.storage.entitlements_repo import EntitlementsRepository
from unishare.storage.factory import _get_entitlements_repo, _get_inputs_repo, _get_jobs_repo
from unishare.storage.inputs_repo import StudyInputsRepository
from unishare.storage.jobs_repo import JobsRepository

logger = logging.getLogger(__name__)


def get_jobs_repo(settings: Settings = Depends(get_settings)) -> JobsRepository:  # noqa: B008
  return _get_jobs_repo(settings)


def get_inputs_repo(settings: Settings = Depends(get_settings)) -> StudyInputsRepository:  # noqa: B008
  return _get_inputs_repo(settings)


def get_entitlements_repo(settings: Settings = Depends(get_settings)) -> EntitlementsRepository:  # noqa: B008
  return _get_entitlements_repo(settings)


def get_dispatcher(settings: Settings = Depends(get_settings)) -> FunctionDispatcher:  # noqa: B008
  return get_function_dispatcher(settings)


def get_document_storage(settings: Settings = Depends(get_settings)) -> DocumentStorageClient:  # noqa: B008
  return build_storage_client(settings)


async def require_scholar_plus(
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: EntitlementsRepository = Depends(get_entitlements_repo),  # noqa: B008
) -> Identity:
  """Authenticate the caller and require Scholar+ access (subscription or temporary grant)."""
  if not await has_scholar_plus_access(repo, identity.user_id):
    logger.info("Scholar+ access denied for user %s", identity.user_id)
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Scholar+ subscription required")
  return identity
