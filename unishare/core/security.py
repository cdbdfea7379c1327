from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.concurrency import run_in_threadpool

from unishare.core.firebase import verify_id_token

# auto_error=False so missing credentials surface as 401 rather than FastAPI's 403.
security_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
  """Authenticated caller: owner id for row filtering plus the token forwarded to processing functions."""

  user_id: str
  access_token: str
  claims: dict[str, Any] = field(default_factory=dict, hash=False)


def _unauthorized() -> HTTPException:
  return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized", headers={"WWW-Authenticate": "Bearer"})


async def get_current_identity(token: Annotated[HTTPAuthorizationCredentials | None, Depends(security_scheme)]) -> Identity:
  """Verify the Firebase ID token and return the caller identity."""
  if token is None or not token.credentials:
    raise _unauthorized()

  # The Admin SDK verifies synchronously (certificate fetch + signature check).
  decoded_claims = await run_in_threadpool(verify_id_token, token.credentials)
  if not decoded_claims:
    raise _unauthorized()

  user_id = decoded_claims.get("uid")
  if not user_id:
    raise _unauthorized()

  return Identity(user_id=str(user_id), access_token=token.credentials, claims=decoded_claims)
