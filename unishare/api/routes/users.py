from datetime import UTC

from fastapi import APIRouter, Depends

from unishare.api.deps import get_entitlements_repo
from unishare.api.models import SubscriptionStatusResponse, TemporaryAccessInfo
from unishare.core.security import Identity, get_current_identity
from unishare.services.entitlements import check_scholar_plus_access
from unishare.storage.entitlements_repo import EntitlementsRepository
from unishare.utils.ids import DATE_FORMAT

router = APIRouter()


@router.get("/subscription-status", response_model=SubscriptionStatusResponse, response_model_exclude_none=True)
async def get_subscription_status(  # noqa: B008
  identity: Identity = Depends(get_current_identity),  # noqa: B008
  repo: EntitlementsRepository = Depends(get_entitlements_repo),  # noqa: B008
) -> SubscriptionStatusResponse:
  """Report the caller's Scholar+ access and, for temporary grants, the time left."""
  access = await check_scholar_plus_access(repo, identity.user_id)
  temporary_access = None
  if access.temporary_access is not None:
    grant = access.temporary_access
    temporary_access = TemporaryAccessInfo(expires_at=grant.expires_at.astimezone(UTC).strftime(DATE_FORMAT), points_spent=grant.points_spent, access_duration_hours=grant.access_duration_hours)
  return SubscriptionStatusResponse(has_scholar_plus=access.has_scholar_plus, subscription_type=access.subscription_type, temporary_access=temporary_access, remaining_hours=access.remaining_hours)
