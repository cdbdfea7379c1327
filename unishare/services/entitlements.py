"""Scholar+ entitlement checks (subscription or time-boxed grant)."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

from unishare.storage.entitlements_repo import EntitlementsRepository, TemporaryAccessRecord

logger = logging.getLogger(__name__)

AccessType = Literal["regular", "temporary", "none"]

_SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class ScholarPlusStatus:
  has_scholar_plus: bool
  subscription_type: AccessType
  temporary_access: TemporaryAccessRecord | None = None
  remaining_hours: int | None = None


_NO_ACCESS = ScholarPlusStatus(has_scholar_plus=False, subscription_type="none")


def _remaining_hours(expires_at: datetime, now: datetime) -> int:
  remaining_seconds = (expires_at - now).total_seconds()
  return max(0, math.ceil(remaining_seconds / _SECONDS_PER_HOUR))


async def check_scholar_plus_access(repo: EntitlementsRepository, user_id: str, *, now: datetime | None = None) -> ScholarPlusStatus:
  """Resolve the caller's Scholar+ access, preferring a paid subscription over a temporary grant."""
  current = now or datetime.now(UTC)
  try:
    subscription = await repo.get_active_subscription(user_id)
    if subscription is not None and subscription.status == "active":
      period_end = subscription.current_period_end
      if not period_end or period_end > int(current.timestamp()):
        return ScholarPlusStatus(has_scholar_plus=True, subscription_type="regular")

    grant = await repo.get_latest_temporary_access(user_id, now=current)
    if grant is not None:
      return ScholarPlusStatus(has_scholar_plus=True, subscription_type="temporary", temporary_access=grant, remaining_hours=_remaining_hours(grant.expires_at, current))
  except Exception:  # noqa: BLE001
    # Deny by default when the lookup itself fails.
    logger.exception("Error checking Scholar+ access for user %s", user_id)
    return _NO_ACCESS

  return _NO_ACCESS


async def has_scholar_plus_access(repo: EntitlementsRepository, user_id: str, *, now: datetime | None = None) -> bool:
  """Boolean shorthand for route guards."""
  resolved = await check_scholar_plus_access(repo, user_id, now=now)
  return resolved.has_scholar_plus
