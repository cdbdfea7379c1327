"""Storage interfaces for Scholar+ entitlements."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class SubscriptionRecord:
  user_id: str
  status: str
  current_period_end: int | None = None


@dataclass(frozen=True)
class TemporaryAccessRecord:
  user_id: str
  expires_at: datetime
  points_spent: int
  access_duration_hours: int


class EntitlementsRepository(Protocol):
  """Lookups backing the Scholar+ access check."""

  async def get_active_subscription(self, user_id: str) -> SubscriptionRecord | None:
    """Return the most recent subscription row with status `active`, if any."""

  async def get_latest_temporary_access(self, user_id: str, *, now: datetime) -> TemporaryAccessRecord | None:
    """Return the active temporary grant expiring last, ignoring grants expired at `now`."""
