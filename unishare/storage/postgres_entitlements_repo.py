from __future__ import annotations

from datetime import datetime

from sqlalchemy import select

from unishare.core.database import get_session_factory
from unishare.schema.sql import Subscription, TemporaryScholarAccess
from unishare.storage.entitlements_repo import EntitlementsRepository, SubscriptionRecord, TemporaryAccessRecord


class PostgresEntitlementsRepository(EntitlementsRepository):
  """Read subscriptions and temporary Scholar+ grants from Postgres."""

  def __init__(self) -> None:
    self._session_factory = get_session_factory()
    if self._session_factory is None:
      raise RuntimeError("Database not initialized")

  async def get_active_subscription(self, user_id: str) -> SubscriptionRecord | None:
    async with self._session_factory() as session:
      stmt = select(Subscription).where(Subscription.user_id == user_id, Subscription.status == "active").order_by(Subscription.created_at.desc()).limit(1)
      row = (await session.execute(stmt)).scalar_one_or_none()
      if row is None:
        return None
      return SubscriptionRecord(user_id=row.user_id, status=row.status, current_period_end=row.current_period_end)

  async def get_latest_temporary_access(self, user_id: str, *, now: datetime) -> TemporaryAccessRecord | None:
    async with self._session_factory() as session:
      stmt = (
        select(TemporaryScholarAccess)
        .where(TemporaryScholarAccess.user_id == user_id, TemporaryScholarAccess.is_active.is_(True), TemporaryScholarAccess.expires_at > now)
        .order_by(TemporaryScholarAccess.expires_at.desc())
        .limit(1)
      )
      row = (await session.execute(stmt)).scalar_one_or_none()
      if row is None:
        return None
      return TemporaryAccessRecord(user_id=row.user_id, expires_at=row.expires_at, points_spent=row.points_spent, access_duration_hours=row.access_duration_hours)
