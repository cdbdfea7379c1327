from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from unishare.services.entitlements import check_scholar_plus_access, has_scholar_plus_access
from unishare.storage.entitlements_repo import SubscriptionRecord, TemporaryAccessRecord

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.anyio
async def test_active_subscription_grants_regular_access(entitlements_repo) -> None:
  entitlements_repo.subscription = SubscriptionRecord(user_id="user-1", status="active", current_period_end=int((NOW + timedelta(days=3)).timestamp()))

  status = await check_scholar_plus_access(entitlements_repo, "user-1", now=NOW)

  assert status.has_scholar_plus is True
  assert status.subscription_type == "regular"
  assert status.remaining_hours is None


@pytest.mark.anyio
async def test_subscription_without_period_end_is_open_ended(entitlements_repo) -> None:
  entitlements_repo.grant_subscription()

  assert await has_scholar_plus_access(entitlements_repo, "user-1", now=NOW) is True


@pytest.mark.anyio
async def test_lapsed_subscription_falls_back_to_temporary_grant(entitlements_repo) -> None:
  entitlements_repo.subscription = SubscriptionRecord(user_id="user-1", status="active", current_period_end=int((NOW - timedelta(days=1)).timestamp()))
  entitlements_repo.temporary_access = TemporaryAccessRecord(user_id="user-1", expires_at=NOW + timedelta(hours=2, minutes=1), points_spent=100, access_duration_hours=12)

  status = await check_scholar_plus_access(entitlements_repo, "user-1", now=NOW)

  assert status.subscription_type == "temporary"
  assert status.remaining_hours == 3
  assert status.temporary_access.points_spent == 100


@pytest.mark.anyio
async def test_expired_grant_means_no_access(entitlements_repo) -> None:
  entitlements_repo.temporary_access = TemporaryAccessRecord(user_id="user-1", expires_at=NOW - timedelta(minutes=1), points_spent=100, access_duration_hours=12)

  status = await check_scholar_plus_access(entitlements_repo, "user-1", now=NOW)

  assert status.has_scholar_plus is False
  assert status.subscription_type == "none"


@pytest.mark.anyio
async def test_lookup_error_denies_access(entitlements_repo) -> None:
  entitlements_repo.error = RuntimeError("database unavailable")

  status = await check_scholar_plus_access(entitlements_repo, "user-1", now=NOW)

  assert status.has_scholar_plus is False
