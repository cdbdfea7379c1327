"""Lazily created async engine and session factory for the Postgres repositories."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from unishare.config import get_database_settings

_ASYNCPG_SCHEME = "postgresql+asyncpg://"
_PLAIN_SCHEMES = ("postgresql://", "postgres://")


class Base(DeclarativeBase):
  pass


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def database_url() -> str | None:
  """Return the configured DSN with the asyncpg driver selected."""
  dsn = get_database_settings().pg_dsn
  if not dsn:
    return None
  for scheme in _PLAIN_SCHEMES:
    if dsn.startswith(scheme):
      return _ASYNCPG_SCHEME + dsn[len(scheme) :]
  return dsn


def get_engine() -> AsyncEngine | None:
  """Create the shared engine on first use; None when no DSN is configured."""
  global _engine
  if _engine is None:
    url = database_url()
    if url is None:
      return None
    settings = get_database_settings()
    _engine = create_async_engine(url, echo=settings.debug, connect_args={"timeout": settings.pg_connect_timeout})
  return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession] | None:
  global _session_factory
  if _session_factory is None:
    engine = get_engine()
    if engine is None:
      return None
    _session_factory = async_sessionmaker(bind=engine, expire_on_commit=False)
  return _session_factory


async def dispose_engine() -> None:
  """Close pooled connections; the next access builds a fresh engine."""
  global _engine, _session_factory
  if _engine is not None:
    await _engine.dispose()
  _engine = None
  _session_factory = None
