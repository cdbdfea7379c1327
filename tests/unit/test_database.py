import pytest

from unishare.config import get_database_settings
from unishare.core import database


@pytest.fixture(autouse=True)
def _fresh_database_settings():
  get_database_settings.cache_clear()
  yield
  get_database_settings.cache_clear()


@pytest.mark.parametrize(
  ("dsn", "expected"),
  [
    ("postgresql://app:secret@db:5432/unishare", "postgresql+asyncpg://app:secret@db:5432/unishare"),
    ("postgres://app@db/unishare", "postgresql+asyncpg://app@db/unishare"),
    ("postgresql+asyncpg://app@db/unishare", "postgresql+asyncpg://app@db/unishare"),
  ],
)
def test_database_url_selects_asyncpg_driver(monkeypatch, dsn: str, expected: str) -> None:
  monkeypatch.setenv("UNISHARE_PG_DSN", dsn)

  assert database.database_url() == expected


def test_accessors_return_none_without_dsn(monkeypatch) -> None:
  monkeypatch.delenv("UNISHARE_PG_DSN", raising=False)
  monkeypatch.delenv("DATABASE_URL", raising=False)
  monkeypatch.setattr(database, "_engine", None)
  monkeypatch.setattr(database, "_session_factory", None)

  assert database.database_url() is None
  assert database.get_engine() is None
  assert database.get_session_factory() is None
