"""Unit tests for poolscore/db/database.py"""

from sqlalchemy import StaticPool, text

from poolscore.db.database import build_url, create_db_engine


def test_key_becomes_the_password() -> None:
    url = build_url("postgresql+psycopg://service@db.example.com:5432/poolscore", "s3cret")
    assert url.password == "s3cret"
    assert url.host == "db.example.com"
    assert url.database == "poolscore"


def test_sqlite_url_ignores_key() -> None:
    url = build_url("sqlite:///poolscore.db", "unused")
    assert url.password is None
    assert url.database == "poolscore.db"


def test_in_memory_sqlite_shares_one_connection() -> None:
    engine = create_db_engine("sqlite:///:memory:")
    assert isinstance(engine.pool, StaticPool)


def test_sqlite_foreign_keys_enabled() -> None:
    engine = create_db_engine("sqlite:///:memory:")
    with engine.connect() as connection:
        assert connection.execute(text("PRAGMA foreign_keys")).scalar() == 1
