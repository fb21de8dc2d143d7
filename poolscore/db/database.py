"""Build database engines and session factories.

Nothing here runs at import time: the application factory (or a test) decides which database to bind to.
"""

from sqlalchemy import Engine, StaticPool, create_engine, event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import Session, sessionmaker

from poolscore.db.schema import Base


def build_url(database_url: str, database_key: str | None = None) -> URL:
    """Combine the configured URL with the credential, which is kept out of the URL itself."""
    url = make_url(database_url)
    if database_key and url.get_backend_name() != "sqlite":
        url = url.set(password=database_key)
    return url


def create_db_engine(url: str | URL, echo: bool = False) -> Engine:
    url = make_url(url)
    kwargs: dict = {"echo": echo}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # a single shared connection, otherwise every session sees its own empty database
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(url, **kwargs)
    if url.get_backend_name() == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Ensure all tables are created"""
    Base.metadata.create_all(bind=engine)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
