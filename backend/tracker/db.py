from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# SQLAlchemy Base class for models to inherit
Base = declarative_base()


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    # "sqlite://", "sqlite+pysqlite://" or an explicit ":memory:" path
    return _is_sqlite(url) and (url.split("://", 1)[1] in ("", "/:memory:"))


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str):
        self.url = url
        kwargs = {"pool_pre_ping": True}  # helps avoid stale connections
        if _is_sqlite(url):
            kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            # One shared connection, otherwise every thread sees an empty db
            kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, **kwargs)
        if _is_sqlite(url):
            _enable_sqlite_foreign_keys(self.engine)
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


# Dependency we will use in FastAPI routes
def get_db(request: Request):
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
