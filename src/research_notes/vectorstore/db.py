import os
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

load_dotenv(override=True)

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///research.db"


def get_engine(
    url: Optional[str] = None,
    wait_ready: bool = True,
    retries: int = 10,
    backoff_sec: float = 1.0,
) -> Engine:
    """Create a SQLAlchemy engine using env defaults if not provided and optionally wait for readiness.

    Env overrides:
      - DATABASE_URL (default sqlite+pysqlite:///research.db)

    In-memory SQLite shares a single connection so that every thread sees the
    same database.
    """
    url = url or os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if make_url(url).database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(url, future=True, echo=False, **kwargs)

    if wait_ready:
        for i in range(max(1, retries)):
            try:
                # A light call to verify connectivity
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                break
            except Exception:  # pragma: no cover
                if i == retries - 1:
                    raise
                time.sleep(backoff_sec)
    return engine


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Session with commit on success and rollback on error."""
    session = sessionmaker(bind=engine, class_=Session, expire_on_commit=False)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
