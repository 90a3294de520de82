"""Database package: engine, session factory, init_db(), get_session()."""

import json
import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.orm import Session, sessionmaker

from src.config import DATABASE_URL, SEED_ON_INIT
from src.db.base import Base

# Import all models so Base.metadata has all tables
from src.db.models import (  # noqa: F401
    Medicine,
    Offer,
    Pharmacy,
    Subscription,
)

_init_lock = threading.Lock()
_engine = None
_SessionLocal: sessionmaker | None = None


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_unicode_lower(dbapi_connection, connection_record) -> None:
    """Replace SQLite's ASCII-only lower() so ILIKE folds accented letters like str.lower()."""
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def _get_engine():
    """Create engine with check_same_thread=False for use from executor threads."""
    url = DATABASE_URL
    if url.startswith("sqlite"):
        if "?" in url:
            url += "&check_same_thread=False"
        else:
            url += "?check_same_thread=False"
    engine = create_engine(
        url,
        echo=False,
        json_serializer=lambda obj: json.dumps(obj, ensure_ascii=False),
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _register_unicode_lower)
    return engine


def init_db(seed: bool | None = None) -> None:
    """Create engine and tables; seed demo data from CSV when the catalog is empty and seeding is on."""
    global _engine, _SessionLocal
    with _init_lock:
        if _SessionLocal is not None:
            return
        _engine = _get_engine()
        Base.metadata.create_all(bind=_engine)
        should_seed = SEED_ON_INIT if seed is None else seed
        if should_seed:
            with Session(bind=_engine) as session:
                if not session.scalar(select(func.count(Medicine.id))):
                    from src.db.seed_data import seed_demo_data

                    seed_demo_data(session)
                    session.commit()
        _SessionLocal = sessionmaker(bind=_engine, autocommit=False, autoflush=False, expire_on_commit=False)


def reset_db() -> None:
    """Drop and recreate all tables (empty). Used by the seed command and tests."""
    init_db(seed=False)
    Base.metadata.drop_all(bind=_engine)
    Base.metadata.create_all(bind=_engine)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager yielding a DB session. Calls init_db() on first use."""
    init_db()
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
