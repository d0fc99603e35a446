# Test bootstrap: point the app at an in-memory database and deterministic
# settings before any prioritizer module is imported.
from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PRIORITIZER_SECRET", "test-secret")
os.environ["LLM_ENABLED"] = "false"

# Ensure project root on sys.path for `prioritizer` imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from prioritizer.db.base import Base  # noqa: E402


def make_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db_engine():
    engine = make_engine()
    yield engine
    engine.dispose()


@pytest.fixture()
def db(db_engine):
    session = sessionmaker(bind=db_engine, autoflush=False, autocommit=False, future=True)()
    try:
        yield session
    finally:
        session.close()
