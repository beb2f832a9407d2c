"""
Pytest fixtures for the site log test suite.

Provides:
- In-memory SQLite sessions with the full module schema
- Deterministic clocks and a fixed progress configuration
- Captured structured log records
"""

import json
import logging
from io import StringIO
from datetime import datetime, timezone
from typing import Generator
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from sitelog_config import ProgressConfig
from sitelog_kernel.db.base import Base
from sitelog_kernel.domain.clock import DeterministicClock
from sitelog_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from sitelog_modules._orm_registry import import_all_orm_models


# Test actor ID for all test operations
TEST_ACTOR_ID = uuid4()


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture sitelog_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, project_service):
            project_service.create_project(...)
            logs = captured_logs()
            assert any(r["message"] == "project_created" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("sitelog_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database with every module table."""
    engine = create_engine("sqlite:///:memory:")
    import_all_orm_models()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(db_engine) -> Generator[Session, None, None]:
    factory = sessionmaker(bind=db_engine, expire_on_commit=False)
    sess = factory()
    yield sess
    sess.close()


@pytest.fixture
def test_actor_id():
    return TEST_ACTOR_ID


# =============================================================================
# Clock / config fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Clock fixed at 2026-01-20 09:00 (site-local wall clock)."""
    return DeterministicClock(datetime(2026, 1, 20, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def progress_config():
    return ProgressConfig()
