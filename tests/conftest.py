"""Pytest fixtures and configuration for taskrestore tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from taskrestore.database.database import Base
from taskrestore.database import models  # noqa: F401
from taskrestore.database.import_store import SqlImportStore
from taskrestore.database.repository import TaskRepository
from taskrestore.database.sync_link_repository import SyncLinkRepository
from taskrestore.database.tag_repository import TagRepository


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def file_session_factory(tmp_path):
    """Session factory on a file-backed SQLite database.

    Import jobs open their own session on a worker thread, so these tests use
    a real file rather than a single shared in-memory connection.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'restore.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def task_repository(db_session: Session):
    return TaskRepository(db_session)


@pytest.fixture
def tag_repository(db_session: Session):
    return TagRepository(db_session)


@pytest.fixture
def sync_link_repository(db_session: Session):
    return SyncLinkRepository(db_session)


@pytest.fixture
def import_store(db_session: Session):
    """SQL-backed store the importer writes through."""
    return SqlImportStore(db_session)


@pytest.fixture
def write_backup(tmp_path):
    """Write backup XML to a file and return its path.

    Bodies without an XML declaration are wrapped in an <astrid> root with the
    given format attribute (omitted when format is None).
    """
    counter = {"n": 0}

    def _write(body: str, *, format="1", wrap: bool = True) -> str:
        counter["n"] += 1
        if wrap:
            format_attr = f' format="{format}"' if format is not None else ""
            text = f'<?xml version="1.0" encoding="UTF-8"?>\n<astrid{format_attr}>\n{body}\n</astrid>\n'
        else:
            text = body
        path = tmp_path / f"backup-{counter['n']}.xml"
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


class RecordingHost:
    """ImportHost that records every callback in arrival order."""

    def __init__(self):
        self.events = []

    def on_progress(self, message):
        self.events.append(("progress", message))

    def on_progress_dismissed(self):
        self.events.append(("dismissed",))

    def on_summary(self, scanned, imported, skipped, source_path):
        self.events.append(("summary", scanned, imported, skipped, source_path))

    def on_fatal_error(self, error):
        self.events.append(("error", error))

    def on_import_complete(self):
        self.events.append(("complete",))

    def kinds(self):
        return [event[0] for event in self.events]


@pytest.fixture
def recording_host():
    return RecordingHost()
