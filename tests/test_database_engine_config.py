import os


def test_get_engine_kwargs_sqlite_has_check_same_thread(monkeypatch):
    # Import lazily so monkeypatch can affect env usage deterministically.
    from taskrestore.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///./taskrestore.db")
    assert kwargs["connect_args"]["check_same_thread"] is False
    # SQLite should not require pool sizing knobs.
    assert "pool_size" not in kwargs
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_kwargs_postgres_reads_pool_env(monkeypatch):
    from taskrestore.database import database as db

    monkeypatch.setenv("DB_POOL_SIZE", "7")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "3")
    monkeypatch.setenv("DB_POOL_TIMEOUT_SEC", "12")

    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db")
    assert "connect_args" not in kwargs
    assert kwargs["pool_size"] == 7
    assert kwargs["max_overflow"] == 3
    assert kwargs["pool_timeout"] == 12


def test_debug_enables_echo(monkeypatch):
    from taskrestore.database import database as db

    monkeypatch.setenv("DEBUG", "true")
    assert db.get_engine_kwargs("sqlite://")["echo"] is True
    monkeypatch.setenv("DEBUG", "false")
    assert db.get_engine_kwargs("sqlite://")["echo"] is False


def test_sqlite_url_detection():
    from taskrestore.database import database as db

    assert db._is_sqlite_url("sqlite:///./taskrestore.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False


def test_init_db_creates_restore_tables_for_sqlite(tmp_path, monkeypatch):
    from sqlalchemy import inspect
    from taskrestore.database import database as db

    monkeypatch.delenv("RUN_MIGRATIONS", raising=False)
    url = f"sqlite:///{tmp_path / 'init.db'}"
    engine = db.build_engine(url)
    db.init_db(engine_override=engine, database_url_override=url)

    tables = set(inspect(engine).get_table_names())
    assert {"tasks", "tags", "task_tags", "sync_links"} <= tables
    engine.dispose()


def test_alembic_head_matches_models():
    """The single migration creates every mapped table."""
    from alembic.config import Config
    from alembic.script import ScriptDirectory
    from taskrestore.database.database import Base
    from taskrestore.database import models  # noqa: F401

    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    config = Config(os.path.join(root, "alembic.ini"))
    config.set_main_option("script_location", os.path.join(root, "alembic"))
    script = ScriptDirectory.from_config(config)

    heads = script.get_heads()
    assert len(heads) == 1
    with open(script.get_revision(heads[0]).path, encoding="utf-8") as f:
        source = f.read()
    for table in Base.metadata.tables:
        assert f'"{table}"' in source


def test_sqlite_pragmas_skip_other_drivers():
    """The connect listener must not send PRAGMA to a non-SQLite connection."""
    from unittest.mock import MagicMock
    from taskrestore.database import database as db

    dbapi_conn = MagicMock()
    db.set_sqlite_pragmas(dbapi_conn, None)
    dbapi_conn.cursor.assert_not_called()


def test_sqlite_pragmas_follow_the_connection_not_the_env(tmp_path, monkeypatch):
    """A SQLite override gets its pragmas even when DATABASE_URL names another backend."""
    import sqlite3
    from sqlalchemy import text
    from taskrestore.database import database as db

    monkeypatch.setattr(db, "DATABASE_URL", "postgresql+psycopg://u:p@localhost:5432/db")
    engine = db.build_engine(f"sqlite:///{tmp_path / 'override.db'}")
    with engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
    engine.dispose()

    raw = sqlite3.connect(str(tmp_path / "override.db"))
    try:
        assert raw.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
    finally:
        raw.close()
