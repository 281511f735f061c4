import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from recovery_desk.config import settings


class Base(DeclarativeBase):
    pass


def enable_wal(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def make_engine(db_path: Path | None = None):
    engine = create_engine(
        f"sqlite:///{db_path or settings.db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", enable_wal)
    return engine


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# One row per storage key. Each value is a whole JSON collection
# (hardDiskRecords, inwardRecords, ...) or a counter.
SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS kv_store (
    key        TEXT PRIMARY KEY,
    value      BLOB NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);
"""


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(SCHEMA_SQL)
    finally:
        conn.close()


def check_integrity(db_path: Path | None = None) -> str:
    """Result of PRAGMA integrity_check: "ok", or SQLite's first complaint."""
    conn = sqlite3.connect(str(db_path or settings.db_path))
    try:
        row = conn.execute("PRAGMA integrity_check").fetchone()
    finally:
        conn.close()
    return row[0] if row else "no result"
