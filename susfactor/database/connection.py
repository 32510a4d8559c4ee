"""SQLite connection and schema initialization"""

import sqlite3
import logging
import threading
from pathlib import Path

logger = logging.getLogger('susfactor.database')

_local   = threading.local()
_db_path = None

SCHEMA = '''
CREATE TABLE IF NOT EXISTS detections (
    detection_id TEXT PRIMARY KEY,
    player_id    TEXT NOT NULL,
    display_name TEXT,
    suspicion    REAL NOT NULL,
    reason       TEXT,
    action       TEXT,
    timestamp    REAL NOT NULL,
    created_at   TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_detections_player  ON detections(player_id);
CREATE INDEX IF NOT EXISTS idx_detections_created ON detections(created_at);
'''


class DatabaseConnection:
    def __init__(self, config):
        self.db_path = Path(config.get('database.path', 'data/database/susfactor.db'))
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def initialize(self):
        set_db_path(self.db_path)
        conn = get_connection()
        conn.executescript(SCHEMA)
        conn.commit()
        logger.info(f"Database initialized: {self.db_path}")

    def close(self):
        if getattr(_local, 'conn', None) is not None:
            _local.conn.close()
            _local.conn = None


def set_db_path(path):
    global _db_path
    _db_path = path


def get_db_path():
    return _db_path


def get_connection():
    if _db_path is None:
        raise RuntimeError('Database not initialized')
    conn = getattr(_local, 'conn', None)
    if conn is None or getattr(_local, 'path', None) != _db_path:
        conn = sqlite3.connect(str(_db_path), timeout=10, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute('PRAGMA journal_mode=WAL')
        conn.execute('PRAGMA synchronous=NORMAL')
        _local.conn = conn
        _local.path = _db_path
    return conn
