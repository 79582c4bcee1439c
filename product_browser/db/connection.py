# product_browser/db/connection.py

"""
SQLite connection handler
"""

import sqlite3
from pathlib import Path
from typing import Any, Dict

from simple_logger import Slogger

MEMORY_DB = ":memory:"

SCHEMA = """
    CREATE TABLE IF NOT EXISTS products (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        product_id TEXT UNIQUE NOT NULL,
        product_name TEXT NOT NULL,
        category TEXT NOT NULL,
        price REAL NOT NULL,
        quantity_in_stock INTEGER NOT NULL DEFAULT 0,
        supplier_name TEXT NOT NULL,
        date_added TEXT NOT NULL,
        location TEXT NOT NULL,
        weight REAL NOT NULL,
        status TEXT NOT NULL
    );
"""


class SQLiteConnection:
    """
    Handles basic connection to SQLite
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize SQLite connection

        Args:
            config: Configuration dictionary containing SQLite settings
        """
        db_path_str = config["sqlite"]["db_path"]
        self.db_path = db_path_str

        if db_path_str != MEMORY_DB:
            db_path = Path(db_path_str)
            if not db_path.parent.exists():
                Slogger.log(f"Creating database directory: {db_path.parent}")
                db_path.parent.mkdir(parents=True, exist_ok=True)

        Slogger.debug(f"Opening SQLite database: {db_path_str}")
        # query() reads from worker threads; ProductService serializes access
        self.conn = sqlite3.connect(db_path_str, check_same_thread=False)
        # Return rows as dictionaries
        self.conn.row_factory = sqlite3.Row

        self._ensure_schema()

    def _ensure_schema(self) -> None:
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def cursor(self):
        """
        Get a cursor for database operations

        Returns:
            SQLite cursor
        """
        return self.conn.cursor()

    def commit(self):
        """Commit the current transaction"""
        self.conn.commit()

    def close(self):
        """Close the connection"""
        self.conn.close()
