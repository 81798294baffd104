import os
import sqlite3

from utils.constants import DB_FILE, DEFAULT_CATEGORIES, OPEN_ENDED_OCCURRENCE_CAP, SCHEMA_VERSION


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Idempotent ALTER TABLE for columns added after initial release."""
        cols = {row[1] for row in conn.execute("PRAGMA table_info(transactions)").fetchall()}
        if "series_id" not in cols:
            conn.execute("ALTER TABLE transactions ADD COLUMN series_id TEXT")
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_transactions_series_id ON transactions(series_id)"
        )

    def _create_schema(self, conn: sqlite3.Connection):
        # Transactions keep their account_id even after the account is deleted;
        # reconciliation skips accounts that no longer exist.
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS accounts (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                name         TEXT    NOT NULL UNIQUE,
                account_type TEXT    NOT NULL DEFAULT 'checking',
                balance      REAL    NOT NULL DEFAULT 0.0,
                created_at   TEXT    NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS categories (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                name       TEXT NOT NULL,
                type       TEXT NOT NULL CHECK(type IN ('income','expense','savings')),
                color_hex  TEXT NOT NULL DEFAULT '#888888',
                is_system  INTEGER NOT NULL DEFAULT 0,
                UNIQUE(name, type)
            );

            CREATE TABLE IF NOT EXISTS subcategories (
                id            INTEGER PRIMARY KEY AUTOINCREMENT,
                name          TEXT NOT NULL,
                category_name TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS goals (
                id             INTEGER PRIMARY KEY AUTOINCREMENT,
                name           TEXT NOT NULL,
                goal_type      TEXT NOT NULL DEFAULT '',
                target_amount  REAL NOT NULL CHECK(target_amount > 0),
                current_amount REAL NOT NULL DEFAULT 0.0,
                target_date    TEXT NOT NULL DEFAULT '',
                notes          TEXT NOT NULL DEFAULT ''
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                description TEXT NOT NULL,
                amount      REAL NOT NULL CHECK(amount > 0),
                type        TEXT NOT NULL CHECK(type IN ('income','expense','savings')),
                category    TEXT NOT NULL DEFAULT '',
                subcategory TEXT,
                frequency   TEXT NOT NULL DEFAULT 'none',
                date        TEXT NOT NULL,
                account_id  INTEGER,
                series_id   TEXT,
                created_at  TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_account_id ON transactions(account_id);
            CREATE INDEX IF NOT EXISTS idx_transactions_date       ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_transactions_category   ON transactions(category);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("currency_symbol", "$"),
            ("open_ended_occurrence_cap", str(OPEN_ENDED_OCCURRENCE_CAP)),
            ("schema_version", str(SCHEMA_VERSION)),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

        for cat in DEFAULT_CATEGORIES:
            conn.execute(
                """INSERT OR IGNORE INTO categories(name, type, color_hex, is_system)
                   VALUES (?, ?, ?, ?)""",
                (cat["name"], cat["type"], cat["color_hex"], cat["is_system"]),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def get_int_setting(self, key: str, default: int) -> int:
        try:
            return int(self.get_setting(key, str(default)))
        except ValueError:
            return default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the ledger DB.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            db_path = os.path.join(db_folder, DB_FILE)
        else:
            db_path = DB_FILE
        db = DatabaseManager(db_path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
