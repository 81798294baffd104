"""Export and import the full ledger snapshot (transactions, accounts,
categories, subcategories, goals) as JSON, plus a CSV-in-ZIP export.

Import replaces every collection wholesale. Imported balances are trusted
as-is; reconciliation is not re-run.
"""
import csv
import io
import json
import sqlite3
import zipfile
from collections.abc import Mapping
from dataclasses import asdict
from datetime import datetime

import structlog

from database.db_manager import DatabaseManager
from database.account_dao import AccountDAO
from database.category_dao import CategoryDAO
from database.goal_dao import GoalDAO
from database.transaction_dao import TransactionDAO
from utils.constants import EXPORT_VERSION
from utils.errors import ValidationError

logger = structlog.get_logger(__name__)

COLLECTIONS = ("transactions", "accounts", "categories", "subcategories", "goals")

_COLUMNS = {
    "transactions": (
        "id", "description", "amount", "type", "category", "subcategory",
        "frequency", "date", "account_id", "series_id",
    ),
    "accounts": ("id", "name", "account_type", "balance"),
    "categories": ("id", "name", "type", "color_hex", "is_system"),
    "subcategories": ("id", "name", "category_name"),
    "goals": ("id", "name", "goal_type", "target_amount", "current_amount", "target_date", "notes"),
}

_DEFAULTS = {
    "transactions": {"frequency": "none", "category": ""},
    "accounts": {"account_type": "checking", "balance": 0.0},
    "categories": {"color_hex": "#888888", "is_system": 0},
    "subcategories": {},
    "goals": {"goal_type": "", "current_amount": 0.0, "target_date": "", "notes": ""},
}


class DataService:
    def __init__(
        self,
        db: DatabaseManager,
        tx_dao: TransactionDAO,
        account_dao: AccountDAO,
        category_dao: CategoryDAO,
        goal_dao: GoalDAO,
    ):
        self._db = db
        self._tx_dao = tx_dao
        self._account_dao = account_dao
        self._category_dao = category_dao
        self._goal_dao = goal_dao

    # ── Export ────────────────────────────────────────────────────────────────

    def export_snapshot(self) -> dict:
        """Return a full export dict (caller writes to disk)."""
        return {
            "version": EXPORT_VERSION,
            "exported_at": datetime.now().isoformat(),
            "transactions": [self._pick("transactions", asdict(t)) for t in self._tx_dao.get_all()],
            "accounts": [self._pick("accounts", asdict(a)) for a in self._account_dao.get_all()],
            "categories": [self._pick("categories", asdict(c)) for c in self._category_dao.get_all()],
            "subcategories": [asdict(s) for s in self._category_dao.get_all_subcategories()],
            "goals": [asdict(g) for g in self._goal_dao.get_all()],
        }

    def export_json(self, path: str) -> dict:
        data = self.export_snapshot()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info("ledger_exported", path=path, **self._counts(data))
        return data

    def export_csv_zip(self, path: str) -> None:
        """Write a ZIP archive containing one CSV per collection."""
        data = self.export_snapshot()
        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
            for key in COLLECTIONS:
                buf = io.StringIO()
                writer = csv.DictWriter(buf, fieldnames=list(_COLUMNS[key]))
                writer.writeheader()
                writer.writerows(data[key])
                zf.writestr(f"{key}.csv", buf.getvalue())
        logger.info("ledger_exported_csv", path=path, **self._counts(data))

    # ── Import ────────────────────────────────────────────────────────────────

    def import_json(self, path: str) -> dict:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Not a valid export file: {exc}") from exc
        return self.import_snapshot(data)

    def import_snapshot(self, data) -> dict:
        """Replace every collection with the bundle's contents.

        Returns {collection: rows imported}. Runs in a single SQLite transaction.
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Import bundle must be a JSON object.")
        version = data.get("version")
        if not isinstance(version, int) or version > EXPORT_VERSION:
            raise ValidationError(f"Unsupported export version: {version!r}")

        conn = self._db.get_connection()
        stats = {}
        try:
            for key in COLLECTIONS:
                conn.execute(f"DELETE FROM {key}")
            for key in COLLECTIONS:
                rows = data.get(key) or []
                columns = _COLUMNS[key]
                sql = (
                    f"INSERT INTO {key} ({', '.join(columns)}) "
                    f"VALUES ({', '.join('?' for _ in columns)})"
                )
                for row in rows:
                    merged = {**_DEFAULTS[key], **row}
                    conn.execute(sql, tuple(merged.get(c) for c in columns))
                stats[key] = len(rows)
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise ValidationError(f"Import bundle rejected: {exc}") from exc
        except Exception:
            conn.rollback()
            raise

        logger.info("ledger_imported", exported_at=data.get("exported_at"), **stats)
        return stats

    # ── Helpers ───────────────────────────────────────────────────────────────

    @staticmethod
    def _pick(key: str, row: dict) -> dict:
        return {c: row.get(c) for c in _COLUMNS[key]}

    @staticmethod
    def _counts(data: dict) -> dict:
        return {key: len(data[key]) for key in COLLECTIONS}
