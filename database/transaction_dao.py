from typing import Iterable, Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction
from utils.errors import NotFoundError


class TransactionDAO:
    """Ledger store for transactions. No business rules live here."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            description=row["description"],
            amount=row["amount"],
            type=row["type"],
            category=row["category"],
            subcategory=row["subcategory"],
            frequency=row["frequency"],
            date=row["date"],
            account_id=row["account_id"],
            series_id=row["series_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _rows(self, sql: str, params: Iterable = ()) -> list[Transaction]:
        rows = self._db.get_connection().execute(sql, tuple(params)).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_all(self) -> list[Transaction]:
        return self._rows("SELECT * FROM transactions ORDER BY date ASC, id ASC")

    def list_recent(self, offset: int = 0, limit: int = 100) -> list[Transaction]:
        """Most recently inserted first."""
        return self._rows(
            "SELECT * FROM transactions ORDER BY id DESC LIMIT ? OFFSET ?",
            (limit, offset),
        )

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        row = self._db.get_connection().execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_date_range(
        self,
        start: str | None = None,
        end: str | None = None,
        type_filter: str | None = None,
    ) -> list[Transaction]:
        sql = "SELECT * FROM transactions WHERE 1=1"
        params: list = []
        if start:
            sql += " AND date >= ?"
            params.append(start)
        if end:
            sql += " AND date <= ?"
            params.append(end)
        if type_filter and type_filter != "all":
            sql += " AND type = ?"
            params.append(type_filter)
        sql += " ORDER BY date ASC, id ASC"
        return self._rows(sql, params)

    def get_recurring(self) -> list[Transaction]:
        return self._rows(
            "SELECT * FROM transactions WHERE frequency != 'none' ORDER BY date ASC, id ASC"
        )

    def get_by_series(self, series_id: str) -> list[Transaction]:
        return self._rows(
            "SELECT * FROM transactions WHERE series_id = ? ORDER BY date ASC, id ASC",
            (series_id,),
        )

    def get_by_category(self, category: str, type_: str | None = None) -> list[Transaction]:
        sql = "SELECT * FROM transactions WHERE category = ?"
        params: list = [category]
        if type_:
            sql += " AND type = ?"
            params.append(type_)
        return self._rows(sql + " ORDER BY date ASC, id ASC", params)

    def get_totals_for_range(self, start: str | None, end: str | None) -> dict:
        """Income, expense and savings totals across all accounts for [start, end]."""
        sql = """SELECT
                SUM(CASE WHEN type='income'  THEN amount ELSE 0 END) AS income,
                SUM(CASE WHEN type='expense' THEN amount ELSE 0 END) AS expense,
                SUM(CASE WHEN type='savings' THEN amount ELSE 0 END) AS savings
               FROM transactions WHERE 1=1"""
        params: list = []
        if start:
            sql += " AND date >= ?"
            params.append(start)
        if end:
            sql += " AND date <= ?"
            params.append(end)
        row = self._db.get_connection().execute(sql, params).fetchone()
        return {
            "income":  row["income"]  or 0.0,
            "expense": row["expense"] or 0.0,
            "savings": row["savings"] or 0.0,
        }

    def get_monthly_totals(self, first_month: str, last_month: str) -> dict[str, dict]:
        """Return {month: {income, expense, savings}} for months in [first_month, last_month]."""
        rows = self._db.get_connection().execute(
            """SELECT strftime('%Y-%m', date) AS month,
                      SUM(CASE WHEN type='income'  THEN amount ELSE 0 END) AS income,
                      SUM(CASE WHEN type='expense' THEN amount ELSE 0 END) AS expense,
                      SUM(CASE WHEN type='savings' THEN amount ELSE 0 END) AS savings
               FROM transactions
               WHERE strftime('%Y-%m', date) BETWEEN ? AND ?
               GROUP BY month""",
            (first_month, last_month),
        ).fetchall()
        return {
            r["month"]: {"income": r["income"], "expense": r["expense"], "savings": r["savings"]}
            for r in rows
        }

    def create(
        self,
        description: str,
        amount: float,
        type_: str,
        category: str,
        date: str,
        frequency: str = "none",
        subcategory: str | None = None,
        account_id: int | None = None,
        series_id: str | None = None,
    ) -> Transaction:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO transactions
               (description, amount, type, category, subcategory, frequency,
                date, account_id, series_id)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                description, amount, type_, category, subcategory, frequency,
                date, account_id, series_id,
            ),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(self, tx: Transaction) -> Transaction:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE transactions
               SET description=?, amount=?, type=?, category=?, subcategory=?,
                   frequency=?, date=?, account_id=?, series_id=?,
                   updated_at=datetime('now')
               WHERE id=?""",
            (
                tx.description, tx.amount, tx.type, tx.category, tx.subcategory,
                tx.frequency, tx.date, tx.account_id, tx.series_id, tx.id,
            ),
        )
        conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Transaction", tx.id)
        return self.get_by_id(tx.id)

    def delete(self, tx_id: int):
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Transaction", tx_id)

    def delete_many(self, tx_ids: Iterable[int]) -> int:
        """Best-effort batch delete; absent ids are skipped. Returns count deleted."""
        conn = self._db.get_connection()
        deleted = 0
        for tx_id in tx_ids:
            deleted += conn.execute(
                "DELETE FROM transactions WHERE id = ?", (tx_id,)
            ).rowcount
        conn.commit()
        return deleted

    def rename_category(self, old_name: str, new_name: str) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE transactions SET category = ?, updated_at=datetime('now') WHERE category = ?",
            (new_name, old_name),
        )
        conn.commit()
        return cursor.rowcount
