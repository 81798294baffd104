from typing import Optional
from database.db_manager import DatabaseManager
from models.account import Account
from utils.errors import NotFoundError


class AccountDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Account:
        return Account(
            id=row["id"],
            name=row["name"],
            account_type=row["account_type"],
            balance=row["balance"],
            created_at=row["created_at"],
        )

    def get_all(self) -> list[Account]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM accounts ORDER BY name"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, account_id: int) -> Optional[Account]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM accounts WHERE id = ?", (account_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, name: str) -> Optional[Account]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM accounts WHERE name = ?", (name,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        name: str,
        account_type: str = "checking",
        balance: float = 0.0,
    ) -> Account:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO accounts(name, account_type, balance) VALUES (?, ?, ?)",
            (name, account_type, balance),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(self, account: Account) -> Account:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE accounts SET name = ?, account_type = ?, balance = ? WHERE id = ?",
            (account.name, account.account_type, account.balance, account.id),
        )
        conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Account", account.id)
        return self.get_by_id(account.id)

    def adjust_balance(self, account_id: int, delta: float) -> bool:
        """Add delta to the stored balance. Returns False if the account is gone."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE accounts SET balance = balance + ? WHERE id = ?",
            (delta, account_id),
        )
        conn.commit()
        return cursor.rowcount > 0

    def delete(self, account_id: int):
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
        conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Account", account_id)

    def count_transactions(self, account_id: int) -> int:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT COUNT(*) as cnt FROM transactions WHERE account_id = ?",
            (account_id,),
        ).fetchone()
        return row["cnt"]
