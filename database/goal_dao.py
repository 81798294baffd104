from typing import Optional
from database.db_manager import DatabaseManager
from models.goal import Goal
from utils.errors import NotFoundError


class GoalDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Goal:
        return Goal(
            id=row["id"],
            name=row["name"],
            goal_type=row["goal_type"],
            target_amount=row["target_amount"],
            current_amount=row["current_amount"],
            target_date=row["target_date"],
            notes=row["notes"],
        )

    def get_all(self) -> list[Goal]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM goals ORDER BY target_date, name"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, goal_id: int) -> Optional[Goal]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM goals WHERE id = ?", (goal_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        name: str,
        goal_type: str,
        target_amount: float,
        current_amount: float = 0.0,
        target_date: str = "",
        notes: str = "",
    ) -> Goal:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO goals(name, goal_type, target_amount, current_amount, target_date, notes)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (name, goal_type, target_amount, current_amount, target_date, notes),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(self, goal: Goal) -> Goal:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE goals SET name=?, goal_type=?, target_amount=?, current_amount=?,
                   target_date=?, notes=?
               WHERE id=?""",
            (
                goal.name, goal.goal_type, goal.target_amount, goal.current_amount,
                goal.target_date, goal.notes, goal.id,
            ),
        )
        conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Goal", goal.id)
        return self.get_by_id(goal.id)

    def delete(self, goal_id: int):
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM goals WHERE id = ?", (goal_id,))
        conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Goal", goal_id)
