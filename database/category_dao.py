from typing import Optional
from database.db_manager import DatabaseManager
from models.category import Category, Subcategory
from utils.errors import NotFoundError


class CategoryDAO:
    """Categories and their free-form subcategories (keyed by category name)."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            color_hex=row["color_hex"],
            is_system=bool(row["is_system"]),
        )

    def _row_to_subcategory(self, row) -> Subcategory:
        return Subcategory(
            id=row["id"],
            name=row["name"],
            category_name=row["category_name"],
        )

    def get_all(self) -> list[Category]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM categories ORDER BY type, name"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, category_id: int) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_type(self, type_: str) -> list[Category]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM categories WHERE type = ? ORDER BY is_system DESC, name",
            (type_,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(self, name: str, type_: str, color_hex: str = "#888888") -> Category:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO categories(name, type, color_hex) VALUES (?, ?, ?)",
            (name, type_, color_hex),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def rename(self, category_id: int, new_name: str) -> Category:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE categories SET name=? WHERE id=?", (new_name, category_id)
        )
        conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Category", category_id)
        return self.get_by_id(category_id)

    def delete(self, category_id: int):
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
        conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Category", category_id)

    # ── Subcategories ────────────────────────────────────────────────────────

    def get_subcategories(self, category_name: str) -> list[Subcategory]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM subcategories WHERE category_name = ? ORDER BY name",
            (category_name,),
        ).fetchall()
        return [self._row_to_subcategory(r) for r in rows]

    def get_all_subcategories(self) -> list[Subcategory]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM subcategories ORDER BY category_name, name"
        ).fetchall()
        return [self._row_to_subcategory(r) for r in rows]

    def create_subcategory(self, name: str, category_name: str) -> Subcategory:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO subcategories(name, category_name) VALUES (?, ?)",
            (name, category_name),
        )
        conn.commit()
        row = conn.execute(
            "SELECT * FROM subcategories WHERE id = ?", (cursor.lastrowid,)
        ).fetchone()
        return self._row_to_subcategory(row)

    def delete_subcategory(self, subcategory_id: int):
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM subcategories WHERE id = ?", (subcategory_id,))
        conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Subcategory", subcategory_id)

    def rename_subcategories_category(self, old_name: str, new_name: str) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE subcategories SET category_name = ? WHERE category_name = ?",
            (new_name, old_name),
        )
        conn.commit()
        return cursor.rowcount

    def delete_subcategories_by_category(self, category_name: str) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "DELETE FROM subcategories WHERE category_name = ?", (category_name,)
        )
        conn.commit()
        return cursor.rowcount
