import structlog

from database.category_dao import CategoryDAO
from database.transaction_dao import TransactionDAO
from models.category import Category, Subcategory
from services.transaction_service import TransactionService
from utils.constants import TRANSACTION_TYPES
from utils.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class CategoryService:
    """Category labels are plain strings on transactions; renames cascade by name."""

    def __init__(
        self,
        category_dao: CategoryDAO,
        tx_dao: TransactionDAO,
        tx_service: TransactionService,
    ):
        self._dao = category_dao
        self._tx_dao = tx_dao
        self._tx_svc = tx_service

    def get_all(self) -> list[Category]:
        return self._dao.get_all()

    def get_by_type(self, type_: str) -> list[Category]:
        return self._dao.get_by_type(type_)

    def get_names(self, type_: str) -> list[str]:
        return [c.name for c in self._dao.get_by_type(type_)]

    def create(self, name: str, type_: str, color_hex: str = "#888888") -> Category:
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty.")
        if type_ not in TRANSACTION_TYPES:
            raise ValidationError(f"Invalid category type: {type_}")
        existing = [c.name.lower() for c in self._dao.get_by_type(type_)]
        if name.lower() in existing:
            raise ValidationError(f"A category named '{name}' already exists.")
        return self._dao.create(name, type_, color_hex)

    def rename(self, category_id: int, new_name: str) -> Category:
        """Rename and carry the new label to subcategories and transactions."""
        cat = self._require(category_id)
        new_name = new_name.strip()
        if not new_name:
            raise ValidationError("Category name cannot be empty.")
        others = [c for c in self._dao.get_by_type(cat.type) if c.id != category_id]
        if any(c.name.lower() == new_name.lower() for c in others):
            raise ValidationError(f"A category named '{new_name}' already exists.")
        if new_name == cat.name:
            return cat

        renamed = self._dao.rename(category_id, new_name)
        subs = self._dao.rename_subcategories_category(cat.name, new_name)
        txs = self._tx_dao.rename_category(cat.name, new_name)
        logger.info(
            "category_renamed",
            old=cat.name,
            new=new_name,
            subcategories=subs,
            transactions=txs,
        )
        return renamed

    def delete(self, category_id: int, delete_transactions: bool = False) -> int:
        """
        Delete a category and its subcategories.

        With delete_transactions=True the category's transactions of the same
        type are deleted too, reversing their balance effects. Returns the number
        of transactions deleted.
        """
        cat = self._require(category_id)
        if cat.is_system:
            raise ValidationError("System categories cannot be deleted.")
        deleted = 0
        if delete_transactions:
            ids = [t.id for t in self._tx_dao.get_by_category(cat.name, cat.type)]
            deleted = self._tx_svc.delete_many(ids)
        self._dao.delete_subcategories_by_category(cat.name)
        self._dao.delete(category_id)
        return deleted

    # ── Subcategories ────────────────────────────────────────────────────────

    def get_subcategories(self, category_name: str) -> list[Subcategory]:
        return self._dao.get_subcategories(category_name)

    def add_subcategory(self, name: str, category_name: str) -> Subcategory:
        name = name.strip()
        if not name:
            raise ValidationError("Subcategory name cannot be empty.")
        if not category_name:
            raise ValidationError("Subcategory needs a parent category.")
        existing = [s.name.lower() for s in self._dao.get_subcategories(category_name)]
        if name.lower() in existing:
            raise ValidationError(f"'{name}' already exists under '{category_name}'.")
        return self._dao.create_subcategory(name, category_name)

    def delete_subcategory(self, subcategory_id: int):
        self._dao.delete_subcategory(subcategory_id)

    def _require(self, category_id: int) -> Category:
        cat = self._dao.get_by_id(category_id)
        if cat is None:
            raise NotFoundError("Category", category_id)
        return cat
