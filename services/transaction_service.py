import math
from dataclasses import replace
from typing import Iterable

import structlog

from models.transaction import Transaction, TransactionTemplate
from database.transaction_dao import TransactionDAO
from services.balance_reconciler import BalanceReconciler
from utils.constants import FREQUENCIES, TRANSACTION_TYPES
from utils.date_helpers import format_date, parse_date
from utils.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class TransactionService:
    """Pairs every ledger write with the matching balance reconciliation."""

    def __init__(self, tx_dao: TransactionDAO, reconciler: BalanceReconciler):
        self._dao = tx_dao
        self._reconciler = reconciler

    def get_by_id(self, tx_id: int) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def list_recent(self, offset: int = 0, limit: int = 100) -> list[Transaction]:
        return self._dao.list_recent(offset, limit)

    def get_all(self) -> list[Transaction]:
        return self._dao.get_all()

    def create(
        self,
        template: TransactionTemplate,
        date,
        frequency: str = "none",
        series_id: str | None = None,
    ) -> Transaction:
        template = self.validate_template(template)
        date_str = self._validate_date(date)
        self._validate_frequency(frequency)
        tx = self._dao.create(
            description=template.description,
            amount=template.amount,
            type_=template.type,
            category=template.category,
            date=date_str,
            frequency=frequency,
            subcategory=template.subcategory,
            account_id=template.account_id,
            series_id=series_id,
        )
        self._reconciler.apply_create(tx)
        return tx

    def update(self, tx: Transaction) -> Transaction:
        template = self.validate_template(TransactionTemplate.from_transaction(tx))
        new = replace(
            tx,
            description=template.description,
            amount=template.amount,
            category=template.category,
            subcategory=template.subcategory,
            date=self._validate_date(tx.date),
        )
        self._validate_frequency(new.frequency)

        stored = self._dao.get_by_id(tx.id)
        if stored is None:
            raise NotFoundError("Transaction", tx.id)
        self._reconciler.apply_edit(stored, new)
        return self._dao.update(new)

    def delete(self, tx_id: int) -> bool:
        """Delete and reverse the stored effect. Absent ids are skipped (False)."""
        stored = self._dao.get_by_id(tx_id)
        if stored is None:
            logger.debug("delete_skipped", transaction_id=tx_id, reason="not_found")
            return False
        try:
            self._dao.delete(tx_id)
        except NotFoundError:
            return False
        self._reconciler.apply_delete(stored)
        return True

    def delete_many(self, tx_ids: Iterable[int]) -> int:
        """Best-effort batch delete; returns the number of transactions removed."""
        return sum(1 for tx_id in tx_ids if self.delete(tx_id))

    # ── Validation ───────────────────────────────────────────────────────────

    def validate_template(self, template: TransactionTemplate) -> TransactionTemplate:
        """Return a normalized copy of template or raise ValidationError."""
        description = (template.description or "").strip()
        if not description:
            raise ValidationError("Description cannot be empty.")
        try:
            amount = float(template.amount)
        except (TypeError, ValueError):
            raise ValidationError(f"Amount must be numeric: {template.amount!r}") from None
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Amount must be positive.")
        if template.type not in TRANSACTION_TYPES:
            raise ValidationError(f"Invalid type: {template.type}")
        subcategory = (template.subcategory or "").strip() or None
        return replace(
            template,
            description=description,
            amount=amount,
            category=(template.category or "").strip(),
            subcategory=subcategory,
        )

    @staticmethod
    def _validate_date(value) -> str:
        d = parse_date(value)
        if d is None:
            raise ValidationError("Invalid date format. Use YYYY-MM-DD.")
        return format_date(d)

    @staticmethod
    def _validate_frequency(frequency: str):
        if frequency not in FREQUENCIES:
            raise ValidationError(f"Invalid frequency: {frequency}")
