"""Keeps each account's balance equal to the signed sum of its linked transactions.

Sign convention: income adds the amount; expense and savings subtract it
(savings is money leaving the source account). A linked account that no
longer exists is skipped without error.
"""
import structlog

from database.account_dao import AccountDAO
from models.transaction import Transaction

logger = structlog.get_logger(__name__)


def signed_effect(tx: Transaction) -> float:
    if tx.type == "income":
        return tx.amount
    if tx.type in ("expense", "savings"):
        return -tx.amount
    return 0.0


class BalanceReconciler:
    def __init__(self, account_dao: AccountDAO):
        self._account_dao = account_dao

    def apply_create(self, tx: Transaction) -> None:
        if tx.account_id is not None:
            self._adjust(tx.account_id, signed_effect(tx), tx.id)

    def apply_delete(self, tx: Transaction) -> None:
        """Reverse the effect of tx; pass the stored record, not edited values."""
        if tx.account_id is not None:
            self._adjust(tx.account_id, -signed_effect(tx), tx.id)

    def apply_edit(self, old: Transaction | None, new: Transaction) -> None:
        """old is None when the stored record vanished; only the new effect applies."""
        if old is None:
            self.apply_create(new)
            return
        if (
            old.account_id == new.account_id
            and old.amount == new.amount
            and old.type == new.type
        ):
            return
        self.apply_delete(old)
        self.apply_create(new)

    def _adjust(self, account_id: int, delta: float, tx_id: int | None) -> None:
        if delta == 0:
            return
        if not self._account_dao.adjust_balance(account_id, delta):
            logger.debug(
                "reconciliation_skipped",
                reason="account_missing",
                account_id=account_id,
                transaction_id=tx_id,
            )
