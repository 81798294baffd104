from dataclasses import replace

import structlog

from models.account import Account, ACCOUNT_TYPES, TRANSACTIONAL_ACCOUNT_TYPES
from database.account_dao import AccountDAO
from utils.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class AccountService:
    def __init__(self, account_dao: AccountDAO):
        self._dao = account_dao

    def get_all(self) -> list[Account]:
        return self._dao.get_all()

    def get_by_id(self, account_id: int) -> Account | None:
        return self._dao.get_by_id(account_id)

    def get_transactional(self) -> list[Account]:
        """Accounts that can be linked to a transaction."""
        return [a for a in self._dao.get_all() if a.account_type in TRANSACTIONAL_ACCOUNT_TYPES]

    def create(
        self,
        name: str,
        account_type: str = "checking",
        balance: float = 0.0,
    ) -> Account:
        name = self._validate_name(name)
        if self._dao.get_by_name(name):
            raise ValidationError(f"An account named '{name}' already exists.")
        self._validate_type(account_type)
        return self._dao.create(name, account_type, self._coerce_balance(balance))

    def rename(self, account_id: int, name: str, account_type: str | None = None) -> Account:
        """Change name and/or type. The balance is left to the reconciler."""
        current = self._require(account_id)
        name = self._validate_name(name)
        existing = self._dao.get_by_name(name)
        if existing and existing.id != account_id:
            raise ValidationError(f"An account named '{name}' already exists.")
        account_type = account_type or current.account_type
        self._validate_type(account_type)
        return self._dao.update(replace(current, name=name, account_type=account_type))

    def set_balance(self, account_id: int, balance: float) -> Account:
        """Manual correction; bypasses reconciliation."""
        current = self._require(account_id)
        balance = self._coerce_balance(balance)
        logger.info(
            "balance_corrected",
            account_id=account_id,
            previous=current.balance,
            balance=balance,
        )
        return self._dao.update(replace(current, balance=balance))

    def delete(self, account_id: int):
        """Linked transactions keep their account_id; reconciliation skips them from now on."""
        linked = self._dao.count_transactions(account_id)
        self._dao.delete(account_id)
        if linked:
            logger.info("account_deleted_with_links", account_id=account_id, linked=linked)

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _require(self, account_id: int) -> Account:
        account = self._dao.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    @staticmethod
    def _validate_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name cannot be empty.")
        return name

    @staticmethod
    def _validate_type(account_type: str):
        if account_type not in ACCOUNT_TYPES:
            raise ValidationError(
                f"Invalid account type '{account_type}'. "
                f"Must be one of: {', '.join(ACCOUNT_TYPES)}."
            )

    @staticmethod
    def _coerce_balance(balance) -> float:
        try:
            return float(balance)
        except (TypeError, ValueError):
            raise ValidationError(f"Balance must be numeric: {balance!r}") from None
