from dataclasses import dataclass
from typing import Optional


@dataclass
class Transaction:
    id: int
    description: str
    amount: float           # always a positive magnitude
    type: str               # 'income' | 'expense' | 'savings'
    category: str
    date: str               # 'YYYY-MM-DD'
    frequency: str = "none"
    subcategory: Optional[str] = None
    account_id: Optional[int] = None
    series_id: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def is_recurring(self) -> bool:
        return self.frequency != "none"


@dataclass
class TransactionTemplate:
    """Caller-supplied payload for one or more new transactions."""
    description: str
    amount: float
    type: str
    category: str
    subcategory: Optional[str] = None
    account_id: Optional[int] = None

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionTemplate":
        return cls(
            description=tx.description,
            amount=tx.amount,
            type=tx.type,
            category=tx.category,
            subcategory=tx.subcategory,
            account_id=tx.account_id,
        )
