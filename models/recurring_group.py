from dataclasses import dataclass, field

from models.transaction import Transaction, TransactionTemplate


@dataclass
class RecurringGroup:
    """Occurrences treated as one logical series.

    key is the series_id when the occurrences carry one, otherwise the legacy
    (description, category, amount, frequency) tuple.
    """
    key: str | tuple
    frequency: str
    occurrences: list[Transaction] = field(default_factory=list)

    def __post_init__(self):
        self.occurrences = sorted(self.occurrences, key=lambda t: (t.date, t.id))

    @property
    def first(self) -> Transaction:
        return self.occurrences[0]

    @property
    def count(self) -> int:
        return len(self.occurrences)

    @property
    def start_date(self) -> str:
        return self.occurrences[0].date if self.occurrences else ""

    @property
    def end_date(self) -> str:
        return self.occurrences[-1].date if self.occurrences else ""

    @property
    def series_id(self) -> str | None:
        return self.key if isinstance(self.key, str) else None

    @property
    def template(self) -> TransactionTemplate:
        return TransactionTemplate.from_transaction(self.first)
