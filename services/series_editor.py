"""
Recurring groups and range edits.

A group is keyed by its series_id; occurrences without one fall back to the
(description, category, amount, frequency) value key. Range edits are a
positional diff: the i-th existing occurrence in date order takes the i-th new
date, surplus occurrences are deleted, missing ones are created from the
group's first occurrence.
"""
from dataclasses import dataclass, field, replace
from datetime import date, timedelta

import structlog

from database.transaction_dao import TransactionDAO
from models.recurring_group import RecurringGroup
from models.transaction import Transaction
from services.transaction_service import TransactionService
from utils.constants import NOMINAL_INTERVAL_DAYS, SERIES_EDIT_CAP
from utils.date_helpers import format_date, parse_date
from utils.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


@dataclass
class SeriesEditResult:
    target_dates: list[str] = field(default_factory=list)
    updated: list[Transaction] = field(default_factory=list)
    deleted_ids: list[int] = field(default_factory=list)
    created: list[Transaction] = field(default_factory=list)


def group_key(tx: Transaction) -> str | tuple:
    if tx.series_id:
        return tx.series_id
    return (tx.description, tx.category, tx.amount, tx.frequency)


class SeriesEditor:
    def __init__(
        self,
        tx_dao: TransactionDAO,
        tx_service: TransactionService,
        max_count: int = SERIES_EDIT_CAP,
    ):
        self._tx_dao = tx_dao
        self._tx_svc = tx_service
        self._max_count = max_count

    def get_groups(self) -> list[RecurringGroup]:
        """All recurring groups, ordered by first occurrence date."""
        buckets: dict = {}
        for tx in self._tx_dao.get_recurring():
            buckets.setdefault(group_key(tx), []).append(tx)
        groups = [
            RecurringGroup(key=key, frequency=txs[0].frequency, occurrences=txs)
            for key, txs in buckets.items()
        ]
        groups.sort(key=lambda g: (g.start_date, g.first.id))
        return groups

    def get_group(self, key) -> RecurringGroup | None:
        if isinstance(key, str):
            txs = self._tx_dao.get_by_series(key)
            if not txs:
                return None
            return RecurringGroup(key=key, frequency=txs[0].frequency, occurrences=txs)
        return next((g for g in self.get_groups() if g.key == tuple(key)), None)

    def infer_interval(self, group: RecurringGroup) -> int:
        """Day gap between the first two occurrences, or the nominal interval."""
        occurrences = group.occurrences
        if len(occurrences) >= 2:
            gap = (parse_date(occurrences[1].date) - parse_date(occurrences[0].date)).days
            if gap > 0:
                return gap
        return NOMINAL_INTERVAL_DAYS.get(group.frequency, 30)

    def target_dates(
        self,
        start: date,
        end: date | None,
        interval_days: int,
        max_count: int | None = None,
    ) -> list[date]:
        cap = max_count or self._max_count
        result: list[date] = []
        current = start
        while end is None or current <= end:
            result.append(current)
            if len(result) >= cap:
                break
            current += timedelta(days=interval_days)
        return result

    def edit_range(
        self,
        group: RecurringGroup,
        new_start,
        new_end=None,
        max_count: int | None = None,
    ) -> SeriesEditResult:
        """
        Re-derive group's occurrences for [new_start, new_end].

        Existing occurrences keep their identifiers where a target date exists
        at the same position; amount, type and account are untouched so those
        updates leave balances unchanged. Deletions reverse and creations apply
        their balance effect.
        """
        start = parse_date(new_start)
        if start is None:
            raise ValidationError("A valid start date is required.")
        end = None
        if new_end:
            end = parse_date(new_end)
            if end is None:
                raise ValidationError("Invalid end date.")
            if end < start:
                raise ValidationError("End date cannot be before start date.")
        if not group.occurrences:
            raise ValidationError("Recurring group has no occurrences.")

        existing = sorted(group.occurrences, key=lambda t: (t.date, t.id))
        interval = self.infer_interval(group)
        targets = [format_date(d) for d in self.target_dates(start, end, interval, max_count)]
        result = SeriesEditResult(target_dates=targets)

        for tx, new_date in zip(existing, targets):
            stored = self._tx_dao.get_by_id(tx.id)
            if stored is None:
                logger.debug("series_edit_skipped", transaction_id=tx.id, reason="not_found")
                continue
            try:
                result.updated.append(self._tx_svc.update(replace(stored, date=new_date)))
            except NotFoundError:
                logger.debug("series_edit_skipped", transaction_id=tx.id, reason="not_found")

        surplus = [tx.id for tx in existing[len(targets):]]
        for tx_id in surplus:
            if self._tx_svc.delete(tx_id):
                result.deleted_ids.append(tx_id)

        template = group.template
        for new_date in targets[len(existing):]:
            result.created.append(
                self._tx_svc.create(template, new_date, group.frequency, group.series_id)
            )

        logger.info(
            "series_edited",
            group=str(group.key),
            interval_days=interval,
            updated=len(result.updated),
            deleted=len(result.deleted_ids),
            created=len(result.created),
        )
        return result

    def delete_group(self, group: RecurringGroup) -> int:
        """Delete every occurrence of group. Confirmation is the caller's job."""
        deleted = self._tx_svc.delete_many(tx.id for tx in group.occurrences)
        logger.info("series_deleted", group=str(group.key), deleted=deleted)
        return deleted
