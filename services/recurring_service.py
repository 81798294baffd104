from datetime import date, timedelta
from uuid import uuid4

import structlog

from models.transaction import Transaction, TransactionTemplate
from services.transaction_service import TransactionService
from utils.constants import (
    DAY_STEPS, FREQUENCIES, MAX_SERIES_OCCURRENCES, OPEN_ENDED_OCCURRENCE_CAP,
    WEEKDAY_FREQUENCIES,
)
from utils.date_helpers import add_months, add_years, format_date, next_weekday_on_or_after, parse_date
from utils.errors import ValidationError

logger = structlog.get_logger(__name__)


class RecurringService:
    """Expands a transaction template into a dated series of occurrences."""

    def __init__(
        self,
        tx_service: TransactionService,
        open_ended_cap: int = OPEN_ENDED_OCCURRENCE_CAP,
    ):
        self._tx_svc = tx_service
        self._open_ended_cap = max(1, open_ended_cap)

    def occurrence_dates(
        self,
        frequency: str,
        start: date,
        end: date | None = None,
        max_count: int | None = None,
    ) -> list[date]:
        """
        Ordered occurrence dates from start through end (inclusive).

        Monthly and yearly steps are anchored on start's day-of-month, so
        2024-01-31 monthly yields 01-31, 02-29, 03-31. Open-ended series stop at
        max_count (default: the configured open-ended cap).
        """
        if frequency not in FREQUENCIES:
            raise ValidationError(f"Invalid frequency: {frequency}")
        if frequency == "none":
            return [start]
        if max_count is None:
            max_count = self._open_ended_cap if end is None else MAX_SERIES_OCCURRENCES
        max_count = min(max_count, MAX_SERIES_OCCURRENCES)

        result: list[date] = []
        current = start
        while len(result) < max_count:
            if end is not None and current > end:
                break
            result.append(current)
            current = self._nth_occurrence(frequency, start, len(result))
        return result

    def plan_series(
        self,
        frequency: str,
        date_,
        start_date=None,
        end_date=None,
        preferred_weekday: int | None = None,
        max_count: int | None = None,
    ) -> list[date]:
        """Resolve the series window and return its occurrence dates.

        preferred_weekday (0=Mon..6=Sun) only applies to weekly-like series when
        no explicit start_date is given; the base date moves forward to it.
        """
        if frequency not in FREQUENCIES:
            raise ValidationError(f"Invalid frequency: {frequency}")
        base = parse_date(date_)
        if base is None:
            raise ValidationError("Invalid date format. Use YYYY-MM-DD.")
        if frequency == "none":
            return [base]

        if start_date:
            start = parse_date(start_date)
            if start is None:
                raise ValidationError("Invalid start date.")
        else:
            start = base
            if preferred_weekday is not None and frequency in WEEKDAY_FREQUENCIES:
                if preferred_weekday not in range(7):
                    raise ValidationError("Preferred weekday must be 0 (Mon) to 6 (Sun).")
                start = next_weekday_on_or_after(base, preferred_weekday)

        end = None
        if end_date:
            end = parse_date(end_date)
            if end is None:
                raise ValidationError("Invalid end date.")
            if end < start:
                raise ValidationError("End date cannot be before start date.")

        return self.occurrence_dates(frequency, start, end, max_count)

    def expand(
        self,
        template: TransactionTemplate,
        frequency: str,
        date_,
        start_date=None,
        end_date=None,
        preferred_weekday: int | None = None,
        max_count: int | None = None,
    ) -> list[tuple[TransactionTemplate, str]]:
        """(template, date) pairs for the series. Writes nothing."""
        template = self._tx_svc.validate_template(template)
        dates = self.plan_series(
            frequency, date_, start_date, end_date, preferred_weekday, max_count
        )
        return [(template, format_date(d)) for d in dates]

    def create_series(
        self,
        template: TransactionTemplate,
        frequency: str,
        date_,
        start_date=None,
        end_date=None,
        preferred_weekday: int | None = None,
        max_count: int | None = None,
    ) -> list[Transaction]:
        """
        Create one transaction per planned date, earliest first.
        Returns the created transactions.

        Earlier occurrences stay committed if a later one fails; the error is
        logged with the committed count and re-raised.
        """
        planned = self.expand(
            template, frequency, date_, start_date, end_date, preferred_weekday, max_count
        )
        series_id = uuid4().hex if frequency != "none" else None

        created: list[Transaction] = []
        for occurrence, date_str in planned:
            try:
                created.append(
                    self._tx_svc.create(occurrence, date_str, frequency, series_id)
                )
            except Exception:
                logger.exception(
                    "series_partially_created",
                    series_id=series_id,
                    committed=len(created),
                    planned=len(planned),
                )
                raise

        if series_id:
            logger.info(
                "series_created",
                series_id=series_id,
                frequency=frequency,
                occurrences=len(created),
                first=created[0].date,
                last=created[-1].date,
            )
        return created

    @staticmethod
    def _nth_occurrence(frequency: str, anchor: date, n: int) -> date:
        if frequency in DAY_STEPS:
            return anchor + timedelta(days=DAY_STEPS[frequency] * n)
        if frequency == "monthly":
            return add_months(anchor, n)
        if frequency == "yearly":
            return add_years(anchor, n)
        raise ValidationError(f"Invalid frequency: {frequency}")
