"""DateRangeResolver - turn a bucket label back into a date window.

This is the inverse of bucketing: given a label and the birth date it returns
the ``[start, end)`` window a photo source should be filtered to when the user
wants to add photos to that bucket.

    ====================================  ==============================================
    Label                                 Window
    ====================================  ==============================================
    Birth Month                           [birth, birth + 1 month)
    M Months                              [birth + M months, birth + M+1 months)
    Y Years                               [birth + Y years, birth + Y+1 years)
    W Weeks Pregnant                      [anchor - 7 days, end_of_day(anchor))
    W Weeks and D Days Pregnant           [anchor - (D+1) days, end_of_day(anchor))
    Before Pregnancy                      [earliest, birth - 40 weeks]
    Pregnancy                             [earliest, birth)
    ====================================  ==============================================

where ``anchor = birth - (40 - W) * 7 days``. Pregnancy-week windows are
picker windows: they contain every photo filed under the label and may also
contain neighbouring days.

Example:
    >>> resolver = DateRangeResolver()
    >>> window = resolver.resolve_range("2 Months", datetime(2024, 1, 15))
    >>> window.start, window.end
    (datetime.datetime(2024, 3, 15, 0, 0), datetime.datetime(2024, 4, 15, 0, 0))
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from typing import Any

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, computed_field, model_validator

from lifereel.core.age import DAYS_PER_WEEK, PREGNANCY_WEEKS, normalize_instants
from lifereel.core.errors import UnresolvableLabelError
from lifereel.core.labels import (
    LABEL_TYPES,
    BeforePregnancyLabel,
    BirthMonthLabel,
    BucketLabel,
    MonthLabel,
    PregnancyLabel,
    PregnancyWeekLabel,
    YearLabel,
    parse_label,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================


def end_of_day(dt: datetime) -> datetime:
    """Last representable instant of the calendar day of ``dt``."""
    return datetime.combine(dt.date(), time.max, tzinfo=dt.tzinfo)


def start_of_day(dt: datetime) -> datetime:
    """Midnight at the start of the calendar day of ``dt``."""
    return datetime.combine(dt.date(), time.min, tzinfo=dt.tzinfo)


def earliest_instant(tzinfo=None) -> datetime:
    """Earliest supported instant, in the given timezone."""
    return datetime.min.replace(tzinfo=tzinfo)


# =============================================================================
# Models
# =============================================================================


class DateRange(BaseModel):
    """Half-open datetime window.

    Attributes:
        start: Start instant (inclusive).
        end: End instant (exclusive).
    """

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_order(self) -> DateRange:
        if self.end < self.start:
            raise ValueError("end must not precede start")
        return self

    @computed_field
    @property
    def duration(self) -> timedelta:
        """Length of the window."""
        return self.end - self.start

    def contains(self, dt: datetime) -> bool:
        """Check if ``start <= dt < end``."""
        return self.start <= dt < self.end


def fallback_window(now: datetime) -> DateRange:
    """Day-wide window around ``now``.

    Callers use this explicitly when a label cannot be resolved; the
    resolver itself never substitutes it.
    """
    return DateRange(start=start_of_day(now), end=end_of_day(now))


# =============================================================================
# Resolver
# =============================================================================


class DateRangeResolver:
    """Maps bucket labels to the date windows they denote.

    Stateless and safe to share between threads.
    """

    def resolve_range(self, label: BucketLabel | str, birth: Any) -> DateRange:
        """Resolve a label to its ``[start, end)`` window.

        Args:
            label: Label variant or display text, under either granularity.
            birth: Birth date or datetime.

        Returns:
            The window the label denotes.

        Raises:
            UnresolvableLabelError: If the label is empty or outside the
                known vocabulary.
            InvalidInputError: If ``birth`` is invalid.
        """
        birth_dt, _ = normalize_instants(birth, birth)
        if not isinstance(label, (str, *LABEL_TYPES)):
            raise UnresolvableLabelError(label)
        parsed = parse_label(label)

        window = self._resolve(parsed, birth_dt)
        if window is None:
            raise UnresolvableLabelError(label)

        logger.debug(f"Resolved {parsed} to {window.start.isoformat()} .. {window.end.isoformat()}")
        return window

    def _resolve(self, label: BucketLabel, birth: datetime) -> DateRange | None:
        if isinstance(label, BirthMonthLabel):
            return DateRange(start=birth, end=birth + relativedelta(months=1))

        if isinstance(label, MonthLabel):
            return DateRange(
                start=birth + relativedelta(months=label.months),
                end=birth + relativedelta(months=label.months + 1),
            )

        if isinstance(label, YearLabel):
            return DateRange(
                start=birth + relativedelta(years=label.years),
                end=birth + relativedelta(years=label.years + 1),
            )

        if isinstance(label, PregnancyWeekLabel):
            anchor = birth - timedelta(days=(PREGNANCY_WEEKS - label.weeks) * DAYS_PER_WEEK)
            span = label.days + 1 if label.days else DAYS_PER_WEEK
            return DateRange(start=anchor - timedelta(days=span), end=end_of_day(anchor))

        if isinstance(label, BeforePregnancyLabel):
            cutoff = birth - timedelta(days=PREGNANCY_WEEKS * DAYS_PER_WEEK)
            # The cutoff instant itself is still before pregnancy.
            return DateRange(start=earliest_instant(birth.tzinfo), end=cutoff + timedelta(microseconds=1))

        if isinstance(label, PregnancyLabel):
            return DateRange(start=earliest_instant(birth.tzinfo), end=birth)

        return None
