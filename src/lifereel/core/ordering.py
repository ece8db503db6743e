"""BucketOrderer - canonical ordering of age buckets.

Buckets are ranked by label variant, tier by tier:

1. Pregnancy weeks, descending (39 Weeks Pregnant ... 1 Week Pregnant),
   with day-remainder labels after their whole week, then Before Pregnancy
   (week 0) and the coarse Pregnancy bucket.
2. Birth Month.
3. Months, ascending (0 Months ... 11 Months).
4. Years, descending by default ("5 Years" before "1 Year"); ascending when
   the orderer is built with ``YearOrder.ASCENDING``.
5. Labels outside the vocabulary, by descending label text.

The display direction toggle (:class:`SortOrder`) is applied afterwards by
reversing the canonical list.

Example:
    >>> orderer = BucketOrderer()
    >>> [b.title for b in orderer.order(buckets)]
    ['1 Week Pregnant', 'Birth Month', '5 Months', '2 Years']
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, TypeVar

from lifereel.core.labels import (
    BeforePregnancyLabel,
    BirthMonthLabel,
    BucketLabel,
    MonthLabel,
    PregnancyLabel,
    PregnancyWeekLabel,
    YearLabel,
    parse_label,
)
from lifereel.core.models import Bucket, SortOrder

logger = logging.getLogger(__name__)

T = TypeVar("T")


class YearOrder(str, Enum):
    """Direction of the year tier within the canonical order."""

    DESCENDING = "descending"
    ASCENDING = "ascending"


class BucketOrderer:
    """Sorts buckets into canonical order and applies the display toggle.

    Args:
        year_order: Direction of the year tier.
    """

    def __init__(self, year_order: YearOrder = YearOrder.DESCENDING) -> None:
        self.year_order = year_order

    def rank(self, label: BucketLabel | str) -> tuple[int, int, int] | None:
        """Sort key of a label within the fixed vocabulary.

        Args:
            label: Label variant or display text.

        Returns:
            A (tier, primary, secondary) tuple, or None for labels outside
            the vocabulary.
        """
        label = parse_label(label)

        if isinstance(label, PregnancyWeekLabel):
            return (0, -label.weeks, label.days)
        if isinstance(label, BeforePregnancyLabel):
            return (0, 0, 0)
        if isinstance(label, PregnancyLabel):
            return (0, 0, 1)
        if isinstance(label, BirthMonthLabel):
            return (1, 0, 0)
        if isinstance(label, MonthLabel):
            return (2, label.months, 0)
        if isinstance(label, YearLabel):
            years = label.years if self.year_order is YearOrder.ASCENDING else -label.years
            return (3, years, 0)
        return None

    def order_labels(self, labels: Iterable[BucketLabel | str]) -> list[BucketLabel]:
        """Sort labels into canonical order."""
        return self._sorted([parse_label(label) for label in labels], lambda label: label)

    def order(self, buckets: Iterable[Bucket]) -> list[Bucket]:
        """Sort buckets into canonical order.

        Args:
            buckets: Buckets in any order.

        Returns:
            New list in canonical order; the input is not modified.
        """
        return self._sorted(list(buckets), lambda bucket: bucket.label)

    def reverse(self, buckets: Iterable[T]) -> list[T]:
        """Reverse an ordered list. ``reverse(reverse(x)) == x``."""
        return list(reversed(list(buckets)))

    def apply_sort_order(self, buckets: Iterable[Bucket], sort_order: SortOrder) -> list[Bucket]:
        """Canonically order buckets, then reverse them for LATEST_TO_OLDEST."""
        ordered = self.order(buckets)
        if sort_order is SortOrder.LATEST_TO_OLDEST:
            return self.reverse(ordered)
        return ordered

    def _sorted(self, items: list[T], label_of) -> list[T]:
        known: list[tuple[tuple[int, int, int], T]] = []
        unknown: list[T] = []
        for item in items:
            key = self.rank(label_of(item))
            if key is None:
                unknown.append(item)
            else:
                known.append((key, item))

        if unknown:
            logger.debug(f"Ordering {len(unknown)} labels outside the vocabulary by text")

        known.sort(key=lambda pair: pair[0])
        unknown.sort(key=lambda item: str(label_of(item)), reverse=True)
        return [item for _, item in known] + unknown
