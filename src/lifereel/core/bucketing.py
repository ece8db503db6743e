"""Bucketizer - partition dated photos into labeled age buckets.

Each photo is classified by its calendar offset from the birth date and
appended to the bucket for that label. Two granularities are supported:

    ============================  ===========================  ===================
    Offset                        FINE                         COARSE
    ============================  ===========================  ===================
    > 40 weeks before birth       Before Pregnancy             Pregnancy
    weeks 1..39 of pregnancy      W Weeks [and D Days] Preg.   Pregnancy
    last 6 days before birth      Birth Month                  Pregnancy
    first month of life           Birth Month                  0 Months
    months 1..11                  M Months                     M Months
    years 1+                      Y Years                      Y Years
    ============================  ===========================  ===================

Buckets keep photos in input traversal order and appear in order of first
use; canonical ordering is the job of :mod:`lifereel.core.ordering`.

Example:
    >>> bucketizer = Bucketizer()
    >>> buckets = bucketizer.group(person.photos, person.date_of_birth, Granularity.FINE)
    >>> [b.title for b in buckets]
    ['2 Months', 'Birth Month']
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Iterable

from dateutil.relativedelta import relativedelta

from lifereel.core.age import DAYS_PER_WEEK, PREGNANCY_WEEKS, AgeCalculator, normalize_instants
from lifereel.core.labels import (
    BeforePregnancyLabel,
    BirthMonthLabel,
    BucketLabel,
    MonthLabel,
    PregnancyLabel,
    PregnancyWeekLabel,
    YearLabel,
)
from lifereel.core.models import BirthMonthsDisplay, Bucket, Granularity, Person, Photo

logger = logging.getLogger(__name__)


class Bucketizer:
    """Assigns photos to age bucket labels.

    Stateless apart from the calculator it delegates to; safe to share
    between threads.

    Args:
        calculator: Age calculator providing calendar decomposition.
    """

    def __init__(self, calculator: AgeCalculator | None = None) -> None:
        self.calculator = calculator or AgeCalculator()

    # =========================================================================
    # Classification
    # =========================================================================

    def classify(
        self,
        birth: Any,
        at: Any,
        granularity: Granularity = Granularity.FINE,
    ) -> BucketLabel:
        """Return the bucket label for an instant.

        Args:
            birth: Birth date or datetime.
            at: Photo timestamp.
            granularity: FINE or COARSE labelling policy.

        Returns:
            The label variant for ``at``.

        Raises:
            InvalidInputError: If either instant is invalid.
        """
        birth_dt, at_dt = normalize_instants(birth, at)

        if at_dt >= birth_dt:
            years, months, _ = self.calculator.components(birth_dt, at_dt)
            if years > 0:
                return YearLabel(years=years)
            if granularity is Granularity.COARSE:
                return MonthLabel(months=months)
            if months == 0:
                return BirthMonthLabel()
            return MonthLabel(months=months)

        if granularity is Granularity.COARSE:
            return PregnancyLabel()

        position = self.calculator.pregnancy_position(birth_dt, at_dt)
        if position.week == PREGNANCY_WEEKS:
            return BirthMonthLabel()
        if position.week == 0:
            return BeforePregnancyLabel()
        return PregnancyWeekLabel(weeks=position.week, days=position.remainder_days)

    # =========================================================================
    # Grouping
    # =========================================================================

    def group(
        self,
        photos: Iterable[Photo],
        birth: Any,
        granularity: Granularity = Granularity.FINE,
    ) -> list[Bucket]:
        """Partition photos into buckets.

        Every photo lands in exactly one bucket. Labels with no photos are
        not produced.

        Args:
            photos: Photos in the order they should appear within buckets.
            birth: Birth date or datetime.
            granularity: FINE or COARSE labelling policy.

        Returns:
            Buckets in order of first use.

        Raises:
            InvalidInputError: If ``birth`` or any photo date is invalid.
        """
        # Fail fast on a bad birth even when there are no photos.
        normalize_instants(birth, birth)

        buckets: dict[BucketLabel, Bucket] = {}
        count = 0
        for photo in photos:
            label = self.classify(birth, photo.date_taken, granularity)
            bucket = buckets.get(label)
            if bucket is None:
                bucket = Bucket(label=label)
                buckets[label] = bucket
            bucket.photos.append(photo)
            count += 1

        logger.debug(
            f"Grouped {count} photos into {len(buckets)} {granularity.value} buckets"
        )
        return list(buckets.values())

    # =========================================================================
    # Empty-stack Skeleton
    # =========================================================================

    def expected_labels(
        self,
        birth: Any,
        until: Any,
        granularity: Granularity = Granularity.FINE,
        birth_months_display: BirthMonthsDisplay = BirthMonthsDisplay.TWELVE_MONTHS,
        include_pregnancy: bool = False,
    ) -> list[BucketLabel]:
        """List every label whose window has started by ``until``.

        Used to show empty stacks a user can still fill. Pregnancy labels are
        only listed on request, and then only as whole weeks.

        Args:
            birth: Birth date or datetime.
            until: Reference time, usually now.
            granularity: FINE or COARSE labelling policy.
            birth_months_display: NONE drops the first-year month stacks.
            include_pregnancy: List pregnancy stacks as well.

        Returns:
            Labels in chronological order, oldest first.
        """
        birth_dt, until_dt = normalize_instants(birth, until)
        labels: list[BucketLabel] = []

        if include_pregnancy:
            if granularity is Granularity.COARSE:
                labels.append(PregnancyLabel())
            else:
                for week in range(1, PREGNANCY_WEEKS):
                    # Week W opens strictly after this instant.
                    week_opens = birth_dt - timedelta(days=(PREGNANCY_WEEKS - week + 1) * DAYS_PER_WEEK)
                    if week_opens < until_dt:
                        labels.append(PregnancyWeekLabel(weeks=week))

        if until_dt < birth_dt:
            return labels

        if birth_months_display is BirthMonthsDisplay.TWELVE_MONTHS:
            first_month = 0 if granularity is Granularity.COARSE else 1
            if granularity is Granularity.FINE:
                labels.append(BirthMonthLabel())
            for month in range(first_month, 12):
                if birth_dt + relativedelta(months=month) > until_dt:
                    break
                labels.append(MonthLabel(months=month))

        years = self.calculator.components(birth_dt, until_dt).years
        labels.extend(YearLabel(years=year) for year in range(1, years + 1))
        return labels

    def group_with_empty(
        self,
        person: Person,
        until: datetime,
        granularity: Granularity = Granularity.FINE,
        include_pregnancy: bool = False,
    ) -> list[Bucket]:
        """Group a person's photos and add empty buckets for unfilled stacks.

        Honours ``person.hide_empty_stacks`` and
        ``person.birth_months_display``. Real buckets are always kept.

        Returns:
            Skeleton buckets in chronological order followed by any real
            buckets the skeleton does not cover.
        """
        buckets = self.group(person.photos, person.date_of_birth, granularity)
        if person.hide_empty_stacks:
            return buckets

        by_label = {bucket.label: bucket for bucket in buckets}
        result = [
            by_label.pop(label, None) or Bucket(label=label)
            for label in self.expected_labels(
                person.date_of_birth,
                until,
                granularity,
                person.birth_months_display,
                include_pregnancy,
            )
        ]
        result.extend(by_label.values())
        return result
