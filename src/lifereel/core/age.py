"""Exact chronological age between a birth date and a photo timestamp.

After birth, age is decomposed with calendar arithmetic (``relativedelta``):
whole years, then whole months, then whole days, such that adding the parts
back to the birth date lands on the target date. Before birth, the gap is
counted in whole days and mapped onto a 40-week pregnancy.

Example:
    >>> from datetime import datetime
    >>> calc = AgeCalculator()
    >>> str(calc.calculate(datetime(2024, 1, 15), datetime(2024, 3, 20)))
    '2 months, 5 days'
    >>> str(calc.calculate(datetime(2024, 6, 1), datetime(2023, 9, 10)))
    '3 weeks, 6 days pregnant'
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any, NamedTuple, Self

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field, model_validator

from lifereel.core.errors import InvalidInputError
from lifereel.utils.text import pluralize

if TYPE_CHECKING:
    from lifereel.core.models import Person

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

PREGNANCY_WEEKS = 40
DAYS_PER_WEEK = 7

NEWBORN_TEXT = "Newborn"
BEFORE_PREGNANCY_TEXT = "Before pregnancy"


# =============================================================================
# Instant Normalization
# =============================================================================


def _as_datetime(value: Any, name: str) -> tuple[datetime, bool]:
    """Convert a date or datetime to a datetime.

    Returns:
        Tuple of (datetime, was_plain_date).
    """
    if value is None:
        raise InvalidInputError(f"{name} is required")
    if isinstance(value, datetime):
        return value, False
    if isinstance(value, date):
        return datetime.combine(value, time.min), True
    raise InvalidInputError(f"{name} must be a date or datetime, got {type(value).__name__}")


def normalize_instants(birth: Any, at: Any) -> tuple[datetime, datetime]:
    """Validate and align a birth instant and a target instant.

    Plain dates become midnight and adopt the other side's timezone. When
    both sides are timezone-aware, ``at`` is converted into the birth
    timezone so that calendar arithmetic happens on the birth calendar.

    Args:
        birth: Birth date or datetime.
        at: Target date or datetime.

    Returns:
        Tuple of (birth, at) as comparable datetimes.

    Raises:
        InvalidInputError: If either value is absent or not a date/datetime,
            or if a naive datetime is mixed with an aware one.
    """
    birth_dt, birth_is_date = _as_datetime(birth, "birth")
    at_dt, at_is_date = _as_datetime(at, "at")

    if birth_is_date and at_dt.tzinfo is not None:
        birth_dt = birth_dt.replace(tzinfo=at_dt.tzinfo)
    if at_is_date and birth_dt.tzinfo is not None:
        at_dt = at_dt.replace(tzinfo=birth_dt.tzinfo)

    if (birth_dt.tzinfo is None) != (at_dt.tzinfo is None):
        raise InvalidInputError("Cannot compare a naive datetime with a timezone-aware one")

    if birth_dt.tzinfo is not None:
        at_dt = at_dt.astimezone(birth_dt.tzinfo)

    return birth_dt, at_dt


# =============================================================================
# Models
# =============================================================================


class AgeComponents(NamedTuple):
    """Calendar offset from birth to a post-birth instant."""

    years: int
    months: int
    days: int


class PregnancyPosition(NamedTuple):
    """Position of a pre-birth instant on the 40-week pregnancy model."""

    days_before_birth: int
    weeks_before_birth: int
    week: int
    remainder_days: int


class Age(BaseModel):
    """Exact age at a point in time.

    Exactly one variant is populated: ``years``/``months``/``days`` after
    birth, or ``pregnancy_weeks``/``extra_days`` before it.

    Attributes:
        years: Whole calendar years since birth.
        months: Whole calendar months within the current year (0..11).
        days: Whole days within the current month.
        pregnancy_weeks: Pregnancy week on the 40-week model (0..40).
            0 means the instant is before the tracked pregnancy window.
        extra_days: Days-before-birth remainder within the week (0..6).
    """

    model_config = ConfigDict(frozen=True)

    years: int | None = Field(default=None, ge=0)
    months: int | None = Field(default=None, ge=0, le=11)
    days: int | None = Field(default=None, ge=0)
    pregnancy_weeks: int | None = Field(default=None, ge=0, le=PREGNANCY_WEEKS)
    extra_days: int | None = Field(default=None, ge=0, le=DAYS_PER_WEEK - 1)

    @model_validator(mode="after")
    def check_single_variant(self) -> Self:
        """Require exactly one complete variant."""
        postnatal = (self.years, self.months, self.days)
        prenatal = (self.pregnancy_weeks, self.extra_days)
        has_postnatal = all(v is not None for v in postnatal)
        has_prenatal = all(v is not None for v in prenatal)

        if any(v is not None for v in postnatal) and not has_postnatal:
            raise ValueError("years, months and days must be set together")
        if any(v is not None for v in prenatal) and not has_prenatal:
            raise ValueError("pregnancy_weeks and extra_days must be set together")
        if has_postnatal == has_prenatal:
            raise ValueError("Exactly one of the postnatal or prenatal variants must be set")
        return self

    @property
    def is_prenatal(self) -> bool:
        return self.pregnancy_weeks is not None

    @property
    def in_tracked_window(self) -> bool:
        """False only for pre-birth instants more than 40 weeks out."""
        return not self.is_prenatal or self.pregnancy_weeks > 0

    def to_display_string(self) -> str:
        """Render the age for display.

        Returns:
            "1 year, 2 months, 5 days" style text, "Newborn" for a zero age,
            "12 weeks, 3 days pregnant" before birth, or "Before pregnancy"
            outside the tracked pregnancy window.
        """
        if self.is_prenatal:
            if not self.in_tracked_window:
                return BEFORE_PREGNANCY_TEXT
            parts = [pluralize(self.pregnancy_weeks, "week")]
            if self.extra_days:
                parts.append(pluralize(self.extra_days, "day"))
            return f"{', '.join(parts)} pregnant"

        parts = []
        if self.years:
            parts.append(pluralize(self.years, "year"))
        if self.months:
            parts.append(pluralize(self.months, "month"))
        if self.days:
            parts.append(pluralize(self.days, "day"))
        return ", ".join(parts) if parts else NEWBORN_TEXT

    def __str__(self) -> str:
        return self.to_display_string()


# =============================================================================
# Calculator
# =============================================================================


class AgeCalculator:
    """Stateless age calculator.

    All methods are pure and safe to call from any thread.

    Example:
        >>> calc = AgeCalculator()
        >>> age = calc.calculate(person.date_of_birth, photo.date_taken)
        >>> age.to_display_string()
    """

    def components(self, birth: Any, at: Any) -> AgeComponents:
        """Calendar (years, months, days) offset for ``at >= birth``.

        Adding the returned parts to ``birth`` with calendar arithmetic
        reproduces the date of ``at``; any time-of-day remainder is dropped.

        Raises:
            InvalidInputError: On invalid instants or if ``at`` precedes birth.
        """
        birth_dt, at_dt = normalize_instants(birth, at)
        if at_dt < birth_dt:
            raise InvalidInputError("components() requires at >= birth")
        delta = relativedelta(at_dt, birth_dt)
        return AgeComponents(years=delta.years, months=delta.months, days=delta.days)

    def pregnancy_position(self, birth: Any, at: Any) -> PregnancyPosition:
        """Place a pre-birth instant on the 40-week pregnancy model.

        Raises:
            InvalidInputError: On invalid instants or if ``at`` is not before birth.
        """
        birth_dt, at_dt = normalize_instants(birth, at)
        if at_dt >= birth_dt:
            raise InvalidInputError("pregnancy_position() requires at < birth")

        days_before = (birth_dt - at_dt).days
        weeks_before = days_before // DAYS_PER_WEEK
        return PregnancyPosition(
            days_before_birth=days_before,
            weeks_before_birth=weeks_before,
            week=max(PREGNANCY_WEEKS - weeks_before, 0),
            remainder_days=days_before % DAYS_PER_WEEK,
        )

    def calculate(self, birth: Any, at: Any) -> Age:
        """Compute the exact age of someone born at ``birth`` at time ``at``.

        Args:
            birth: Birth date or datetime (may be in the future).
            at: The instant to measure at.

        Returns:
            Postnatal Age when ``at >= birth``, otherwise a prenatal Age.

        Raises:
            InvalidInputError: If either instant is absent or malformed.
        """
        birth_dt, at_dt = normalize_instants(birth, at)

        if at_dt >= birth_dt:
            years, months, days = self.components(birth_dt, at_dt)
            return Age(years=years, months=months, days=days)

        position = self.pregnancy_position(birth_dt, at_dt)
        if position.week == 0:
            logger.debug(
                f"{at_dt.isoformat()} is {position.days_before_birth} days before birth, "
                "outside the tracked pregnancy window"
            )
        return Age(pregnancy_weeks=position.week, extra_days=position.remainder_days)

    def calculate_string(self, birth: Any, at: Any) -> str:
        """Shortcut for ``calculate(birth, at).to_display_string()``."""
        return self.calculate(birth, at).to_display_string()

    def describe(self, person: Person, at: Any) -> str:
        """Sentence describing a person's age at ``at``.

        Returns:
            "Ada is 2 months, 5 days", "Ada's mom is 12 weeks pregnant", or
            "Ada's mom is not pregnant yet" outside the pregnancy window.
        """
        age = self.calculate(person.date_of_birth, at)
        if not age.is_prenatal:
            return f"{person.name} is {age}"
        if not age.in_tracked_window:
            return f"{person.name}'s mom is not pregnant yet"
        return f"{person.name}'s mom is {age}"
