"""Bucket labels as a tagged variant.

Every bucket produced by the chronology engine is named by one of a closed
set of label shapes. Instead of comparing display strings, each shape is a
small frozen pydantic model that carries its parsed integers; the display
text is produced by ``str(label)`` and parsed back with :func:`parse_label`.

Vocabulary:
    - ``PregnancyWeekLabel(weeks, days)``: "3 Weeks Pregnant",
      "3 Weeks and 6 Days Pregnant" (weeks 1..39, days 0..6)
    - ``BeforePregnancyLabel``: "Before Pregnancy"
    - ``PregnancyLabel``: "Pregnancy" (coarse granularity)
    - ``BirthMonthLabel``: "Birth Month"
    - ``MonthLabel(months)``: "0 Months" .. "11 Months"
    - ``YearLabel(years)``: "1 Year", "2 Years", ...
    - ``OtherLabel(text)``: anything else, kept verbatim

Example:
    >>> label = parse_label("3 Weeks and 6 Days Pregnant")
    >>> label.weeks, label.days
    (3, 6)
    >>> str(MonthLabel(months=1))
    '1 Month'
"""

from __future__ import annotations

import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lifereel.utils.text import pluralize


# =============================================================================
# Constants
# =============================================================================

BIRTH_MONTH_TEXT = "Birth Month"
BEFORE_PREGNANCY_TEXT = "Before Pregnancy"
PREGNANCY_TEXT = "Pregnancy"

# Canonical pregnancy length in weeks.
PREGNANCY_WEEKS = 40

_WEEKS_AND_DAYS_PATTERN = re.compile(r"^(\d+) Weeks? and (\d+) Days? Pregnant$")
_WEEKS_PATTERN = re.compile(r"^(\d+) Weeks? Pregnant$")
_MONTHS_PATTERN = re.compile(r"^(\d+) Months?$")
_YEARS_PATTERN = re.compile(r"^(\d+) Years?$")


# =============================================================================
# Label Variants
# =============================================================================


class _Label(BaseModel):
    """Shared configuration for all label variants."""

    model_config = ConfigDict(frozen=True)


class PregnancyWeekLabel(_Label):
    """A photo taken during the tracked pregnancy window.

    Attributes:
        weeks: Pregnancy week, 1..39.
        days: Days-before-birth remainder within the week, 0..6.
    """

    kind: Literal["pregnancy_week"] = "pregnancy_week"
    weeks: int = Field(ge=1, le=PREGNANCY_WEEKS - 1)
    days: int = Field(default=0, ge=0, le=6)

    def __str__(self) -> str:
        weeks = pluralize(self.weeks, "Week")
        if self.days > 0:
            return f"{weeks} and {pluralize(self.days, 'Day')} Pregnant"
        return f"{weeks} Pregnant"


class BeforePregnancyLabel(_Label):
    """A photo taken more than 40 weeks before birth."""

    kind: Literal["before_pregnancy"] = "before_pregnancy"

    def __str__(self) -> str:
        return BEFORE_PREGNANCY_TEXT


class PregnancyLabel(_Label):
    """Any pre-birth photo under coarse granularity."""

    kind: Literal["pregnancy"] = "pregnancy"

    def __str__(self) -> str:
        return PREGNANCY_TEXT


class BirthMonthLabel(_Label):
    """The first calendar month of life (and the final pre-birth week)."""

    kind: Literal["birth_month"] = "birth_month"

    def __str__(self) -> str:
        return BIRTH_MONTH_TEXT


class MonthLabel(_Label):
    """Whole calendar months of age within the first year.

    Attributes:
        months: 0..11. Month 0 only appears under coarse granularity.
    """

    kind: Literal["month"] = "month"
    months: int = Field(ge=0, le=11)

    def __str__(self) -> str:
        return pluralize(self.months, "Month")


class YearLabel(_Label):
    """Whole calendar years of age.

    Attributes:
        years: 1 or more.
    """

    kind: Literal["year"] = "year"
    years: int = Field(ge=1)

    def __str__(self) -> str:
        return pluralize(self.years, "Year")


class OtherLabel(_Label):
    """A label outside the known vocabulary, kept verbatim."""

    kind: Literal["other"] = "other"
    text: str

    def __str__(self) -> str:
        return self.text


BucketLabel = Annotated[
    Union[
        PregnancyWeekLabel,
        BeforePregnancyLabel,
        PregnancyLabel,
        BirthMonthLabel,
        MonthLabel,
        YearLabel,
        OtherLabel,
    ],
    Field(discriminator="kind"),
]

LABEL_TYPES = (
    PregnancyWeekLabel,
    BeforePregnancyLabel,
    PregnancyLabel,
    BirthMonthLabel,
    MonthLabel,
    YearLabel,
    OtherLabel,
)


# =============================================================================
# Parsing
# =============================================================================


def _parse_known(text: str) -> _Label | None:
    """Map display text onto a known variant, or None."""
    if text == BIRTH_MONTH_TEXT:
        return BirthMonthLabel()
    if text == BEFORE_PREGNANCY_TEXT:
        return BeforePregnancyLabel()
    if text == PREGNANCY_TEXT:
        return PregnancyLabel()

    if match := _WEEKS_AND_DAYS_PATTERN.match(text):
        return PregnancyWeekLabel(weeks=int(match.group(1)), days=int(match.group(2)))
    if match := _WEEKS_PATTERN.match(text):
        return PregnancyWeekLabel(weeks=int(match.group(1)))
    if match := _MONTHS_PATTERN.match(text):
        return MonthLabel(months=int(match.group(1)))
    if match := _YEARS_PATTERN.match(text):
        return YearLabel(years=int(match.group(1)))
    return None


def parse_label(text: str | BucketLabel) -> BucketLabel:
    """Parse label display text into its tagged variant.

    Text is only accepted as a known variant when it renders back to exactly
    the same string, so "1 Weeks Pregnant", "12 Months" or "0 Years" all come
    back as :class:`OtherLabel`.

    Args:
        text: Display text, or an already-parsed label (returned unchanged).

    Returns:
        The matching label variant, or ``OtherLabel(text=text)``.

    Example:
        >>> parse_label("Birth Month")
        BirthMonthLabel(kind='birth_month')
        >>> parse_label("Graduation")
        OtherLabel(kind='other', text='Graduation')
    """
    if isinstance(text, LABEL_TYPES):
        return text

    try:
        label = _parse_known(text)
    except ValidationError:
        label = None

    if label is None or str(label) != text:
        return OtherLabel(text=text)
    return label


def is_prenatal(label: BucketLabel) -> bool:
    """Check whether a label denotes time before birth.

    ``BirthMonthLabel`` is not prenatal even though fine bucketing also
    files the last pre-birth week under it.
    """
    return isinstance(label, (PregnancyWeekLabel, BeforePregnancyLabel, PregnancyLabel))
