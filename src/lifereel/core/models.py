"""Core data models for lifereel.

A ``Person`` owns a set of dated ``Photo`` objects. The chronology engine
never persists anything of its own: ``Bucket`` objects are recomputed from
the photo set on every call.

Example:
    >>> from datetime import datetime
    >>> person = Person(name="Ada", date_of_birth=datetime(2024, 1, 15))
    >>> photo = Photo(date_taken=datetime(2024, 3, 20), image_ref="IMG_0042")
    >>> person.photos.append(photo)
"""

from __future__ import annotations

import uuid as uuid_module
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field, field_validator

from lifereel.core.labels import BucketLabel


# =============================================================================
# Enums
# =============================================================================


class Granularity(str, Enum):
    """How finely photos are split into age buckets.

    Attributes:
        FINE: Pregnancy weeks (with day remainders), birth month, months, years.
        COARSE: A single pregnancy bucket, months 0..11, years.
    """

    FINE = "fine"
    COARSE = "coarse"


class SortOrder(str, Enum):
    """Display direction applied on top of the canonical bucket order.

    Attributes:
        OLDEST_TO_LATEST: Canonical order as produced.
        LATEST_TO_OLDEST: Canonical order reversed.
    """

    OLDEST_TO_LATEST = "oldest_to_latest"
    LATEST_TO_OLDEST = "latest_to_oldest"

    def toggled(self) -> SortOrder:
        """Return the other direction."""
        if self is SortOrder.OLDEST_TO_LATEST:
            return SortOrder.LATEST_TO_OLDEST
        return SortOrder.OLDEST_TO_LATEST


class BirthMonthsDisplay(str, Enum):
    """Whether month stacks are shown for the first year.

    Attributes:
        TWELVE_MONTHS: Show birth month and months 1..11.
        NONE: Only show year stacks after birth.
    """

    TWELVE_MONTHS = "twelve_months"
    NONE = "none"

    @classmethod
    def for_birth(cls, date_of_birth: datetime, now: datetime) -> BirthMonthsDisplay:
        """Pick the default for a newly added person.

        People younger than 24 months get month stacks; older people only
        get years.
        """
        age = relativedelta(now, date_of_birth)
        total_months = age.years * 12 + age.months
        return cls.TWELVE_MONTHS if total_months < 24 else cls.NONE


# =============================================================================
# Helpers
# =============================================================================


def _coerce_datetime(v: Any) -> Any:
    """Accept datetimes, dates (as midnight) and ISO strings.

    Anything else is passed through for pydantic to reject.
    """
    if isinstance(v, datetime):
        return v
    if isinstance(v, date):
        return datetime.combine(v, time.min)
    if isinstance(v, str):
        try:
            return datetime.fromisoformat(v)
        except ValueError:
            return v
    return v


# =============================================================================
# Models
# =============================================================================


class Photo(BaseModel):
    """A single dated photo.

    Photos compare equal by ``id`` and order by ``date_taken``. The
    ``image_ref`` is opaque to lifereel; it belongs to whatever photo library
    supplied the record.

    Attributes:
        id: Unique identifier (UUID, auto-generated).
        date_taken: When the photo was captured.
        image_ref: Opaque handle into the photo library.
    """

    id: str = Field(default_factory=lambda: str(uuid_module.uuid4()))
    date_taken: datetime
    image_ref: Any = None

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("id", mode="before")
    @classmethod
    def generate_id_if_empty(cls, v: str | None) -> str:
        """Generate UUID if empty or None."""
        if not v:
            return str(uuid_module.uuid4())
        return v

    @field_validator("date_taken", mode="before")
    @classmethod
    def parse_date_taken(cls, v: Any) -> Any:
        return _coerce_datetime(v)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Photo):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: Photo) -> bool:
        return self.date_taken < other.date_taken

    def with_date(self, date_taken: datetime) -> Photo:
        """Return a copy of this photo re-dated to ``date_taken``."""
        return self.model_copy(update={"date_taken": _coerce_datetime(date_taken)})


class Person(BaseModel):
    """A tracked person and their photos.

    ``date_of_birth`` may lie in the future while a pregnancy is tracked.

    Attributes:
        id: Unique identifier (UUID, auto-generated).
        name: Display name.
        date_of_birth: Birth instant (or due date).
        photos: Photos of this person, unique by id.
        birth_months_display: Whether first-year month stacks are shown.
        hide_empty_stacks: Whether empty stacks are hidden from timelines.
    """

    id: str = Field(default_factory=lambda: str(uuid_module.uuid4()))
    name: str
    date_of_birth: datetime
    photos: list[Photo] = Field(default_factory=list)
    birth_months_display: BirthMonthsDisplay = BirthMonthsDisplay.TWELVE_MONTHS
    hide_empty_stacks: bool = False

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def parse_date_of_birth(cls, v: Any) -> Any:
        return _coerce_datetime(v)

    @field_validator("photos")
    @classmethod
    def ensure_unique_photos(cls, v: list[Photo]) -> list[Photo]:
        """Reject photo lists that repeat an id."""
        seen: set[str] = set()
        for photo in v:
            if photo.id in seen:
                raise ValueError(f"Duplicate photo id: {photo.id}")
            seen.add(photo.id)
        return v

    @classmethod
    def create(cls, name: str, date_of_birth: datetime | date, now: datetime | None = None) -> Person:
        """Create a person with the month-stack default for their age.

        Args:
            name: Display name.
            date_of_birth: Birth instant or due date.
            now: Reference time for the default (defaults to the current time).

        Returns:
            New Person with ``birth_months_display`` chosen from their age.
        """
        dob = _coerce_datetime(date_of_birth)
        if now is None:
            now = datetime.now(dob.tzinfo)
        return cls(
            name=name,
            date_of_birth=dob,
            birth_months_display=BirthMonthsDisplay.for_birth(dob, now),
        )


class Bucket(BaseModel):
    """A labeled group of photos.

    Attributes:
        label: Tagged label variant naming the age window.
        photos: Photos in input traversal order.
    """

    label: BucketLabel
    photos: list[Photo] = Field(default_factory=list)

    @property
    def title(self) -> str:
        """Display text of the label."""
        return str(self.label)

    @property
    def count(self) -> int:
        return len(self.photos)

    def is_empty(self) -> bool:
        return not self.photos
