"""Photo sources consumed by the chronology engine.

A photo source yields ``Photo`` records and can be narrowed to a date
window, which is how a picker is scoped to the bucket the user is filling.

Example:
    >>> source = InMemoryPhotoSource(photos)
    >>> window = scope_for_label("2 Months", person.date_of_birth, now)
    >>> candidates = source.fetch(window)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable

from lifereel.core.errors import UnresolvableLabelError
from lifereel.core.labels import BucketLabel
from lifereel.core.models import Photo
from lifereel.core.ranges import DateRange, DateRangeResolver, fallback_window

logger = logging.getLogger(__name__)


class PhotoSource(ABC):
    """Abstract base class for photo sources."""

    @abstractmethod
    def all(self) -> list[Photo]:
        """Return every photo the source knows about."""

    def fetch(self, date_range: DateRange | None = None) -> list[Photo]:
        """Return photos within ``date_range``, oldest first.

        Args:
            date_range: Half-open window; None returns everything.

        Returns:
            Photos with ``start <= date_taken < end``, sorted by date taken.
        """
        photos = self.all()
        if date_range is not None:
            photos = [p for p in photos if date_range.contains(p.date_taken)]
        return sorted(photos, key=lambda p: p.date_taken)


class InMemoryPhotoSource(PhotoSource):
    """Photo source backed by a list."""

    def __init__(self, photos: Iterable[Photo] = ()) -> None:
        self._photos = list(photos)

    def all(self) -> list[Photo]:
        return list(self._photos)

    def add(self, photo: Photo) -> None:
        self._photos.append(photo)


def scope_for_label(
    label: BucketLabel | str,
    birth: Any,
    now: datetime,
    resolver: DateRangeResolver | None = None,
) -> DateRange:
    """Window a picker should show when filling the bucket ``label``.

    When the label cannot be resolved the day-wide window around ``now`` is
    used instead, and the substitution is logged.

    Args:
        label: Bucket label or display text.
        birth: Birth date or datetime of the person.
        now: Current time, anchoring the fallback window.
        resolver: Resolver to use (a default one if omitted).

    Returns:
        The resolved window, or the fallback window.
    """
    resolver = resolver or DateRangeResolver()
    try:
        return resolver.resolve_range(label, birth)
    except UnresolvableLabelError as e:
        logger.warning(f"{e}; falling back to the day of {now.date().isoformat()}")
        return fallback_window(now)
