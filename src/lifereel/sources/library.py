"""In-memory person and photo store.

Bucket membership is never stored: it follows from ``date_taken``, so
re-dating a photo is all it takes to move it to another bucket.

Example:
    >>> library = PhotoLibrary()
    >>> library.update_person(person)
    >>> library.add_photo(person.id, picked_photo)
    >>> library.update_photo_date(person.id, picked_photo.id, datetime(2024, 2, 1))
"""

from __future__ import annotations

import logging
from datetime import datetime

from lifereel.core.models import Person, Photo

logger = logging.getLogger(__name__)


class PersonNotFoundError(KeyError):
    """Raised when a person id is not in the library."""

    pass


class PhotoLibrary:
    """Stores people and the photos attached to them."""

    def __init__(self) -> None:
        self._people: dict[str, Person] = {}

    def people(self) -> list[Person]:
        return list(self._people.values())

    def get_person(self, person_id: str) -> Person:
        try:
            return self._people[person_id]
        except KeyError:
            raise PersonNotFoundError(person_id) from None

    def update_person(self, person: Person) -> Person:
        """Insert or replace a person."""
        self._people[person.id] = person
        return person

    def delete_person(self, person_id: str) -> None:
        self.get_person(person_id)
        del self._people[person_id]

    def add_photo(self, person_id: str, asset: Photo) -> Photo:
        """Attach a photo to a person.

        Adding a photo whose id is already attached returns the existing
        photo unchanged.

        Returns:
            The stored photo.
        """
        person = self.get_person(person_id)
        for existing in person.photos:
            if existing.id == asset.id:
                logger.debug(f"Photo {asset.id} already attached to {person.name}")
                return existing
        person.photos.append(asset)
        return asset

    def update_photo_date(self, person_id: str, photo_id: str, date_taken: datetime) -> Photo:
        """Re-date a photo, which implicitly moves it to another bucket.

        Raises:
            KeyError: If the photo is not attached to the person.
        """
        person = self.get_person(person_id)
        for i, photo in enumerate(person.photos):
            if photo.id == photo_id:
                updated = photo.with_date(date_taken)
                person.photos[i] = updated
                return updated
        raise KeyError(photo_id)

    def delete_photo(self, person_id: str, photo_id: str) -> bool:
        """Detach a photo. Returns False if it was not attached."""
        person = self.get_person(person_id)
        remaining = [p for p in person.photos if p.id != photo_id]
        removed = len(remaining) != len(person.photos)
        person.photos = remaining
        return removed

    def sorted_photos(self, person_id: str, newest_first: bool = False) -> list[Photo]:
        """A person's photos in chronological (or reverse) order."""
        person = self.get_person(person_id)
        return sorted(person.photos, key=lambda p: p.date_taken, reverse=newest_first)
