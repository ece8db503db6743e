"""Tests for photo sources and the photo library."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from lifereel.core.models import Person, Photo
from lifereel.core.ranges import DateRange, end_of_day
from lifereel.sources import (
    InMemoryPhotoSource,
    LocalFolderPhotoSource,
    PersonNotFoundError,
    PhotoLibrary,
    parse_exif_datetime,
    scope_for_label,
)
from lifereel.sources.local_folder import date_taken_from_exif


# =============================================================================
# In-memory Source Tests
# =============================================================================


class TestInMemoryPhotoSource:
    """Tests for list-backed sources."""

    def test_fetch_sorts_oldest_first(self, fine_photos: list[Photo]) -> None:
        source = InMemoryPhotoSource(fine_photos)

        fetched = source.fetch()

        assert fetched == sorted(fine_photos, key=lambda p: p.date_taken)

    def test_fetch_filters_half_open(self, make_photo) -> None:
        inside = make_photo(datetime(2024, 3, 15))
        edge = make_photo(datetime(2024, 4, 15))
        source = InMemoryPhotoSource([edge, inside])

        fetched = source.fetch(DateRange(start=datetime(2024, 3, 15), end=datetime(2024, 4, 15)))

        assert fetched == [inside]

    def test_add(self, make_photo) -> None:
        source = InMemoryPhotoSource()
        source.add(make_photo(datetime(2024, 1, 1)))

        assert len(source.all()) == 1


class TestScopeForLabel:
    """Tests for picker scoping."""

    def test_resolvable_label(self, birth: datetime) -> None:
        window = scope_for_label("2 Months", birth, now=datetime(2025, 1, 1))

        assert window.start == datetime(2024, 3, 15)

    def test_unknown_label_falls_back_to_today(self, birth: datetime, caplog) -> None:
        now = datetime(2025, 6, 7, 10, 0)

        with caplog.at_level(logging.WARNING):
            window = scope_for_label("Someday", birth, now=now)

        assert window.start == datetime(2025, 6, 7)
        assert window.end == end_of_day(now)
        assert "falling back" in caplog.text

    def test_fetch_with_scope(self, birth: datetime, fine_photos: list[Photo]) -> None:
        source = InMemoryPhotoSource(fine_photos)

        photos = source.fetch(scope_for_label("Birth Month", birth, now=datetime(2026, 1, 1)))

        assert [p.date_taken for p in photos] == [datetime(2024, 1, 15)]


# =============================================================================
# Local Folder Tests
# =============================================================================


class TestExifParsing:
    """Tests for EXIF datetime handling."""

    def test_parse_exif_datetime(self) -> None:
        assert parse_exif_datetime("2019:06:15 14:30:22") == datetime(2019, 6, 15, 14, 30, 22)

    def test_parse_strips_nul(self) -> None:
        assert parse_exif_datetime("2019:06:15 14:30:22\x00") == datetime(2019, 6, 15, 14, 30, 22)

    @pytest.mark.parametrize("value", [None, "", "0000:00:00 00:00:00", "2019-06-15 14:30:22", 42])
    def test_parse_rejects_bad_values(self, value) -> None:
        assert parse_exif_datetime(value) is None

    def test_tag_priority(self) -> None:
        exif = {
            "DateTime": "2020:01:01 00:00:00",
            "DateTimeOriginal": "2019:06:15 14:30:22",
        }

        assert date_taken_from_exif(exif) == datetime(2019, 6, 15, 14, 30, 22)

    def test_falls_through_malformed_tags(self) -> None:
        exif = {"DateTimeOriginal": "garbage", "DateTime": "2020:01:01 00:00:00"}

        assert date_taken_from_exif(exif) == datetime(2020, 1, 1)


class TestLocalFolderPhotoSource:
    """Tests for scanning a folder of images."""

    def test_finds_dated_images(self, photo_folder: Path) -> None:
        source = LocalFolderPhotoSource(photo_folder)

        photos = source.fetch()

        assert [p.date_taken for p in photos] == [
            datetime(2023, 12, 4, 12, 0),
            datetime(2024, 1, 20, 9, 30),
            datetime(2024, 3, 20, 17, 0),
            datetime(2025, 1, 15, 15, 0),
        ]
        assert all(isinstance(p.image_ref, Path) for p in photos)

    def test_undated_images_are_skipped(self, photo_folder: Path) -> None:
        source = LocalFolderPhotoSource(photo_folder)

        source.all()

        assert [p.name for p in source.skipped] == ["scan.png"]

    def test_ids_are_stable(self, photo_folder: Path) -> None:
        first = {p.image_ref: p.id for p in LocalFolderPhotoSource(photo_folder).all()}
        second = {p.image_ref: p.id for p in LocalFolderPhotoSource(photo_folder).all()}

        assert first == second
        assert len(set(first.values())) == 4

    def test_timezone_attached(self, photo_folder: Path) -> None:
        source = LocalFolderPhotoSource(photo_folder, tz=timezone.utc)

        assert all(p.date_taken.tzinfo is timezone.utc for p in source.all())

    def test_hidden_files_ignored(self, photo_folder: Path, image_factory) -> None:
        hidden = photo_folder / ".thumbs"
        hidden.mkdir()
        image_factory(hidden / "thumb.jpg", datetime(2024, 2, 2))

        assert len(LocalFolderPhotoSource(photo_folder).all()) == 4


# =============================================================================
# Library Tests
# =============================================================================


class TestPhotoLibrary:
    """Tests for the in-memory person and photo store."""

    @pytest.fixture
    def library(self, sample_person: Person) -> PhotoLibrary:
        library = PhotoLibrary()
        library.update_person(sample_person)
        return library

    def test_get_missing_person(self) -> None:
        with pytest.raises(PersonNotFoundError):
            PhotoLibrary().get_person("nobody")

    def test_people(self, library: PhotoLibrary, sample_person: Person) -> None:
        assert library.people() == [sample_person]

    def test_add_photo_is_idempotent(self, library: PhotoLibrary, sample_person: Person, make_photo) -> None:
        photo = make_photo(datetime(2024, 8, 1))

        library.add_photo(sample_person.id, photo)
        library.add_photo(sample_person.id, photo)

        assert sum(1 for p in sample_person.photos if p.id == photo.id) == 1

    def test_update_photo_date(self, library: PhotoLibrary, sample_person: Person) -> None:
        photo = sample_person.photos[0]

        updated = library.update_photo_date(sample_person.id, photo.id, datetime(2024, 2, 1))

        assert updated.id == photo.id
        assert updated.date_taken == datetime(2024, 2, 1)
        assert library.get_person(sample_person.id).photos[0].date_taken == datetime(2024, 2, 1)

    def test_update_missing_photo(self, library: PhotoLibrary, sample_person: Person) -> None:
        with pytest.raises(KeyError):
            library.update_photo_date(sample_person.id, "missing", datetime(2024, 2, 1))

    def test_delete_photo(self, library: PhotoLibrary, sample_person: Person) -> None:
        photo_id = sample_person.photos[0].id

        assert library.delete_photo(sample_person.id, photo_id) is True
        assert library.delete_photo(sample_person.id, photo_id) is False
        assert len(sample_person.photos) == 7

    def test_sorted_photos(self, library: PhotoLibrary, sample_person: Person) -> None:
        newest = library.sorted_photos(sample_person.id, newest_first=True)

        assert newest[0].date_taken == datetime(2026, 2, 1)
        assert library.sorted_photos(sample_person.id)[0].date_taken == datetime(2023, 4, 1)

    def test_delete_person(self, library: PhotoLibrary, sample_person: Person) -> None:
        library.delete_person(sample_person.id)

        assert library.people() == []
        with pytest.raises(PersonNotFoundError):
            library.delete_person(sample_person.id)
