"""Central Pytest Fixtures for lifereel.

Fixtures included:
- Dates: birth, due_date
- Photos: make_photo factory, fine_photos spanning pregnancy to year 2
- People: sample_person
- Folders: photo_folder with EXIF-dated JPEGs and one undated PNG
- Config: clean_config (cache reset, no LIFEREEL_* env leakage)
- Logging: reset_package_logger (autouse)
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from lifereel.config import reset_config
from lifereel.core.models import Person, Photo


# =============================================================================
# Helper Functions
# =============================================================================


def create_test_image(
    path: Path,
    exif_datetime: datetime | None = None,
    color: str = "red",
) -> Path:
    """Create a small image, optionally with a DateTimeOriginal EXIF tag.

    Args:
        path: Where to save the image.
        exif_datetime: Datetime to embed as DateTimeOriginal.
        color: Solid fill color.

    Returns:
        Path to the created image.
    """
    img = Image.new("RGB", (16, 16), color=color)

    if exif_datetime:
        exif = img.getexif()
        # 36867 is DateTimeOriginal
        exif[36867] = exif_datetime.strftime("%Y:%m:%d %H:%M:%S")
        img.save(path, exif=exif)
    else:
        img.save(path)

    return path


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def birth() -> datetime:
    """Birth date used across scenarios."""
    return datetime(2024, 1, 15)


@pytest.fixture
def due_date() -> datetime:
    """A due date used for pregnancy scenarios."""
    return datetime(2024, 6, 1)


@pytest.fixture
def make_photo() -> Callable[..., Photo]:
    """Factory creating photos with readable ids."""

    def _make(date_taken: datetime, photo_id: str | None = None) -> Photo:
        return Photo(
            id=photo_id or f"photo-{date_taken:%Y%m%d%H%M%S}",
            date_taken=date_taken,
            image_ref=f"asset://{date_taken:%Y%m%d}",
        )

    return _make


@pytest.fixture
def fine_photos(make_photo) -> list[Photo]:
    """Photos around a 2024-01-15 birth, newest first."""
    dates = [
        datetime(2026, 2, 1),  # 2 Years
        datetime(2025, 1, 20),  # 1 Year
        datetime(2024, 6, 20),  # 5 Months
        datetime(2024, 3, 20),  # 2 Months
        datetime(2024, 1, 15),  # Birth Month
        datetime(2024, 1, 12),  # 3 days before birth -> Birth Month
        datetime(2023, 12, 4),  # 42 days before -> 34 Weeks Pregnant
        datetime(2023, 4, 1),  # > 40 weeks before -> Before Pregnancy
    ]
    return [make_photo(d) for d in dates]


@pytest.fixture
def sample_person(birth, fine_photos) -> Person:
    """A person with photos spanning pregnancy to year two."""
    return Person(id="person-ada", name="Ada", date_of_birth=birth, photos=fine_photos)


@pytest.fixture
def photo_folder(tmp_path: Path) -> Path:
    """Folder with three dated JPEGs, a nested one, and an undated PNG."""
    create_test_image(tmp_path / "newborn.jpg", datetime(2024, 1, 20, 9, 30))
    create_test_image(tmp_path / "two_months.jpg", datetime(2024, 3, 20, 17, 0))
    create_test_image(tmp_path / "bump.jpg", datetime(2023, 12, 4, 12, 0))
    nested = tmp_path / "first_birthday"
    nested.mkdir()
    create_test_image(nested / "cake.jpg", datetime(2025, 1, 15, 15, 0))
    create_test_image(tmp_path / "scan.png")
    (tmp_path / "notes.txt").write_text("not a photo")
    return tmp_path


@pytest.fixture
def clean_config(monkeypatch, tmp_path):
    """Isolate configuration from the developer's environment."""
    for key in list(os.environ):
        if key.upper().startswith("LIFEREEL_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def image_factory() -> Callable[..., Path]:
    """Expose create_test_image to tests."""
    return create_test_image


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() so caplog sees lifereel records."""
    yield
    package_logger = logging.getLogger("lifereel")
    package_logger.handlers = []
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
