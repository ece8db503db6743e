"""Photo source for a local folder of images.

Dates come from EXIF, in priority order ``DateTimeOriginal``,
``DateTimeDigitized``, ``DateTime``. EXIF stores wall-clock time without a
zone, so dates are returned naive unless a ``tzinfo`` is supplied. Images
without a usable EXIF date are skipped with a warning; no substitute date is
invented.

Example:
    >>> source = LocalFolderPhotoSource(Path("~/Pictures/ada").expanduser())
    >>> photos = source.all()
"""

from __future__ import annotations

import hashlib
import logging
import os
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, ClassVar, Iterator

from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import TAGS

from lifereel.core.models import Photo
from lifereel.sources.base import PhotoSource

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
EXIF_IFD_POINTER = 0x8769
DATE_TAGS = ("DateTimeOriginal", "DateTimeDigitized", "DateTime")


def parse_exif_datetime(value: Any) -> datetime | None:
    """Parse an EXIF datetime string such as "2019:06:15 14:30:22".

    Returns:
        Naive datetime, or None if the value is missing or malformed.
    """
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip().rstrip("\x00"), EXIF_DATETIME_FORMAT)
    except ValueError:
        logger.debug(f"Could not parse EXIF datetime: {value!r}")
        return None


def date_taken_from_exif(exif: dict[str, Any]) -> datetime | None:
    """Pick the best capture date from decoded EXIF tags."""
    for tag in DATE_TAGS:
        dt = parse_exif_datetime(exif.get(tag))
        if dt is not None:
            return dt
    return None


class LocalFolderPhotoSource(PhotoSource):
    """Photos found under a directory, dated from their EXIF data.

    Args:
        root: Directory to scan recursively.
        tz: Timezone attached to EXIF wall-clock times (naive if None).
    """

    supported_extensions: ClassVar[set[str]] = {
        ".jpg",
        ".jpeg",
        ".png",
        ".heic",
        ".heif",
        ".webp",
        ".tiff",
        ".tif",
    }

    def __init__(self, root: Path, tz: tzinfo | None = None) -> None:
        self.root = root
        self.tz = tz
        self.skipped: list[Path] = []

    def all(self) -> list[Photo]:
        """Scan the folder and return every dated photo."""
        self.skipped = []
        photos = []
        for path in self._iter_images():
            date_taken = date_taken_from_exif(self._read_exif(path))
            if date_taken is None:
                logger.warning(f"No EXIF capture date in {path.name}; skipping")
                self.skipped.append(path)
                continue
            if self.tz is not None:
                date_taken = date_taken.replace(tzinfo=self.tz)
            photos.append(Photo(id=self._photo_id(path), date_taken=date_taken, image_ref=path))
        logger.debug(f"Found {len(photos)} dated photos under {self.root} ({len(self.skipped)} skipped)")
        return photos

    def _iter_images(self) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for filename in sorted(filenames):
                if filename.startswith("."):
                    continue
                path = Path(dirpath) / filename
                if path.suffix.lower() in self.supported_extensions:
                    yield path

    def _read_exif(self, path: Path) -> dict[str, Any]:
        """Decode EXIF tags (base IFD plus the Exif sub-IFD) by name."""
        try:
            with Image.open(path) as img:
                exif = img.getexif()
                decoded = {TAGS.get(tag_id, tag_id): value for tag_id, value in exif.items()}
                for tag_id, value in exif.get_ifd(EXIF_IFD_POINTER).items():
                    decoded[TAGS.get(tag_id, tag_id)] = value
                return decoded
        except (OSError, UnidentifiedImageError) as e:
            logger.debug(f"Could not read EXIF from {path}: {e}")
            return {}

    @staticmethod
    def _photo_id(path: Path) -> str:
        return hashlib.sha256(str(path.resolve()).encode("utf-8")).hexdigest()[:16]
