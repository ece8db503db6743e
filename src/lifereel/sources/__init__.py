"""Photo sources and the person/photo store used around the engine."""

from lifereel.sources.base import InMemoryPhotoSource, PhotoSource, scope_for_label
from lifereel.sources.library import PersonNotFoundError, PhotoLibrary
from lifereel.sources.local_folder import LocalFolderPhotoSource, parse_exif_datetime

__all__ = [
    "PhotoSource",
    "InMemoryPhotoSource",
    "LocalFolderPhotoSource",
    "parse_exif_datetime",
    "scope_for_label",
    "PhotoLibrary",
    "PersonNotFoundError",
]
