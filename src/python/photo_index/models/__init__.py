"""Enumerations shared by the catalog and the media inspector."""

from photo_index.models.enums import FileFormat, FileType, IndexResult

__all__ = [
    "FileFormat",
    "FileType",
    "IndexResult",
]
