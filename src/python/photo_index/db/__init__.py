"""Catalog database models."""

from photo_index.db.models import Base, Camera, Country, File, Lens, Location, Photo, Tag, photo_tags

__all__ = [
    "Base",
    "Camera",
    "Country",
    "File",
    "Lens",
    "Location",
    "Photo",
    "Tag",
    "photo_tags",
]
