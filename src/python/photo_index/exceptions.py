"""
Exception hierarchy for photo-index.

Everything except ConfigError is recoverable inside an indexing run: the
indexer catches these, logs them and carries on with partial metadata.
Database errors are not wrapped; they abort the run.
"""


class PhotoIndexError(Exception):
    """Base exception for all photo-index errors."""
    pass


class DecodeError(PhotoIndexError):
    """Raised when a media file cannot be decoded into an image."""
    pass


class MetadataError(PhotoIndexError):
    """Raised when EXIF or other embedded metadata cannot be extracted."""
    pass


class LocationError(PhotoIndexError):
    """Raised when coordinates are missing or cannot be reverse geocoded."""
    pass


class SiblingError(PhotoIndexError):
    """Raised when the related files of a media file cannot be resolved."""
    pass


class ConfigError(PhotoIndexError):
    """Raised when the configuration is missing or invalid."""
    pass
