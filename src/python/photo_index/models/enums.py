"""Enumerations for photo-index models."""

from enum import Enum
from pathlib import PurePath


class FileFormat(Enum):
    """File formats recognised by extension; the value is the usual extension."""

    # camera raw
    ARW = "arw"
    CR2 = "cr2"
    CR3 = "cr3"
    DNG = "dng"
    NEF = "nef"
    ORF = "orf"
    RAF = "raf"
    RW2 = "rw2"

    JPEG = "jpg"
    PNG = "png"
    WEBP = "webp"
    HEIC = "heic"
    HEIF = "heif"
    TIFF = "tiff"

    # sidecars written by editors and phones
    XMP = "xmp"
    THM = "thm"
    AAE = "aae"

    AVI = "avi"
    MOV = "mov"
    MP4 = "mp4"

    UNKNOWN = "unknown"

    @classmethod
    def from_extension(cls, extension: str) -> "FileFormat":
        """Look up an extension, case-insensitive, leading dot optional."""
        return _BY_EXTENSION.get(extension.lower().lstrip("."), cls.UNKNOWN)

    @classmethod
    def from_filename(cls, filename: str) -> "FileFormat":
        """Format of the last extension of a name or path, e.g. CR2 for ``IMG_1234.CR2``."""
        return cls.from_extension(PurePath(filename).suffix)

    @property
    def is_raw(self) -> bool:
        return self in RAW_FORMATS

    @property
    def is_image(self) -> bool:
        """Any still photo format, raw included."""
        return self in RAW_FORMATS or self in STILL_FORMATS

    @property
    def is_decodable(self) -> bool:
        """Pillow opens it without extra plugins."""
        return self in (FileFormat.JPEG, FileFormat.PNG, FileFormat.WEBP)

    @property
    def is_sidecar(self) -> bool:
        return self in SIDECAR_FORMATS

    @property
    def is_video(self) -> bool:
        return self in VIDEO_FORMATS


RAW_FORMATS = frozenset({
    FileFormat.ARW, FileFormat.CR2, FileFormat.CR3, FileFormat.DNG,
    FileFormat.NEF, FileFormat.ORF, FileFormat.RAF, FileFormat.RW2,
})
STILL_FORMATS = frozenset({
    FileFormat.JPEG, FileFormat.PNG, FileFormat.WEBP,
    FileFormat.HEIC, FileFormat.HEIF, FileFormat.TIFF,
})
SIDECAR_FORMATS = frozenset({FileFormat.XMP, FileFormat.THM, FileFormat.AAE})
VIDEO_FORMATS = frozenset({FileFormat.AVI, FileFormat.MOV, FileFormat.MP4})

_BY_EXTENSION = {fmt.value: fmt for fmt in FileFormat if fmt is not FileFormat.UNKNOWN}
_BY_EXTENSION.update({"jpeg": FileFormat.JPEG, "jpe": FileFormat.JPEG, "tif": FileFormat.TIFF})


class FileType(Enum):
    """
    The type stored on a catalog File record.

    JPEG is the displayable image type: only JPEG files are eligible to be
    the primary file of a Photo and only they get a color summary.
    """
    JPEG = "jpg"
    RAW = "raw"
    HEIF = "heif"
    PNG = "png"
    TIFF = "tiff"
    WEBP = "webp"
    VIDEO = "video"
    SIDECAR = "sidecar"
    OTHER = "other"

    @classmethod
    def from_format(cls, fmt: FileFormat) -> "FileType":
        """Map a FileFormat onto the catalog file type."""
        if fmt == FileFormat.JPEG:
            return cls.JPEG
        if fmt.is_raw:
            return cls.RAW
        if fmt in (FileFormat.HEIC, FileFormat.HEIF):
            return cls.HEIF
        if fmt == FileFormat.PNG:
            return cls.PNG
        if fmt == FileFormat.TIFF:
            return cls.TIFF
        if fmt == FileFormat.WEBP:
            return cls.WEBP
        if fmt.is_video:
            return cls.VIDEO
        if fmt.is_sidecar:
            return cls.SIDECAR
        return cls.OTHER


class IndexResult(Enum):
    """Outcome of reconciling a single media file against the catalog."""
    ADDED = "Added"
    UPDATED = "Updated"

    def __str__(self) -> str:
        return self.value
