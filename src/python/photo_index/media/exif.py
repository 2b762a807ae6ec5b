"""
EXIF reading for still images.

Camera raw and HEIC/HEIF containers are parsed with exifread, everything
else with Pillow. Pillow's IFDs are translated into exifread's tag naming
("Image Make", "EXIF FNumber", "GPS GPSLatitude") so one builder turns
either reader's tags into an ExifData.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import exifread
from PIL import ExifTags, Image

from photo_index.models.enums import FileFormat

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


@dataclass
class ExifData:
    """Camera metadata of one file. Every field is optional.

    focal_length is in millimetres, aperture is the f-number, width and
    height are the pixel size the camera recorded, and coordinates are
    signed decimal degrees.
    """
    captured_at: Optional[datetime] = None
    camera_make: Optional[str] = None
    camera_model: Optional[str] = None
    lens_make: Optional[str] = None
    lens_model: Optional[str] = None
    focal_length: Optional[int] = None
    aperture: Optional[float] = None
    orientation: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None
    artist: Optional[str] = None

    @property
    def has_gps(self) -> bool:
        return self.gps_latitude is not None and self.gps_longitude is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def extract_exif_metadata(file_path: Path) -> Optional[ExifData]:
    """
    Read the EXIF block of an image.

    Returns None for missing or empty files, unreadable containers and
    images that carry no EXIF at all.
    """
    if not file_path.is_file():
        logger.warning("Cannot read EXIF, no such file: %s", file_path)
        return None

    if file_path.stat().st_size == 0:
        logger.warning("Cannot read EXIF, file has no content: %s", file_path)
        return None

    file_format = FileFormat.from_filename(file_path.name)
    if file_format.is_raw or file_format in (FileFormat.HEIC, FileFormat.HEIF):
        tags = _read_exifread_tags(file_path)
    else:
        tags = _read_pillow_tags(file_path)

    if not tags:
        logger.debug("No EXIF in %s", file_path)
        return None

    return _exif_from_tags(tags)


def _read_exifread_tags(file_path: Path) -> Optional[Dict[str, Any]]:
    try:
        with open(file_path, 'rb') as f:
            return exifread.process_file(f, details=False)
    except Exception as e:
        logger.warning("exifread could not parse %s: %s", file_path, e)
        return None


def _read_pillow_tags(file_path: Path) -> Optional[Dict[str, Any]]:
    """Pillow EXIF keyed the way exifread names its tags."""
    try:
        with Image.open(file_path) as img:
            exif = img.getexif()
            if not exif:
                return None

            tags = {f"Image {ExifTags.TAGS.get(k, k)}": v for k, v in exif.items()}
            for k, v in exif.get_ifd(ExifTags.IFD.Exif).items():
                tags[f"EXIF {ExifTags.TAGS.get(k, k)}"] = v
            for k, v in exif.get_ifd(ExifTags.IFD.GPSInfo).items():
                tags[f"GPS {ExifTags.GPSTAGS.get(k, k)}"] = v
            return tags
    except Exception as e:
        logger.warning("Pillow could not read EXIF of %s: %s", file_path, e)
        return None


def _exif_from_tags(tags: Dict[str, Any]) -> ExifData:
    def first(*names):
        for name in names:
            value = _scalar(tags.get(name))
            if value not in (None, ""):
                return value
        return None

    latitude, longitude = _gps_coordinates(tags)

    return ExifData(
        captured_at=_parse_datetime(
            first("EXIF DateTimeOriginal", "Image DateTime", "EXIF DateTimeDigitized")
        ),
        camera_make=_clean_string(first("Image Make")),
        camera_model=_clean_string(first("Image Model")),
        lens_make=_clean_string(first("EXIF LensMake")),
        lens_model=_clean_string(first("EXIF LensModel")),
        focal_length=_to_int(first("EXIF FocalLength")),
        aperture=_to_float(first("EXIF FNumber")),
        orientation=_to_int(first("Image Orientation")),
        width=_to_int(first("EXIF ExifImageWidth")),
        # exifread and Pillow disagree on the name of tag 0xA003
        height=_to_int(first("EXIF ExifImageLength", "EXIF ExifImageHeight")),
        gps_latitude=latitude,
        gps_longitude=longitude,
        artist=_clean_string(first("Image Artist")),
    )


def _raw(tag):
    """Unwrap an exifread tag object; Pillow values pass through."""
    return getattr(tag, "values", tag)


def _scalar(tag):
    value = _raw(tag)
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _parse_datetime(value) -> Optional[datetime]:
    """Parse "YYYY:MM:DD HH:MM:SS"; zeroed or malformed stamps give None."""
    if not value:
        return None

    try:
        return datetime.strptime(str(value).strip().rstrip("\x00"), EXIF_DATETIME_FORMAT)
    except (ValueError, TypeError):
        logger.debug("Ignoring EXIF timestamp %r", value)
        return None


def _ratio_to_float(value) -> float:
    """Pillow IFDRational, exifread Ratio, (num, den) tuple or plain number."""
    if isinstance(value, tuple):
        return value[0] / value[1]
    if hasattr(value, "num") and hasattr(value, "den"):
        return value.num / value.den
    return float(value)


def _to_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return round(_ratio_to_float(value), 2)
    except (ValueError, TypeError, ZeroDivisionError):
        return None


def _to_int(value) -> Optional[int]:
    number = _to_float(value)
    return None if number is None else int(round(number))


def _gps_coordinates(tags: Dict[str, Any]) -> Tuple[Optional[float], Optional[float]]:
    """(latitude, longitude) in decimal degrees, or (None, None) when incomplete."""
    parts = [_raw(tags.get(f"GPS {name}")) for name in
             ("GPSLatitude", "GPSLatitudeRef", "GPSLongitude", "GPSLongitudeRef")]
    if any(part in (None, "", []) for part in parts):
        return None, None

    lat, lat_ref, lon, lon_ref = parts
    try:
        return _dms_to_decimal(tuple(lat), str(lat_ref)), _dms_to_decimal(tuple(lon), str(lon_ref))
    except (ValueError, TypeError, ZeroDivisionError) as e:
        logger.debug("Ignoring GPS block %r: %s", parts, e)
        return None, None


def _dms_to_decimal(dms: Tuple, ref: str) -> float:
    """Degrees, minutes and seconds to signed degrees; S and W are negative."""
    degrees, minutes, seconds = (_ratio_to_float(v) for v in dms)
    decimal = degrees + minutes / 60 + seconds / 3600
    if str(ref).strip().upper()[:1] in {"S", "W"}:
        decimal = -decimal
    return round(decimal, 6)


def _clean_string(value) -> Optional[str]:
    """Strip whitespace and NUL padding; blank strings become None."""
    if value is None:
        return None
    value = str(value).strip().rstrip("\x00").strip()
    return value or None
