"""Media inspection: hashing, naming, EXIF, colors, geocoding and sibling discovery."""

from photo_index.media.colors import ColorSummary, summarize_colors
from photo_index.media.exif import ExifData, extract_exif_metadata
from photo_index.media.geocoding import Geocoder, LocationInfo, NominatimGeocoder
from photo_index.media.media_file import MediaFile
from photo_index.media.patterns import extract_base_name, parse_date_from_filename

__all__ = [
    "ColorSummary",
    "ExifData",
    "Geocoder",
    "LocationInfo",
    "MediaFile",
    "NominatimGeocoder",
    "extract_base_name",
    "extract_exif_metadata",
    "parse_date_from_filename",
    "summarize_colors",
]
