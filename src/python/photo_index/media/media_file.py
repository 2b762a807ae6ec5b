"""
MediaFile: the indexer's view of one original file on disk.

A MediaFile answers every question the reconciler asks about a file: content
hash, canonical name, type, decoded pixels, EXIF, location, dimensions, colors
and the set of sibling files that belong to the same capture. Expensive
answers (hash, EXIF, siblings) are computed once and cached.
"""

import hashlib
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from photo_index.exceptions import DecodeError, LocationError, MetadataError, SiblingError
from photo_index.media.colors import ColorSummary, summarize_colors
from photo_index.media.exif import ExifData, extract_exif_metadata
from photo_index.media.geocoding import Geocoder, LocationInfo
from photo_index.media.patterns import extract_base_name, parse_date_from_filename
from photo_index.models.enums import FileFormat, FileType

logger = logging.getLogger(__name__)

HASH_CHUNK_SIZE = 1024 * 1024


class MediaFile:
    """
    A single original file.

    Args:
        path: Path to an existing regular file

    Raises:
        FileNotFoundError: If the path does not exist or is not a file
    """

    def __init__(self, path: Union[str, Path]):
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Not a file: {path}")

        self.path = path.absolute()
        self.format = FileFormat.from_filename(self.path.name)
        self._hash: Optional[str] = None
        self._exif: Optional[ExifData] = None
        self._exif_loaded = False
        self._size: Optional[Tuple[int, int]] = None
        self._siblings: Optional[Tuple[List["MediaFile"], "MediaFile"]] = None

    def __repr__(self) -> str:
        return f"MediaFile({str(self.path)!r})"

    @property
    def filename(self) -> str:
        """Absolute path as a string; used as the run-scoped identity."""
        return str(self.path)

    @property
    def file_type(self) -> FileType:
        return FileType.from_format(self.format)

    def is_image(self) -> bool:
        """Check if this is the displayable image type (JPEG)."""
        return self.file_type == FileType.JPEG

    def is_photo(self) -> bool:
        """Check if this file is worth seeding a group from."""
        return self.format.is_image

    def is_raw(self) -> bool:
        return self.format.is_raw

    def hash(self) -> str:
        """SHA-256 of the file content (hex)."""
        if self._hash is None:
            sha256_hash = hashlib.sha256()
            with open(self.path, "rb") as f:
                for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
                    sha256_hash.update(chunk)
            self._hash = sha256_hash.hexdigest()
        return self._hash

    def canonical_name(self) -> str:
        """Identity shared by every variant of the same capture."""
        base_name, _ = extract_base_name(self.path.name)
        return base_name

    def relative_path(self, root: Union[str, Path]) -> str:
        """Path relative to the originals root, or the bare filename when outside it."""
        try:
            return self.path.relative_to(Path(root).absolute()).as_posix()
        except ValueError:
            return self.path.name

    # Siblings

    def siblings(self) -> Tuple[List["MediaFile"], "MediaFile"]:
        """
        Find every file in the same directory sharing this file's base name.

        The main file of the group is a RAW file if there is one, otherwise
        the JPEG with the shortest name, otherwise this file.

        Returns:
            Tuple of (all related files sorted by name, main file)

        Raises:
            SiblingError: If the directory cannot be read
        """
        if self._siblings is not None:
            return self._siblings

        canonical_name = self.canonical_name()
        related: List[MediaFile] = []

        try:
            entries = sorted(self.path.parent.iterdir())
        except OSError as e:
            raise SiblingError(f"Cannot list {self.path.parent}: {e}") from e

        for entry in entries:
            if entry.name.startswith(".") or not entry.is_file():
                continue
            if extract_base_name(entry.name)[0] != canonical_name:
                continue
            if entry == self.path:
                related.append(self)
                continue
            try:
                related.append(MediaFile(entry))
            except OSError as e:
                logger.debug("Skipping unreadable sibling %s: %s", entry, e)

        if self not in related:
            related.append(self)

        main_file = self._elect_main(related)
        self._siblings = (related, main_file)
        return self._siblings

    def _elect_main(self, related: List["MediaFile"]) -> "MediaFile":
        raws = [f for f in related if f.is_raw()]
        if raws:
            return raws[0]

        jpegs = [f for f in related if f.is_image()]
        if jpegs:
            return min(jpegs, key=lambda f: len(f.path.name))

        return self

    def jpeg(self) -> Optional["MediaFile"]:
        """This file if it is a JPEG, else its shortest-named JPEG sibling."""
        if self.is_image():
            return self
        try:
            related, _ = self.siblings()
        except SiblingError as e:
            logger.debug("No JPEG sibling for %s: %s", self.path, e)
            return None
        jpegs = [f for f in related if f.is_image()]
        return min(jpegs, key=lambda f: len(f.path.name)) if jpegs else None

    # Pixels

    def decode(self) -> Image.Image:
        """
        Decode the file into a Pillow image.

        Files Pillow cannot read (RAW, HEIC, video, sidecars) are decoded
        through their JPEG sibling.

        Raises:
            DecodeError: If neither this file nor a JPEG sibling can be decoded
        """
        source = self if self.format.is_decodable else self.jpeg()
        if source is None:
            raise DecodeError(f"No decodable image for {self.path}")

        try:
            with Image.open(source.path) as img:
                img.load()
                return img.copy()
        except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Cannot decode {source.path}: {e}") from e

    def color_summary(self, decoded: Image.Image) -> ColorSummary:
        return summarize_colors(decoded)

    # Metadata

    def exif(self) -> ExifData:
        """
        EXIF metadata of this file, falling back to its JPEG sibling.

        Raises:
            MetadataError: If no EXIF data could be read
        """
        if not self._exif_loaded:
            self._exif_loaded = True
            self._exif = extract_exif_metadata(self.path) if self.format.is_image else None
            if self._exif is None and not self.is_image():
                jpeg = self.jpeg()
                if jpeg is not None:
                    self._exif = extract_exif_metadata(jpeg.path)

        if self._exif is None:
            raise MetadataError(f"No EXIF data in {self.path}")
        return self._exif

    def _metadata(self) -> ExifData:
        try:
            return self.exif()
        except MetadataError:
            return ExifData()

    def location(self, geocoder: Optional[Geocoder]) -> LocationInfo:
        """
        Resolve the capture location from EXIF GPS coordinates.

        Raises:
            LocationError: If there are no coordinates or the geocoder fails
        """
        if geocoder is None:
            raise LocationError("No geocoder configured")

        try:
            exif = self.exif()
        except MetadataError as e:
            raise LocationError(str(e)) from e

        if not exif.has_gps:
            raise LocationError(f"No GPS coordinates in {self.path}")

        return geocoder.reverse(exif.gps_latitude, exif.gps_longitude)

    def camera_model(self) -> str:
        return self._metadata().camera_model or ""

    def camera_make(self) -> str:
        return self._metadata().camera_make or ""

    def lens_model(self) -> str:
        return self._metadata().lens_model or ""

    def lens_make(self) -> str:
        return self._metadata().lens_make or ""

    def focal_length(self) -> int:
        return self._metadata().focal_length or 0

    def aperture(self) -> float:
        return self._metadata().aperture or 0.0

    def orientation(self) -> int:
        return self._metadata().orientation or 1

    def capture_time(self) -> datetime:
        """EXIF capture time, else a date in the filename, else the modification time."""
        captured_at = self._metadata().captured_at
        if captured_at is None:
            captured_at = parse_date_from_filename(self.path.name)
        if captured_at is None:
            captured_at = datetime.fromtimestamp(self.path.stat().st_mtime)
        return captured_at

    def _dimensions(self) -> Tuple[int, int]:
        if self._size is None:
            self._size = (0, 0)
            if self.format.is_decodable:
                try:
                    with Image.open(self.path) as img:
                        self._size = img.size
                except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
                    logger.debug("Cannot read dimensions of %s: %s", self.path, e)
            elif self.format.is_image:
                exif = self._metadata()
                self._size = (exif.width or 0, exif.height or 0)
        return self._size

    def width(self) -> int:
        return self._dimensions()[0]

    def height(self) -> int:
        return self._dimensions()[1]

    def aspect_ratio(self) -> float:
        width, height = self._dimensions()
        if width <= 0 or height <= 0:
            return 0.0
        return round(width / height, 2)

    def mime_type(self) -> str:
        """MIME type sniffed from the file content (python-magic)."""
        try:
            import magic
        except ImportError:
            logger.error("python-magic not installed. Install with: pip install python-magic")
            return ""

        try:
            return magic.from_file(str(self.path), mime=True)
        except (OSError, magic.MagicException) as e:
            logger.debug("Cannot sniff MIME type of %s: %s", self.path, e)
            return ""
