"""Pytest configuration and shared fixtures."""

from datetime import datetime
from pathlib import Path
from typing import Generator, List, Optional

import pytest
from PIL import Image
from sqlalchemy.orm import Session

from photo_index.catalog import CatalogStore
from photo_index.database import create_catalog_engine, init_db
from photo_index.exceptions import DecodeError, LocationError, MetadataError, SiblingError
from photo_index.media.colors import ColorSummary
from photo_index.media.exif import ExifData
from photo_index.media.geocoding import LocationInfo
from photo_index.models.enums import FileType

ORIGINALS = Path("/originals")


class FakeMediaFile:
    """In-memory stand-in for MediaFile with fully controllable answers."""

    def __init__(
        self,
        name: str,
        content_hash: Optional[str] = None,
        file_type: FileType = FileType.JPEG,
        canonical: Optional[str] = None,
        taken_at: datetime = datetime(2023, 6, 1, 12, 0, 0),
        image: Optional[Image.Image] = None,
        exif: Optional[ExifData] = None,
        location: Optional[LocationInfo] = None,
        camera: tuple = ("", ""),
        lens: tuple = ("", ""),
        focal_length: int = 0,
        aperture: float = 0.0,
        size: tuple = (0, 0),
        orientation: int = 1,
        siblings: Optional[tuple] = None,
        sibling_error: Optional[Exception] = None,
    ):
        self.path = ORIGINALS / name
        self._hash = content_hash or f"hash-{name}"
        self._file_type = file_type
        self._canonical = canonical or name.split(".")[0]
        self._taken_at = taken_at
        self._image = image
        self._exif = exif
        self._location = location
        self._camera = camera
        self._lens = lens
        self._focal_length = focal_length
        self._aperture = aperture
        self._size = size
        self._orientation = orientation
        self._siblings = siblings
        self._sibling_error = sibling_error
        self.decode_calls = 0

    def __repr__(self) -> str:
        return f"FakeMediaFile({self.path.name!r})"

    @property
    def filename(self) -> str:
        return str(self.path)

    @property
    def file_type(self) -> FileType:
        return self._file_type

    def is_image(self) -> bool:
        return self._file_type == FileType.JPEG

    def is_photo(self) -> bool:
        return self._file_type in (FileType.JPEG, FileType.RAW, FileType.HEIF, FileType.PNG)

    def hash(self) -> str:
        return self._hash

    def canonical_name(self) -> str:
        return self._canonical

    def relative_path(self, root) -> str:
        return self.path.relative_to(root).as_posix()

    def siblings(self):
        if self._sibling_error is not None:
            raise self._sibling_error
        if self._siblings is None:
            return [self], self
        return self._siblings

    def decode(self) -> Image.Image:
        self.decode_calls += 1
        if self._image is None:
            raise DecodeError(f"cannot decode {self.path.name}")
        return self._image

    def exif(self) -> ExifData:
        if self._exif is None:
            raise MetadataError(f"no exif in {self.path.name}")
        return self._exif

    def location(self, geocoder) -> LocationInfo:
        if self._location is None:
            raise LocationError(f"no location for {self.path.name}")
        return self._location

    def camera_model(self) -> str:
        return self._camera[0]

    def camera_make(self) -> str:
        return self._camera[1]

    def lens_model(self) -> str:
        return self._lens[0]

    def lens_make(self) -> str:
        return self._lens[1]

    def focal_length(self) -> int:
        return self._focal_length

    def aperture(self) -> float:
        return self._aperture

    def width(self) -> int:
        return self._size[0]

    def height(self) -> int:
        return self._size[1]

    def aspect_ratio(self) -> float:
        return round(self._size[0] / self._size[1], 2) if self._size[1] else 0.0

    def orientation(self) -> int:
        return self._orientation

    def mime_type(self) -> str:
        return "image/jpeg" if self.is_image() else "application/octet-stream"

    def capture_time(self) -> datetime:
        return self._taken_at

    def color_summary(self, decoded) -> ColorSummary:
        return ColorSummary(main_color="red", palette="444444444", luminance="444444444", saturation=15)


class FakeClassifier:
    """Returns a fixed list of predictions for every image."""

    def __init__(self, predictions: List):
        self.predictions = predictions
        self.calls = 0

    def classify(self, image):
        self.calls += 1
        return list(self.predictions)


class Clock:
    """Mutable clock for staleness tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        from datetime import timedelta
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """In-memory SQLite catalog session."""
    engine = create_catalog_engine("sqlite://")
    init_db(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def store(session: Session) -> CatalogStore:
    return CatalogStore(session)


@pytest.fixture
def originals() -> Path:
    return ORIGINALS


@pytest.fixture
def make_media():
    """Factory for FakeMediaFile instances."""
    return FakeMediaFile


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2024, 1, 1, 9, 0, 0))


@pytest.fixture
def rgb_image() -> Image.Image:
    return Image.new("RGB", (30, 20), (255, 0, 0))


@pytest.fixture
def make_classifier():
    return FakeClassifier


def write_jpeg(path: Path, color=(255, 0, 0), size=(30, 20), exif=None) -> Path:
    """Write a small JPEG, optionally with EXIF."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", size, color)
    if exif is not None:
        img.save(path, "JPEG", exif=exif)
    else:
        img.save(path, "JPEG")
    return path


@pytest.fixture
def jpeg_writer():
    return write_jpeg
