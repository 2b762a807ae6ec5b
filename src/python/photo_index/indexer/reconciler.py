"""
Photo reconciliation.

PhotoReconciler takes one media file and makes the catalog reflect it: it
finds or creates the logical Photo the file belongs to (keyed by canonical
name), enriches new or stale photos with metadata, and finds or creates the
File record for this particular variant, electing the primary file on the way.

Enrichment is best effort. A file that cannot be decoded, has no EXIF or no
resolvable location still produces a Photo and a File with whatever metadata
was available. Database errors are not caught.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from PIL import Image

from photo_index.catalog import CatalogStore
from photo_index.classifier import Classifier
from photo_index.config import IndexSettings
from photo_index.db.models import Camera, Country, File, Lens, Location, Photo, Tag
from photo_index.exceptions import DecodeError, LocationError, MetadataError
from photo_index.indexer.tags import TagResolver
from photo_index.media.geocoding import Geocoder
from photo_index.models.enums import IndexResult

logger = logging.getLogger(__name__)


def title_case(text: str) -> str:
    """Upper-case the first letter of every word, leaving the rest untouched."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


class _DecodeOnce:
    """Decodes a media file at most once per reconciliation."""

    def __init__(self, media_file):
        self.media_file = media_file
        self._done = False
        self._image: Optional[Image.Image] = None

    @property
    def image(self) -> Optional[Image.Image]:
        if not self._done:
            self._done = True
            try:
                self._image = self.media_file.decode()
            except DecodeError as e:
                logger.debug("Skipping image enrichment: %s", e)
        return self._image


class PhotoReconciler:
    """
    Find-or-create Photo and File records for media files.

    Args:
        store: Catalog store
        originals_path: Library root; file paths are stored relative to it
        classifier: Optional image classifier for semantic tags
        geocoder: Optional reverse geocoder for GPS coordinates
        settings: Thresholds (confidence, staleness window, title length)
        clock: Returns the current time; defaults to datetime.now
    """

    def __init__(
        self,
        store: CatalogStore,
        originals_path: Union[str, Path],
        classifier: Optional[Classifier] = None,
        geocoder: Optional[Geocoder] = None,
        settings: Optional[IndexSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.originals_path = Path(originals_path)
        self.geocoder = geocoder
        self.settings = settings or IndexSettings()
        self.clock = clock
        self.tags = TagResolver(store, classifier, self.settings.confidence_threshold)

    def reconcile(self, media_file) -> IndexResult:
        """
        Bring the catalog in line with one media file.

        Returns:
            IndexResult.ADDED if a new File record was created,
            IndexResult.UPDATED if an existing one was overwritten
        """
        canonical_name = media_file.canonical_name()
        file_hash = media_file.hash()
        relative_path = media_file.relative_path(self.originals_path)
        decoded = _DecodeOnce(media_file)

        photo = self.store.find_one(Photo, canonical_name=canonical_name)

        if photo is None:
            photo = self._create_photo(media_file, canonical_name, decoded)
        elif self._is_stale(photo):
            self._refresh_photo(photo, media_file, decoded)
        else:
            logger.debug("Photo %s updated recently, not refreshing", canonical_name)

        is_primary = self._is_primary(photo, media_file, file_hash, relative_path)

        return self._store_file(photo, media_file, file_hash, relative_path, is_primary, decoded)

    # Photo

    def _create_photo(self, media_file, canonical_name: str, decoded: _DecodeOnce) -> Photo:
        taken_at = media_file.capture_time()
        year = taken_at.strftime("%Y")
        photo = Photo(canonical_name=canonical_name, favorite=False)
        tags: List[Tag] = []

        if decoded.image is not None:
            self._apply_exif(photo, media_file)
            tags = self.tags.classify(decoded.image)

        location = self._resolve_location(media_file)

        if location is not None:
            photo.location = location
            photo.country = self._resolve_country(location)
            tags = self.tags.location_tags(tags, location)
            if not photo.title:
                photo.title = self._location_title(location, year)
        else:
            photo.country = self._nearest_country(taken_at)

        photo.tags = tags

        if not photo.title:
            photo.title = self._fallback_title(photo, year)

        self._apply_camera(photo, media_file)
        photo.taken_at = taken_at

        now = self.clock()
        photo.created_at = now
        photo.updated_at = now

        self.store.create(photo)
        logger.debug("Created photo %s titled %r", canonical_name, photo.title)
        return photo

    def _is_stale(self, photo: Photo) -> bool:
        if photo.updated_at is None:
            return True
        return self.clock() - photo.updated_at > self.settings.staleness_window

    def _refresh_photo(self, photo: Photo, media_file, decoded: _DecodeOnce) -> None:
        if decoded.image is not None:
            self._apply_camera(photo, media_file)
            self._apply_exif(photo, media_file)

        if photo.location_id is None:
            taken_at = photo.taken_at or media_file.capture_time()
            country = self._nearest_country(taken_at, exclude_id=photo.id)
            if country is not None:
                photo.country = country

        if not photo.title:
            year = (photo.taken_at or media_file.capture_time()).strftime("%Y")
            photo.title = self._fallback_title(photo, year)

        photo.updated_at = self.clock()
        self.store.save(photo)
        logger.debug("Refreshed photo %s", photo.canonical_name)

    def _apply_exif(self, photo: Photo, media_file) -> None:
        try:
            exif = media_file.exif()
        except MetadataError as e:
            logger.debug("No EXIF for %s: %s", photo.canonical_name, e)
            return

        if exif.has_gps:
            photo.latitude = exif.gps_latitude
            photo.longitude = exif.gps_longitude
        if exif.artist:
            photo.artist = exif.artist

    def _apply_camera(self, photo: Photo, media_file) -> None:
        camera_model, camera_make = media_file.camera_model(), media_file.camera_make()
        if camera_model or camera_make:
            photo.camera = self.store.first_or_create(Camera, {"model": camera_model, "make": camera_make})

        lens_model, lens_make = media_file.lens_model(), media_file.lens_make()
        if lens_model or lens_make:
            photo.lens = self.store.first_or_create(Lens, {"model": lens_model, "make": lens_make})

        photo.focal_length = media_file.focal_length() or None
        photo.aperture = media_file.aperture() or None

    # References

    def _resolve_location(self, media_file) -> Optional[Location]:
        try:
            info = media_file.location(self.geocoder)
        except LocationError as e:
            logger.info("No location: %s", e)
            return None

        return self.store.first_or_create(
            Location,
            {"id": info.id},
            name=info.name,
            city=info.city,
            county=info.county,
            state=info.state,
            country=info.country,
            country_code=info.country_code,
            category=info.category,
            type=info.type,
            latitude=info.latitude,
            longitude=info.longitude,
        )

    def _resolve_country(self, location: Location) -> Optional[Country]:
        if not location.country_code:
            return None
        return self.store.first_or_create(Country, {"code": location.country_code}, name=location.country)

    def _nearest_country(self, taken_at: datetime, exclude_id: Optional[int] = None) -> Optional[Country]:
        nearest = self.store.nearest_photo(taken_at, exclude_id=exclude_id)
        if nearest is None:
            return None
        return nearest.country

    # Titles

    def _location_title(self, location: Location, year: str) -> Optional[str]:
        if location.name:
            name = title_case(location.name)
            if len(location.name) > self.settings.title_name_max_length or not location.city:
                return f"{name} / {year}"
            return f"{name} / {location.city} / {year}"
        if location.city:
            return f"{location.city} / {location.country} / {year}"
        if location.county:
            return f"{location.county} / {location.country} / {year}"
        return None

    def _fallback_title(self, photo: Photo, year: str) -> str:
        if photo.tags:
            return f"{title_case(photo.tags[0].label)} / {year}"
        if photo.country is not None and photo.country.name:
            return f"{title_case(photo.country.name)} / {year}"
        return f"Unknown / {year}"

    # File

    def _is_primary(self, photo: Photo, media_file, file_hash: str, relative_path: str) -> bool:
        if not media_file.is_image():
            return False

        primary = self.store.primary_file(photo.id)
        if primary is None:
            return True

        return relative_path == primary.path or file_hash == primary.hash

    def _store_file(
        self,
        photo: Photo,
        media_file,
        file_hash: str,
        relative_path: str,
        is_primary: bool,
        decoded: _DecodeOnce,
    ) -> IndexResult:
        file = self.store.find_file(photo.id, file_hash, relative_path)
        created = file is None
        if created:
            file = File()

        file.photo = photo
        file.path = relative_path
        file.hash = file_hash
        file.type = media_file.file_type
        file.mime_type = media_file.mime_type()
        file.orientation = media_file.orientation()
        file.primary = is_primary
        file.missing = False

        width, height = media_file.width(), media_file.height()
        if width > 0 and height > 0:
            file.width = width
            file.height = height
            file.aspect_ratio = media_file.aspect_ratio()

        if media_file.is_image() and decoded.image is not None:
            colors = media_file.color_summary(decoded.image)
            file.main_color = colors.main_color
            file.colors = colors.palette
            file.luminance = colors.luminance
            file.saturation = colors.saturation

        if created:
            self.store.create(file)
        else:
            self.store.save(file)

        if is_primary:
            self.store.demote_primaries(photo.id, keep=file)

        return IndexResult.ADDED if created else IndexResult.UPDATED
