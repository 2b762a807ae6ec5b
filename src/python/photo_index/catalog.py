"""
Catalog store on top of a SQLAlchemy session.

The indexer never talks to the session directly; it goes through the small
set of primitives defined here so that reference data (tags, locations,
countries, cameras, lenses) is always resolved through one idempotent
find-or-create operation keyed by an explicit natural key.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Type, TypeVar

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from photo_index.db.models import Base, File, Photo
from photo_index.models.enums import FileType

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class CatalogStore:
    """Record store used by the indexer.

    Writes are flushed immediately so that later lookups in the same run see
    them; committing is left to the caller (see TreeWalker and session_scope).
    Database errors are not caught here.
    """

    def __init__(self, session: Session):
        self.session = session

    def find_one(self, model: Type[ModelT], /, *criteria, **natural_key) -> Optional[ModelT]:
        """Return the first record matching the criteria, or None.

        Args:
            model: Mapped class to query
            *criteria: SQLAlchemy boolean expressions
            **natural_key: Column equality filters (as for filter_by); may
                include a column called "model"
        """
        stmt = select(model)
        if criteria:
            stmt = stmt.where(*criteria)
        if natural_key:
            stmt = stmt.filter_by(**natural_key)
        return self.session.scalars(stmt.limit(1)).first()

    def first_or_create(self, model: Type[ModelT], natural_key: Dict[str, Any], /, **defaults) -> ModelT:
        """Resolve a reference record by its natural key, creating it if needed.

        Calling this twice with the same natural key returns the same record.
        The insert runs inside a savepoint; if another writer created the row
        in the meantime the unique constraint fires and the existing row is
        returned instead.

        Args:
            model: Mapped class of the reference entity
            natural_key: Column values that identify the record
            **defaults: Extra column values used only when creating

        Returns:
            The existing or newly created record
        """
        record = self.find_one(model, **natural_key)
        if record is not None:
            return record

        record = model(**natural_key, **defaults)
        try:
            with self.session.begin_nested():
                self.session.add(record)
        except IntegrityError:
            existing = self.find_one(model, **natural_key)
            if existing is None:
                raise
            logger.debug("%s %s was created concurrently, reusing it", model.__name__, natural_key)
            return existing

        logger.debug("Created %s %s", model.__name__, natural_key)
        return record

    def create(self, record: Base) -> Base:
        """Insert a new record."""
        self.session.add(record)
        self.session.flush()
        return record

    def save(self, record: Base) -> Base:
        """Persist changes to an existing record."""
        self.session.add(record)
        self.session.flush()
        return record

    def commit(self) -> None:
        """Commit everything written so far."""
        self.session.commit()

    def rollback(self) -> None:
        """Discard everything written since the last commit."""
        self.session.rollback()

    def nearest_photo(self, taken_at: datetime, exclude_id: Optional[int] = None) -> Optional[Photo]:
        """Find the cataloged photo whose capture time is closest to taken_at.

        Ranked by absolute time difference; ties go to the lower id.
        """
        candidates = []
        for condition, ordering in (
            (Photo.taken_at <= taken_at, Photo.taken_at.desc()),
            (Photo.taken_at >= taken_at, Photo.taken_at.asc()),
        ):
            stmt = select(Photo).where(condition).order_by(ordering, Photo.id)
            if exclude_id is not None:
                stmt = stmt.where(Photo.id != exclude_id)
            photo = self.session.scalars(stmt.limit(1)).first()
            if photo is not None:
                candidates.append(photo)

        if not candidates:
            return None

        return min(candidates, key=lambda p: (abs((p.taken_at - taken_at).total_seconds()), p.id))

    def primary_file(self, photo_id: int) -> Optional[File]:
        """Return the primary displayable file of a photo, if any."""
        stmt = (
            select(File)
            .where(File.photo_id == photo_id, File.type == FileType.JPEG, File.primary.is_(True))
            .order_by(File.id)
        )
        return self.session.scalars(stmt.limit(1)).first()

    def find_file(self, photo_id: int, file_hash: str, path: str) -> Optional[File]:
        """Return the photo's file record with the given content hash or relative path."""
        stmt = (
            select(File)
            .where(File.photo_id == photo_id, or_(File.hash == file_hash, File.path == path))
            .order_by(File.id)
        )
        return self.session.scalars(stmt.limit(1)).first()

    def demote_primaries(self, photo_id: int, keep: File) -> int:
        """Clear the primary flag on every file of a photo except ``keep``.

        Returns:
            Number of files demoted
        """
        stmt = select(File).where(File.photo_id == photo_id, File.primary.is_(True))
        demoted = 0
        for other in self.session.scalars(stmt):
            if other is keep:
                continue
            other.primary = False
            demoted += 1
        if demoted:
            self.session.flush()
        return demoted
