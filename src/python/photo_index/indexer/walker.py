"""
Full library pass.

TreeWalker visits every file below the originals root in lexical, depth-first
order and hands each photo file to the GroupIndexer. Files already consumed
as siblings of an earlier seed are skipped.

A group that fails is logged, its uncommitted writes are rolled back and the
walk moves on. Database errors end the run.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Set, Union

from sqlalchemy.exc import SQLAlchemyError

from photo_index.catalog import CatalogStore
from photo_index.indexer.group import GroupIndexer, IndexOutcome
from photo_index.media.media_file import MediaFile

logger = logging.getLogger(__name__)


class TreeWalker:
    """
    Indexes a whole originals tree.

    Args:
        originals_path: Library root to walk
        group_indexer: Indexer used for every seed file
        store: Optional catalog store; when given, it is committed after each group
        media_factory: Builds a media handle from a path (MediaFile by default)
    """

    def __init__(
        self,
        originals_path: Union[str, Path],
        group_indexer: GroupIndexer,
        store: Optional[CatalogStore] = None,
        media_factory=MediaFile,
    ):
        self.originals_path = Path(originals_path)
        self.group_indexer = group_indexer
        self.store = store
        self.media_factory = media_factory
        self.outcomes: List[IndexOutcome] = []

    def index_all(self) -> Set[str]:
        """
        Index every photo below the originals root.

        Returns:
            Absolute paths of all files reconciled during this run
        """
        processed: Set[str] = set()
        self.outcomes = []

        logger.info("Indexing originals in %s", self.originals_path)
        self._walk(self.originals_path, processed)
        logger.info("Indexed %d files", len(processed))

        return processed

    def _walk(self, directory: Path, processed: Set[str]) -> None:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.error("Cannot read directory %s: %s", directory, e)
            return

        for entry in entries:
            if entry.name.startswith("."):
                continue

            try:
                is_dir = entry.is_dir()
            except OSError as e:
                logger.error("Cannot stat %s: %s", entry.path, e)
                continue

            if is_dir:
                self._walk(Path(entry.path), processed)
            else:
                self._index_path(Path(entry.path), processed)

    def _index_path(self, path: Path, processed: Set[str]) -> None:
        if str(path.absolute()) in processed:
            return

        try:
            media_file = self.media_factory(path)
        except OSError as e:
            logger.debug("Skipping %s: %s", path, e)
            return

        if not media_file.is_photo():
            return

        outcomes_before = len(self.outcomes)
        try:
            indexed = self.group_indexer.index_group(media_file, processed, self.outcomes)
        except SQLAlchemyError:
            raise
        except Exception as e:
            logger.error("Could not index %s: %s", path, e)
            del self.outcomes[outcomes_before:]
            if self.store is not None:
                self.store.rollback()
            return

        processed.update(indexed)

        if self.store is not None:
            self.store.commit()
