"""
Group indexing: reconcile a seed file together with all of its siblings.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Union

from photo_index.exceptions import SiblingError
from photo_index.indexer.reconciler import PhotoReconciler
from photo_index.models.enums import IndexResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexOutcome:
    """What happened to one file during a run."""
    path: str
    relative_path: str
    file_type: str
    role: str
    result: IndexResult

    def to_dict(self) -> dict:
        """Convert to dictionary for pandas DataFrame."""
        return {
            "path": self.path,
            "relative_path": self.relative_path,
            "file_type": self.file_type,
            "role": self.role,
            "result": self.result.value,
        }


class GroupIndexer:
    """
    Indexes a seed media file and its siblings.

    The main file of the group is reconciled first so that the Photo record
    exists (or has been refreshed) before the other variants attach to it.

    Args:
        reconciler: Photo reconciler used for every file
        originals_path: Library root, for log messages and outcomes
    """

    def __init__(self, reconciler: PhotoReconciler, originals_path: Union[str, Path]):
        self.reconciler = reconciler
        self.originals_path = Path(originals_path)

    def index_group(
        self,
        seed,
        processed: Optional[Set[str]] = None,
        outcomes: Optional[List[IndexOutcome]] = None,
    ) -> Set[str]:
        """
        Reconcile the main file of the seed's group, then every sibling.

        Args:
            seed: Media file that triggered the group
            processed: Absolute paths already handled earlier in this run;
                       siblings in it are skipped. Not modified.
            outcomes: Optional list that receives one IndexOutcome per file

        Returns:
            Absolute paths reconciled for this group; empty if the siblings
            could not be resolved
        """
        processed = processed if processed is not None else set()
        indexed: Set[str] = set()

        try:
            related, main_file = seed.siblings()
        except SiblingError as e:
            logger.error('Could not index "%s": %s', seed.relative_path(self.originals_path), e)
            return indexed

        self._index_one(main_file, "main", outcomes)
        indexed.add(main_file.filename)

        for related_file in related:
            if related_file.filename in indexed or related_file.filename in processed:
                continue

            self._index_one(related_file, "related", outcomes)
            indexed.add(related_file.filename)

        return indexed

    def _index_one(self, media_file, role: str, outcomes: Optional[List[IndexOutcome]]) -> None:
        result = self.reconciler.reconcile(media_file)
        relative_path = media_file.relative_path(self.originals_path)

        logger.info('%s %s %s file "%s"', result, role, media_file.file_type.value, relative_path)

        if outcomes is not None:
            outcomes.append(IndexOutcome(
                path=media_file.filename,
                relative_path=relative_path,
                file_type=media_file.file_type.value,
                role=role,
                result=result,
            ))
