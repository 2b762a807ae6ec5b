"""Indexing core: tag resolution, photo reconciliation, group and tree indexing."""

from photo_index.indexer.group import GroupIndexer, IndexOutcome
from photo_index.indexer.reconciler import PhotoReconciler, title_case
from photo_index.indexer.tags import TagResolver
from photo_index.indexer.walker import TreeWalker

__all__ = [
    "GroupIndexer",
    "IndexOutcome",
    "PhotoReconciler",
    "TagResolver",
    "TreeWalker",
    "title_case",
]
