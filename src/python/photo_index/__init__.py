"""
photo-index - media library indexing engine.

Walks a directory of original photo and video files, groups the variants of
each capture (RAW + JPEG + sidecars), enriches every logical photo with EXIF,
location, camera and classifier tags, and reconciles the result with a
SQLAlchemy catalog using idempotent create-or-update semantics.

Core Concepts:
- Photo: a logical capture event, identified by its canonical name
- File: one physical variant of a Photo (RAW, JPEG, sidecar, video)

Usage:
    from sqlalchemy import create_engine
    from sqlalchemy.orm import Session
    from photo_index import CatalogStore, GroupIndexer, PhotoReconciler, TreeWalker, init_db

    engine = create_engine("sqlite:///catalog.db")
    init_db(engine)
    with Session(engine) as session:
        store = CatalogStore(session)
        reconciler = PhotoReconciler(store, "/photos/originals")
        walker = TreeWalker("/photos/originals", GroupIndexer(reconciler, "/photos/originals"), store=store)
        walker.index_all()
"""

from photo_index.__version__ import __version__
from photo_index.catalog import CatalogStore
from photo_index.config import Config, IndexSettings
from photo_index.database import init_db
from photo_index.indexer import GroupIndexer, IndexOutcome, PhotoReconciler, TagResolver, TreeWalker
from photo_index.media import MediaFile
from photo_index.models import FileFormat, FileType, IndexResult

__all__ = [
    "__version__",
    # Catalog
    "CatalogStore",
    "init_db",
    # Configuration
    "Config",
    "IndexSettings",
    # Indexer
    "GroupIndexer",
    "IndexOutcome",
    "PhotoReconciler",
    "TagResolver",
    "TreeWalker",
    # Media
    "MediaFile",
    # Models
    "FileFormat",
    "FileType",
    "IndexResult",
]
