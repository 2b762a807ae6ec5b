"""
Command line entry point.

Indexes the originals tree into the catalog database.

Usage:
    photo-index [--config config.yaml] [--originals DIR] [--db-uri URI]
                [--no-classifier] [--no-geocoding] [--report report.csv]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from photo_index.catalog import CatalogStore
from photo_index.classifier import TransformersClassifier
from photo_index.config import Config, get_originals_path
from photo_index.database import get_engine, init_db, session_scope
from photo_index.exceptions import ConfigError
from photo_index.indexer import GroupIndexer, PhotoReconciler, TreeWalker
from photo_index.media.geocoding import NominatimGeocoder
from photo_index.report import summarize_outcomes, write_report
from photo_index.utils.logging import setup_logging

logger = logging.getLogger("photo_index")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Index original photos into the catalog")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--originals", help="Originals root (overrides index.originals_path)")
    parser.add_argument("--db-uri", help="Database URI (overrides database.uri)")
    parser.add_argument("--no-classifier", action="store_true", help="Do not run the image classifier")
    parser.add_argument("--no-geocoding", action="store_true", help="Do not reverse geocode GPS coordinates")
    parser.add_argument("--log-level", help="Logging level (overrides logging.level)")
    parser.add_argument("--report", type=Path, help="Write per-file outcomes to this CSV file")
    return parser


def load_run_config(args: argparse.Namespace) -> Config:
    """Load the config file and apply command line overrides."""
    config = Config.load(args.config)

    if args.originals:
        config.index.originals_path = args.originals
    if args.db_uri:
        config.database.uri = args.db_uri
    if args.no_classifier:
        config.classifier.enabled = False
    if args.no_geocoding:
        config.geocoding.enabled = False
    if args.log_level:
        config.logging.level = args.log_level

    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_run_config(args)
        setup_logging(config.logging.level, config.logging.file, config.logging.format)
        originals_path = get_originals_path(config)
        engine = get_engine(config)
    except ConfigError as e:
        logger.error("Config Error: %s", e)
        return 1

    init_db(engine)

    classifier = None
    if config.classifier.enabled:
        classifier = TransformersClassifier(config.classifier.model, top_k=config.classifier.top_k)

    geocoder = None
    if config.geocoding.enabled:
        geocoder = NominatimGeocoder(
            url=config.geocoding.url,
            user_agent=config.geocoding.user_agent,
            timeout=config.geocoding.timeout,
            language=config.geocoding.language,
        )

    with session_scope(config) as session:
        store = CatalogStore(session)
        reconciler = PhotoReconciler(
            store,
            originals_path,
            classifier=classifier,
            geocoder=geocoder,
            settings=config.index.to_settings(),
        )
        walker = TreeWalker(originals_path, GroupIndexer(reconciler, originals_path), store=store)
        indexed = walker.index_all()

    summary = summarize_outcomes(walker.outcomes)
    if not summary.empty:
        print(summary.to_string())
    print(f"Indexed {len(indexed)} files from {originals_path}")

    if args.report:
        logger.info("Wrote report to %s", write_report(walker.outcomes, args.report))

    return 0


if __name__ == "__main__":
    sys.exit(main())
