"""
Tag resolution.

Every label that ends up on a photo goes through TagResolver.append_unique,
which lowercases it, drops duplicates and resolves it to a persisted Tag.
"""

import logging
from typing import Iterable, List, Optional

from PIL import Image

from photo_index.catalog import CatalogStore
from photo_index.classifier import Classifier
from photo_index.db.models import Location, Tag

logger = logging.getLogger(__name__)


class TagResolver:
    """Turns raw labels into a deduplicated, ordered list of Tag records.

    Args:
        store: Catalog store used to find or create tags
        classifier: Optional image classifier
        confidence_threshold: Predictions at or below this score are ignored
    """

    def __init__(self, store: CatalogStore, classifier: Optional[Classifier] = None, confidence_threshold: float = 0.15):
        self.store = store
        self.classifier = classifier
        self.confidence_threshold = confidence_threshold

    def append_unique(self, tags: List[Tag], label: Optional[str]) -> List[Tag]:
        """
        Append the tag for ``label`` unless an equal tag is already present.

        Labels compare case-insensitively; the first occurrence wins and
        keeps its position.

        Example:
            >>> tags = []
            >>> for label in ["Paris", "paris", "PARIS", "Rome"]:
            ...     tags = resolver.append_unique(tags, label)
            >>> [t.label for t in tags]
            ['paris', 'rome']
        """
        if not label:
            return tags

        label = label.strip().lower()
        if not label:
            return tags

        if any(tag.label == label for tag in tags):
            return tags

        tag = self.store.first_or_create(Tag, {"label": label})
        return tags + [tag]

    def extend(self, tags: List[Tag], labels: Iterable[Optional[str]]) -> List[Tag]:
        """Append several labels in order."""
        for label in labels:
            tags = self.append_unique(tags, label)
        return tags

    def location_tags(self, tags: List[Tag], location: Location) -> List[Tag]:
        """Append the place labels of a location: city, county, country, category, name, type."""
        return self.extend(tags, [
            location.city, location.county, location.country,
            location.category, location.name, location.type,
        ])

    def classify(self, image: Image.Image) -> List[Tag]:
        """
        Tags inferred from a decoded image.

        Returns an empty list when no classifier is configured.
        """
        if self.classifier is None:
            return []

        predictions = self.classifier.classify(image)
        labels = [p.label for p in predictions if p.confidence > self.confidence_threshold]
        logger.debug("Classifier kept %d of %d labels", len(labels), len(predictions))

        return self.extend([], labels)
