"""Image classification used to derive semantic photo tags."""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol

from PIL import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagPrediction:
    """A single classifier label with its confidence in [0, 1]."""
    label: str
    confidence: float


class Classifier(Protocol):
    def classify(self, image: Image.Image) -> List[TagPrediction]:
        ...


class TransformersClassifier:
    """Classifier backed by a Hugging Face ``image-classification`` pipeline.

    The model is loaded on first use. Requires the ``classifier`` extra
    (transformers and torch).

    Args:
        model: Model name or local path
        top_k: Number of labels requested per image
        device: Optional device passed to the pipeline (e.g. "cpu", 0)
    """

    def __init__(self, model: str = "google/vit-base-patch16-224", top_k: int = 10, device: Optional[Any] = None):
        self.model = model
        self.top_k = top_k
        self.device = device
        self._pipeline = None
        self._unavailable = False

    def _load(self):
        if self._pipeline is None:
            from transformers import pipeline

            logger.info("Loading image classifier %s", self.model)
            self._pipeline = pipeline("image-classification", model=self.model, device=self.device)
        return self._pipeline

    def classify(self, image: Image.Image) -> List[TagPrediction]:
        """Return ranked predictions; an empty list if the model is unavailable or inference fails.

        A model that cannot be loaded (transformers missing, download failure)
        is reported once and not retried for the rest of the run.
        """
        if self._unavailable:
            return []

        try:
            classifier = self._load()
        except Exception as e:
            logger.warning("Image classifier %s unavailable, skipping classification: %s", self.model, e)
            self._unavailable = True
            return []

        try:
            raw = classifier(image.convert("RGB"), top_k=self.top_k)
        except Exception as e:
            logger.warning("Image classification failed: %s", e)
            return []

        return [
            TagPrediction(label=_primary_label(item["label"]), confidence=float(item["score"]))
            for item in raw
        ]


def _primary_label(label: str) -> str:
    """ImageNet labels list synonyms ("tabby, tabby cat"); keep the first."""
    return label.split(",")[0].strip()
