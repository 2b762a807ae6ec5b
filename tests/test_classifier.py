"""Tests for the transformers-backed classifier."""

import logging
from unittest.mock import MagicMock, patch

from photo_index.classifier import TagPrediction, TransformersClassifier, _primary_label


class TestPrimaryLabel:

    def test_synonyms_dropped(self):
        assert _primary_label("tabby, tabby cat") == "tabby"

    def test_single_label(self):
        assert _primary_label(" seashore ") == "seashore"


class TestTransformersClassifier:

    def test_classify(self, rgb_image):
        pipe = MagicMock(return_value=[
            {"label": "seashore, coast, seacoast", "score": 0.71},
            {"label": "sandbar, sand bar", "score": 0.12},
        ])
        classifier = TransformersClassifier(top_k=2)
        classifier._pipeline = pipe

        predictions = classifier.classify(rgb_image)

        assert predictions == [TagPrediction("seashore", 0.71), TagPrediction("sandbar", 0.12)]
        _, kwargs = pipe.call_args
        assert kwargs["top_k"] == 2

    def test_inference_failure_returns_empty(self, rgb_image):
        classifier = TransformersClassifier()
        classifier._pipeline = MagicMock(side_effect=RuntimeError("CUDA out of memory"))

        assert classifier.classify(rgb_image) == []

    def test_pipeline_loaded_once(self, rgb_image):
        """Test that the model is loaded lazily and reused."""
        factory = MagicMock(return_value=MagicMock(return_value=[]))
        transformers = MagicMock(pipeline=factory)

        with patch.dict("sys.modules", {"transformers": transformers}):
            classifier = TransformersClassifier(model="some/model")
            classifier.classify(rgb_image)
            classifier.classify(rgb_image)

        factory.assert_called_once_with("image-classification", model="some/model", device=None)

    def test_transformers_not_installed(self, rgb_image, caplog):
        """Test that a missing classifier extra disables tagging instead of failing."""
        with patch.dict("sys.modules", {"transformers": None}):
            classifier = TransformersClassifier()
            with caplog.at_level(logging.WARNING, logger="photo_index.classifier"):
                assert classifier.classify(rgb_image) == []
                assert classifier.classify(rgb_image) == []

        assert caplog.text.count("unavailable") == 1

    def test_model_load_failure(self, rgb_image):
        """Test that a model that cannot be fetched is not retried."""
        factory = MagicMock(side_effect=OSError("model not found on the hub"))

        with patch.dict("sys.modules", {"transformers": MagicMock(pipeline=factory)}):
            classifier = TransformersClassifier(model="missing/model")
            assert classifier.classify(rgb_image) == []
            assert classifier.classify(rgb_image) == []

        factory.assert_called_once()
