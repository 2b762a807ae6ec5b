"""Utility helpers for photo-index."""

from photo_index.utils.logging import setup_logging

__all__ = ["setup_logging"]
