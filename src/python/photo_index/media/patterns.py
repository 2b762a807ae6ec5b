"""
Canonical names for grouping the files of one capture.

Every variant of a capture (RAW original, camera JPEG, edited exports,
XMP sidecars) shares a leading part of its filename. That part is the
canonical name of the logical photo; whatever follows it is the variant
suffix.

Recognised layouts:
    PXL_20251210_200246684.RAW-01.COVER.jpg   Pixel RAW bundle member
    2025-01-01_00-28-40_001.jpg              three-digit derivative number
    IMG_0042.jpg.xmp                         sidecar with stacked extensions
"""

import logging
import re
from datetime import datetime
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

_PIXEL_RAW_MARKER = re.compile(r"\.RAW-", re.IGNORECASE)
_DERIVATIVE_NUMBER = re.compile(r"^(.+?)_\d{3}$")


def extract_base_name(filename: str) -> Tuple[str, str]:
    """Split a filename into (canonical name, variant suffix).

    All extensions are dropped, then a trailing ``_NNN`` derivative number.
    Leading dots belong to the name, so ``.IMG.jpg`` yields ``.IMG``.

    >>> extract_base_name("2025-01-01_00-28-40_001.jpg")
    ('2025-01-01_00-28-40', '_001.jpg')
    >>> extract_base_name("PXL_20251210_200246684.RAW-01.COVER.jpg")
    ('PXL_20251210_200246684', '.RAW-01.COVER.jpg')
    """
    marker = _PIXEL_RAW_MARKER.search(filename)
    if marker:
        base_name = filename[:marker.start()]
        return base_name, filename[len(base_name):]

    body = filename.lstrip(".")
    stem = filename[:len(filename) - len(body)] + body.split(".", 1)[0]

    match = _DERIVATIVE_NUMBER.match(stem)
    base_name = match[1] if match else stem

    return base_name, filename[len(base_name):]


def parse_date_from_filename(filename: str) -> Optional[datetime]:
    """
    Attempt to parse a capture date from a filename using common patterns.

    Supported patterns:
    - YYYYMMDD_HHMMSS (e.g., IMG_20250101_123045.jpg)
    - YYYY-MM-DD_HH-MM-SS (e.g., 2025-01-01_12-30-45.jpg)
    - YYYYMMDD-HHMMSS (e.g., Screenshot_20251214-082305.png)
    - YYYYMMDD (e.g., IMG-20250101-WA0001.jpg)
    - YYYY-MM-DD (e.g., Screenshot_2025-01-01.png)

    Returns:
        datetime object if a pattern matches, else None
    """
    patterns = (
        (r"(\d{8})_(\d{6})", lambda m: f"{m[1]}{m[2]}", "%Y%m%d%H%M%S"),
        (r"(\d{4}-\d{2}-\d{2})_(\d{2}-\d{2}-\d{2})", lambda m: f"{m[1]}{m[2].replace('-', '')}", "%Y-%m-%d%H%M%S"),
        (r"(\d{8})-(\d{6})", lambda m: f"{m[1]}{m[2]}", "%Y%m%d%H%M%S"),
        (r"(20[0-3]\d{5})", lambda m: m[1], "%Y%m%d"),
        (r"(20[0-3]\d-\d{2}-\d{2})", lambda m: m[1], "%Y-%m-%d"),
    )

    for pattern, extract, fmt in patterns:
        match = re.search(pattern, filename)
        if not match:
            continue
        try:
            return datetime.strptime(extract(match), fmt)
        except ValueError:
            logger.debug("Ignoring implausible date in %s", filename)

    return None
