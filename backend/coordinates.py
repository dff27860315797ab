"""Atlas Backend: Coordinate resolution

Source rows carry their position as a quoted "lat,lng" string that is often
missing or malformed. Unresolvable positions are replaced by a point jittered
around a regional centroid so every incident stays mappable.
"""

import math
import re
from typing import Optional

import numpy as np

from config import (
    FALLBACK_LATITUDE, FALLBACK_LONGITUDE,
    FALLBACK_JITTER_DEGREES, COORDINATE_SEED,
)

# Leading decimal number; trailing text such as "N" or "°E" is ignored
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_leading_float(text: str) -> Optional[float]:
    """Numeric prefix of ``text`` as a float, or None when it has none."""
    match = _NUMBER_PREFIX.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def parse_coordinate_pair(raw: Optional[str]) -> Optional[tuple[float, float]]:
    """Parse a "lat,lng" field. Returns None when the field is unusable.

    Each half is read by its leading number, so "17.5N,78.3E" gives
    (17.5, 78.3). A zero on either axis counts as unusable: the dataset
    writes 0 for locations it never resolved.
    """
    if not raw:
        return None
    parts = raw.replace('"', "").strip().split(",")
    if len(parts) != 2:
        return None
    lat = parse_leading_float(parts[0])
    lng = parse_leading_float(parts[1])
    if lat is None or lng is None:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    if lat == 0 or lng == 0:
        return None
    return lat, lng


class CoordinateResolver:
    """Resolves a raw location field to a (lat, lng) pair, never raising."""

    def __init__(
        self,
        center_lat: float = FALLBACK_LATITUDE,
        center_lng: float = FALLBACK_LONGITUDE,
        jitter: float = FALLBACK_JITTER_DEGREES,
        seed: Optional[int] = COORDINATE_SEED,
    ):
        if jitter < 0:
            raise ValueError("jitter must be non-negative")
        self.center_lat = center_lat
        self.center_lng = center_lng
        self.jitter = jitter
        self._rng = np.random.default_rng(seed)

    def fallback(self) -> tuple[float, float]:
        """A point drawn uniformly from the jitter box around the centroid."""
        d_lat, d_lng = self._rng.uniform(-self.jitter, self.jitter, size=2)
        return self.center_lat + float(d_lat), self.center_lng + float(d_lng)

    def resolve(self, raw: Optional[str]) -> tuple[tuple[float, float], bool]:
        """Return ((lat, lng), resolved). ``resolved`` is False for synthesized points."""
        pair = parse_coordinate_pair(raw)
        if pair is not None:
            return pair, True
        return self.fallback(), False
