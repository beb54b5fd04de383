"""BDQueimadas focos pipeline (WFS fetch, reprojection, flat records)."""

from .normalizer import build_dataset, normalize_feature
from .projection import GeoPoint, PlanarPoint, to_geographic

__all__ = [
    "GeoPoint",
    "PlanarPoint",
    "build_dataset",
    "normalize_feature",
    "to_geographic",
]
