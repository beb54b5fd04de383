"""Flatten BDQueimadas GeoJSON features into pivot-ready records."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Mapping, Tuple

from focos.config import FocosSettings, settings as focos_settings
from focos.logging_utils import log_event
from focos.models import DATE_KEY, EXCLUDED_KEYS, TIME_KEY, TIMESTAMP_KEY, Dataset, FlatRecord
from focos.projection import PlanarPoint, to_geographic_point

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DisplayFormat:
    """How parsed timestamps are rendered into ``data_hora_gmt``/``data``/``hora``."""

    timezone: tzinfo
    datetime_format: str = "%d/%m/%Y %H:%M:%S"
    date_format: str = "%d/%m/%Y"
    time_format: str = "%H:%M:%S"

    @classmethod
    def from_settings(cls, config: FocosSettings | None = None) -> "DisplayFormat":
        config = config or focos_settings
        return cls(
            timezone=config.zone,
            datetime_format=config.datetime_format,
            date_format=config.date_format,
            time_format=config.time_format,
        )


@dataclass
class NormalizationSummary:
    """Per-build counters for tolerated feature defects."""

    total_features: int = 0
    invalid_features: int = 0
    missing_properties: int = 0
    missing_geometry: int = 0
    timestamps_parsed: int = 0
    timestamps_unparsed: int = 0
    reprojected: int = 0


def normalize_feature(feature: Any, display: DisplayFormat | None = None) -> FlatRecord:
    """Convert one GeoJSON feature into a flat record.

    Properties are shallow-copied, the timestamp is split into display
    fields, coordinates are recovered from the Web Mercator geometry when
    ``latitude``/``longitude`` are missing, and BDQueimadas bookkeeping keys
    are dropped. Defects in the feature are tolerated, never raised.
    """
    return _normalize(feature, display or DisplayFormat.from_settings(), NormalizationSummary())


def build_dataset(collection: Any, display: DisplayFormat | None = None) -> Dataset:
    """Map a FeatureCollection to records in input order; ``[]`` for unusable input."""
    records, _ = build_dataset_with_summary(collection, display)
    return records


def build_dataset_with_summary(
    collection: Any,
    display: DisplayFormat | None = None,
) -> Tuple[Dataset, NormalizationSummary]:
    summary = NormalizationSummary()
    features = _features(collection)
    if not features:
        return [], summary

    fmt = display or DisplayFormat.from_settings()
    summary.total_features = len(features)
    records = [_normalize(feature, fmt, summary) for feature in features]

    log_event(
        LOGGER,
        "focos.normalize",
        "Built dataset",
        total=summary.total_features,
        invalid=summary.invalid_features,
        missing_properties=summary.missing_properties,
        missing_geometry=summary.missing_geometry,
        timestamps_parsed=summary.timestamps_parsed,
        timestamps_unparsed=summary.timestamps_unparsed,
        reprojected=summary.reprojected,
    )
    return records, summary


def _features(collection: Any) -> list:
    if collection is None:
        return []
    if not isinstance(collection, Mapping):
        log_event(
            LOGGER,
            "focos.normalize",
            "Payload is not a JSON object; treating as empty",
            level="warning",
            payload_type=type(collection).__name__,
        )
        return []
    features = collection.get("features")
    if features is None:
        return []
    if not isinstance(features, list):
        log_event(
            LOGGER,
            "focos.normalize",
            "Payload 'features' is not a list; treating as empty",
            level="warning",
            features_type=type(features).__name__,
        )
        return []
    return features


def _normalize(feature: Any, display: DisplayFormat, summary: NormalizationSummary) -> FlatRecord:
    if not isinstance(feature, Mapping):
        summary.invalid_features += 1
        log_event(
            LOGGER,
            "focos.normalize",
            "Feature is not a JSON object",
            level="debug",
            feature_type=type(feature).__name__,
        )
        return {}

    properties = feature.get("properties")
    if isinstance(properties, Mapping):
        record: FlatRecord = dict(properties)
    else:
        summary.missing_properties += 1
        record = {}

    raw_timestamp = record.get(TIMESTAMP_KEY)
    if raw_timestamp:
        local = _parse_timestamp(raw_timestamp, display.timezone)
        if local is None:
            summary.timestamps_unparsed += 1
            log_event(
                LOGGER,
                "focos.normalize",
                "Leaving unparsable timestamp untouched",
                level="debug",
                feature_id=feature.get("id"),
                value=raw_timestamp,
            )
        else:
            record[TIMESTAMP_KEY] = local.strftime(display.datetime_format)
            record[DATE_KEY] = local.strftime(display.date_format)
            record[TIME_KEY] = local.strftime(display.time_format)
            summary.timestamps_parsed += 1

    point = _planar_point(feature.get("geometry"))
    if point is None:
        summary.missing_geometry += 1
    elif _is_missing(record.get("latitude")) or _is_missing(record.get("longitude")):
        # Zero counts as missing here, so 0-valued coordinates get recomputed.
        geo = to_geographic_point(point)
        record["latitude"] = geo.latitude
        record["longitude"] = geo.longitude
        summary.reprojected += 1

    for key in EXCLUDED_KEYS:
        record.pop(key, None)
    return record


def _parse_timestamp(value: Any, zone: tzinfo) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        # data_hora_gmt is GMT even when the offset is omitted.
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(zone)
    except (OverflowError, ValueError):
        return None


def _planar_point(geometry: Any) -> PlanarPoint | None:
    if not isinstance(geometry, Mapping):
        return None
    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 2:
        return None
    x, y = coordinates[0], coordinates[1]
    if not _is_number(x) or not _is_number(y):
        return None
    return PlanarPoint(float(x), float(y))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_missing(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value
