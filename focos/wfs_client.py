"""Helpers for querying the BDQueimadas GeoServer WFS."""

from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from focos.config import FocosSettings, settings as focos_settings
from focos.logging_utils import log_event
from focos.models import QUERY_DATE_FORMAT, FetchQuery

LOGGER = logging.getLogger(__name__)
WFS_VERSION = "1.0.0"
OUTPUT_FORMAT = "application/json"
SOURCE_SRS = "EPSG:3857"


class WFSClientError(RuntimeError):
    """Raised when the WFS request cannot be completed."""


def build_cql_filter(query: FetchQuery, continent_id: int) -> str:
    """CQL filter for the date range, optional satellite and continent.

    ``query.satellite`` is restricted to the catalogue by ``FetchQuery``; it is
    interpolated as-is and must never come from free text.
    """
    start = query.start_date.strftime(QUERY_DATE_FORMAT)
    end = query.end_date.strftime(QUERY_DATE_FORMAT)
    satellite_clause = "" if query.all_satellites else f" AND satelite in ('{query.satellite}')"
    return f"data_hora_gmt between '{start}' and '{end}'{satellite_clause} AND continente_id = {continent_id}"


def build_wfs_params(query: FetchQuery, config: FocosSettings | None = None) -> Dict[str, str]:
    """GetFeature parameters for one query."""
    config = config or focos_settings
    return {
        "service": "WFS",
        "version": WFS_VERSION,
        "request": "GetFeature",
        "typeName": config.type_name,
        "outputFormat": OUTPUT_FORMAT,
        "srsName": SOURCE_SRS,
        "CQL_FILTER": build_cql_filter(query, config.continent_id),
    }


def fetch_feature_collection(
    query: FetchQuery,
    config: FocosSettings | None = None,
    client: httpx.Client | None = None,
) -> Any:
    """Run the GetFeature request and return the decoded JSON payload.

    The payload is returned unvalidated; shape checks belong to the dataset
    builder, which treats anything that is not a FeatureCollection as empty.
    """
    config = config or focos_settings
    params = build_wfs_params(query, config)
    log_event(
        LOGGER,
        "focos.fetch",
        "Requesting WFS features",
        url=config.wfs_url,
        **query.to_dict(),
    )
    try:
        if client is None:
            response = httpx.get(config.wfs_url, params=params, timeout=config.request_timeout_seconds)
        else:
            response = client.get(config.wfs_url, params=params, timeout=config.request_timeout_seconds)
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise WFSClientError(f"Failed to fetch focos data: {exc}") from exc

    try:
        payload = response.json()
    except ValueError as exc:
        # GeoServer reports CQL and layer errors as XML with a 200 status.
        raise WFSClientError(
            f"WFS returned a non-JSON response ({response.headers.get('content-type', 'unknown')}): "
            f"{response.text[:200]}"
        ) from exc

    features = payload.get("features") if isinstance(payload, dict) else None
    log_event(
        LOGGER,
        "focos.fetch",
        "Fetched WFS features",
        features=len(features) if isinstance(features, list) else 0,
        url=config.wfs_url,
    )
    return payload
