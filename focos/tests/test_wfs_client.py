from __future__ import annotations

import logging
from datetime import date

import httpx
import pytest

from focos.config import FocosSettings
from focos.models import ALL_SATELLITES, FetchQuery
from focos.wfs_client import (
    WFSClientError,
    build_cql_filter,
    build_wfs_params,
    fetch_feature_collection,
)

QUERY = FetchQuery(date(2024, 8, 10), date(2024, 8, 11), "AQUA_M-T")
FEATURE_COLLECTION = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [-4611423.26445, -2501313.424355]},
            "properties": {"data_hora_gmt": "2024-08-10T17:30:00Z", "frp": 12.3},
        }
    ],
}


@pytest.fixture
def config() -> FocosSettings:
    return FocosSettings()


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_cql_filter_with_satellite():
    assert build_cql_filter(QUERY, 8) == (
        "data_hora_gmt between '2024-08-10' and '2024-08-11' "
        "AND satelite in ('AQUA_M-T') AND continente_id = 8"
    )


def test_cql_filter_omits_satellite_clause_for_all_satellites():
    query = FetchQuery(date(2024, 8, 10), date(2024, 8, 11), ALL_SATELLITES)

    cql = build_cql_filter(query, 8)

    assert cql == "data_hora_gmt between '2024-08-10' and '2024-08-11' AND continente_id = 8"
    assert "satelite" not in cql


def test_cql_filter_keeps_spaces_in_satellite_codes():
    query = FetchQuery(date(2024, 8, 10), date(2024, 8, 10), "NOAA-19 Tarde")

    assert "satelite in ('NOAA-19 Tarde')" in build_cql_filter(query, 8)


def test_wfs_params(config):
    params = build_wfs_params(QUERY, config)

    assert params == {
        "service": "WFS",
        "version": "1.0.0",
        "request": "GetFeature",
        "typeName": "bdqueimadas:focos",
        "outputFormat": "application/json",
        "srsName": "EPSG:3857",
        "CQL_FILTER": build_cql_filter(QUERY, 8),
    }


def test_fetch_returns_decoded_payload(config):
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, json=FEATURE_COLLECTION)

    with _client(handler) as client:
        payload = fetch_feature_collection(QUERY, config, client=client)

    assert payload == FEATURE_COLLECTION
    url = seen["url"]
    assert str(url).startswith(config.wfs_url)
    assert url.params["typeName"] == "bdqueimadas:focos"
    assert url.params["srsName"] == "EPSG:3857"
    assert url.params["CQL_FILTER"] == build_cql_filter(QUERY, 8)


def test_fetch_returns_non_collection_json_unchanged(config):
    with _client(lambda request: httpx.Response(200, json={"totalFeatures": 0})) as client:
        assert fetch_feature_collection(QUERY, config, client=client) == {"totalFeatures": 0}


def test_http_error_status_raises_client_error(config):
    with _client(lambda request: httpx.Response(503, text="down")) as client:
        with pytest.raises(WFSClientError, match="Failed to fetch focos data"):
            fetch_feature_collection(QUERY, config, client=client)


def test_transport_error_raises_client_error(config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with _client(handler) as client:
        with pytest.raises(WFSClientError) as excinfo:
            fetch_feature_collection(QUERY, config, client=client)

    assert isinstance(excinfo.value.__cause__, httpx.ConnectTimeout)


def test_xml_exception_report_raises_client_error(config):
    body = "<ServiceExceptionReport><ServiceException>Could not parse CQL</ServiceException></ServiceExceptionReport>"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=body, headers={"content-type": "application/xml"})

    with _client(handler) as client:
        with pytest.raises(WFSClientError, match="non-JSON"):
            fetch_feature_collection(QUERY, config, client=client)


def test_module_level_get_is_used_without_client(config, monkeypatch):
    calls = []

    def fake_get(url, params, timeout):
        calls.append((url, params, timeout))
        return httpx.Response(200, json=FEATURE_COLLECTION, request=httpx.Request("GET", url))

    monkeypatch.setattr("focos.wfs_client.httpx.get", fake_get)

    assert fetch_feature_collection(QUERY, config) == FEATURE_COLLECTION
    assert calls == [(config.wfs_url, build_wfs_params(QUERY, config), config.request_timeout_seconds)]


def test_invalid_url_raises_client_error(config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.InvalidURL("Invalid IPv6 address")

    with _client(handler) as client:
        with pytest.raises(WFSClientError) as excinfo:
            fetch_feature_collection(QUERY, config, client=client)

    assert isinstance(excinfo.value.__cause__, httpx.InvalidURL)


def test_fetch_logs_feature_count(config, caplog):
    with _client(lambda request: httpx.Response(200, json=FEATURE_COLLECTION)) as client:
        with caplog.at_level(logging.INFO, logger="focos.wfs_client"):
            fetch_feature_collection(QUERY, config, client=client)

    fetched = [r for r in caplog.records if "Fetched WFS features" in r.getMessage()]
    assert len(fetched) == 1
    assert fetched[0].event == "focos.fetch"
    assert fetched[0].context["features"] == 1
