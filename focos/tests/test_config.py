import pytest
from pydantic import ValidationError

from focos.config import DEFAULT_WFS_URL, FocosSettings


def test_defaults(monkeypatch):
    for name in (
        "FOCOS_WFS_URL",
        "FOCOS_CONTINENT_ID",
        "FOCOS_REQUEST_TIMEOUT_SECONDS",
        "FOCOS_DISPLAY_TIMEZONE",
        "FOCOS_DEFAULT_SATELLITE",
    ):
        monkeypatch.delenv(name, raising=False)

    config = FocosSettings()

    assert config.wfs_url == DEFAULT_WFS_URL
    assert config.type_name == "bdqueimadas:focos"
    assert config.continent_id == 8
    assert config.request_timeout_seconds == 30.0
    assert config.display_timezone == "America/Sao_Paulo"
    assert config.default_satellite == "AQUA_M-T"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FOCOS_WFS_URL", "  http://localhost:8080/geoserver/wfs ")
    monkeypatch.setenv("FOCOS_CONTINENT_ID", "5")
    monkeypatch.setenv("FOCOS_REQUEST_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("FOCOS_DISPLAY_TIMEZONE", "UTC")
    monkeypatch.setenv("FOCOS_DEFAULT_SATELLITE", "ALL_SATELLITES")

    config = FocosSettings()

    assert config.wfs_url == "http://localhost:8080/geoserver/wfs"
    assert config.continent_id == 5
    assert config.request_timeout_seconds == 2.5
    assert config.zone.key == "UTC"
    assert config.default_satellite == "ALL_SATELLITES"


@pytest.mark.parametrize(
    "name,value",
    [
        ("FOCOS_REQUEST_TIMEOUT_SECONDS", "0"),
        ("FOCOS_REQUEST_TIMEOUT_SECONDS", "-1"),
        ("FOCOS_DISPLAY_TIMEZONE", "Mars/Olympus_Mons"),
        ("FOCOS_DEFAULT_SATELLITE", "SPUTNIK"),
        ("FOCOS_WFS_URL", "   "),
        ("FOCOS_CONTINENT_ID", "eight"),
    ],
)
def test_invalid_values_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        FocosSettings()
