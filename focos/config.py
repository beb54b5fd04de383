"""Configuration helpers for the focos pipeline."""

from __future__ import annotations

from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from focos.models import REFERENCE_SATELLITE, SATELLITE_CODES

REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env", override=False)

DEFAULT_WFS_URL = "https://terrabrasilis.dpi.inpe.br/queimadas/geoserver/wfs"


class FocosSettings(BaseSettings):
    """Environment-driven configuration for fetching and displaying focos."""

    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=False,
        extra="ignore",
    )

    wfs_url: str = Field(default=DEFAULT_WFS_URL, validation_alias="FOCOS_WFS_URL")
    type_name: str = Field(default="bdqueimadas:focos", validation_alias="FOCOS_TYPE_NAME")
    continent_id: int = Field(default=8, validation_alias="FOCOS_CONTINENT_ID")
    request_timeout_seconds: float = Field(
        default=30.0,
        validation_alias="FOCOS_REQUEST_TIMEOUT_SECONDS",
    )
    display_timezone: str = Field(
        default="America/Sao_Paulo",
        validation_alias="FOCOS_DISPLAY_TIMEZONE",
    )
    datetime_format: str = Field(default="%d/%m/%Y %H:%M:%S", validation_alias="FOCOS_DATETIME_FORMAT")
    date_format: str = Field(default="%d/%m/%Y", validation_alias="FOCOS_DATE_FORMAT")
    time_format: str = Field(default="%H:%M:%S", validation_alias="FOCOS_TIME_FORMAT")
    default_satellite: str = Field(
        default=REFERENCE_SATELLITE,
        validation_alias="FOCOS_DEFAULT_SATELLITE",
    )

    @field_validator("wfs_url", mode="before")
    @classmethod
    def _strip_url(cls, value: object) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("FOCOS_WFS_URL must be a non-empty string")
        return value.strip()

    @field_validator("request_timeout_seconds")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("FOCOS_REQUEST_TIMEOUT_SECONDS must be positive")
        return value

    @field_validator("display_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown FOCOS_DISPLAY_TIMEZONE: {value}") from exc
        return value

    @field_validator("default_satellite")
    @classmethod
    def _validate_satellite(cls, value: str) -> str:
        if value not in SATELLITE_CODES:
            raise ValueError(f"FOCOS_DEFAULT_SATELLITE must be one of {', '.join(SATELLITE_CODES)}")
        return value

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.display_timezone)


settings = FocosSettings()
