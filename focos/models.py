"""Common data structures for the focos pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Tuple, Union

Scalar = Union[str, int, float, None]
FlatRecord = Dict[str, Scalar]
Dataset = List[FlatRecord]

# Property names the BDQueimadas ``focos`` layer is known to carry. Records are
# not restricted to these; any extra property the service adds passes through.
WELL_KNOWN_KEYS: Tuple[str, ...] = (
    "data_hora_gmt",
    "satelite",
    "frp",
    "latitude",
    "longitude",
    "estado",
    "municipio",
    "pais",
    "bioma",
)
TIMESTAMP_KEY = "data_hora_gmt"
DATE_KEY = "data"
TIME_KEY = "hora"
EXCLUDED_KEYS: Tuple[str, ...] = ("id_importacao_bdq", "id_foco_bdq", "geometry_name")

ALL_SATELLITES = "ALL_SATELLITES"
REFERENCE_SATELLITE = "AQUA_M-T"

# (code, label) pairs in display order. Codes are the literal values stored in
# the ``satelite`` column upstream, spaces included.
SATELLITES: Tuple[Tuple[str, str], ...] = (
    ("AQUA_M-T", "Satélite referência (Aqua, tarde)"),
    (ALL_SATELLITES, "Todos os satélites"),
    ("TERRA_M-M", "Terra Manhã"),
    ("TERRA_M-T", "Terra Tarde"),
    ("AQUA_M-M", "Aqua Manhã"),
    ("GOES-16", "GOES-16"),
    ("NOAA-18", "NOAA-18 Tarde"),
    ("NOAA-18D", "NOAA-18 Manhã"),
    ("MSG-03", "MSG-03"),
    ("METOP-B", "METOP-B"),
    ("METOP-C", "METOP-C"),
    ("NOAA-19 Tarde", "NOAA-19"),
    ("NOAA-19D", "NOAA-19 Manhã"),
    ("NOAA-20", "NOAA-20"),
    ("NOAA-21", "NOAA-21"),
    ("NPP-375 Manhã", "NPP-375D"),
    ("NPP-375", "NPP-375 Tarde"),
)
SATELLITE_CODES: Tuple[str, ...] = tuple(code for code, _ in SATELLITES)

QUERY_DATE_FORMAT = "%Y-%m-%d"


def satellite_label(code: str) -> str:
    """Display label for a satellite code (the code itself when unknown)."""
    for value, label in SATELLITES:
        if value == code:
            return label
    return code


def parse_query_date(value: str | date) -> date:
    """Parse a strict ``YYYY-MM-DD`` calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, QUERY_DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}") from exc


@dataclass(frozen=True, slots=True)
class FetchQuery:
    """Date range and satellite selection for one WFS request."""

    start_date: date
    end_date: date
    satellite: str = REFERENCE_SATELLITE

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date.isoformat()} is after end_date {self.end_date.isoformat()}"
            )
        # The code is interpolated into the CQL filter, so only catalogue values are accepted.
        if self.satellite not in SATELLITE_CODES:
            raise ValueError(f"Unknown satellite code: {self.satellite!r}")

    @classmethod
    def from_strings(
        cls,
        start_date: str | date,
        end_date: str | date,
        satellite: str = REFERENCE_SATELLITE,
    ) -> "FetchQuery":
        return cls(parse_query_date(start_date), parse_query_date(end_date), satellite)

    @property
    def all_satellites(self) -> bool:
        return self.satellite == ALL_SATELLITES

    def to_dict(self) -> Dict[str, str]:
        return {
            "start_date": self.start_date.strftime(QUERY_DATE_FORMAT),
            "end_date": self.end_date.strftime(QUERY_DATE_FORMAT),
            "satellite": self.satellite,
        }


def default_query(today: date | None = None, satellite: str = REFERENCE_SATELLITE) -> FetchQuery:
    """Initial selection: from two days ago through yesterday."""
    current = today or date.today()
    return FetchQuery(
        start_date=current - timedelta(days=2),
        end_date=current - timedelta(days=1),
        satellite=satellite,
    )
