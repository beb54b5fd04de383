"""Pivot a focos dataset with pandas, using the dashboard's default layout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import pandas as pd

from focos.models import FlatRecord

NULL_LABEL = "null"
COUNT_COLUMN = "count"
# Aggregated copy of the value field, so grouping columns are never coerced.
VALUE_COLUMN = "__value__"
AGGREGATORS = {
    "Average": "mean",
    "Sum": "sum",
    "Maximum": "max",
    "Minimum": "min",
    "Count": "sum",
}


@dataclass(frozen=True)
class PivotSettings:
    rows: Tuple[str, ...] = ("estado", "municipio")
    cols: Tuple[str, ...] = ("pais",)
    vals: Tuple[str, ...] = ("frp",)
    aggregator_name: str = "Average"

    def __post_init__(self) -> None:
        if self.aggregator_name not in AGGREGATORS:
            raise ValueError(
                f"Unknown aggregator {self.aggregator_name!r}; expected one of {', '.join(AGGREGATORS)}"
            )
        if self.aggregator_name != "Count" and not self.vals:
            raise ValueError(f"Aggregator {self.aggregator_name!r} needs a value field")
        grouping = (*self.rows, *self.cols)
        if len(set(grouping)) != len(grouping):
            raise ValueError(f"A field can appear only once across rows and cols: {grouping}")


DEFAULT_PIVOT_SETTINGS = PivotSettings()


def reset_pivot_settings() -> PivotSettings:
    return DEFAULT_PIVOT_SETTINGS


def records_to_frame(records: Iterable[FlatRecord]) -> pd.DataFrame:
    return pd.DataFrame.from_records(list(records))


def pivot_dataset(
    records: Iterable[FlatRecord],
    settings: PivotSettings = DEFAULT_PIVOT_SETTINGS,
) -> pd.DataFrame:
    """Aggregate ``records`` by ``settings.rows`` x ``settings.cols``.

    Records may have heterogeneous keys: a missing grouping field is grouped
    under ``"null"`` and a non-numeric value is ignored by the aggregation.
    ``Count`` counts records and ignores ``vals``.
    """
    frame = records_to_frame(records)
    if frame.empty:
        return pd.DataFrame()

    for key in (*settings.rows, *settings.cols):
        if key not in frame.columns:
            frame[key] = NULL_LABEL
        else:
            frame[key] = frame[key].astype(object).where(frame[key].notna(), NULL_LABEL)

    if settings.aggregator_name == "Count":
        value = COUNT_COLUMN
        frame[value] = 1
    else:
        source = settings.vals[0]
        value = VALUE_COLUMN
        if source in frame.columns:
            frame[value] = pd.to_numeric(frame[source], errors="coerce")
        else:
            frame[value] = float("nan")
    aggfunc = AGGREGATORS[settings.aggregator_name]

    if not settings.rows and not settings.cols:
        return pd.DataFrame({settings.aggregator_name: [frame[value].agg(aggfunc)]})

    return pd.pivot_table(
        frame,
        values=value,
        index=list(settings.rows) or None,
        columns=list(settings.cols) or None,
        aggfunc=aggfunc,
    )


def flatten_for_chart(table: pd.DataFrame) -> pd.DataFrame:
    """Join multi-level row/column labels with ``" / "`` so charts get flat axes."""
    flat = table.copy()
    if isinstance(flat.index, pd.MultiIndex):
        flat.index = [" / ".join(str(part) for part in label) for label in flat.index]
    if isinstance(flat.columns, pd.MultiIndex):
        flat.columns = [" / ".join(str(part) for part in label) for label in flat.columns]
    return flat
