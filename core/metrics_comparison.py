from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from core.metrics_overview import EMPTY_KPIS, compute_kpis


def date_bounds(df: pd.DataFrame) -> Optional[Tuple[date, date]]:
    """Earliest and latest shipping day in ``df``, or None when undated."""
    if df.empty:
        return None
    days = pd.to_datetime(df.loc[df["shipping_day"] != "", "shipping_day"], format="%Y-%m-%d", errors="coerce").dropna()
    if days.empty:
        return None
    return days.min().date(), days.max().date()


def previous_period_window(current_start: date, current_end: date) -> Tuple[date, date]:
    """The equally long window ending the day before ``current_start``."""
    duration = current_end - current_start
    prev_end = current_start - timedelta(days=1)
    return prev_end - duration, prev_end


def compute_previous_period(current_df: pd.DataFrame, base_df: pd.DataFrame, scale: float = 1.0) -> Dict[str, Any]:
    """KPIs for the preceding window of the same length.

    The window comes from the filtered table's dates; the KPIs are computed
    over ``base_df`` (scope only, no user filters) restricted to the window.
    """
    bounds = date_bounds(current_df)
    if bounds is None:
        return {"current_window": None, "window": None, "kpis": dict(EMPTY_KPIS)}

    start, end = previous_period_window(*bounds)
    in_window = base_df[
        (base_df["shipping_day"] != "")
        & (base_df["shipping_day"] >= start.isoformat())
        & (base_df["shipping_day"] <= end.isoformat())
    ] if not base_df.empty else base_df
    return {
        "current_window": {"start": bounds[0].isoformat(), "end": bounds[1].isoformat()},
        "window": {"start": start.isoformat(), "end": end.isoformat()},
        "kpis": compute_kpis(in_window, scale),
    }
