from __future__ import annotations

from typing import Any, Dict, List, Literal

import pandas as pd

from core import config
from core.data import positive_rows, round_int
from core.targets import dedup_target_rows

TrendGrain = Literal["daily", "monthly", "yearly"]

_PERIOD_COLUMN = {"daily": "shipping_day", "monthly": "shipping_month", "yearly": "shipping_year"}


def compute_trend(df: pd.DataFrame, grain: TrendGrain, scale: float = 1.0) -> List[Dict[str, Any]]:
    """Sales and target per period, ascending by period key.

    Built from positive-quantity lines. Monthly and yearly targets count each
    employee-month once; the daily target counts each employee-day once at
    1/30 of the monthly value regardless of the month's length.
    """
    positive = positive_rows(df)
    if positive.empty:
        return []
    positive = positive[positive["shipping_day"] != ""]
    if positive.empty:
        return []

    period_col = _PERIOD_COLUMN[grain]
    sales = positive.groupby(period_col)["gross_sales"].sum() * scale

    if grain == "daily":
        target_rows = dedup_target_rows(positive, "day")
        per_row = target_rows["sales_target_uniq"] * scale / config.DAILY_TARGET_DAYS
    else:
        target_rows = dedup_target_rows(positive, "month")
        per_row = target_rows["sales_target_uniq"] * scale
    target = per_row.groupby(target_rows[period_col]).sum() if not target_rows.empty else pd.Series(dtype=float)

    points = []
    for period in sorted(sales.index):
        points.append(
            {
                "date": str(period),
                "sales": round_int(sales.get(period, 0.0)),
                "target": round_int(target.get(period, 0.0)),
            }
        )
    return points


def compute_trends(df: pd.DataFrame, scale: float = 1.0) -> Dict[str, List[Dict[str, Any]]]:
    return {grain: compute_trend(df, grain, scale) for grain in ("daily", "monthly", "yearly")}
