"""Target deduplication shared by every target figure on the dashboard.

``sales_target_uniq`` is a monthly per-employee target repeated on every
transaction row of that employee and month. It is counted once per
``employee_name::YYYY-MM`` key (or ``employee_name::YYYY-MM-DD`` for the
daily trend); summing it over rows would multiply it by the row count.
"""

from __future__ import annotations

from typing import Literal

import pandas as pd

Grain = Literal["day", "month"]

_PERIOD_COLUMN = {"day": "shipping_day", "month": "shipping_month"}


def target_key(df: pd.DataFrame, grain: Grain = "month") -> pd.Series:
    return df["employee_name"] + "::" + df[_PERIOD_COLUMN[grain]]


def dedup_target_rows(df: pd.DataFrame, grain: Grain = "month") -> pd.DataFrame:
    """One row per target key, the first one encountered.

    Rows without a positive target, an employee name, or a shipping date
    carry no target.
    """
    if df.empty:
        return df.assign(target_key=pd.Series(dtype=object))
    eligible = df[
        (df["sales_target_uniq"] > 0)
        & (df["employee_name"] != "")
        & (df["shipping_day"] != "")
    ]
    keyed = eligible.assign(target_key=target_key(eligible, grain))
    return keyed.drop_duplicates(subset="target_key", keep="first")


def dedup_target(df: pd.DataFrame, grain: Grain = "month") -> float:
    rows = dedup_target_rows(df, grain)
    return float(rows["sales_target_uniq"].sum()) if not rows.empty else 0.0


def dedup_target_by(df: pd.DataFrame, by: str, grain: Grain = "month") -> pd.Series:
    """Deduplicated target summed per value of ``by``."""
    rows = dedup_target_rows(df, grain)
    if rows.empty:
        return pd.Series(dtype=float)
    return rows.groupby(by, sort=False)["sales_target_uniq"].sum()
