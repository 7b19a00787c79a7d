from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from core import config
from core.data import positive_rows, return_rows, round_half_up, round_int, safe_div


def compute_returns(df: pd.DataFrame, scale: float = 1.0, top_n: int = config.TOP_N_PRODUCTS) -> Dict[str, Any]:
    returns = return_rows(df)
    if returns.empty:
        return {
            "kpis": {"return_lines": 0, "returned_qty": 0, "returned_value": 0, "return_rate": 0.0},
            "trend": [],
            "top": [],
        }

    sold_qty = float(positive_rows(df)["qty"].sum())
    returned_qty = float(returns["qty"].abs().sum())
    returned_value = float(returns["gross_sales"].abs().sum()) * scale

    dated = returns[returns["shipping_day"] != ""]
    trend = pd.DataFrame(columns=["shipping_day", "returned_value", "returned_qty", "return_lines"]) if dated.empty else (
        dated.assign(value=dated["gross_sales"].abs() * scale, units=dated["qty"].abs())
        .groupby("shipping_day")
        .agg(returned_value=("value", "sum"), returned_qty=("units", "sum"), return_lines=("units", "count"))
        .reset_index()
        .sort_values("shipping_day")
    )

    named = returns[returns["sku_name"] != ""]
    top = pd.DataFrame(columns=["sku_name", "returned_value", "returned_qty", "return_lines"]) if named.empty else (
        named.assign(value=named["gross_sales"].abs() * scale, units=named["qty"].abs())
        .groupby("sku_name", sort=False)
        .agg(returned_value=("value", "sum"), returned_qty=("units", "sum"), return_lines=("units", "count"))
        .reset_index()
        .sort_values("returned_value", ascending=False, kind="stable")
        .head(top_n)
        .reset_index(drop=True)
    )
    top.insert(0, "rank", top.index + 1)

    return {
        "kpis": {
            "return_lines": int(len(returns)),
            "returned_qty": round_int(returned_qty * scale),
            "returned_value": round_int(returned_value),
            "return_rate": round_half_up(safe_div(returned_qty, sold_qty + returned_qty) * 100, 2),
        },
        "trend": [
            {
                "date": str(r.shipping_day),
                "returned_value": round_int(r.returned_value),
                "returned_qty": round_int(r.returned_qty * scale),
                "return_lines": int(r.return_lines),
            }
            for r in trend.itertuples(index=False)
        ],
        "top": [
            {
                "rank": int(r["rank"]),
                "sku_name": str(r["sku_name"]),
                "returned_value": round_int(r["returned_value"]),
                "returned_qty": round_int(r["returned_qty"] * scale),
                "return_lines": int(r["return_lines"]),
            }
            for r in top.to_dict(orient="records")
        ],
    }
