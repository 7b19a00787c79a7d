from __future__ import annotations

import calendar
from typing import Any, Dict, List, Tuple

import pandas as pd

from core import config
from core.data import positive_rows, round_half_up, round_int, safe_div
from core.targets import dedup_target_by, dedup_target_rows


def _agents_in_order(df: pd.DataFrame) -> List[str]:
    if df.empty:
        return []
    names = df["employee_name"]
    return names[names != ""].drop_duplicates().tolist()


def compute_agent_performance(df: pd.DataFrame, scale: float = 1.0) -> List[Dict[str, Any]]:
    """Revenue and target per agent, highest revenue first.

    Every agent present in ``df`` is listed, including agents whose lines are
    all returns; their revenue is 0 but their target still counts.
    """
    agents = _agents_in_order(df)
    if not agents:
        return []

    positive = positive_rows(df)
    revenue = (positive["gross_sales"].abs() * scale).groupby(positive["employee_name"], sort=False).sum()
    targets = dedup_target_by(df, "employee_name") * scale

    rows = []
    for name in agents:
        agent_revenue = float(revenue.get(name, 0.0))
        agent_target = float(targets.get(name, 0.0))
        rows.append(
            {
                "name": name,
                "revenue": agent_revenue,
                "target": round_int(agent_target),
                "achievement": round_half_up(safe_div(agent_revenue, agent_target) * 100, 1),
            }
        )
    # sorted() is stable: equal revenue keeps encounter order.
    return sorted(rows, key=lambda r: r["revenue"], reverse=True)


def compute_product_insights(
    df: pd.DataFrame, scale: float = 1.0, top_n: int = config.TOP_N_PRODUCTS
) -> Dict[str, List[Dict[str, Any]]]:
    positive = positive_rows(df)
    if not positive.empty:
        positive = positive[positive["sku_name"] != ""]
    if positive.empty:
        return {"top_by_revenue": [], "top_by_quantity": [], "slow_moving": []}

    grouped = (
        positive.assign(revenue=positive["gross_sales"].abs() * scale, quantity=positive["qty"] * scale)
        .groupby("sku_name", sort=False)
        .agg(
            category=("mgh3", "first"),
            product_type=("product_type", "first"),
            total_revenue=("revenue", "sum"),
            total_qty=("quantity", "sum"),
            transaction_count=("invoice_number", "nunique"),
        )
        .reset_index()
    )
    products = [
        {
            "sku_name": str(r.sku_name),
            "category": str(r.category),
            "product_type": str(r.product_type),
            "total_revenue": round_int(r.total_revenue),
            "total_qty": round_int(r.total_qty),
            "transaction_count": int(r.transaction_count),
        }
        for r in grouped.itertuples(index=False)
    ]

    return {
        "top_by_revenue": sorted(products, key=lambda p: p["total_revenue"], reverse=True)[:top_n],
        "top_by_quantity": sorted(products, key=lambda p: p["total_qty"], reverse=True)[:top_n],
        "slow_moving": sorted(products, key=lambda p: p["total_revenue"])[:top_n],
    }


def quarter_months(quarter: int) -> List[int]:
    first = (quarter - 1) * 3 + 1
    return [first, first + 1, first + 2]


def _month_number(df: pd.DataFrame) -> pd.Series:
    return pd.to_numeric(df["shipping_month"].str.slice(5, 7), errors="coerce")


def compute_monthly_achievement(
    base_df: pd.DataFrame, scale: float = 1.0, quarter: int = config.REPORTING_QUARTER
) -> List[Dict[str, Any]]:
    """Per-agent sales vs target for the three months of the reporting quarter.

    ``base_df`` is the scope-filtered table before user filters, so every
    agent the caller can see gets a row even with no sales in the quarter.
    Months are matched by calendar month number.
    """
    agents = _agents_in_order(base_df)
    if not agents:
        return []
    months = quarter_months(quarter)

    sales_map: Dict[Tuple[str, int], float] = {}
    positive = positive_rows(base_df)
    positive = positive[positive["shipping_day"] != ""]
    if not positive.empty:
        month_num = _month_number(positive)
        sales = (positive["gross_sales"] * scale).groupby([positive["employee_name"], month_num]).sum()
        sales_map = {(name, int(m)): float(v) for (name, m), v in sales.items()}

    target_map: Dict[Tuple[str, int], float] = {}
    target_rows = dedup_target_rows(base_df, "month")
    if not target_rows.empty:
        month_num = _month_number(target_rows)
        targets = (target_rows["sales_target_uniq"] * scale).groupby([target_rows["employee_name"], month_num]).last()
        target_map = {(name, int(m)): float(v) for (name, m), v in targets.items()}

    matrix = []
    for name in agents:
        cells = []
        for m in months:
            month_sales = sales_map.get((name, m), 0.0)
            month_target = target_map.get((name, m), 0.0)
            cells.append(
                {
                    "month": calendar.month_abbr[m],
                    "sales": round_int(month_sales),
                    "target": round_int(month_target),
                    "achievement": safe_div(month_sales, month_target) * 100,
                }
            )
        matrix.append({"name": name, "months": cells})
    return matrix
