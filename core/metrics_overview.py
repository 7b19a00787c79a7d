from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from core.data import positive_rows, round_half_up, round_int, safe_div
from core.targets import dedup_target

EMPTY_KPIS: Dict[str, Any] = {
    "sales": 0.0,
    "target": 0,
    "achievement": 0.0,
    "avg_items_per_order": 0.0,
    "avg_order_value": 0,
    "revenue_per_agent": 0,
}


def compute_kpis(df: pd.DataFrame, scale: float = 1.0) -> Dict[str, Any]:
    """Headline KPIs for a filtered transaction table.

    Sales, quantity, invoices and agents come from positive-quantity lines
    only; the target is deduplicated over every line, returns included.
    """
    if df.empty:
        return dict(EMPTY_KPIS)

    positive = positive_rows(df)
    sales = float(positive["gross_sales"].abs().sum()) * scale
    target = round_int(dedup_target(df) * scale)
    total_qty = float(positive["qty"].sum())
    invoices = int(positive["invoice_number"].nunique())
    agents = int(positive["employee_number"].nunique())

    return {
        "sales": sales,
        "target": target,
        "achievement": round_half_up(safe_div(sales, target) * 100, 2),
        "avg_items_per_order": round_half_up(safe_div(total_qty, invoices), 2),
        "avg_order_value": round_int(safe_div(sales, invoices)),
        "revenue_per_agent": round_int(safe_div(sales, agents)),
    }
