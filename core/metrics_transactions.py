from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd


def compute_transactions(df: pd.DataFrame, scale: float = 1.0, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Line-level listing of the filtered table, returns included.

    Quantities and amounts are scaled magnitudes; ``status`` and
    ``is_return`` tell sales and returns apart.
    """
    if df.empty:
        return []
    rows = df if limit is None else df.head(max(0, int(limit)))
    return [
        {
            "location": r.location,
            "site_name": r.site_name,
            "sub_region": r.sub_region,
            "regional_area": r.regional_area,
            "invoice_number": r.invoice_number,
            "shipping_date": r.shipping_date,
            "sku_name": r.sku_name,
            "qty": abs(float(r.qty)) * scale,
            "unit_price": float(r.unit_price),
            "nett_sales": abs(float(r.nett_sales)) * scale,
            "gross_sales": abs(float(r.gross_sales)) * scale,
            "sales_target": float(r.sales_target),
            "sales_target_uniq": float(r.sales_target_uniq),
            "employee_name": r.employee_name,
            "position": r.position,
            "channel_name": r.channel_name,
            "status": r.status,
            "category": r.mgh3,
            "product_type": r.product_type,
            "is_return": bool(r.qty < 0),
        }
        for r in rows.itertuples(index=False)
    ]
