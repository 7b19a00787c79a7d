from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from core.targets import dedup_target_rows


def compute_debug(ctx: Dict[str, Any], data_ctx: Dict[str, Any]) -> Dict[str, Any]:
    transactions: pd.DataFrame = data_ctx.get("transactions", pd.DataFrame())
    base: pd.DataFrame = ctx.get("base", pd.DataFrame())
    filtered: pd.DataFrame = ctx.get("filtered", pd.DataFrame())

    payload: Dict[str, Any] = {
        "scope": ctx.get("scope") or "",
        "filters": ctx["filters"].to_dict() if ctx.get("filters") is not None else {},
        "source": {
            "path": data_ctx.get("source"),
            "checksum": data_ctx.get("checksum"),
            "read_error": data_ctx.get("read_error"),
        },
        "row_counts": {
            "parsed_rows": int(len(transactions)),
            "dropped_short_rows": int(data_ctx.get("dropped_rows", 0) or 0),
            "scope_rows": int(len(base)),
            "filtered_rows": int(len(filtered)),
            "return_rows": int((filtered["qty"] < 0).sum()) if not filtered.empty else 0,
        },
        "cleaning_checks": {
            "rows_missing_date": 0,
            "rows_missing_employee": 0,
            "target_rows": 0,
            "target_keys": 0,
        },
        "date_coverage": None,
    }

    if not filtered.empty:
        target_rows = filtered[filtered["sales_target_uniq"] > 0]
        payload["cleaning_checks"] = {
            "rows_missing_date": int((filtered["shipping_day"] == "").sum()),
            "rows_missing_employee": int((filtered["employee_name"] == "").sum()),
            "target_rows": int(len(target_rows)),
            "target_keys": int(len(dedup_target_rows(filtered))),
        }
        days = filtered.loc[filtered["shipping_day"] != "", "shipping_day"]
        if not days.empty:
            payload["date_coverage"] = {
                "first_day": str(days.min()),
                "last_day": str(days.max()),
                "days_present": int(days.nunique()),
            }
    return payload
