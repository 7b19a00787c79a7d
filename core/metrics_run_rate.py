from __future__ import annotations

import calendar
from datetime import date
from typing import Any, Dict, Optional

from core.data import round_half_up, round_int, safe_div

DEFAULT_RUN_RATE: Dict[str, Any] = {
    "days_elapsed": 0,
    "days_total": 30,
    "days_remaining": 30,
    "daily_sales_rate": 0,
    "required_daily_rate": 0,
    "projected_sales": 0,
    "projected_achievement": 0.0,
    "is_on_track": False,
}


def compute_run_rate(sales: float, target: float, latest_day: Optional[date]) -> Dict[str, Any]:
    """Project month-end sales from the pace so far.

    The period is the calendar month of ``latest_day``; the pace is linear
    over the days elapsed in that month.
    """
    if latest_day is None:
        return dict(DEFAULT_RUN_RATE)

    days_total = calendar.monthrange(latest_day.year, latest_day.month)[1]
    days_elapsed = max(1, latest_day.day)
    days_remaining = max(0, days_total - days_elapsed)

    daily_sales_rate = sales / days_elapsed
    required_daily_rate = max(0.0, target - sales) / days_remaining if days_remaining > 0 else 0.0
    projected_sales = round_int(daily_sales_rate * days_total)
    projected_achievement = round_half_up(safe_div(projected_sales, target) * 100, 1)

    return {
        "days_elapsed": days_elapsed,
        "days_total": days_total,
        "days_remaining": days_remaining,
        "daily_sales_rate": round_int(daily_sales_rate),
        "required_daily_rate": round_int(required_daily_rate),
        "projected_sales": projected_sales,
        "projected_achievement": projected_achievement,
        "is_on_track": projected_achievement >= 100,
    }
