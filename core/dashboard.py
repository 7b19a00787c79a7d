"""Dashboard composition: the entry points used by the API.

Every call recomputes from the (cached, read-only) parsed table; nothing
that depends on scope or filters is kept between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import pandas as pd

from core import config
from core.data import load_dashboard_data
from core.filters import FilterSpec, apply_filters, apply_scope, normalize_filters
from core.metrics_alerts import compute_alerts
from core.metrics_comparison import compute_previous_period, date_bounds
from core.metrics_overview import compute_kpis
from core.metrics_performance import compute_agent_performance, compute_monthly_achievement, compute_product_insights
from core.metrics_run_rate import compute_run_rate
from core.metrics_trends import compute_trends
from core.options import compute_filter_options, is_valid_selection

logger = logging.getLogger(__name__)


def prepare_context(
    scope: Optional[str], filters: dict | FilterSpec | None, data_ctx: Dict[str, object]
) -> Dict[str, Any]:
    spec = filters if isinstance(filters, FilterSpec) else normalize_filters(filters)
    transactions: pd.DataFrame = data_ctx.get("transactions", pd.DataFrame())

    base = apply_scope(transactions, scope)
    filtered = apply_filters(transactions, scope, spec)
    return {
        "scope": scope or "",
        "filters": spec,
        "base": base,
        "filtered": filtered,
    }


def compute_dashboard(
    scope: Optional[str],
    filters: dict | FilterSpec | None = None,
    period: str = "month",
    data_ctx: Optional[Dict[str, object]] = None,
    *,
    scale: Optional[float] = None,
) -> Dict[str, Any]:
    data_ctx = data_ctx if data_ctx is not None else load_dashboard_data()
    scale = config.SCALE_FACTOR if scale is None else scale
    ctx = prepare_context(scope, filters, data_ctx)
    filtered: pd.DataFrame = ctx["filtered"]
    base: pd.DataFrame = ctx["base"]
    spec: FilterSpec = ctx["filters"]

    kpis = compute_kpis(filtered, scale)
    trends = compute_trends(filtered, scale)
    agents = compute_agent_performance(filtered, scale)
    bounds = date_bounds(filtered)
    run_rate = compute_run_rate(kpis["sales"], kpis["target"], bounds[1] if bounds else None)
    logger.debug("dashboard scope=%r rows=%d/%d", ctx["scope"], len(filtered), len(base))

    return {
        "scope": ctx["scope"],
        "period": period,
        "filters": spec.to_dict(),
        "row_count": int(len(filtered)),
        "read_error": data_ctx.get("read_error"),
        "kpis": kpis,
        "sales_trend": trends["daily"],
        "sales_trend_daily": trends["daily"],
        "sales_trend_monthly": trends["monthly"],
        "sales_trend_yearly": trends["yearly"],
        "agent_performance": agents,
        "product_insights": compute_product_insights(filtered, scale),
        "monthly_achievement": compute_monthly_achievement(base, scale),
        "filter_options": compute_filter_options(base, spec),
        "previous_period": compute_previous_period(filtered, base, scale),
        "run_rate": run_rate,
        "alerts": compute_alerts(agents, run_rate),
    }


def list_filter_options(
    scope: Optional[str],
    filters: dict | FilterSpec | None = None,
    data_ctx: Optional[Dict[str, object]] = None,
) -> Dict[str, Any]:
    data_ctx = data_ctx if data_ctx is not None else load_dashboard_data()
    ctx = prepare_context(scope, filters, data_ctx)
    options = compute_filter_options(ctx["base"], ctx["filters"])
    return {
        "scope": ctx["scope"],
        "options": options,
        "valid": is_valid_selection(options, ctx["filters"]),
    }
