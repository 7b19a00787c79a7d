from __future__ import annotations

import logging
import math
from typing import Annotated, Literal, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Header, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import DashboardFiltersModel, FilterOptionsResponse, SourceResponse
from core import config
from core.dashboard import compute_dashboard, list_filter_options, prepare_context
from core.data import load_dashboard_data
from core.filters import FilterSpec, normalize_filters
from core.metrics_debug import compute_debug
from core.metrics_returns import compute_returns
from core.metrics_transactions import compute_transactions

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=config.APP_TITLE, version=config.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Period = Literal["week", "month", "quarter", "year"]


def _filters_from_model(model: DashboardFiltersModel) -> FilterSpec:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


# Scope is set by the upstream auth layer and must always be sent; an empty
# value is an administrator.
ScopeHeader = Annotated[str, Header(alias="X-Scope")]


@app.get("/health")
def health():
    return {"status": "ok", "version": config.APP_VERSION}


@app.get("/meta/source", response_model=SourceResponse)
def meta_source():
    try:
        data_ctx = load_dashboard_data()
        return {
            "source": data_ctx["source"],
            "checksum": data_ctx["checksum"],
            "rows": int(len(data_ctx["transactions"])),
            "dropped_rows": int(data_ctx["dropped_rows"]),
            "read_error": data_ctx["read_error"],
        }
    except Exception as exc:
        logger.exception("meta_source failed")
        return _error(exc)


@app.post("/dashboard")
def dashboard(
    filters: DashboardFiltersModel,
    scope: ScopeHeader,
    period: Period = Query(default="month"),
):
    try:
        return _json(compute_dashboard(scope, _filters_from_model(filters), period, load_dashboard_data()))
    except Exception as exc:
        logger.exception("dashboard failed")
        return _error(exc)


@app.post("/filter-options", response_model=FilterOptionsResponse)
def filter_options(filters: DashboardFiltersModel, scope: ScopeHeader):
    try:
        return list_filter_options(scope, _filters_from_model(filters), load_dashboard_data())
    except Exception as exc:
        logger.exception("filter_options failed")
        return _error(exc)


@app.post("/transactions")
def transactions(
    filters: DashboardFiltersModel,
    scope: ScopeHeader,
    limit: Optional[int] = Query(default=None, ge=0),
):
    try:
        ctx = prepare_context(scope, _filters_from_model(filters), load_dashboard_data())
        rows = compute_transactions(ctx["filtered"], config.SCALE_FACTOR, limit=limit)
        return _json({"scope": ctx["scope"], "total": int(len(ctx["filtered"])), "rows": rows})
    except Exception as exc:
        logger.exception("transactions failed")
        return _error(exc)


@app.post("/returns")
def returns(filters: DashboardFiltersModel, scope: ScopeHeader):
    try:
        ctx = prepare_context(scope, _filters_from_model(filters), load_dashboard_data())
        payload = compute_returns(ctx["filtered"], config.SCALE_FACTOR)
        return _json({"scope": ctx["scope"], "filters": ctx["filters"].to_dict(), **payload})
    except Exception as exc:
        logger.exception("returns failed")
        return _error(exc)


@app.post("/debug")
def debug(filters: DashboardFiltersModel, scope: ScopeHeader):
    try:
        data_ctx = load_dashboard_data()
        ctx = prepare_context(scope, _filters_from_model(filters), data_ctx)
        return _json(compute_debug(ctx, data_ctx))
    except Exception as exc:
        logger.exception("debug failed")
        return _error(exc)
