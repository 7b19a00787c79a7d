"""
Configuration for the sales dashboard engine and API.

All settings are read from environment variables (a local ``.env`` file is
honoured) with defaults suitable for running against the bundled CSV.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ROOT_DIR = Path(__file__).resolve().parents[1]


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------
SALES_CSV_PATH: Path = Path(os.getenv("SALES_CSV_PATH", str(ROOT_DIR / "data" / "sales_transactions.csv")))

# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------
SCALE_FACTOR: float = _env_float("SCALE_FACTOR", 1.0)
REPORTING_QUARTER: int = min(4, max(1, _env_int("REPORTING_QUARTER", 1)))
TOP_N_PRODUCTS: int = max(1, _env_int("TOP_N_PRODUCTS", 10))

# Monthly targets are spread over a fixed 30-day month on the daily trend.
DAILY_TARGET_DAYS: int = 30

# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------
ALERT_CRITICAL_PCT: float = _env_float("ALERT_CRITICAL_PCT", 80.0)
ALERT_WARNING_PCT: float = _env_float("ALERT_WARNING_PCT", 100.0)

# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
APP_TITLE: str = "Retail Sales Dashboard API"
APP_VERSION: str = "0.1.0"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]
