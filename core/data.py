from __future__ import annotations

import csv
import hashlib
import io
import logging
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from core import config

logger = logging.getLogger(__name__)

# Source header -> record field.
TRANSACTION_COLUMNS = {
    "LOCATION": "location",
    "SITE_NAME": "site_name",
    "SUB_DISTRICT": "sub_region",
    "REGIONAL_AREA": "regional_area",
    "INVOICE_NUMBER": "invoice_number",
    "ORDER_NUMBER": "order_number",
    "SKU_NUMBER": "sku_number",
    "SKU_NAME": "sku_name",
    "TOTAL_QTY": "qty",
    "UNIT_PRICE": "unit_price",
    "NETT_SALES": "nett_sales",
    "SALES": "gross_sales",
    "EMPLOYEE_NUMBER": "employee_number",
    "EMPLOYEE_NAME": "employee_name",
    "SALES_TARGET": "sales_target",
    "SALES_TARGET_UNIQ": "sales_target_uniq",
    "POSITION": "position",
    "CHANNEL_NAME": "channel_name",
    "STATUS": "status",
    "DIST_CHAN_DESC": "distribution_channel",
    "SHIPPING_DATE": "shipping_date",
    "MATL_TYPE": "material_type_code",
    "MATL_TYPE_DESC": "material_type",
    "MGH_1": "mgh1",
    "MGH_2": "mgh2",
    "MGH_3": "mgh3",
    "MGH_4": "mgh4",
    "PRODUCT_TYPE": "product_type",
    "IS_GWP": "is_gift",
    "IS_BOGO": "is_bogo",
}

NUMERIC_COLUMNS = ["qty", "unit_price", "nett_sales", "gross_sales", "sales_target", "sales_target_uniq"]
DATE_PART_COLUMNS = ["shipping_day", "shipping_month", "shipping_year"]
STRING_COLUMNS = [c for c in TRANSACTION_COLUMNS.values() if c not in NUMERIC_COLUMNS] + DATE_PART_COLUMNS
RECORD_COLUMNS = list(TRANSACTION_COLUMNS.values()) + DATE_PART_COLUMNS


# ---------------- Helpers ----------------
def drop_duplicate_columns(df: pd.DataFrame) -> pd.DataFrame:
    return df.loc[:, ~df.columns.duplicated()]


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    """Coerce numeric fields; anything unparsable becomes 0."""
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0).astype(float)
    return df


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = df[col].fillna("").astype(str).str.strip()
    return df


def add_date_parts(df: pd.DataFrame) -> pd.DataFrame:
    day = df["shipping_date"].astype(str).str.slice(0, 10)
    df["shipping_day"] = day
    df["shipping_month"] = day.str.slice(0, 7)
    df["shipping_year"] = day.str.slice(0, 4)
    return df


def empty_transactions() -> pd.DataFrame:
    return pd.DataFrame(
        {c: pd.Series(dtype=float if c in NUMERIC_COLUMNS else object) for c in RECORD_COLUMNS}
    )


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def round_int(value: object) -> int:
    rounded = round_half_up(value)
    return int(rounded) if rounded is not None else 0


def safe_div(numerator: float, denominator: float) -> float:
    """Ratio that is 0 whenever the denominator is 0."""
    if not denominator:
        return 0.0
    return float(numerator) / float(denominator)


def positive_rows(df: pd.DataFrame) -> pd.DataFrame:
    """True sales lines (qty > 0); returns and reversals excluded."""
    if df.empty:
        return df
    return df[df["qty"] > 0]


def return_rows(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return df
    return df[df["qty"] < 0]


# ---------------- Parser ----------------
def parse_transactions(text: str) -> Tuple[pd.DataFrame, int]:
    """Parse delimited text into the transaction table.

    Returns the table and the number of rows dropped for having fewer
    fields than the header. Extra trailing fields are ignored.
    """
    if not text or not text.strip():
        return empty_transactions(), 0

    rows = [r for r in csv.reader(io.StringIO(text)) if r and not (len(r) == 1 and not r[0].strip())]
    if not rows:
        return empty_transactions(), 0
    header = [h.strip() for h in rows[0]]
    width = len(header)
    body = [r[:width] for r in rows[1:] if len(r) >= width]
    dropped = len(rows) - 1 - len(body)
    if dropped:
        logger.warning("Dropped %d rows with fewer fields than the header", dropped)

    df = pd.DataFrame(body, columns=header)
    df = df.rename(columns=TRANSACTION_COLUMNS)
    df = drop_duplicate_columns(df)
    for col in TRANSACTION_COLUMNS.values():
        if col not in df.columns:
            df[col] = 0.0 if col in NUMERIC_COLUMNS else ""
    df = df[list(TRANSACTION_COLUMNS.values())].copy()
    df = coerce_str_safe(df, [c for c in TRANSACTION_COLUMNS.values() if c not in NUMERIC_COLUMNS])
    df = numericize(df, NUMERIC_COLUMNS)
    df = add_date_parts(df)
    return df.reset_index(drop=True), dropped


def source_checksum(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()


@lru_cache(maxsize=4)
def _load_transactions_cached(path: str, checksum: str, raw: bytes) -> Tuple[pd.DataFrame, int]:
    # The parsed bytes are the hashed bytes; a changed file is parsed again.
    df, dropped = parse_transactions(raw.decode("utf-8-sig"))
    logger.info("Parsed %s: %d rows (%d dropped), sha256=%s", path, len(df), dropped, checksum[:12])
    return df, dropped


# ---------------- Public API ----------------
def load_dashboard_data(path: Optional[Path | str] = None) -> Dict[str, object]:
    """Load the transaction table for one request.

    The parsed table is shared between requests with the same source
    checksum and must be treated as read-only. A source that cannot be read
    yields an empty table and ``read_error``.
    """
    source = Path(path) if path is not None else config.SALES_CSV_PATH
    try:
        raw = source.read_bytes()
        checksum = source_checksum(raw)
        transactions, dropped = _load_transactions_cached(str(source), checksum, raw)
    except Exception as exc:
        logger.exception("Failed to read sales source %s", source)
        return {
            "source": str(source),
            "checksum": None,
            "transactions": empty_transactions(),
            "read_error": f"{type(exc).__name__}: {exc}",
            "dropped_rows": 0,
        }
    return {
        "source": str(source),
        "checksum": checksum,
        "transactions": transactions,
        "read_error": None,
        "dropped_rows": dropped,
    }


def data_context_from_frame(df: pd.DataFrame, *, source: str = "<memory>") -> Dict[str, object]:
    """Wrap an in-memory table (e.g. a warehouse query result) as a data context."""
    transactions = df.copy()
    for col in RECORD_COLUMNS:
        if col not in transactions.columns:
            if col in DATE_PART_COLUMNS:
                continue
            transactions[col] = 0.0 if col in NUMERIC_COLUMNS else ""
    transactions = coerce_str_safe(transactions, [c for c in STRING_COLUMNS if c not in DATE_PART_COLUMNS])
    transactions = numericize(transactions, NUMERIC_COLUMNS)
    transactions = add_date_parts(transactions)
    return {
        "source": source,
        "checksum": None,
        "transactions": transactions[RECORD_COLUMNS].reset_index(drop=True),
        "read_error": None,
        "dropped_rows": 0,
    }


def unique_values(series: pd.Series) -> List[str]:
    """Distinct non-blank values, ordinal ascending."""
    values = {str(v) for v in series.dropna().tolist() if str(v).strip()}
    return sorted(values)
