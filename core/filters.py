from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

import pandas as pd

ALL = "All"


class Facet(NamedTuple):
    name: str
    column: str


# Fixed cascade order; also the order predicates are applied in.
FACETS: Tuple[Facet, ...] = (
    Facet("regional_area", "regional_area"),
    Facet("sub_region", "sub_region"),
    Facet("distribution_channel", "distribution_channel"),
    Facet("site_name", "site_name"),
    Facet("material_type", "material_type"),
    Facet("product_type", "product_type"),
    Facet("mgh1", "mgh1"),
    Facet("mgh2", "mgh2"),
    Facet("mgh3", "mgh3"),
    Facet("mgh4", "mgh4"),
    Facet("gift", "is_gift"),
    Facet("bogo", "is_bogo"),
    Facet("employee", "employee_name"),
)
FACET_BY_NAME: Dict[str, Facet] = {f.name: f for f in FACETS}

# camelCase request keys sent by the dashboard client.
FILTER_ALIASES = {
    "regional": "regional_area",
    "subDistrict": "sub_region",
    "distributionChannel": "distribution_channel",
    "siteName": "site_name",
    "materialType": "material_type",
    "productType": "product_type",
    "gwp": "gift",
    "idRa": "employee",
    "dateStart": "date_start",
    "dateEnd": "date_end",
}


@dataclass(frozen=True)
class FilterSpec:
    """User-selected constraints. ``None`` means unconstrained."""

    regional_area: Optional[str] = None
    sub_region: Optional[str] = None
    distribution_channel: Optional[str] = None
    site_name: Optional[str] = None
    material_type: Optional[str] = None
    product_type: Optional[str] = None
    mgh1: Optional[str] = None
    mgh2: Optional[str] = None
    mgh3: Optional[str] = None
    mgh4: Optional[str] = None
    gift: Optional[str] = None
    bogo: Optional[str] = None
    employee: Optional[str] = None
    date_start: Optional[str] = None
    date_end: Optional[str] = None

    def value(self, facet: Facet | str) -> Optional[str]:
        name = facet if isinstance(facet, str) else facet.name
        return getattr(self, name)

    def constraints(self) -> Dict[str, str]:
        return {f.name: self.value(f) for f in FACETS if self.value(f) is not None}

    def to_dict(self) -> Dict[str, str]:
        """Request-shaped view with ``"All"`` for unconstrained facets."""
        out = {f.name: (getattr(self, f.name) or ALL) for f in fields(self) if f.name not in ("date_start", "date_end")}
        out["date_start"] = self.date_start
        out["date_end"] = self.date_end
        return out


def _as_constraint(value: object) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    if not s or s == ALL:
        return None
    return s


def _as_day(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()[:10]
    s = str(value).strip()[:10]
    return s or None


def normalize_filters(raw: Optional[dict]) -> FilterSpec:
    raw = dict(raw or {})
    for alias, name in FILTER_ALIASES.items():
        if alias in raw and name not in raw:
            raw[name] = raw[alias]
    values = {f.name: _as_constraint(raw.get(f.name)) for f in FACETS}
    return FilterSpec(
        **values,
        date_start=_as_day(raw.get("date_start")),
        date_end=_as_day(raw.get("date_end")),
    )


def apply_scope(df: pd.DataFrame, scope: Optional[str]) -> pd.DataFrame:
    """Restrict to the caller's sub-region; an empty scope sees everything."""
    if not scope or df.empty:
        return df
    return df[df["sub_region"] == scope]


def apply_facets(df: pd.DataFrame, spec: FilterSpec, facets: Iterable[Facet] = FACETS) -> pd.DataFrame:
    for facet in facets:
        wanted = spec.value(facet)
        if wanted is None or df.empty:
            continue
        df = df[df[facet.column] == wanted]
    return df


def apply_date_range(df: pd.DataFrame, start: Optional[str], end: Optional[str]) -> pd.DataFrame:
    # Undated rows pass; zero-padded ISO days compare correctly as strings.
    if df.empty:
        return df
    if start:
        df = df[(df["shipping_day"] == "") | (df["shipping_day"] >= start)]
    if end:
        df = df[(df["shipping_day"] == "") | (df["shipping_day"] <= end)]
    return df


def apply_filters(df: pd.DataFrame, scope: Optional[str], spec: FilterSpec) -> pd.DataFrame:
    df = apply_scope(df, scope)
    df = apply_date_range(df, spec.date_start, spec.date_end)
    return apply_facets(df, spec)


def facets_before(name: str) -> List[Facet]:
    idx = [f.name for f in FACETS].index(name)
    return list(FACETS[:idx])
