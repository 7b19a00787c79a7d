from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.filters import ALL


class DashboardFiltersModel(BaseModel):
    """Filter selections; ``"All"`` leaves a facet unconstrained.

    Accepts both the snake_case field names and the camelCase keys sent by
    the dashboard client.
    """

    model_config = ConfigDict(populate_by_name=True)

    regional_area: Optional[str] = Field(default=ALL, alias="regional")
    sub_region: Optional[str] = Field(default=ALL, alias="subDistrict")
    distribution_channel: Optional[str] = Field(default=ALL, alias="distributionChannel")
    site_name: Optional[str] = Field(default=ALL, alias="siteName")
    material_type: Optional[str] = Field(default=ALL, alias="materialType")
    product_type: Optional[str] = Field(default=ALL, alias="productType")
    mgh1: Optional[str] = ALL
    mgh2: Optional[str] = ALL
    mgh3: Optional[str] = ALL
    mgh4: Optional[str] = ALL
    gift: Optional[str] = Field(default=ALL, alias="gwp")
    bogo: Optional[str] = ALL
    employee: Optional[str] = Field(default=ALL, alias="idRa")
    date_start: Optional[date] = Field(default=None, alias="dateStart")
    date_end: Optional[date] = Field(default=None, alias="dateEnd")


class FilterOptionsResponse(BaseModel):
    scope: str
    options: dict[str, list[str]]
    valid: dict[str, bool]


class SourceResponse(BaseModel):
    source: str
    checksum: Optional[str]
    rows: int
    dropped_rows: int
    read_error: Optional[str]
