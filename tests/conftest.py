"""
Shared fixtures for the dashboard engine tests.

Tests build small transaction tables row by row; every field not given
falls back to ``BASE_ROW``.
"""

import pandas as pd
import pytest

from core.data import data_context_from_frame

BASE_ROW = {
    "location": "S101",
    "site_name": "Store A",
    "sub_region": "R1",
    "regional_area": "JAKARTA",
    "invoice_number": "INV-1",
    "order_number": "ORD-1",
    "sku_number": "SKU-1",
    "sku_name": "P1",
    "qty": 1,
    "unit_price": 0,
    "nett_sales": 0,
    "gross_sales": 0,
    "employee_number": "E1",
    "employee_name": "A",
    "sales_target": 0,
    "sales_target_uniq": 0,
    "position": "Retail Assistant",
    "channel_name": "Offline Store",
    "status": "delivered",
    "distribution_channel": "Retail",
    "shipping_date": "2025-01-10 10:00:00.000000 UTC",
    "material_type_code": "FERT",
    "material_type": "Finished Goods",
    "mgh1": "Brand X",
    "mgh2": "Apparel",
    "mgh3": "Jackets",
    "mgh4": "Outdoor",
    "product_type": "Regular",
    "is_gift": "FALSE",
    "is_bogo": "FALSE",
}


def build_context(rows):
    frame = pd.DataFrame([{**BASE_ROW, **row} for row in rows]) if rows else pd.DataFrame(columns=list(BASE_ROW))
    return data_context_from_frame(frame)


def build_frame(rows):
    return build_context(rows)["transactions"]


@pytest.fixture
def make_frame():
    """Factory: list of partial rows -> normalized transaction table."""
    return build_frame


@pytest.fixture
def make_context():
    """Factory: list of partial rows -> data context as returned by the loader."""
    return build_context


@pytest.fixture
def three_row_context():
    """Two sales lines for agent A and one return line for agent B, all January 2025."""
    return build_context(
        [
            {
                "invoice_number": "INV-1",
                "employee_number": "E1",
                "employee_name": "A",
                "sku_name": "P1",
                "sales_target_uniq": 1000,
                "qty": 2,
                "gross_sales": 500,
                "shipping_date": "2025-01-10 10:00:00.000000 UTC",
            },
            {
                "invoice_number": "INV-2",
                "employee_number": "E1",
                "employee_name": "A",
                "sku_name": "P2",
                "sales_target_uniq": 1000,
                "qty": 1,
                "gross_sales": 200,
                "shipping_date": "2025-01-20 10:00:00.000000 UTC",
            },
            {
                "invoice_number": "INV-3",
                "employee_number": "E2",
                "employee_name": "B",
                "sku_name": "PB",
                "sales_target_uniq": 500,
                "qty": -1,
                "gross_sales": -100,
                "status": "returned",
                "shipping_date": "2025-01-15 10:00:00.000000 UTC",
            },
        ]
    )
