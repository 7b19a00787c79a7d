"""
Tests for agent performance, product insights and the monthly achievement matrix.
"""

from core.metrics_performance import (
    compute_agent_performance,
    compute_monthly_achievement,
    compute_product_insights,
    quarter_months,
)


# ---------------------------------------------------------------------------
# Agent performance
# ---------------------------------------------------------------------------
class TestAgentPerformance:
    """Tests for compute_agent_performance."""

    def test_three_row_scenario(self, three_row_context):
        agents = compute_agent_performance(three_row_context["transactions"])
        assert agents == [
            {"name": "A", "revenue": 700.0, "target": 1000, "achievement": 70.0},
            {"name": "B", "revenue": 0.0, "target": 500, "achievement": 0.0},
        ]

    def test_sorted_by_revenue_descending(self, make_frame):
        df = make_frame(
            [
                {"employee_name": "A", "qty": 1, "gross_sales": 100},
                {"employee_name": "B", "qty": 1, "gross_sales": 300},
                {"employee_name": "C", "qty": 1, "gross_sales": 200},
            ]
        )
        assert [a["name"] for a in compute_agent_performance(df)] == ["B", "C", "A"]

    def test_equal_revenue_keeps_encounter_order(self, make_frame):
        df = make_frame(
            [
                {"employee_name": "Z", "qty": 1, "gross_sales": 100},
                {"employee_name": "Y", "qty": 1, "gross_sales": 100},
            ]
        )
        assert [a["name"] for a in compute_agent_performance(df)] == ["Z", "Y"]

    def test_duplicated_rows_leave_agent_targets_unchanged(self, make_frame):
        rows = [
            {"employee_name": "A", "sales_target_uniq": 1000, "qty": 2, "gross_sales": 500, "shipping_date": "2025-01-10"},
            {"employee_name": "A", "sales_target_uniq": 1200, "qty": 1, "gross_sales": 200, "shipping_date": "2025-02-03"},
            {"employee_name": "B", "sales_target_uniq": 500, "qty": -1, "gross_sales": -100, "shipping_date": "2025-01-15"},
        ]
        once = {a["name"]: a["target"] for a in compute_agent_performance(make_frame(rows))}
        repeated = {a["name"]: a["target"] for a in compute_agent_performance(make_frame(rows * 5))}
        assert repeated == once == {"A": 2200, "B": 500}

    def test_rows_without_agent_name_are_skipped(self, make_frame):
        df = make_frame([{"employee_name": "", "qty": 1, "gross_sales": 100}])
        assert compute_agent_performance(df) == []


# ---------------------------------------------------------------------------
# Product insights
# ---------------------------------------------------------------------------
class TestProductInsights:
    """Tests for compute_product_insights."""

    def test_returned_products_are_excluded(self, three_row_context):
        insights = compute_product_insights(three_row_context["transactions"])
        names = {p["sku_name"] for p in insights["top_by_revenue"]}
        assert names == {"P1", "P2"}

    def test_rankings(self, make_frame):
        df = make_frame(
            [
                {"sku_name": "Jacket", "mgh3": "Jackets", "qty": 1, "gross_sales": 900, "invoice_number": "1"},
                {"sku_name": "Cap", "mgh3": "Caps", "qty": 5, "gross_sales": 100, "invoice_number": "2"},
                {"sku_name": "Cap", "mgh3": "Caps", "qty": 3, "gross_sales": 60, "invoice_number": "3"},
                {"sku_name": "Tee", "mgh3": "Tees", "qty": 2, "gross_sales": 300, "invoice_number": "3"},
            ]
        )
        insights = compute_product_insights(df)
        assert [p["sku_name"] for p in insights["top_by_revenue"]] == ["Jacket", "Tee", "Cap"]
        assert [p["sku_name"] for p in insights["top_by_quantity"]] == ["Cap", "Tee", "Jacket"]
        assert [p["sku_name"] for p in insights["slow_moving"]] == ["Cap", "Tee", "Jacket"]

        cap = next(p for p in insights["top_by_revenue"] if p["sku_name"] == "Cap")
        assert cap == {
            "sku_name": "Cap",
            "category": "Caps",
            "product_type": "Regular",
            "total_revenue": 160,
            "total_qty": 8,
            "transaction_count": 2,
        }

    def test_lists_are_capped(self, make_frame):
        df = make_frame([{"sku_name": f"SKU-{i:02d}", "qty": 1, "gross_sales": 10 + i} for i in range(15)])
        insights = compute_product_insights(df, top_n=10)
        assert len(insights["top_by_revenue"]) == 10
        assert insights["top_by_revenue"][0]["sku_name"] == "SKU-14"
        assert insights["slow_moving"][0]["sku_name"] == "SKU-00"

    def test_empty_table(self, make_frame):
        assert compute_product_insights(make_frame([])) == {"top_by_revenue": [], "top_by_quantity": [], "slow_moving": []}


# ---------------------------------------------------------------------------
# Monthly achievement
# ---------------------------------------------------------------------------
class TestMonthlyAchievement:
    """Tests for compute_monthly_achievement."""

    def test_quarter_months(self):
        assert quarter_months(1) == [1, 2, 3]
        assert quarter_months(4) == [10, 11, 12]

    def test_matrix_for_first_quarter(self, make_frame):
        df = make_frame(
            [
                {"employee_name": "A", "sales_target_uniq": 1000, "qty": 1, "gross_sales": 500, "shipping_date": "2025-01-10"},
                {"employee_name": "A", "sales_target_uniq": 1000, "qty": 1, "gross_sales": 250, "shipping_date": "2025-01-11"},
                {"employee_name": "A", "sales_target_uniq": 800, "qty": 1, "gross_sales": 800, "shipping_date": "2025-02-01"},
                {"employee_name": "B", "sales_target_uniq": 400, "qty": -1, "gross_sales": -50, "shipping_date": "2025-03-05"},
            ]
        )
        matrix = compute_monthly_achievement(df, quarter=1)
        assert [row["name"] for row in matrix] == ["A", "B"]

        a_months = matrix[0]["months"]
        assert [m["month"] for m in a_months] == ["Jan", "Feb", "Mar"]
        assert a_months[0] == {"month": "Jan", "sales": 750, "target": 1000, "achievement": 75.0}
        assert a_months[1]["achievement"] == 100.0
        assert a_months[2] == {"month": "Mar", "sales": 0, "target": 0, "achievement": 0.0}

        b_march = matrix[1]["months"][2]
        assert b_march["sales"] == 0
        assert b_march["target"] == 400

    def test_months_outside_quarter_are_ignored(self, make_frame):
        df = make_frame(
            [{"employee_name": "A", "sales_target_uniq": 1000, "qty": 1, "gross_sales": 500, "shipping_date": "2025-05-10"}]
        )
        matrix = compute_monthly_achievement(df, quarter=1)
        assert all(m["sales"] == 0 and m["target"] == 0 for m in matrix[0]["months"])

    def test_empty_table(self, make_frame):
        assert compute_monthly_achievement(make_frame([])) == []
