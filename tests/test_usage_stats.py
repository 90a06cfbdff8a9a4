"""Tests for usage stats section building."""

from app.services.usage_stats import MISSING, USAGE_SECTIONS, build_usage_stats_sections, us_val


class TestUsVal:

    def test_snake_key(self):
        assert us_val({"target_name": "A"}, "target_name") == "A"

    def test_upper_snake_fallback(self):
        assert us_val({"TARGET_NAME": "A"}, "target_name") == "A"

    def test_camel_case_key_converted(self):
        assert us_val({"TARGET_NAME": "A"}, "targetName") == "A"

    def test_first_non_null_key_wins(self):
        assert us_val({"a": None, "B": 2}, "a", "b") == 2

    def test_missing(self):
        assert us_val({}, "rank") is None


class TestBuildSections:

    def test_empty_payload(self):
        assert build_usage_stats_sections(None) == []
        assert build_usage_stats_sections({}) == []

    def test_eight_sections_defined(self):
        assert len(USAGE_SECTIONS) == 8

    def test_most_used_rows(self):
        payload = {
            "usage_stats": {
                "most_used_content_last_60_days": [
                    {"RANK": 1, "TARGET_NAME": "Sales", "COGIPF_TARGET_PATH": "x" * 60, "content_type": "report"},
                ],
            },
        }
        sections = build_usage_stats_sections(payload)

        assert len(sections) == 1
        section = sections[0]
        assert section.title == "Most Used Content (Last 60 Days)"
        assert [h.label for h in section.headers] == [
            "RANK", "TARGET NAME", "PATH", "CONTENT TYPE", "VIEWS (60D)", "PRIMARY USER",
        ]
        assert section.rows == [[1, "Sales", "x" * 40, "report", MISSING, MISSING]]

    def test_truncated_cell_missing_is_blank(self):
        payload = {"content_creation": {"content_creation_rate": [{"month_label": "2024-01"}]}}
        row = build_usage_stats_sections(payload)[0].rows[0]
        assert row == ["2024-01", MISSING, MISSING, MISSING, ""]

    def test_empty_tables_omitted_and_order_fixed(self):
        payload = {
            "pilot_recommendations": {"recommended_pilot_reports": [{"target_name": "P"}]},
            "user_stats": {"top_active_users": [], "developer_activity": [{"username": "dev"}]},
            "performance": "not-a-dict",
        }
        titles = [s.title for s in build_usage_stats_sections(payload)]
        assert titles == ["Developer Activity", "Recommended Pilot Reports"]

    def test_non_scalar_cells_stringified(self):
        payload = {"quick_wins": {"quick_wins_scatter": [{"target_name": True, "views_last_60_days": 1.5}]}}
        row = build_usage_stats_sections(payload)[0].rows[0]
        assert row[0] == "True"
        assert row[2] == 1.5
