"""Tests for aggregate report assembly."""

import pytest

from app.config import Settings
from app.services.complexity import ComplexityLevel, VisualizationClassifier, VisualizationMetadata
from app.services.report_service import ReportService


@pytest.fixture
def service() -> ReportService:
    return ReportService()


@pytest.fixture
def assets_scenario(builder):
    """
    Package P holds three modules; M1 connects to DS. Dashboard D uses P
    directly and report R reaches M2 through a query.
    """
    builder.add("P", "package", "Sales Package")
    for mid in ("M1", "M2", "M3"):
        builder.add(mid, "data_module", mid, cognosClass="smartsModule" if mid == "M3" else None)
        builder.link("P", mid)
    builder.add("DS", "data_source", "Warehouse", data_source_type="db2")
    builder.link("M1", "DS", "connects_to")
    builder.add("D", "dashboard", "Exec Dashboard")
    builder.link("D", "P", "uses")
    builder.add("R", "report", "Revenue")
    builder.add("Q", "query")
    builder.link("R", "Q")
    builder.link("Q", "M2", "uses")
    return builder


class TestDashboardsSummary:

    def test_two_tab_dashboard(self, service, dashboard_scenario):
        summary = service.get_dashboards_summary(dashboard_scenario.objects, dashboard_scenario.relationships)

        assert summary.total_dashboards == 1
        dashboard = summary.dashboards[0]
        assert dashboard.total_tabs == 2
        assert dashboard.total_visualizations == 7
        assert dashboard.complexity == "high"
        assert dashboard.visualizations_by_complexity.low == 7
        assert dashboard.nesting_depth == 2
        assert summary.stats.high == 1

    def test_auxiliary_counts(self, service, builder):
        builder.add("D", "dashboard")
        builder.add("M", "data_module")
        builder.add("S", "data_source")
        builder.add("P", "package")
        builder.add("R", "report")
        builder.link("D", "M", "uses")
        builder.link("D", "M", "connects_to")
        builder.link("D", "S", "connects_to")
        builder.link("D", "P", "connects_to")
        builder.link("D", "R", "uses")

        dashboard = service.get_dashboards_summary(builder.objects, builder.relationships).dashboards[0]
        assert dashboard.total_data_modules == 1
        assert dashboard.total_data_sources == 1
        assert dashboard.total_packages == 1
        assert dashboard.total_reports == 1

    def test_sorted_by_name_case_insensitive(self, service, builder):
        builder.add("1", "dashboard", "beta")
        builder.add("2", "dashboard", "Alpha")
        builder.add("3", "dashboard", "gamma")
        summary = service.get_dashboards_summary(builder.objects, builder.relationships)
        assert [d.dashboard_name for d in summary.dashboards] == ["Alpha", "beta", "gamma"]


class TestReportsSummary:

    def test_report_roll_up(self, service, builder):
        builder.add("R", "report", "Revenue")
        builder.add("P1", "page")
        builder.add("V1", "visualization", visualization_type="Bar")
        builder.add("V2", "visualization", visualization_type="Treemap")
        builder.add("Q", "query")
        builder.add("DM", "data_module")
        builder.add("DS", "data_source")
        builder.link("R", "P1")
        builder.link("P1", "V1")
        builder.link("P1", "V2")
        builder.link("R", "Q")
        builder.link("Q", "DM", "uses")
        builder.link("DM", "DS", "connects_to")

        report = service.get_reports_summary(builder.objects, builder.relationships).reports[0]
        assert report.report_type == "Mixed"
        assert report.total_pages == 1
        assert report.total_visualizations == 2
        assert report.complexity == "medium"
        assert report.visualizations_by_complexity.low == 1
        assert report.visualizations_by_complexity.critical == 1
        assert report.total_queries == 1
        assert report.total_data_modules == 1
        assert report.total_data_sources == 1
        assert report.nesting_depth == 2
        assert report.descendant_count == 4

    def test_report_type_fallbacks(self, service, builder):
        builder.add("R1", "report", "a", reportType="interactiveReport")
        builder.add("R2", "report", "b")
        builder.add("R3", "report", "c")
        builder.add("V", "visualization", visualization_type="Pie")
        builder.link("R3", "V")

        reports = service.get_reports_summary(builder.objects, builder.relationships).reports
        assert [r.report_type for r in reports] == ["interactiveReport", "—", "Pie"]

    def test_report_type_from_raw_type_or_cognos_class(self, service, builder):
        builder.add("R1", "report", "a")
        builder.add("V1", "visualization", raw_type="List")
        builder.link("R1", "V1")
        builder.add("R2", "report", "b")
        builder.add("V2", "visualization", cognosClass="crosstab")
        builder.link("R2", "V2")

        reports = service.get_reports_summary(builder.objects, builder.relationships).reports
        assert [r.report_type for r in reports] == ["List", "crosstab"]

    def test_data_source_connections_counted_as_sources(self, service, builder):
        builder.add("R", "report")
        builder.add("C", "data_source_connection")
        builder.link("R", "C", "uses")

        report = service.get_reports_summary(builder.objects, builder.relationships).reports[0]
        assert report.total_data_sources == 1
        assert report.total_data_source_connections == 1


class TestDataAssets:

    def test_package_summary(self, service, assets_scenario):
        assets = service.get_data_assets_summary(assets_scenario.objects, assets_scenario.relationships)
        package = assets.packages[0]

        assert package.total_data_modules == 3
        assert package.complexity == "medium"
        assert package.total_data_sources == 1
        assert package.dashboards_using == 1
        assert package.reports_using == 1
        assert package.total_usage == 2

    def test_module_summary(self, service, assets_scenario):
        assets = service.get_data_assets_summary(assets_scenario.objects, assets_scenario.relationships)
        modules = {m.data_module_id: m for m in assets.data_modules}

        assert modules["M1"].total_data_sources == 1
        assert modules["M1"].nested_in_package is True
        assert modules["M2"].reports_using == 1
        assert modules["M3"].module_type == "smartsModule"
        assert modules["M1"].module_type == "dataModule"
        assert all(m.complexity == "medium" for m in assets.data_modules)
        # M2 is used, the rest tie on zero usage and sort by name
        assert [m.data_module_id for m in assets.data_modules] == ["M2", "M1", "M3"]

    def test_module_nested_in_data_source_connection(self, service, builder):
        builder.add("C", "data_source_connection")
        builder.add("M", "data_module")
        builder.link("C", "M")

        module = service.get_data_assets_summary(builder.objects, builder.relationships).data_modules[0]
        assert module.nested_in_data_source is True
        assert module.nested_in_package is False

    def test_package_data_sources_exclude_packages(self, service, builder):
        builder.add("P", "package")
        builder.add("M", "data_module")
        builder.add("DS", "data_source")
        builder.add("C", "data_source_connection")
        builder.add("P2", "package")
        builder.link("P", "M")
        builder.link("M", "DS", "connects_to")
        builder.link("M", "C", "connects_to")
        builder.link("M", "P2", "connects_to")

        packages = service.get_data_assets_summary(builder.objects, builder.relationships).packages
        package = next(p for p in packages if p.package_id == "P")
        assert package.total_data_sources == 2

    def test_module_tables_and_columns(self, service, builder):
        builder.add("M", "data_module")
        builder.add("P", "package")
        builder.add("T", "table")
        builder.add("C1", "column")
        builder.add("C2", "column")
        builder.link("T", "M", "parent_child")
        builder.link("M", "P", "parent_child")
        builder.link("T", "C1", "has_column")
        builder.link("T", "C2", "has_column")
        builder.link("T", "C1", "has_column")

        module = service.get_data_assets_summary(builder.objects, builder.relationships).data_modules[0]
        assert module.total_tables == 1
        assert module.total_columns == 2
        assert module.parent_type == "package"

    def test_data_source_summary(self, service, builder):
        builder.add("DS", "data_source", "Warehouse", data_source_type="db2")
        builder.add("M1", "data_module")
        builder.add("M2", "data_module")
        builder.add("P", "package")
        builder.add("R", "report")
        builder.link("M1", "DS", "connects_to")
        builder.link("DS", "M2", "parent_child")
        builder.link("P", "DS", "parent_child")
        builder.link("R", "DS", "uses")

        source = service.get_data_assets_summary(builder.objects, builder.relationships).data_sources[0]
        assert source.data_source_type == "db2"
        assert source.total_data_modules == 2
        assert source.total_packages == 1
        assert source.reports_using == 1
        assert source.total_usage == 3

    def test_unified_totals(self, service, assets_scenario):
        assets = service.get_data_assets_summary(assets_scenario.objects, assets_scenario.relationships)
        assert assets.total_packages == 1
        assert assets.total_data_modules == 3
        assert assets.total_data_sources == 1
        assert assets.total_reports_using == 1
        assert assets.total_dashboards_using == 1

    def test_usage_counts(self, service, data_source_scenario):
        counts = service.get_usage_counts("DS", data_source_scenario.objects, data_source_scenario.relationships)
        assert counts.reports_using == 1
        assert counts.report_ids == ["R"]
        missing = service.get_usage_counts("nope", data_source_scenario.objects, data_source_scenario.relationships)
        assert missing.total_usage == 0


class TestFeatureGroups:

    def test_visualization_type_groups(self, service, builder):
        builder.add("D", "dashboard")
        builder.add("T", "tab")
        builder.add("R", "report")
        builder.add("V1", "visualization", visualization_type="Bar ")
        builder.add("V2", "visualization", visualization_type="Bar")
        builder.add("V3", "visualization")
        builder.link("D", "T")
        builder.link("T", "V1")
        builder.link("R", "V2")

        groups = service.get_visualization_type_groups(builder.objects, builder.relationships)
        assert groups[0].visualization_type == "Bar"
        assert groups[0].count == 2
        assert groups[0].complexity == "Low"
        assert groups[0].feasibility == "Yes"
        assert groups[0].dashboards_affected == 1
        assert groups[0].reports_affected == 1
        assert groups[1].visualization_type == "Unknown"
        assert groups[1].complexity == "Unknown"

    def test_calculated_field_groups(self, builder):
        builder.add("c1", "calculated_field", calculation_type="expression", expression="a + b")
        builder.add("c2", "calculated_field", calculation_type="mystery")
        builder.add("c3", "calculated_field", calculation_type="mystery")

        groups = ReportService().get_calculated_field_groups(builder.objects)
        assert [(g.calculation_type, g.count, g.complexity) for g in groups] == [
            ("mystery", 2, "Low"),
            ("expression", 1, "Low"),
        ]
        assert groups[1].fields[0].expression == "a + b"

        strict = ReportService(calculated_field_unknown_level=ComplexityLevel.CRITICAL)
        assert strict.get_calculated_field_groups(builder.objects)[0].complexity == "Critical"

    def test_calculated_field_type_falls_back_to_cognos_class(self, service, builder):
        builder.add("c1", "calculated_field", cognosClass="calculation")
        builder.add("c2", "calculated_field")
        groups = service.get_calculated_field_groups(builder.objects)
        assert {g.calculation_type for g in groups} == {"calculation", "Unknown"}

    def test_filter_groups(self, service, builder):
        builder.add("f1", "filter", filter_type="detail", parameter_references=["p"])
        builder.add("f2", "filter", filter_type="detail")
        builder.add("f3", "filter", referenced_columns=["a", "b", "c", "d"])

        groups = service.get_filter_groups(builder.objects)
        assert groups[0].filter_type == "detail"
        assert groups[0].count == 2
        assert [f.complexity for f in groups[0].filters] == ["Medium", "Low"]
        assert groups[0].complexity == "Medium"
        assert groups[1].filter_type == "Unknown"
        assert groups[1].complexity == "Critical"

    def test_prompt_groups(self, service, builder):
        builder.add("p1", "prompt", prompt_type="text", value="Region")
        builder.add("p2", "prompt", prompt_type="tree")
        groups = service.get_prompt_groups(builder.objects)
        assert {g.prompt_type: g.complexity for g in groups} == {"text": "Low", "tree": "High"}
        assert groups[0].prompts[0].value == "Region"


class TestInventory:

    def test_inventory_summary(self, service, dashboard_scenario):
        dashboard_scenario.add("R", "report")
        dashboard_scenario.add("PG", "page")
        inventory = service.get_inventory_summary(dashboard_scenario.objects, dashboard_scenario.relationships)
        assert inventory.dashboards == 1
        assert inventory.reports == 1
        assert inventory.visualizations == 7
        assert inventory.pages_and_tabs == 3

    def test_detailed_inventory(self, service, builder):
        builder.add("D", "dashboard", "Exec", owner="ana")
        builder.add("R", "report", "Revenue")
        builder.add("R2", "report", "Orphan")
        builder.add("P", "package", "Sales")
        builder.link("R", "D", "references")
        builder.link("R", "P", "uses")
        builder.link("R", "P", "uses")

        rows = {r.object_id: r for r in service.get_detailed_inventory(builder.objects, builder.relationships)}
        assert rows["D"].dashboards == ["Exec"]
        assert rows["D"].owner == "ana"
        assert rows["R"].dashboards == ["Exec"]
        assert rows["R"].datasets_used == ["Sales"]
        assert rows["R"].owner == "Unknown"
        assert rows["R2"].dashboards == ["N/A"]
        assert rows["R2"].datasets_used == ["N/A"]


class TestGenerateReport:

    def test_full_report(self, service, dashboard_scenario):
        snapshot = dashboard_scenario.snapshot(summary={"key_findings": ["x"]})
        report = service.generate_report(snapshot)

        assert report.overall_complexity == "High"
        assert report.dashboards.dashboards[0].total_visualizations == 7
        assert report.inventory.visualizations == 7
        assert report.summary == {"key_findings": ["x"]}
        assert report.complex_analysis is None
        assert report.usage_stats_sections == []

    def test_duplicate_edges_change_nothing(self, service, dashboard_scenario, data_source_scenario):
        # both fixtures share one builder
        snapshot = dashboard_scenario.snapshot()
        doubled = dashboard_scenario.snapshot()
        doubled.relationships = list(snapshot.relationships) + list(snapshot.relationships)

        first = service.generate_report(snapshot).model_dump()
        second = service.generate_report(doubled).model_dump()
        assert first == second

    def test_graph_context_memoized_on_list_identity(self, service, dashboard_scenario):
        objects, relationships = dashboard_scenario.objects, dashboard_scenario.relationships
        context = service.get_context(objects, relationships)
        assert service.get_context(objects, relationships) is context
        assert service.get_context(list(objects), relationships) is not context

    def test_injected_classifier(self, dashboard_scenario):
        classifier = VisualizationClassifier({"bar": VisualizationMetadata("Critical", "No")})
        service = ReportService(visualization_classifier=classifier)
        dashboard = service.get_dashboards_summary(
            dashboard_scenario.objects, dashboard_scenario.relationships
        ).dashboards[0]
        assert dashboard.visualizations_by_complexity.critical == 7

    def test_from_settings(self, tmp_path):
        mapping = tmp_path / "mapping.csv"
        mapping.write_text(
            "Feature Area,Feature,Complexity,Feasibility\nVisualization,Bar,High,Partial\n",
            encoding="utf-8",
        )
        configured = Settings(
            VISUALIZATION_MAPPING_PATH=str(mapping),
            CALCULATED_FIELD_UNKNOWN_COMPLEXITY="critical",
            HIGH_COMPLEXITY_SHARE_THRESHOLD=0.5,
        )

        service = ReportService.from_settings(configured)
        assert service.classify_visualization_type("bar").complexity == "High"
        assert service.calculated_field_unknown_level == ComplexityLevel.CRITICAL
        assert service.high_share_threshold == 0.5
