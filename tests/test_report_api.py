"""Tests for the assessment report HTTP endpoints."""

import logging

import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture
def client():
    return TestClient(app)


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["visualization_mapping"] == "built-in"
        assert body["visualization_types"] == 55


class TestAssessmentReportEndpoints:

    def test_full_report(self, client, dashboard_scenario):
        response = client.post(
            "/api/assessment-report",
            json=dashboard_scenario.payload(appendix={"rows": []}),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["dashboards"]["dashboards"][0]["total_visualizations"] == 7
        assert body["dashboards"]["dashboards"][0]["complexity"] == "high"
        assert body["appendix"] == {"rows": []}

    def test_empty_snapshot(self, client):
        response = client.post("/api/assessment-report", json={})
        assert response.status_code == 200
        body = response.json()
        assert body["dashboards"]["total_dashboards"] == 0
        assert body["overall_complexity"] == "Low"

    def test_malformed_payload_rejected(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="app.main"):
            response = client.post("/api/assessment-report", json={"objects": "not-a-list"})
        assert response.status_code == 422
        assert "detail" in response.json()
        assert "Rejected POST /api/assessment-report" in caplog.text

    def test_dashboards(self, client, dashboard_scenario):
        response = client.post("/api/assessment-report/dashboards", json=dashboard_scenario.payload())
        assert response.status_code == 200
        assert response.json()["dashboards"][0]["total_tabs"] == 2

    def test_reports(self, client, data_source_scenario):
        response = client.post("/api/assessment-report/reports", json=data_source_scenario.payload())
        assert response.status_code == 200
        report = response.json()["reports"][0]
        assert report["total_queries"] == 1
        assert report["total_data_sources"] == 1

    def test_data_assets(self, client, data_source_scenario):
        response = client.post("/api/assessment-report/data-assets", json=data_source_scenario.payload())
        assert response.status_code == 200
        body = response.json()
        assert body["data_sources"][0]["reports_using"] == 1
        assert body["packages"][0]["total_data_modules"] == 1

    def test_usage(self, client, data_source_scenario):
        response = client.post("/api/assessment-report/usage/DS", json=data_source_scenario.payload())
        assert response.status_code == 200
        assert response.json()["report_ids"] == ["R"]

    def test_usage_unknown_target(self, client, data_source_scenario):
        response = client.post("/api/assessment-report/usage/nope", json=data_source_scenario.payload())
        assert response.status_code == 200
        assert response.json()["total_usage"] == 0

    def test_classify_visualization_type(self, client):
        response = client.get("/api/visualization-types/classify", params={"type": "Stacked Bar Chart"})
        assert response.status_code == 200
        assert response.json()["complexity"] == "Low"
        assert response.json()["feasibility"] == "Yes"

    def test_classify_requires_type(self, client):
        response = client.get("/api/visualization-types/classify")
        assert response.status_code == 422
