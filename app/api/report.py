from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from app.config import settings
from app.schemas.report import (
    AssessmentReport,
    AssessmentSnapshot,
    DashboardsSummary,
    DataAssetsSummary,
    ReportsSummary,
    UsageCounts,
    VisualizationClassification,
)
from app.services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter()

_report_service: Optional[ReportService] = None


def get_report_service() -> ReportService:
    """Shared service instance; the visualization mapping is loaded once."""
    global _report_service
    if _report_service is None:
        _report_service = ReportService.from_settings(settings)
    return _report_service


@router.post("/assessment-report", response_model=AssessmentReport)
async def generate_assessment_report(
    snapshot: AssessmentSnapshot,
    service: ReportService = Depends(get_report_service),
):
    """Full assessment report for an extracted object / relationship snapshot."""
    return service.generate_report(snapshot)


@router.post("/assessment-report/dashboards", response_model=DashboardsSummary)
async def get_dashboards_summary(
    snapshot: AssessmentSnapshot,
    service: ReportService = Depends(get_report_service),
):
    return service.get_dashboards_summary(snapshot.objects, snapshot.relationships)


@router.post("/assessment-report/reports", response_model=ReportsSummary)
async def get_reports_summary(
    snapshot: AssessmentSnapshot,
    service: ReportService = Depends(get_report_service),
):
    return service.get_reports_summary(snapshot.objects, snapshot.relationships)


@router.post("/assessment-report/data-assets", response_model=DataAssetsSummary)
async def get_data_assets_summary(
    snapshot: AssessmentSnapshot,
    service: ReportService = Depends(get_report_service),
):
    """Packages, data modules and data sources with report / dashboard usage."""
    return service.get_data_assets_summary(snapshot.objects, snapshot.relationships)


@router.post("/assessment-report/usage/{target_id}", response_model=UsageCounts)
async def get_usage(
    target_id: str,
    snapshot: AssessmentSnapshot,
    service: ReportService = Depends(get_report_service),
):
    """Reports and dashboards using target_id. Unknown ids return zero counts."""
    return service.get_usage_counts(target_id, snapshot.objects, snapshot.relationships)


@router.get("/visualization-types/classify", response_model=VisualizationClassification)
async def classify_visualization_type(
    type: str = Query(..., description="Visualization type, e.g. 'Stacked Bar Chart'"),
    service: ReportService = Depends(get_report_service),
):
    return service.classify_visualization_type(type)
