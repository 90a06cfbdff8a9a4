"""Schemas for assessment report API requests and responses."""
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field

from app.schemas.object import ExtractedObject, ObjectRelationship


class ComplexityStats(BaseModel):
    """Counts by complexity (low, medium, high, critical)."""
    low: int = 0
    medium: int = 0
    high: int = 0
    critical: int = 0


class DashboardSummary(BaseModel):
    dashboard_id: str
    dashboard_name: str
    complexity: str = "low"  # low | medium | high | critical
    total_tabs: int = 0
    """Direct visualizations plus per-tab visualizations (a visualization under both counts twice)."""
    total_visualizations: int = 0
    visualizations_by_complexity: ComplexityStats = Field(default_factory=lambda: ComplexityStats())
    total_measures: int = 0
    total_dimensions: int = 0
    total_filters: int = 0
    total_calculated_fields: int = 0
    total_parameters: int = 0
    total_prompts: int = 0
    total_hierarchies: int = 0
    total_sorts: int = 0
    total_pages: int = 0
    total_outputs: int = 0
    total_data_modules: int = 0
    total_data_sources: int = 0
    total_packages: int = 0
    total_reports: int = 0
    nesting_depth: int = 0
    descendant_count: int = 0


class DashboardsSummary(BaseModel):
    total_dashboards: int
    """Count of dashboards by structural complexity."""
    stats: ComplexityStats = Field(default_factory=lambda: ComplexityStats())
    dashboards: List[DashboardSummary]


class ReportSummary(BaseModel):
    report_id: str
    report_name: str
    report_type: str = "—"  # single visualization type, "Mixed", or the reportType property
    complexity: str = "low"  # low | medium | high | critical
    total_pages: int = 0
    total_visualizations: int = 0
    visualizations_by_complexity: ComplexityStats = Field(default_factory=lambda: ComplexityStats())
    total_queries: int = 0
    # Transitive (contains / uses / references / connects_to) counts
    total_packages: int = 0
    total_data_modules: int = 0
    total_data_sources: int = 0
    total_data_source_connections: int = 0
    total_tables: int = 0
    total_columns: int = 0
    total_calculated_fields: int = 0
    total_measures: int = 0
    total_dimensions: int = 0
    total_filters: int = 0
    total_parameters: int = 0
    total_sorts: int = 0
    total_prompts: int = 0
    total_hierarchies: int = 0
    total_outputs: int = 0
    nesting_depth: int = 0
    descendant_count: int = 0


class ReportsSummary(BaseModel):
    total_reports: int
    """Count of reports by structural complexity."""
    stats: ComplexityStats = Field(default_factory=lambda: ComplexityStats())
    reports: List[ReportSummary]


class UsageCounts(BaseModel):
    """Reports and dashboards that transitively use one target object."""
    target_id: str
    reports_using: int = 0
    dashboards_using: int = 0
    total_usage: int = 0
    report_ids: List[str] = Field(default_factory=list)
    dashboard_ids: List[str] = Field(default_factory=list)


class PackageSummary(BaseModel):
    package_id: str
    package_name: str
    """More than two data modules → medium, else low."""
    complexity: str = "low"
    total_data_modules: int = 0
    total_data_sources: int = 0
    reports_using: int = 0
    dashboards_using: int = 0
    total_usage: int = 0


class DataModuleSummary(BaseModel):
    data_module_id: str
    data_module_name: str
    module_type: str = "dataModule"  # cognosClass
    parent_type: Optional[str] = None  # data_module | package | data_source
    nested_in_package: bool = False
    nested_in_data_source: bool = False
    complexity: str = "medium"
    total_tables: int = 0
    total_columns: int = 0
    total_data_sources: int = 0
    total_packages: int = 0
    reports_using: int = 0
    dashboards_using: int = 0
    total_usage: int = 0


class DataSourceSummary(BaseModel):
    data_source_id: str
    data_source_name: str
    data_source_type: str = "Unknown"
    complexity: str = "medium"
    total_data_modules: int = 0
    total_packages: int = 0
    reports_using: int = 0
    dashboards_using: int = 0
    """Dashboards + reports + data modules."""
    total_usage: int = 0


class DataAssetsSummary(BaseModel):
    total_packages: int = 0
    total_data_modules: int = 0
    total_data_sources: int = 0
    """Largest per-table sum across packages, data modules and data sources."""
    total_reports_using: int = 0
    total_dashboards_using: int = 0
    packages: List[PackageSummary] = Field(default_factory=list)
    data_modules: List[DataModuleSummary] = Field(default_factory=list)
    data_sources: List[DataSourceSummary] = Field(default_factory=list)


class VisualizationTypeGroup(BaseModel):
    visualization_type: str
    count: int
    complexity: str = "Unknown"  # Low | Medium | High | Critical | Unknown
    feasibility: str = "Unknown"  # Yes | Partial | No | Unknown
    dashboards_affected: int = 0
    reports_affected: int = 0


class CalculatedFieldItem(BaseModel):
    calculated_field_id: str
    name: str
    calculation_type: str
    complexity: str
    expression: str = ""


class CalculatedFieldGroup(BaseModel):
    calculation_type: str
    count: int
    complexity: str
    fields: List[CalculatedFieldItem] = Field(default_factory=list)


class FilterItem(BaseModel):
    filter_id: str
    name: str
    filter_type: str
    complexity: str
    expression: str = ""
    referenced_columns: List[str] = Field(default_factory=list)
    parameter_references: List[str] = Field(default_factory=list)


class FilterGroup(BaseModel):
    filter_type: str
    count: int
    complexity: str
    filters: List[FilterItem] = Field(default_factory=list)


class PromptItem(BaseModel):
    prompt_id: str
    name: str
    prompt_type: str
    complexity: str
    value: Optional[str] = None


class PromptGroup(BaseModel):
    prompt_type: str
    count: int
    complexity: str
    prompts: List[PromptItem] = Field(default_factory=list)


class InventorySummary(BaseModel):
    dashboards: int = 0
    reports: int = 0
    visualizations: int = 0
    pages_and_tabs: int = 0
    packages: int = 0
    data_sources: int = 0
    data_modules: int = 0


class DetailedInventoryRow(BaseModel):
    object_id: str
    object_type: str  # report | dashboard
    name: str
    dashboards: List[str] = Field(default_factory=lambda: ["N/A"])
    datasets_used: List[str] = Field(default_factory=lambda: ["N/A"])
    owner: str = "Unknown"


class UsageTableHeader(BaseModel):
    label: str
    flex: float = 1.0


class UsageTableSection(BaseModel):
    title: str
    headers: List[UsageTableHeader]
    rows: List[List[Union[str, int, float]]]


class AssessmentSnapshot(BaseModel):
    """Request payload: extracted graph plus optional precomputed sections."""
    objects: List[ExtractedObject] = Field(default_factory=list)
    relationships: List[ObjectRelationship] = Field(default_factory=list)
    complex_analysis: Optional[Dict[str, Any]] = None
    summary: Optional[Dict[str, Any]] = None
    challenges: Optional[Dict[str, Any]] = None
    appendix: Optional[Dict[str, Any]] = None
    usage_stats: Optional[Dict[str, Any]] = None

    class Config:
        extra = "allow"


class AssessmentReport(BaseModel):
    overall_complexity: str = "Low"
    inventory: InventorySummary
    dashboards: DashboardsSummary
    reports: ReportsSummary
    data_assets: DataAssetsSummary
    visualization_types: List[VisualizationTypeGroup] = Field(default_factory=list)
    calculated_fields: List[CalculatedFieldGroup] = Field(default_factory=list)
    filters: List[FilterGroup] = Field(default_factory=list)
    prompts: List[PromptGroup] = Field(default_factory=list)
    detailed_inventory: List[DetailedInventoryRow] = Field(default_factory=list)
    usage_stats_sections: List[UsageTableSection] = Field(default_factory=list)
    # Precomputed sections, returned as provided
    complex_analysis: Optional[Dict[str, Any]] = None
    summary: Optional[Dict[str, Any]] = None
    challenges: Optional[Dict[str, Any]] = None
    appendix: Optional[Dict[str, Any]] = None

    class Config:
        extra = "allow"


class VisualizationClassification(BaseModel):
    visualization_type: str
    complexity: str
    feasibility: str
