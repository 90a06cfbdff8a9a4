"""
Service for assessment report generation.

Builds the aggregate records of an assessment snapshot (dashboard / report
roll-ups, data asset usage, visualization / calculated field / filter / prompt
groups, inventory) from the flat object and relationship lists.

The graph index, usage resolver and hierarchy of a snapshot are built once and
reused while the same object and relationship lists are passed in.
"""
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple
import logging

from app.schemas.object import ExtractedObject, ObjectRelationship
from app.schemas.report import (
    AssessmentReport,
    AssessmentSnapshot,
    CalculatedFieldGroup,
    CalculatedFieldItem,
    ComplexityStats,
    DashboardSummary,
    DashboardsSummary,
    DataAssetsSummary,
    DataModuleSummary,
    DataSourceSummary,
    DetailedInventoryRow,
    FilterGroup,
    FilterItem,
    InventorySummary,
    PackageSummary,
    PromptGroup,
    PromptItem,
    ReportSummary,
    ReportsSummary,
    UsageCounts,
    VisualizationClassification,
    VisualizationTypeGroup,
)
from app.services.complexity import (
    UNKNOWN,
    ComplexityLevel,
    VisualizationClassifier,
    classify,
    classify_calculated_field,
    classify_filter,
    classify_prompt,
    complexity_stats,
    overall_complexity,
)
from app.services.containment import (
    CONTAINS,
    HAS_COLUMN,
    PARENT_CHILD,
    children_of_type,
    orient_parent_child,
    parent_of_type,
    related_of_type,
    roll_up_container,
    transitive_related_ids,
)
from app.services.custom_mapping_loader import CustomMappingLoader
from app.services.graph_index import GraphIndex, build_graph_index
from app.services.hierarchy_service import HierarchyNode, HierarchyService
from app.services.usage_resolver import UsageResolver, UsageResult
from app.services.usage_stats import build_usage_stats_sections

logger = logging.getLogger(__name__)

DATA_SOURCE_TYPES = ("data_source", "data_source_connection")
DATASET_TYPES = frozenset({"package", "data_source", "data_module"})
CONTAINER_TYPES = frozenset({"dashboard", "report"})
GROUPING_TYPES = frozenset({"tab", "page"})

# Report field -> object types counted over the transitive closure
REPORT_TRANSITIVE_COUNTS: Dict[str, Tuple[str, ...]] = {
    "total_packages": ("package",),
    "total_data_modules": ("data_module",),
    "total_data_sources": DATA_SOURCE_TYPES,
    "total_data_source_connections": ("data_source_connection",),
    "total_tables": ("table",),
    "total_columns": ("column",),
    "total_calculated_fields": ("calculated_field",),
    "total_measures": ("measure",),
    "total_dimensions": ("dimension",),
    "total_filters": ("filter",),
    "total_parameters": ("parameter",),
    "total_sorts": ("sort",),
    "total_prompts": ("prompt",),
    "total_hierarchies": ("hierarchy",),
    "total_outputs": ("output",),
}


def _name_key(name: str) -> str:
    return (name or "").lower()


def _unique(values: Iterable[str]) -> List[str]:
    """Drop empty and repeated values, keep first-seen order."""
    seen: Set[str] = set()
    out: List[str] = []
    for v in values:
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return out


def _stats(levels: Iterable[Optional[ComplexityLevel]]) -> ComplexityStats:
    return ComplexityStats(**complexity_stats(levels))


@dataclass
class SnapshotContext:
    """Indexes shared by every section of one snapshot."""
    graph: GraphIndex
    usage: UsageResolver
    hierarchy: Dict[str, HierarchyNode]


class ReportService:
    def __init__(
        self,
        visualization_classifier: Optional[VisualizationClassifier] = None,
        calculated_field_unknown_level: ComplexityLevel = ComplexityLevel.LOW,
        high_share_threshold: float = 0.3,
    ):
        self.visualization_classifier = visualization_classifier or VisualizationClassifier()
        self.calculated_field_unknown_level = calculated_field_unknown_level
        self.high_share_threshold = high_share_threshold
        # (objects, relationships, context); the lists are held so their ids stay valid
        self._context_cache: Optional[Tuple[Any, Any, SnapshotContext]] = None

    @classmethod
    def from_settings(cls, settings: Any) -> "ReportService":
        """Service configured from application settings (mapping CSV, classifier policies)."""
        classifier = None
        if settings.VISUALIZATION_MAPPING_PATH:
            classifier = CustomMappingLoader(settings.VISUALIZATION_MAPPING_PATH).build_classifier()
        return cls(
            visualization_classifier=classifier,
            calculated_field_unknown_level=ComplexityLevel(settings.CALCULATED_FIELD_UNKNOWN_COMPLEXITY),
            high_share_threshold=settings.HIGH_COMPLEXITY_SHARE_THRESHOLD,
        )

    def get_context(
        self,
        objects: Sequence[ExtractedObject],
        relationships: Sequence[ObjectRelationship],
    ) -> SnapshotContext:
        """
        Graph index, usage resolver and hierarchy for a snapshot. Reused while
        the same list objects are passed in.
        """
        cached = self._context_cache
        if cached is not None and cached[0] is objects and cached[1] is relationships:
            logger.debug("Reusing cached graph index")
            return cached[2]
        graph = build_graph_index(objects, relationships)
        context = SnapshotContext(
            graph=graph,
            usage=UsageResolver(graph),
            hierarchy=HierarchyService().build_hierarchy(graph),
        )
        self._context_cache = (objects, relationships, context)
        return context

    # ------------------------------------------------------------------
    # Full report
    # ------------------------------------------------------------------

    def generate_report(self, snapshot: AssessmentSnapshot) -> AssessmentReport:
        """Every section for one snapshot; precomputed sections pass through unchanged."""
        objects, relationships = snapshot.objects, snapshot.relationships
        logger.info(
            f"Generating assessment report: {len(objects)} objects, "
            f"{len(relationships)} relationships"
        )
        dashboards = self.get_dashboards_summary(objects, relationships)
        report = AssessmentReport(
            overall_complexity=overall_complexity(
                [ComplexityLevel(d.complexity) for d in dashboards.dashboards],
                self.high_share_threshold,
            ),
            inventory=self.get_inventory_summary(objects, relationships),
            dashboards=dashboards,
            reports=self.get_reports_summary(objects, relationships),
            data_assets=self.get_data_assets_summary(objects, relationships),
            visualization_types=self.get_visualization_type_groups(objects, relationships),
            calculated_fields=self.get_calculated_field_groups(objects),
            filters=self.get_filter_groups(objects),
            prompts=self.get_prompt_groups(objects),
            detailed_inventory=self.get_detailed_inventory(objects, relationships),
            usage_stats_sections=build_usage_stats_sections(snapshot.usage_stats),
            complex_analysis=snapshot.complex_analysis,
            summary=snapshot.summary,
            challenges=snapshot.challenges,
            appendix=snapshot.appendix,
        )
        logger.info(
            f"Report generated: {report.dashboards.total_dashboards} dashboards, "
            f"{report.reports.total_reports} reports, overall complexity {report.overall_complexity}"
        )
        return report

    # ------------------------------------------------------------------
    # Dashboards and reports
    # ------------------------------------------------------------------

    def _visualization_levels(self, viz_ids: Iterable[str], graph: GraphIndex) -> List[Optional[ComplexityLevel]]:
        levels = []
        for viz_id in viz_ids:
            obj = graph.get(viz_id)
            if obj is None:
                continue
            levels.append(self.visualization_classifier.level(obj.typed_properties().visualization_type))
        return levels

    def _hierarchy_metrics(self, object_id: str, context: SnapshotContext) -> Tuple[int, int]:
        node = context.hierarchy.get(object_id)
        if node is None:
            return 0, 0
        return node.height, node.descendant_count

    def get_dashboards_summary(
        self,
        objects: Sequence[ExtractedObject],
        relationships: Sequence[ObjectRelationship],
    ) -> DashboardsSummary:
        """Per-dashboard tab / visualization roll-up, sorted by name."""
        context = self.get_context(objects, relationships)
        graph = context.graph
        items: List[DashboardSummary] = []
        for dashboard in graph.objects_of_type("dashboard"):
            roll_up = roll_up_container(dashboard.id, "tab", graph)
            counts = roll_up.type_counts
            depth, descendants = self._hierarchy_metrics(dashboard.id, context)
            items.append(DashboardSummary(
                dashboard_id=dashboard.id,
                dashboard_name=dashboard.name,
                complexity=classify(roll_up.group_count, roll_up.visualization_count).value,
                total_tabs=roll_up.group_count,
                total_visualizations=roll_up.visualization_count,
                visualizations_by_complexity=_stats(
                    self._visualization_levels(roll_up.visualization_ids, graph)
                ),
                total_measures=counts["measure"],
                total_dimensions=counts["dimension"],
                total_filters=counts["filter"],
                total_calculated_fields=counts["calculated_field"],
                total_parameters=counts["parameter"],
                total_prompts=counts["prompt"],
                total_hierarchies=counts["hierarchy"],
                total_sorts=counts["sort"],
                total_pages=counts["page"],
                total_outputs=counts["output"],
                total_data_modules=len(related_of_type(dashboard.id, ("uses", "connects_to"), ("data_module",), graph)),
                total_data_sources=len(related_of_type(dashboard.id, ("connects_to",), ("data_source",), graph)),
                total_packages=len(related_of_type(dashboard.id, ("connects_to",), ("package",), graph)),
                total_reports=len(related_of_type(dashboard.id, ("uses",), ("report",), graph)),
                nesting_depth=depth,
                descendant_count=descendants,
            ))
        items.sort(key=lambda d: _name_key(d.dashboard_name))
        return DashboardsSummary(
            total_dashboards=len(items),
            stats=_stats(ComplexityLevel(d.complexity) for d in items),
            dashboards=items,
        )

    def _report_type(self, report: ExtractedObject, viz_ids: Set[str], graph: GraphIndex) -> str:
        """Single visualization type, "Mixed" for several, else the reportType property."""
        viz_types = set()
        for viz_id in viz_ids:
            obj = graph.get(viz_id)
            if obj is None:
                continue
            viz_type = (obj.typed_properties().display_type or "").strip()
            if viz_type:
                viz_types.add(viz_type)
        if len(viz_types) == 1:
            return next(iter(viz_types))
        if len(viz_types) > 1:
            return "Mixed"
        props = report.typed_properties()
        return props.reportType or props.report_type or "—"

    def get_reports_summary(
        self,
        objects: Sequence[ExtractedObject],
        relationships: Sequence[ObjectRelationship],
    ) -> ReportsSummary:
        """Per-report page / visualization roll-up plus transitive dependency counts, sorted by name."""
        context = self.get_context(objects, relationships)
        graph = context.graph
        items: List[ReportSummary] = []
        for report in graph.objects_of_type("report"):
            roll_up = roll_up_container(report.id, "page", graph)
            reachable = transitive_related_ids(report.id, graph)
            reachable_types = defaultdict(int)
            for oid in reachable:
                ot = graph.type_of(oid)
                if ot:
                    reachable_types[ot] += 1
            transitive = {
                field_name: sum(reachable_types[t] for t in types)
                for field_name, types in REPORT_TRANSITIVE_COUNTS.items()
            }
            depth, descendants = self._hierarchy_metrics(report.id, context)
            items.append(ReportSummary(
                report_id=report.id,
                report_name=report.name,
                report_type=self._report_type(report, roll_up.visualization_ids, graph),
                complexity=classify(roll_up.group_count, roll_up.visualization_count).value,
                total_pages=roll_up.group_count,
                total_visualizations=roll_up.visualization_count,
                visualizations_by_complexity=_stats(
                    self._visualization_levels(roll_up.visualization_ids, graph)
                ),
                total_queries=len(related_of_type(report.id, (CONTAINS, "uses"), ("query",), graph)),
                nesting_depth=depth,
                descendant_count=descendants,
                **transitive,
            ))
        items.sort(key=lambda r: _name_key(r.report_name))
        return ReportsSummary(
            total_reports=len(items),
            stats=_stats(ComplexityLevel(r.complexity) for r in items),
            reports=items,
        )

    # ------------------------------------------------------------------
    # Data assets
    # ------------------------------------------------------------------

    def get_usage_counts(
        self,
        target_id: str,
        objects: Sequence[ExtractedObject],
        relationships: Sequence[ObjectRelationship],
    ) -> UsageCounts:
        """Reports and dashboards using target_id; an unknown id yields zero counts."""
        result = self.get_context(objects, relationships).usage.find_users(target_id)
        return self._usage_counts(target_id, result)

    def _usage_counts(self, target_id: str, result: UsageResult) -> UsageCounts:
        return UsageCounts(
            target_id=target_id,
            reports_using=result.report_count,
            dashboards_using=result.dashboard_count,
            total_usage=result.total,
            report_ids=sorted(result.report_ids),
            dashboard_ids=sorted(result.dashboard_ids),
        )

    def _get_packages(self, context: SnapshotContext) -> List[PackageSummary]:
        """
        Data sources of a package are the data_source / data_source_connection
        targets its modules connect to. Packages reached over connects_to are
        not counted as data sources.
        """
        graph, usage = context.graph, context.usage
        items: List[PackageSummary] = []
        for package in graph.objects_of_type("package"):
            module_ids = children_of_type(package.id, "data_module", graph)
            source_ids: Set[str] = set()
            result = usage.find_users(package.id)
            for module_id in module_ids:
                source_ids |= related_of_type(module_id, ("connects_to",), DATA_SOURCE_TYPES, graph)
                result.update(usage.find_users(module_id))
            items.append(PackageSummary(
                package_id=package.id,
                package_name=package.name,
                complexity=(ComplexityLevel.MEDIUM if len(module_ids) > 2 else ComplexityLevel.LOW).value,
                total_data_modules=len(module_ids),
                total_data_sources=len(source_ids),
                reports_using=result.report_count,
                dashboards_using=result.dashboard_count,
                total_usage=result.total,
            ))
        items.sort(key=lambda p: (-p.total_usage, _name_key(p.package_name)))
        return items

    def _nested_in(self, object_id: str, container_types: Iterable[str], graph: GraphIndex) -> bool:
        """True when an object of one of container_types contains or uses object_id."""
        return any(
            rel.relationship_type in (CONTAINS, "uses")
            and graph.type_of(rel.source_object_id) in container_types
            for rel in graph.incoming(object_id)
        )

    def _get_data_modules(self, context: SnapshotContext) -> List[DataModuleSummary]:
        graph, usage = context.graph, context.usage
        items: List[DataModuleSummary] = []
        for module in graph.objects_of_type("data_module"):
            table_ids = children_of_type(module.id, "table", graph)
            column_ids: Set[str] = set()
            for table_id in table_ids:
                column_ids |= {
                    rel.target_object_id
                    for rel in graph.outgoing(table_id)
                    if rel.relationship_type == HAS_COLUMN
                }
            result = usage.find_users(module.id)
            items.append(DataModuleSummary(
                data_module_id=module.id,
                data_module_name=module.name,
                module_type=module.typed_properties().module_type,
                parent_type=parent_of_type(module.id, ("data_module", "package", "data_source"), graph),
                nested_in_package=self._nested_in(module.id, ("package",), graph),
                nested_in_data_source=self._nested_in(module.id, DATA_SOURCE_TYPES, graph),
                complexity=ComplexityLevel.MEDIUM.value,
                total_tables=len(table_ids),
                total_columns=len(column_ids),
                total_data_sources=len(related_of_type(module.id, ("connects_to",), DATA_SOURCE_TYPES, graph)),
                total_packages=len(related_of_type(module.id, ("connects_to",), ("package",), graph)),
                reports_using=result.report_count,
                dashboards_using=result.dashboard_count,
                total_usage=result.total,
            ))
        items.sort(key=lambda m: (-m.total_usage, _name_key(m.data_module_name)))
        return items

    def _parent_child_children(self, parent_id: str, child_type: str, graph: GraphIndex) -> Set[str]:
        """Children of parent_id of child_type over oriented PARENT_CHILD edges only."""
        out: Set[str] = set()
        for rel in graph.outgoing(parent_id) + graph.incoming(parent_id):
            if rel.relationship_type != PARENT_CHILD:
                continue
            p_id, c_id = orient_parent_child(rel, graph)
            if p_id == parent_id and c_id != parent_id and graph.type_of(c_id) == child_type:
                out.add(c_id)
        return out

    def _get_data_sources(self, context: SnapshotContext) -> List[DataSourceSummary]:
        graph, usage = context.graph, context.usage
        items: List[DataSourceSummary] = []
        for source in graph.objects_of_type("data_source"):
            module_ids = {
                rel.source_object_id
                for rel in graph.incoming(source.id)
                if rel.relationship_type == "connects_to"
                and graph.type_of(rel.source_object_id) == "data_module"
            }
            module_ids |= self._parent_child_children(source.id, "data_module", graph)
            package_ids = self._parent_child_children(source.id, "package", graph)
            result = usage.find_users(source.id)
            items.append(DataSourceSummary(
                data_source_id=source.id,
                data_source_name=source.name,
                data_source_type=source.typed_properties().source_type,
                complexity=ComplexityLevel.MEDIUM.value,
                total_data_modules=len(module_ids),
                total_packages=len(package_ids),
                reports_using=result.report_count,
                dashboards_using=result.dashboard_count,
                total_usage=result.total + len(module_ids),
            ))
        items.sort(key=lambda s: (-s.total_usage, _name_key(s.data_source_name)))
        return items

    def get_data_assets_summary(
        self,
        objects: Sequence[ExtractedObject],
        relationships: Sequence[ObjectRelationship],
    ) -> DataAssetsSummary:
        """Package, data module and data source tables with unified usage totals."""
        context = self.get_context(objects, relationships)
        packages = self._get_packages(context)
        modules = self._get_data_modules(context)
        sources = self._get_data_sources(context)
        tables: List[Sequence[Any]] = [packages, modules, sources]
        return DataAssetsSummary(
            total_packages=len(packages),
            total_data_modules=len(modules),
            total_data_sources=len(sources),
            total_reports_using=max(sum(row.reports_using for row in t) for t in tables),
            total_dashboards_using=max(sum(row.dashboards_using for row in t) for t in tables),
            packages=packages,
            data_modules=modules,
            data_sources=sources,
        )

    # ------------------------------------------------------------------
    # Feature groups
    # ------------------------------------------------------------------

    def _containers_of(self, object_id: str, graph: GraphIndex) -> Set[str]:
        """Dashboards / reports containing object_id directly or through a tab / page."""
        out: Set[str] = set()
        for rel in graph.incoming(object_id):
            if rel.relationship_type != CONTAINS:
                continue
            source_type = graph.type_of(rel.source_object_id)
            if source_type in CONTAINER_TYPES:
                out.add(rel.source_object_id)
            elif source_type in GROUPING_TYPES:
                for parent_rel in graph.incoming(rel.source_object_id):
                    if parent_rel.relationship_type == CONTAINS and graph.type_of(parent_rel.source_object_id) in CONTAINER_TYPES:
                        out.add(parent_rel.source_object_id)
        return out

    def get_visualization_type_groups(
        self,
        objects: Sequence[ExtractedObject],
        relationships: Sequence[ObjectRelationship],
    ) -> List[VisualizationTypeGroup]:
        """Visualizations grouped by type with lookup complexity / feasibility, by count desc."""
        graph = self.get_context(objects, relationships).graph
        counts: Dict[str, int] = defaultdict(int)
        containers: Dict[str, Set[str]] = defaultdict(set)
        for viz in graph.objects_of_type("visualization"):
            viz_type = (viz.typed_properties().visualization_type or "").strip() or UNKNOWN
            counts[viz_type] += 1
            containers[viz_type] |= self._containers_of(viz.id, graph)
        groups = []
        for viz_type, count in counts.items():
            meta = self.visualization_classifier.classify(viz_type)
            groups.append(VisualizationTypeGroup(
                visualization_type=viz_type,
                count=count,
                complexity=meta.complexity,
                feasibility=meta.feasibility,
                dashboards_affected=sum(1 for c in containers[viz_type] if graph.type_of(c) == "dashboard"),
                reports_affected=sum(1 for c in containers[viz_type] if graph.type_of(c) == "report"),
            ))
        groups.sort(key=lambda g: -g.count)
        return groups

    def get_calculated_field_groups(self, objects: Sequence[ExtractedObject]) -> List[CalculatedFieldGroup]:
        groups: Dict[str, CalculatedFieldGroup] = {}
        for obj in objects:
            if obj.object_type != "calculated_field":
                continue
            props = obj.typed_properties()
            calc_type = props.calculation_type or props.cognosClass or UNKNOWN
            level = classify_calculated_field(calc_type, self.calculated_field_unknown_level)
            group = groups.setdefault(calc_type, CalculatedFieldGroup(
                calculation_type=calc_type, count=0, complexity=level.label,
            ))
            group.count += 1
            group.fields.append(CalculatedFieldItem(
                calculated_field_id=obj.id,
                name=obj.name,
                calculation_type=calc_type,
                complexity=level.label,
                expression=props.expression or "",
            ))
        return sorted(groups.values(), key=lambda g: -g.count)

    def get_filter_groups(self, objects: Sequence[ExtractedObject]) -> List[FilterGroup]:
        groups: Dict[str, FilterGroup] = {}
        for obj in objects:
            if obj.object_type != "filter":
                continue
            props = obj.typed_properties()
            filter_type = props.filter_type or UNKNOWN
            level = classify_filter(props.filter_type, props.parameter_references, props.referenced_columns)
            group = groups.setdefault(filter_type, FilterGroup(
                filter_type=filter_type, count=0, complexity=level.label,
            ))
            group.count += 1
            group.filters.append(FilterItem(
                filter_id=obj.id,
                name=obj.name,
                filter_type=filter_type,
                complexity=level.label,
                expression=props.expression or "",
                referenced_columns=props.referenced_columns,
                parameter_references=props.parameter_references,
            ))
        return sorted(groups.values(), key=lambda g: -g.count)

    def get_prompt_groups(self, objects: Sequence[ExtractedObject]) -> List[PromptGroup]:
        groups: Dict[str, PromptGroup] = {}
        for obj in objects:
            if obj.object_type != "prompt":
                continue
            props = obj.typed_properties()
            prompt_type = props.prompt_type or UNKNOWN
            level = classify_prompt(props.prompt_type)
            group = groups.setdefault(prompt_type, PromptGroup(
                prompt_type=prompt_type, count=0, complexity=level.label,
            ))
            group.count += 1
            group.prompts.append(PromptItem(
                prompt_id=obj.id,
                name=obj.name,
                prompt_type=prompt_type,
                complexity=level.label,
                value=props.value or None,
            ))
        return sorted(groups.values(), key=lambda g: -g.count)

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def get_inventory_summary(
        self,
        objects: Sequence[ExtractedObject],
        relationships: Sequence[ObjectRelationship],
    ) -> InventorySummary:
        graph = self.get_context(objects, relationships).graph
        return InventorySummary(
            dashboards=len(graph.objects_of_type("dashboard")),
            reports=len(graph.objects_of_type("report")),
            visualizations=len(graph.objects_of_type("visualization")),
            pages_and_tabs=len(graph.objects_of_type("page", "tab")),
            packages=len(graph.objects_of_type("package")),
            data_sources=len(graph.objects_of_type("data_source")),
            data_modules=len(graph.objects_of_type("data_module")),
        )

    def get_detailed_inventory(
        self,
        objects: Sequence[ExtractedObject],
        relationships: Sequence[ObjectRelationship],
    ) -> List[DetailedInventoryRow]:
        """One row per report / dashboard: dashboards it belongs to, datasets used, owner."""
        graph = self.get_context(objects, relationships).graph
        rows: List[DetailedInventoryRow] = []
        for item in graph.objects_of_type("report", "dashboard"):
            targets = [graph.get(rel.target_object_id) for rel in graph.outgoing(item.id)]
            targets = [t for t in targets if t is not None]
            if item.object_type == "dashboard":
                dashboards = _unique([item.name])
            else:
                dashboards = _unique(t.name for t in targets if t.object_type == "dashboard")
            datasets = _unique(t.name for t in targets if t.object_type in DATASET_TYPES)
            rows.append(DetailedInventoryRow(
                object_id=item.id,
                object_type=item.object_type,
                name=item.name,
                dashboards=dashboards or ["N/A"],
                datasets_used=datasets or ["N/A"],
                owner=item.typed_properties().owner or "Unknown",
            ))
        return rows

    def classify_visualization_type(self, raw_type: Optional[str]) -> VisualizationClassification:
        meta = self.visualization_classifier.classify(raw_type)
        return VisualizationClassification(
            visualization_type=raw_type or "",
            complexity=meta.complexity,
            feasibility=meta.feasibility,
        )
