"""Pytest fixtures for assessment report tests."""

from typing import Any, Dict, List, Optional

import pytest

from app.schemas.object import ExtractedObject, ObjectRelationship
from app.schemas.report import AssessmentSnapshot
from app.services.graph_index import GraphIndex, build_graph_index

# =============================================================================
# Snapshot Builder
# =============================================================================


class SnapshotBuilder:
    """Small helper to assemble object / relationship snapshots in tests."""

    def __init__(self) -> None:
        self.objects: List[ExtractedObject] = []
        self.relationships: List[ObjectRelationship] = []

    def add(self, object_id: str, object_type: str, name: Optional[str] = None, **properties: Any) -> str:
        self.objects.append(ExtractedObject(
            id=object_id,
            object_type=object_type,
            name=name if name is not None else object_id,
            properties=properties,
        ))
        return object_id

    def link(self, source: str, target: str, rel: str = "contains") -> None:
        self.relationships.append(ObjectRelationship(
            source_object_id=source,
            target_object_id=target,
            relationship_type=rel,
        ))

    def graph(self) -> GraphIndex:
        return build_graph_index(self.objects, self.relationships)

    def snapshot(self, **extra: Any) -> AssessmentSnapshot:
        return AssessmentSnapshot(objects=self.objects, relationships=self.relationships, **extra)

    def payload(self, **extra: Any) -> Dict[str, Any]:
        """JSON body for the HTTP endpoints."""
        body: Dict[str, Any] = {
            "objects": [o.model_dump() for o in self.objects],
            "relationships": [r.model_dump() for r in self.relationships],
        }
        body.update(extra)
        return body


@pytest.fixture
def builder() -> SnapshotBuilder:
    return SnapshotBuilder()


# =============================================================================
# Scenarios
# =============================================================================


@pytest.fixture
def dashboard_scenario(builder: SnapshotBuilder) -> SnapshotBuilder:
    """Dashboard D with tabs T1 (3 visualizations) and T2 (4 visualizations)."""
    builder.add("D", "dashboard", "Sales Dashboard")
    for tab_id, viz_count in (("T1", 3), ("T2", 4)):
        builder.add(tab_id, "tab")
        builder.link("D", tab_id)
        for i in range(viz_count):
            viz_id = f"{tab_id}-V{i}"
            builder.add(viz_id, "visualization", visualization_type="Bar")
            builder.link(tab_id, viz_id)
    return builder


@pytest.fixture
def data_source_scenario(builder: SnapshotBuilder) -> SnapshotBuilder:
    """
    Module M connects to data source DS and sits in package P.
    Report R contains query Q, which uses DS.
    """
    builder.add("DS", "data_source", "Warehouse", data_source_type="db2")
    builder.add("M", "data_module", "Sales Module")
    builder.add("P", "package", "Sales Package")
    builder.add("R", "report", "Revenue Report")
    builder.add("Q", "query", "Revenue Query")
    builder.link("M", "DS", "connects_to")
    builder.link("P", "M", "contains")
    builder.link("R", "Q", "contains")
    builder.link("Q", "DS", "uses")
    return builder
