"""
Usage Resolver

Finds the reports and dashboards that depend on a data asset (data source,
package, data module, ...) directly, through query / visualization hops, and
through tab / page grouping nodes.

Relationship direction and type are not fully consistent in extracted data, so
a reverse scan from every report / dashboard down to its queries and
visualizations is unioned with the forward walk. Per-entity variations are
expressed as a UsagePolicy, not as separate traversals.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Set

from app.services.graph_index import GraphIndex


@dataclass(frozen=True)
class UsagePolicy:
    root_types: FrozenSet[str] = frozenset({"report", "dashboard"})
    # Edge types that count as a root using the target directly
    usage_rel_types: FrozenSet[str] = frozenset({"uses", "connects_to", "references"})
    hop_types: FrozenSet[str] = frozenset({"query", "visualization"})
    # Edge types from a hop to the target; None accepts any type
    hop_rel_types: Optional[FrozenSet[str]] = None
    grouping_types: FrozenSet[str] = frozenset({"tab", "page"})
    containment_rel_types: FrozenSet[str] = frozenset({"contains"})
    reverse_scan: bool = True


DEFAULT_USAGE_POLICY = UsagePolicy()


@dataclass
class UsageResult:
    report_ids: Set[str] = field(default_factory=set)
    dashboard_ids: Set[str] = field(default_factory=set)

    @property
    def report_count(self) -> int:
        return len(self.report_ids)

    @property
    def dashboard_count(self) -> int:
        return len(self.dashboard_ids)

    @property
    def total(self) -> int:
        return len(self.report_ids) + len(self.dashboard_ids)

    def add(self, object_id: str, object_type: Optional[str]) -> None:
        if object_type == "report":
            self.report_ids.add(object_id)
        elif object_type == "dashboard":
            self.dashboard_ids.add(object_id)

    def update(self, other: "UsageResult") -> None:
        self.report_ids |= other.report_ids
        self.dashboard_ids |= other.dashboard_ids


class UsageResolver:
    """
    Usage lookups bound to one graph and policy.
    The per-root hop map needed by the reverse scan is built once and reused
    across find_users calls.
    """

    def __init__(self, graph: GraphIndex, policy: UsagePolicy = DEFAULT_USAGE_POLICY):
        self.graph = graph
        self.policy = policy
        self._root_hops: Optional[Dict[str, Set[str]]] = None

    def _contained_by(self, object_id: str) -> Iterable[str]:
        """Sources of incoming containment edges."""
        for rel in self.graph.incoming(object_id):
            if rel.relationship_type in self.policy.containment_rel_types:
                yield rel.source_object_id

    def _contained(self, object_id: str) -> Iterable[str]:
        """Targets of outgoing containment edges."""
        for rel in self.graph.outgoing(object_id):
            if rel.relationship_type in self.policy.containment_rel_types:
                yield rel.target_object_id

    def _hops_under_root(self) -> Dict[str, Set[str]]:
        """root id -> query/visualization ids contained directly or one grouping level down."""
        if self._root_hops is not None:
            return self._root_hops
        graph, policy = self.graph, self.policy
        root_hops: Dict[str, Set[str]] = {}
        for root in graph.objects_of_type(*policy.root_types):
            hops: Set[str] = set()
            for child_id in self._contained(root.id):
                child_type = graph.type_of(child_id)
                if child_type in policy.hop_types:
                    hops.add(child_id)
                elif child_type in policy.grouping_types:
                    for grandchild_id in self._contained(child_id):
                        if graph.type_of(grandchild_id) in policy.hop_types:
                            hops.add(grandchild_id)
            root_hops[root.id] = hops
        self._root_hops = root_hops
        return root_hops

    def find_users(self, target_id: str) -> UsageResult:
        """Reports and dashboards that transitively use target_id."""
        graph, policy = self.graph, self.policy
        result = UsageResult()
        if target_id not in graph:
            return result

        incoming = graph.incoming(target_id)

        # Direct: report/dashboard -> target
        for rel in incoming:
            if rel.relationship_type not in policy.usage_rel_types:
                continue
            source_type = graph.type_of(rel.source_object_id)
            if source_type in policy.root_types:
                result.add(rel.source_object_id, source_type)

        # Via hop: root -> (tab/page ->) query/visualization -> target
        hop_ids: Set[str] = set()
        for rel in incoming:
            if policy.hop_rel_types is not None and rel.relationship_type not in policy.hop_rel_types:
                continue
            if graph.type_of(rel.source_object_id) in policy.hop_types:
                hop_ids.add(rel.source_object_id)
        for hop_id in hop_ids:
            for container_id in self._contained_by(hop_id):
                container_type = graph.type_of(container_id)
                if container_type in policy.root_types:
                    result.add(container_id, container_type)
                elif container_type in policy.grouping_types:
                    for parent_id in self._contained_by(container_id):
                        parent_type = graph.type_of(parent_id)
                        if parent_type in policy.root_types:
                            result.add(parent_id, parent_type)

        # Reverse scan: every root's hops that have an edge landing on target
        if policy.reverse_scan:
            for root_id, hops in self._hops_under_root().items():
                for hop_id in hops:
                    if any(r.target_object_id == target_id for r in graph.outgoing(hop_id)):
                        result.add(root_id, graph.type_of(root_id))
                        break

        return result


def find_users(
    target_id: str,
    graph: GraphIndex,
    policy: UsagePolicy = DEFAULT_USAGE_POLICY,
) -> UsageResult:
    """One-off lookup; use UsageResolver when resolving many targets on one graph."""
    return UsageResolver(graph, policy).find_users(target_id)
