"""
Containment Resolver

Resolves which objects a parent contains, directly or transitively, and rolls
dashboards / reports up into structural counts.

Containment is recorded two ways in extracted data:
  - CONTAINS edges, always parent -> child
  - PARENT_CHILD edges, whose semantic parent depends on the endpoint types
    (e.g. table -> data_module points child to parent, data_source -> package
    points parent to child). PARENT_CHILD_RULES holds those conventions.
"""
import enum
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from app.schemas.object import ObjectRelationship
from app.services.graph_index import GraphIndex

CONTAINS = "contains"
PARENT_CHILD = "parent_child"
HAS_COLUMN = "has_column"

DEFAULT_TRANSITIVE_REL_TYPES = frozenset({"contains", "uses", "references", "connects_to"})

# Contained object types counted on dashboard / report roll-ups
CONTAINED_COUNT_TYPES = (
    "measure", "dimension", "filter", "calculated_field", "parameter",
    "prompt", "hierarchy", "sort", "page", "output",
)


class EdgeDirection(str, enum.Enum):
    CHILD_TO_PARENT = "child_to_parent"
    PARENT_TO_CHILD = "parent_to_child"


# (child_type, parent_type) -> direction a PARENT_CHILD edge is recorded in
PARENT_CHILD_RULES: Dict[Tuple[str, str], EdgeDirection] = {
    ("table", "data_module"): EdgeDirection.CHILD_TO_PARENT,
    ("data_module", "package"): EdgeDirection.CHILD_TO_PARENT,
    ("data_module", "data_source"): EdgeDirection.PARENT_TO_CHILD,
    ("package", "data_source"): EdgeDirection.PARENT_TO_CHILD,
    ("data_module", "data_module"): EdgeDirection.PARENT_TO_CHILD,
}


def orient_parent_child(
    rel: ObjectRelationship,
    graph: GraphIndex,
    rules: Dict[Tuple[str, str], EdgeDirection] = PARENT_CHILD_RULES,
) -> Tuple[str, str]:
    """
    Return (parent_id, child_id) for a PARENT_CHILD edge.
    A rule matching the recorded direction wins; otherwise a rule naming the
    pair in either order decides which type is the parent; pairs not covered
    default to "source is the parent".
    """
    src, tgt = rel.source_object_id, rel.target_object_id
    src_type = graph.type_of(src) or ""
    tgt_type = graph.type_of(tgt) or ""
    as_child_of_target = rules.get((src_type, tgt_type))
    as_parent_of_target = rules.get((tgt_type, src_type))
    if as_child_of_target == EdgeDirection.CHILD_TO_PARENT:
        return tgt, src
    if as_parent_of_target == EdgeDirection.PARENT_TO_CHILD:
        return src, tgt
    if as_child_of_target is not None:
        return tgt, src
    return src, tgt


def children_of_type(parent_id: str, child_type: str, graph: GraphIndex) -> Set[str]:
    """
    Ids of child_type objects contained by parent_id. Union of:
      1. outgoing CONTAINS edges whose target is child_type
      2. outgoing PARENT_CHILD edges whose target is child_type
      3. incoming PARENT_CHILD edges whose source is child_type
    """
    out: Set[str] = set()
    for rel in graph.outgoing(parent_id):
        if rel.relationship_type in (CONTAINS, PARENT_CHILD):
            if graph.type_of(rel.target_object_id) == child_type:
                out.add(rel.target_object_id)
    for rel in graph.incoming(parent_id):
        if rel.relationship_type == PARENT_CHILD:
            if graph.type_of(rel.source_object_id) == child_type:
                out.add(rel.source_object_id)
    return out


def related_of_type(
    object_id: str,
    rel_types: Iterable[str],
    object_types: Iterable[str],
    graph: GraphIndex,
) -> Set[str]:
    """Targets of outgoing edges of rel_types whose object type is in object_types."""
    rel_types = frozenset(rel_types)
    object_types = frozenset(object_types)
    return {
        rel.target_object_id
        for rel in graph.outgoing(object_id)
        if rel.relationship_type in rel_types
        and graph.type_of(rel.target_object_id) in object_types
    }


def contained_ids(object_id: str, graph: GraphIndex) -> Set[str]:
    """Targets of outgoing CONTAINS edges, any object type."""
    return {
        rel.target_object_id
        for rel in graph.outgoing(object_id)
        if rel.relationship_type == CONTAINS
    }


def transitive_related_ids(
    root_id: str,
    graph: GraphIndex,
    allowed_types: FrozenSet[str] = DEFAULT_TRANSITIVE_REL_TYPES,
) -> Set[str]:
    """
    Every id reachable from root_id over outgoing edges of allowed_types.
    Each id is visited once, so cycles terminate. The root is excluded.
    """
    seen: Set[str] = {root_id}
    frontier: List[str] = [root_id]
    while frontier:
        current = frontier.pop()
        for rel in graph.outgoing(current):
            if rel.relationship_type not in allowed_types:
                continue
            tid = rel.target_object_id
            if tid and tid not in seen:
                seen.add(tid)
                frontier.append(tid)
    seen.discard(root_id)
    return seen


def parent_of_type(
    object_id: str,
    parent_types: Iterable[str],
    graph: GraphIndex,
) -> Optional[str]:
    """
    Type of the last PARENT_CHILD parent of object_id whose type is in parent_types,
    with edge orientation resolved through PARENT_CHILD_RULES.
    """
    parent_types = frozenset(parent_types)
    found: Optional[str] = None
    for rel in graph.outgoing(object_id) + graph.incoming(object_id):
        if rel.relationship_type != PARENT_CHILD:
            continue
        parent_id, child_id = orient_parent_child(rel, graph)
        if child_id != object_id or parent_id == object_id:
            # self-loops and edges where object_id is the parent
            continue
        ptype = graph.type_of(parent_id)
        if ptype in parent_types:
            found = ptype
    return found


@dataclass
class ContainerRollUp:
    """Structural counts for one dashboard (grouped by tabs) or report (grouped by pages)."""
    root_id: str
    group_ids: Set[str] = field(default_factory=set)
    direct_visualization_ids: Set[str] = field(default_factory=set)
    group_visualization_count: int = 0
    visualization_ids: Set[str] = field(default_factory=set)
    contained_ids: Set[str] = field(default_factory=set)
    type_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def group_count(self) -> int:
        return len(self.group_ids)

    @property
    def visualization_count(self) -> int:
        # Sum of per-parent counts: a visualization under the root and a group counts twice
        return len(self.direct_visualization_ids) + self.group_visualization_count


def roll_up_container(root_id: str, grouping_type: str, graph: GraphIndex) -> ContainerRollUp:
    """
    Roll a dashboard (grouping_type="tab") or report (grouping_type="page") up
    into group, visualization and contained-type counts.
    """
    roll_up = ContainerRollUp(root_id=root_id)
    roll_up.group_ids = children_of_type(root_id, grouping_type, graph)
    roll_up.direct_visualization_ids = children_of_type(root_id, "visualization", graph)
    roll_up.visualization_ids = set(roll_up.direct_visualization_ids)
    roll_up.contained_ids = contained_ids(root_id, graph)
    for group_id in sorted(roll_up.group_ids):
        group_viz = children_of_type(group_id, "visualization", graph)
        roll_up.group_visualization_count += len(group_viz)
        roll_up.visualization_ids |= group_viz
        roll_up.contained_ids |= contained_ids(group_id, graph)

    counts = {t: 0 for t in CONTAINED_COUNT_TYPES}
    for oid in roll_up.contained_ids:
        ot = graph.type_of(oid)
        if ot in counts:
            counts[ot] += 1
    roll_up.type_counts = counts
    return roll_up
