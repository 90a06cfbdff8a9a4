"""
Graph Index

Adjacency indexes over a flat object/relationship snapshot. Every traversal in
the aggregation engine reads the graph through this index.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from app.schemas.object import ExtractedObject, ObjectRelationship


class GraphIndex:
    """
    Read-only view of one assessment snapshot.
    - by_id[object_id] = object
    - by_source[object_id] = relationships whose source is object_id (insertion order)
    - by_target[object_id] = relationships whose target is object_id (insertion order)
    Lookups of unknown ids return None / empty tuples, never raise.
    """
    __slots__ = ("objects", "by_id", "by_source", "by_target")

    def __init__(
        self,
        objects: Sequence[ExtractedObject],
        by_id: Dict[str, ExtractedObject],
        by_source: Dict[str, Tuple[ObjectRelationship, ...]],
        by_target: Dict[str, Tuple[ObjectRelationship, ...]],
    ):
        self.objects = tuple(objects)
        self.by_id = by_id
        self.by_source = by_source
        self.by_target = by_target

    def get(self, object_id: str) -> Optional[ExtractedObject]:
        return self.by_id.get(object_id)

    def type_of(self, object_id: str) -> Optional[str]:
        obj = self.by_id.get(object_id)
        return obj.object_type if obj else None

    def outgoing(self, object_id: str) -> Tuple[ObjectRelationship, ...]:
        return self.by_source.get(object_id, ())

    def incoming(self, object_id: str) -> Tuple[ObjectRelationship, ...]:
        return self.by_target.get(object_id, ())

    def objects_of_type(self, *object_types: str) -> List[ExtractedObject]:
        """Objects whose type is one of object_types, in input order."""
        wanted = set(object_types)
        return [obj for obj in self.objects if obj.object_type in wanted]

    def __contains__(self, object_id: str) -> bool:
        return object_id in self.by_id

    def __repr__(self):
        return (
            f"<GraphIndex objects={len(self.by_id)} "
            f"relationships={sum(len(v) for v in self.by_source.values())}>"
        )


def build_graph_index(
    objects: Iterable[ExtractedObject],
    relationships: Iterable[ObjectRelationship],
) -> GraphIndex:
    """
    Build id lookup and source/target adjacency from the flat lists.
    Dangling relationship ends are indexed as-is; consumers skip them on lookup.
    Inputs are not mutated.
    """
    objects = list(objects)
    by_id: Dict[str, ExtractedObject] = {obj.id: obj for obj in objects}
    by_source: Dict[str, List[ObjectRelationship]] = defaultdict(list)
    by_target: Dict[str, List[ObjectRelationship]] = defaultdict(list)
    for rel in relationships:
        by_source[rel.source_object_id].append(rel)
        by_target[rel.target_object_id].append(rel)
    return GraphIndex(
        objects=objects,
        by_id=by_id,
        by_source={k: tuple(v) for k, v in by_source.items()},
        by_target={k: tuple(v) for k, v in by_target.items()},
    )
