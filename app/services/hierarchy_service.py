"""
Hierarchy Service

Builds the containment hierarchy of an assessment snapshot from top to bottom,
breaks cycles, and measures how deeply each object nests its children.
"""
from typing import Dict, List, Optional, Set, Tuple
from collections import defaultdict
import logging

from app.services.containment import CONTAINS, HAS_COLUMN, PARENT_CHILD, orient_parent_child
from app.services.graph_index import GraphIndex

logger = logging.getLogger(__name__)


class HierarchyNode:
    """Represents a node in the object hierarchy tree."""

    def __init__(self, object_id: str, object_type: str, name: str):
        self.object_id = object_id
        self.object_type = object_type
        self.name = name

        # Hierarchy structure
        self.depth = 0
        self.children: List['HierarchyNode'] = []
        self.parent: Optional['HierarchyNode'] = None
        self.path: str = ""

        # Metrics (calculated after the tree is built)
        self.child_count = 0
        self.descendant_count = 0
        self.height = 0  # levels of nesting below this node

    def __repr__(self):
        return f"<HierarchyNode {self.object_type}: {self.name} (depth={self.depth})>"


class HierarchyService:
    """Service for building and querying the containment hierarchy."""

    # Relationship types that create hierarchy (in priority order)
    HIERARCHY_RELATIONSHIP_TYPES = [
        PARENT_CHILD,  # Highest priority
        CONTAINS,      # Container relationships
        HAS_COLUMN,    # Table -> Column
    ]

    def __init__(self):
        self.nodes: Dict[str, HierarchyNode] = {}
        self.children_by_parent: Dict[str, List[Tuple[str, str]]] = defaultdict(list)
        self.detected_cycles: List[List[str]] = []

    def build_hierarchy(self, graph: GraphIndex) -> Dict[str, HierarchyNode]:
        """
        Build hierarchy tree from an indexed snapshot.

        Args:
            graph: Graph index of the snapshot

        Returns:
            Dictionary of object_id -> HierarchyNode
        """
        self.nodes.clear()
        self.children_by_parent.clear()
        self.detected_cycles.clear()

        for obj in graph.objects:
            self.nodes[obj.id] = HierarchyNode(
                object_id=obj.id,
                object_type=obj.object_type or "unknown",
                name=obj.name or "Unknown",
            )

        edges = self._collect_hierarchy_edges(graph)
        edges = self._detect_and_break_cycles(edges)
        for parent_id, child_id, rel_type in edges:
            self.children_by_parent[parent_id].append((child_id, rel_type))

        roots = self._identify_root_nodes(edges)
        for root_id in roots:
            self._build_tree_from_root(root_id)

        self._calculate_metrics()
        return self.nodes

    def _collect_hierarchy_edges(self, graph: GraphIndex) -> List[Tuple[str, str, str]]:
        """(parent_id, child_id, rel_type) for hierarchy edges between known objects, deduplicated."""
        edges: List[Tuple[str, str, str]] = []
        seen: Set[Tuple[str, str]] = set()
        for rel_type in self.HIERARCHY_RELATIONSHIP_TYPES:
            for obj in graph.objects:
                for rel in graph.outgoing(obj.id):
                    if rel.relationship_type != rel_type:
                        continue
                    if rel_type == PARENT_CHILD:
                        parent_id, child_id = orient_parent_child(rel, graph)
                    else:
                        parent_id, child_id = rel.source_object_id, rel.target_object_id
                    if parent_id not in self.nodes or child_id not in self.nodes:
                        continue
                    if parent_id == child_id or (parent_id, child_id) in seen:
                        continue
                    seen.add((parent_id, child_id))
                    edges.append((parent_id, child_id, rel_type))
        return edges

    def _detect_and_break_cycles(
        self,
        edges: List[Tuple[str, str, str]],
    ) -> List[Tuple[str, str, str]]:
        """
        Detect circular containment and break it by dropping the edge that closes
        each cycle. Returns the remaining edges.
        """
        graph: Dict[str, List[str]] = defaultdict(list)
        for parent_id, child_id, _ in edges:
            graph[parent_id].append(child_id)

        visited: Set[str] = set()
        on_stack: Set[str] = set()
        edges_to_remove: Set[Tuple[str, str]] = set()

        for start in list(graph):
            if start in visited:
                continue
            # Iterative DFS: (node, iterator over children)
            path: List[str] = [start]
            stack = [(start, iter(graph.get(start, [])))]
            visited.add(start)
            on_stack.add(start)
            while stack:
                node, children = stack[-1]
                advanced = False
                for neighbor in children:
                    if neighbor in on_stack:
                        cycle = path[path.index(neighbor):] + [neighbor]
                        self.detected_cycles.append(cycle)
                        edges_to_remove.add((node, neighbor))
                        logger.warning(
                            f"Cycle detected and broken: {' -> '.join(cycle)} "
                            f"(removed edge {node} -> {neighbor})"
                        )
                        continue
                    if neighbor not in visited:
                        visited.add(neighbor)
                        on_stack.add(neighbor)
                        path.append(neighbor)
                        stack.append((neighbor, iter(graph.get(neighbor, []))))
                        advanced = True
                        break
                if not advanced:
                    stack.pop()
                    on_stack.discard(node)
                    path.pop()

        if edges_to_remove:
            logger.info(
                f"Detected {len(self.detected_cycles)} cycles, removed {len(edges_to_remove)} edges"
            )
        return [e for e in edges if (e[0], e[1]) not in edges_to_remove]

    def _identify_root_nodes(self, edges: List[Tuple[str, str, str]]) -> List[str]:
        """Root nodes are objects with no incoming hierarchy edge."""
        with_parent = {child_id for _, child_id, _ in edges}
        roots = [oid for oid in self.nodes if oid not in with_parent]
        logger.debug(f"Identified {len(roots)} root nodes")
        return roots

    def _build_tree_from_root(self, root_id: str) -> None:
        """
        Attach children top-down from a root. A node already claimed by another
        parent keeps its first parent.
        """
        root = self.nodes[root_id]
        root.depth = 0
        root.path = root.name
        queue: List[str] = [root_id]
        while queue:
            current = self.nodes[queue.pop(0)]
            for child_id, _ in self.children_by_parent.get(current.object_id, []):
                child = self.nodes[child_id]
                if child.parent is not None or child is root:
                    continue
                child.parent = current
                child.depth = current.depth + 1
                child.path = f"{current.path} > {child.name}"
                current.children.append(child)
                queue.append(child_id)

    def _calculate_metrics(self) -> None:
        """Calculate child_count, descendant_count and height for all nodes."""
        order: List[HierarchyNode] = []
        queue = [node for node in self.nodes.values() if node.parent is None]
        while queue:
            node = queue.pop(0)
            order.append(node)
            queue.extend(node.children)
        # Children before parents
        for node in reversed(order):
            node.child_count = len(node.children)
            node.descendant_count = node.child_count + sum(c.descendant_count for c in node.children)
            node.height = 1 + max((c.height for c in node.children), default=-1)

    def get_root_nodes(self) -> List[HierarchyNode]:
        """Get all root nodes."""
        return [node for node in self.nodes.values() if node.parent is None]

    def get_detected_cycles(self) -> List[List[str]]:
        """Get list of detected cycles."""
        return self.detected_cycles
