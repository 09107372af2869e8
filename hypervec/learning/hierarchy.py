"""
Hierarchy graphs used as input to curvature learning and evaluation.

A hierarchy is given as a mapping from node identifier to the list of
its parents. Nodes that only ever appear as parents are part of the
graph too. Cycles are tolerated: structural statistics guard against
revisiting a node on the current path, and shortest paths treat the
graph as undirected.
"""

from collections import deque
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union


class HierarchyGraph:
    """
    Parent-list view of a (possibly cyclic) hierarchy.

    Args:
        parents: Mapping from node identifier to its parent identifiers

    Example:
        >>> graph = HierarchyGraph({"b": ["a"], "c": ["a"], "d": ["b"]})
        >>> graph.roots()
        ['a']
        >>> graph.max_depth()
        3
    """

    def __init__(self, parents: Mapping[str, Sequence[str]]):
        self._parents: Dict[str, List[str]] = {node: list(ps) for node, ps in parents.items()}
        self._children: Optional[Dict[str, List[str]]] = None
        self._adjacency: Optional[Dict[str, Set[str]]] = None

    @classmethod
    def coerce(cls, hierarchy: Union["HierarchyGraph", Mapping[str, Sequence[str]]]) -> "HierarchyGraph":
        """Return ``hierarchy`` unchanged if it is already a graph, else wrap it."""
        if isinstance(hierarchy, HierarchyGraph):
            return hierarchy
        return cls(hierarchy)

    @property
    def parents(self) -> Dict[str, List[str]]:
        return {node: list(ps) for node, ps in self._parents.items()}

    def nodes(self) -> List[str]:
        """All nodes: mapping keys first, then parent-only nodes, each once, in first-seen order."""
        seen = dict.fromkeys(self._parents)
        for ps in self._parents.values():
            for parent in ps:
                seen.setdefault(parent, None)
        return list(seen)

    def __len__(self) -> int:
        return len(self.nodes())

    def __contains__(self, node: object) -> bool:
        return node in self._parents or any(node in ps for ps in self._parents.values())

    def parents_of(self, node: str) -> List[str]:
        return list(self._parents.get(node, []))

    def children(self) -> Dict[str, List[str]]:
        """Parent-to-children map with an entry (possibly empty) for every node."""
        if self._children is None:
            children: Dict[str, List[str]] = {node: [] for node in self.nodes()}
            for child, ps in self._parents.items():
                for parent in ps:
                    children[parent].append(child)
            self._children = children
        return self._children

    def roots(self) -> List[str]:
        """Nodes that are nobody's child."""
        return [node for node in self.nodes() if not self._parents.get(node)]

    def leaves(self) -> List[str]:
        return [node for node, kids in self.children().items() if not kids]

    def max_depth(self) -> int:
        """
        Number of nodes on the longest root-to-leaf path.

        A lone root has depth 1; a graph without roots (a pure cycle) has
        depth 0.
        """
        children = self.children()
        depths: Dict[str, int] = {}
        best = 0
        for root in self.roots():
            best = max(best, self._depth_from(root, children, depths))
        return best

    @staticmethod
    def _depth_from(root: str, children: Dict[str, List[str]], depths: Dict[str, int]) -> int:
        """
        Iterative post-order depth-first search from ``root``.

        Depths are memoised in ``depths`` so shared descendants are
        visited once. An edge back to a node still on the current path
        contributes nothing.
        """
        if root in depths:
            return depths[root]
        on_path: Set[str] = {root}
        stack = [(root, iter(children.get(root, [])))]
        deepest = {root: 0}
        while stack:
            node, pending = stack[-1]
            child = next(pending, None)
            if child is None:
                stack.pop()
                on_path.discard(node)
                depths[node] = 1 + deepest.pop(node)
                if stack:
                    parent = stack[-1][0]
                    deepest[parent] = max(deepest[parent], depths[node])
                continue
            if child in on_path:
                continue
            if child in depths:
                deepest[node] = max(deepest[node], depths[child])
                continue
            on_path.add(child)
            deepest[child] = 0
            stack.append((child, iter(children.get(child, []))))
        return depths[root]

    def average_branching_factor(self) -> float:
        """Mean number of children over nodes that have at least one child."""
        counts = [len(kids) for kids in self.children().values() if kids]
        if not counts:
            return 0.0
        return sum(counts) / len(counts)

    def adjacency(self) -> Dict[str, Set[str]]:
        """Undirected neighbour sets over parent-child edges."""
        if self._adjacency is None:
            adjacency: Dict[str, Set[str]] = {node: set() for node in self.nodes()}
            for child, ps in self._parents.items():
                for parent in ps:
                    adjacency[child].add(parent)
                    adjacency[parent].add(child)
            self._adjacency = adjacency
        return self._adjacency

    def hop_distances_from(self, source: str) -> Dict[str, float]:
        """Breadth-first hop counts from ``source`` to every reachable node."""
        adjacency = self.adjacency()
        distances = {source: 0.0}
        queue = deque([source])
        while queue:
            current = queue.popleft()
            for neighbor in adjacency.get(current, ()):
                if neighbor not in distances:
                    distances[neighbor] = distances[current] + 1.0
                    queue.append(neighbor)
        return distances

    def hop_distances(self) -> Dict[str, Dict[str, float]]:
        """All-pairs hop counts over the undirected graph (unreachable pairs are absent)."""
        return {source: self.hop_distances_from(source) for source in self.adjacency()}

    def ancestors(self, node: str) -> Set[str]:
        result: Set[str] = set()
        stack = list(self._parents.get(node, []))
        while stack:
            current = stack.pop()
            if current in result:
                continue
            result.add(current)
            stack.extend(self._parents.get(current, []))
        result.discard(node)
        return result

    def is_ancestor(self, ancestor: str, node: str) -> bool:
        return ancestor in self.ancestors(node)

    def are_siblings(self, a: str, b: str) -> bool:
        return a != b and bool(set(self._parents.get(a, [])) & set(self._parents.get(b, [])))

    def grandparents(self, node: str) -> Set[str]:
        return {gp for parent in self._parents.get(node, []) for gp in self._parents.get(parent, [])}

    def share_grandparent(self, a: str, b: str) -> bool:
        return a != b and bool(self.grandparents(a) & self.grandparents(b))

    def is_related(self, a: str, b: str) -> bool:
        """Ancestor, descendant, sibling or cousin (shared grandparent)."""
        return (
            self.is_ancestor(a, b)
            or self.is_ancestor(b, a)
            or self.are_siblings(a, b)
            or self.share_grandparent(a, b)
        )

    def __repr__(self) -> str:
        return f"HierarchyGraph(nodes={len(self)}, roots={len(self.roots())})"


def build_tree(depth: int, branching: int, prefix: str = "n") -> Dict[str, List[str]]:
    """
    Parent map of a complete tree.

    Args:
        depth: Number of levels, counting the root as level 1
        branching: Children per internal node
        prefix: Identifier prefix; node ids are ``{prefix}{path}``

    Returns:
        Mapping from child id to ``[parent id]``; the root has an empty list
    """
    root = f"{prefix}0"
    parents: Dict[str, List[str]] = {root: []}
    level: Iterable[str] = [root]
    for _ in range(depth - 1):
        next_level = []
        for node in level:
            for i in range(branching):
                child = f"{node}.{i}"
                parents[child] = [node]
                next_level.append(child)
        level = next_level
    return parents
