"""Undirected graph of nodes linked by ways."""

from __future__ import annotations

from typing import List, Optional

from .geometry import Vector2, distance


class Node:
    """Graph vertex at a world position, knowing the ways attached to it."""

    def __init__(self, id: int, position: Vector2) -> None:
        self.id = id
        self.position = position
        self.ways: List[Way] = []

    def has_ways(self) -> bool:
        """Return True when at least one way is attached to the node."""
        return bool(self.ways)

    def way_to(self, node: Node) -> Optional[Way]:
        """Return the latest way joining this node and node, or None."""
        for way in reversed(self.ways):
            if {way.from_node, way.to_node} == {node, self} and (
                (way.from_node is node and way.to_node is self)
                or (way.to_node is node and way.from_node is self)
            ):
                return way
        return None

    def __repr__(self) -> str:
        return f"Node(id={self.id}, position={self.position})"


class Way:
    """Undirected arc between two nodes."""

    def __init__(self, id: int, from_node: Node, to_node: Node) -> None:
        self.id = id
        self.from_node = from_node
        self.to_node = to_node
        from_node.ways.append(self)
        to_node.ways.append(self)
        self._magnitude = 0.0
        self._update_magnitude()

    def _update_magnitude(self) -> None:
        self._magnitude = distance(self.to_node.position, self.from_node.position)

    @property
    def magnitude(self) -> float:
        """Length of the way in meters."""
        return self._magnitude

    def __repr__(self) -> str:
        return f"Way(id={self.id}, from={self.from_node.id}, to={self.to_node.id})"


class Path:
    """Graph holding nodes and the ways connecting them."""

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._ways: List[Way] = []

    @property
    def nodes(self) -> tuple:
        return tuple(self._nodes)

    @property
    def ways(self) -> tuple:
        return tuple(self._ways)

    def add_node(self, position: Vector2) -> Node:
        """Create and store a node at the given position."""
        node = Node(len(self._nodes), position)
        self._nodes.append(node)
        return node

    def add_way(self, node1: Node, node2: Node) -> Way:
        """Create and store a way joining two existing nodes."""
        way = Way(len(self._ways), node1, node2)
        self._ways.append(way)
        return way

    def split_way(self, way: Way, offset: float) -> Node:
        """Split way at the normalized offset and return the splitting node.

        An offset at or beyond an extremity returns that extremity unchanged.
        """
        if offset <= 0.0:
            return way.from_node
        if offset >= 1.0:
            return way.to_node

        start = way.from_node.position
        position = start + (way.to_node.position - start) * offset
        new_node = self.add_node(position)
        self.add_way(new_node, way.to_node)

        way.to_node.ways.remove(way)
        way.to_node = new_node
        new_node.ways.append(way)
        way._update_magnitude()
        return new_node