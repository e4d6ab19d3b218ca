"""Lightweight road segments linked into a graph, and the generator's building blocks."""

from __future__ import annotations

import itertools
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .geometry import Vector2, distance, distance2, orientation

_INVERSION_EPSILON = 0.1  # square meters


class RoadSegment:
    """Road segment used while generating a city.

    A segment knows the segments merged at its start (``backwards``) and the
    segments split off at its end (``forwards``). Links are compared by
    identity, so a segment and its copy are distinct graph members.
    """

    _ids = itertools.count(1)

    def __init__(self, start: Vector2, end: Vector2, priority: int = 0,
                 highway: bool = False, *, id: Optional[int] = None) -> None:
        self.id = next(RoadSegment._ids) if id is None else id
        self.start = start
        self.end = end
        self.priority = priority
        self.highway = highway
        self.has_severed = False
        self.backwards: List[RoadSegment] = []
        self.forwards: List[RoadSegment] = []
        self.previous_segment_to_link: Optional[RoadSegment] = None

    def copy(self) -> RoadSegment:
        """Return a new segment with the same id, state and links."""
        other = RoadSegment(self.start, self.end, self.priority, self.highway,
                            id=self.id)
        other.has_severed = self.has_severed
        other.backwards = list(self.backwards)
        other.forwards = list(self.forwards)
        other.previous_segment_to_link = self.previous_segment_to_link
        return other

    def setup_branch_links(self) -> None:
        """Link this segment to the segment it was branched from, if any."""
        previous = self.previous_segment_to_link
        if previous is None:
            return
        for link in previous.forwards:
            self.backwards.append(link)
            if _contains(self.backwards, previous):
                self.backwards.append(self)
            elif _contains(self.forwards, previous):
                self.forwards.append(self)
        previous.forwards.append(self)
        self.backwards.append(previous)

    def links_for_end_containing(self, road: RoadSegment) -> List[RoadSegment]:
        """Return the link list (backwards or forwards) holding road.

        Raises ValueError when road is linked at neither end.
        """
        if _contains(self.backwards, road):
            return self.backwards
        if _contains(self.forwards, road):
            return self.forwards
        raise ValueError(f"segment {road.id} is not linked to segment {self.id}")

    def is_inversed(self) -> bool:
        """Return True when the first link touches the wrong end of this segment."""
        if self.backwards:
            first = self.backwards[0]
            return (distance2(first.start, self.start) < _INVERSION_EPSILON
                    or distance2(first.end, self.start) < _INVERSION_EPSILON)
        if self.forwards:
            first = self.forwards[0]
            return (distance2(first.start, self.end) < _INVERSION_EPSILON
                    or distance2(first.end, self.end) < _INVERSION_EPSILON)
        return False

    def heading(self) -> float:
        """Return the direction of the segment in radians."""
        return orientation(self.start, self.end)

    def length(self) -> float:
        """Return the length of the segment in meters."""
        return distance(self.start, self.end)

    def __str__(self) -> str:
        kind = "Highway" if self.highway else "Road"
        backwards = "".join(f" {link.id}" for link in self.backwards)
        forwards = "".join(f" {link.id}" for link in self.forwards)
        return (f"{kind}{self.id} (({self.start.x:g}, {self.start.y:g}) => "
                f"({self.end.x:g}, {self.end.y:g}))  Prio: {self.priority}, "
                f"Sev: {int(self.has_severed)}, Backwards: [{backwards} ], "
                f"Forwards: [{forwards} ]")

    def __repr__(self) -> str:
        return f"RoadSegment({self})"


def _contains(links: List[RoadSegment], road: RoadSegment) -> bool:
    return any(link is road for link in links)


class PriorityQueue:
    """Pending segments, popped lowest priority value first.

    Among segments of equal priority the earliest pushed comes out first.
    """

    def __init__(self) -> None:
        self._queue: List[RoadSegment] = []

    def push(self, road: RoadSegment) -> None:
        """Add a segment to the queue."""
        self._queue.append(road)

    def pop(self) -> RoadSegment:
        """Remove and return the segment with the lowest priority value."""
        if not self._queue:
            raise IndexError("pop from an empty priority queue")
        index = min(range(len(self._queue)),
                    key=lambda i: self._queue[i].priority)
        return self._queue.pop(index)

    def clear(self) -> None:
        """Remove every pending segment."""
        self._queue.clear()

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)


@dataclass
class GeneratorConfig:
    """Settings of the city generator. Angles in radians, lengths in meters."""

    max_roads: int = 8
    branch_angle_deviation: float = field(default_factory=lambda: math.radians(3.0))
    straight_angle_deviation: float = field(default_factory=lambda: math.radians(15.0))
    minimum_intersection_deviation: float = field(
        default_factory=lambda: math.radians(30.0))
    default_road_length: float = 300.0
    highway_road_length: float = 400.0
    default_branch_probability: float = 0.4
    highway_branch_probability: float = 0.05
    normal_branch_population_threshold: float = 128.0
    highway_branch_population_threshold: float = 128.0
    normal_branch_time_delay_from_highway: int = 5
    max_snap_distance: float = 50.0
    building_road_period: int = 5
    building_count_per_road: int = 10
    max_building_distance_from_segment: float = 400.0


class GenerationRule(ABC):
    """Rule deciding whether and how a new segment fits the existing network.

    Lower priority values mean higher precedence.
    """

    def __init__(self, context: Any, priority: int) -> None:
        self.context = context
        self.priority = priority

    @abstractmethod
    def accept(self, road: RoadSegment, other: RoadSegment) -> bool:
        """Return True when the rule applies to road against other."""

    @abstractmethod
    def apply(self, road: RoadSegment) -> bool:
        """Apply the rule to road; return True when road is kept."""