"""Roads made of parallel lanes for right-hand and left-hand traffic."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .geometry import Vector2, distance, heading, lerp, normal, orientation

Color = Tuple[int, int, int]

COLOR_DRIVING_LANE: Color = (204, 204, 204)
COLOR_RESTRICTED_LANE: Color = (150, 143, 158)
COLOR_PARKING_LANE: Color = (71, 71, 71)


class TrafficSide(Enum):
    """Side of the road the traffic drives on."""

    LEFT_HAND = 0
    RIGHT_HAND = 1


@dataclass(frozen=True)
class LaneBluePrint:
    """Dimensions of a lane: length [m], angle [rad] and width [m]."""

    length: float
    angle: float
    width: float

    @classmethod
    def from_points(cls, start: Vector2, stop: Vector2, width: float) -> LaneBluePrint:
        """Build the blueprint of a lane going from start to stop."""
        return cls(distance(start, stop), orientation(start, stop), width)


class Lane:
    """A single lane of a road, with its own direction of travel."""

    def __init__(self, start: Vector2, stop: Vector2, width: float,
                 side: TrafficSide) -> None:
        self.blueprint = LaneBluePrint.from_points(start, stop, width)
        self.side = side
        self._start = start
        self._stop = stop
        self._normal = normal(stop - start)
        self.color: Color = (COLOR_DRIVING_LANE if side is TrafficSide.RIGHT_HAND
                             else COLOR_RESTRICTED_LANE)
        self.cars: List[object] = []

    def heading(self) -> float:
        """Return the direction of the lane in radians."""
        return self.blueprint.angle

    def origin(self) -> Vector2:
        """Return the world position where the lane starts."""
        return self._start

    def destination(self) -> Vector2:
        """Return the world position where the lane ends."""
        return self._stop

    def normal(self) -> Vector2:
        """Return the unit normal of the lane."""
        return self._normal

    def __repr__(self) -> str:
        return (f"Lane(side={self.side.name}, start={self._start}, "
                f"stop={self._stop}, width={self.blueprint.width})")


LaneCounts = Union[Mapping[TrafficSide, int], Sequence[int]]


def _lane_count(lanes: LaneCounts, side: TrafficSide) -> int:
    if isinstance(lanes, Mapping):
        count = lanes.get(side, 0)
    else:
        count = lanes[side.value]
    if count < 0:
        raise ValueError(f"negative number of lanes for {side.name}: {count}")
    return count


class Road:
    """Straight road segment holding lanes on both traffic sides.

    Right-hand lanes run from the first center to the second one, left-hand
    lanes run the opposite way. Lanes are stacked along the road normal, each
    one shifted by the lane width.
    """

    def __init__(self, centers: Sequence[Vector2], width: float,
                 lanes: LaneCounts) -> None:
        if len(centers) < 2:
            raise ValueError("a road needs at least two center points")
        self._start = centers[0]
        self._stop = centers[1]
        self._width = width
        self._heading = orientation(self._start, self._stop)

        lane_offset = self.normal() * width
        self.lanes: Dict[TrafficSide, Tuple[Lane, ...]] = {}

        right: List[Lane] = []
        start, stop = self._start, self._stop
        for _ in range(_lane_count(lanes, TrafficSide.RIGHT_HAND)):
            right.append(Lane(start, stop, width, TrafficSide.RIGHT_HAND))
            start, stop = start - lane_offset, stop - lane_offset
        self.lanes[TrafficSide.RIGHT_HAND] = tuple(reversed(right))

        left: List[Lane] = []
        start, stop = self._start, self._stop
        for _ in range(_lane_count(lanes, TrafficSide.LEFT_HAND)):
            left.append(Lane(stop, start, width, TrafficSide.LEFT_HAND))
            start, stop = start + lane_offset, stop + lane_offset
        self.lanes[TrafficSide.LEFT_HAND] = tuple(reversed(left))

    def _lane(self, side: TrafficSide, lane: int) -> Lane:
        side_lanes = self.lanes[side]
        if not 0 <= lane < len(side_lanes):
            raise IndexError(
                f"lane {lane} out of range for {side.name} "
                f"({len(side_lanes)} lanes)")
        return side_lanes[lane]

    def offset(self, side: TrafficSide, lane: int, x: float, y: float) -> Vector2:
        """Return the world position at relative offsets inside a lane.

        x in [0, 1] runs along the lane from its origin to its end; y in
        [0, 1] runs across the lane width.
        """
        chosen = self._lane(side, lane)
        local = Vector2(lerp(0.0, chosen.blueprint.length, x),
                        lerp(0.0, -chosen.blueprint.width, y))
        return chosen.origin() + heading(local, chosen.blueprint.angle)

    def heading(self, side: Optional[TrafficSide] = None) -> float:
        """Return the road heading, or the heading of the lanes of a side."""
        if side is None:
            return self._heading
        return self._lane(side, 0).heading()

    def origin(self) -> Vector2:
        """Return the initial center position of the road."""
        return self._start

    def destination(self) -> Vector2:
        """Return the final center position of the road."""
        return self._stop

    def normal(self) -> Vector2:
        """Return the unit normal of the road."""
        return normal(self._stop - self._start)

    def width(self) -> float:
        """Return the width of each lane."""
        return self._width

    def __repr__(self) -> str:
        counts = {side.name: len(lanes) for side, lanes in self.lanes.items()}
        return (f"Road(start={self._start}, stop={self._stop}, "
                f"width={self._width}, lanes={counts})")