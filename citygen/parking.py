"""Parking slots placed in the world and the cars parked in them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from .geometry import Vector2, heading as rotate

Color = Tuple[int, int, int]

COLOR_PARKING: Color = (71, 71, 71)


class ParkingType(Enum):
    """Kind of parking slot, given by the angle of the slot to its lane."""

    PARALLEL = 0
    DIAGONAL_45 = 45
    DIAGONAL_60 = 60
    DIAGONAL_75 = 75
    PERPENDICULAR = 90

    @classmethod
    def from_angle(cls, angle: float) -> ParkingType:
        """Return the parking type matching an angle in degrees.

        The angle is truncated to whole degrees; an angle matching no
        known type raises ValueError.
        """
        degrees = int(angle)
        for kind in cls:
            if kind.value == degrees:
                return kind
        raise ValueError(f"unknown parking type for angle {angle} deg")


@dataclass(frozen=True)
class ParkingBluePrint:
    """Dimensions of a parking slot: length [m], width [m], angle [deg].

    The angle is 0 for parallel slots and 90 for perpendicular ones.
    """

    length: float
    width: float
    angle: float


class Parking:
    """Parking slot placed in the world, optionally holding a parked car.

    The position is the top-left corner of the slot in world coordinates and
    the heading is given in radians.
    """

    def __init__(self, blueprint: ParkingBluePrint, position: Vector2,
                 heading: float, car: Optional[Any] = None) -> None:
        self.blueprint = blueprint
        self.type = ParkingType.from_angle(blueprint.angle)
        self._position = position
        self._heading = heading
        self._car = car
        self.initial_color: Color = COLOR_PARKING
        self.color: Color = COLOR_PARKING

    @property
    def rotation(self) -> float:
        """Rotation of the slot shape in degrees, as used for drawing."""
        return -(self.blueprint.angle + math.degrees(self._heading))

    def _orientation(self) -> float:
        return math.radians(self.blueprint.angle) - self._heading

    def occupy(self, car: Any) -> None:
        """Mark the slot as occupied by car.

        Raises ValueError when the slot already holds a car, be it the same
        one or another.
        """
        if self._car is not None:
            if self._car is car:
                raise ValueError("car already bound to this parking slot")
            raise ValueError("parking slot already occupied by another car")
        self._car = car

    def release(self) -> Optional[Any]:
        """Free the slot and return the car that was in it, if any."""
        car, self._car = self._car, None
        return car

    def empty(self) -> bool:
        """Return True when no car is parked in the slot."""
        return self._car is None

    def car(self) -> Any:
        """Return the parked car; raise LookupError if the slot is empty."""
        if self._car is None:
            raise LookupError("parking slot is empty")
        return self._car

    def origin(self) -> Vector2:
        """Return the middle of the left side of the slot in world coordinates."""
        local = Vector2(0.0, -self.blueprint.width / 2.0)
        return self._position + rotate(local, self._orientation())

    def position(self) -> Vector2:
        """Return the top-left corner of the slot in world coordinates."""
        return self._position

    def heading(self) -> float:
        """Return the heading of the slot in radians."""
        return self._heading

    def delta(self) -> Vector2:
        """Return the position where the next slot along this one starts."""
        local = Vector2(self.blueprint.length, 0.0)
        return self._position + rotate(local, self._orientation())

    def next_to(self) -> Parking:
        """Return a new empty slot of the same kind placed right after this one."""
        return Parking(self.blueprint, self.delta(), self._heading)

    def __repr__(self) -> str:
        p = self._position
        return (f"Parking P = ({p.x}, {p.y}), length = {self.blueprint.length}, "
                f"width = {self.blueprint.width}, angle = {self.blueprint.angle}")