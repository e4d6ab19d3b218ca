"""Local constraint rules deciding how a new segment joins the road network."""

from __future__ import annotations

import logging
from typing import Optional

from .geometry import (Vector2, aligned, distance2, intersect, is_equal_approx,
                       project, wrap_angle)
from .roadgraph import GenerationRule, RoadSegment

logger = logging.getLogger(__name__)


class DummyRule(GenerationRule):
    """Rule always accepting the segment as it is."""

    def accept(self, road: RoadSegment, other: RoadSegment) -> bool:
        return True

    def apply(self, road: RoadSegment) -> bool:
        logger.debug("segment %s kept as is", road.id)
        return True


class IntersectingRoadsRule(GenerationRule):
    """Split an existing segment where the new segment crosses it."""

    def __init__(self, context, priority: int) -> None:
        super().__init__(context, priority)
        self._intersection: Optional[Vector2] = None
        self._other: Optional[RoadSegment] = None
        self._previous_distance2 = 100000.0 * 100000.0

    def accept(self, road: RoadSegment, other: RoadSegment) -> bool:
        point = intersect((road.start, road.end), (other.start, other.end))
        if point is None:
            return False
        self._intersection = point

        d2 = distance2(road.start, point)
        if d2 >= self._previous_distance2:
            return False
        deviation = wrap_angle(other.heading() - road.heading())
        if deviation < self.context.config.minimum_intersection_deviation:
            return False
        self._previous_distance2 = d2
        self._other = other
        return True

    def apply(self, road: RoadSegment) -> bool:
        if self._other is None or self._intersection is None:
            raise RuntimeError("rule applied before any segment was accepted")
        logger.debug("segment %s crosses segment %s", road.id, self._other.id)
        self.context.junction(road, self._other, self._intersection)
        return True


class SnapToCrossingRule(GenerationRule):
    """Snap the end of a segment onto a nearby crossing."""

    def __init__(self, context, priority: int) -> None:
        super().__init__(context, priority)
        self._other: Optional[RoadSegment] = None

    def accept(self, road: RoadSegment, other: RoadSegment) -> bool:
        snap = self.context.config.max_snap_distance
        if distance2(road.end, other.end) <= snap * snap:
            self._other = other
            road.has_severed = True
            return True
        return False

    def apply(self, road: RoadSegment) -> bool:
        other = self._other
        if other is None:
            raise RuntimeError("rule applied before any segment was accepted")
        road.end = other.end
        road.has_severed = True

        links = other.forwards if other.is_inversed() else other.backwards
        for link in links:
            if ((is_equal_approx(link.start, road.end)
                 and is_equal_approx(link.end, road.start))
                    or (is_equal_approx(link.start, road.start)
                        and is_equal_approx(link.end, road.end))):
                logger.debug("snap of segment %s skipped: duplicate", road.id)
                return False

        for link in list(links):
            link.links_for_end_containing(other).append(road)
            road.forwards.append(link)

        links.append(road)
        road.forwards.append(other)
        return True


class RadiusIntersectionRule(GenerationRule):
    """Join a segment ending close to an existing segment onto it."""

    def __init__(self, context, priority: int) -> None:
        super().__init__(context, priority)
        self._intersection: Optional[Vector2] = None
        self._other: Optional[RoadSegment] = None

    def accept(self, road: RoadSegment, other: RoadSegment) -> bool:
        if not aligned(road.end, other.start, other.end):
            return False
        self._intersection = project(road.end, other.start, other.end, False)
        d2 = road.end.dot(self._intersection)
        snap = self.context.config.max_snap_distance
        if d2 >= snap * snap:
            return False
        deviation = wrap_angle(other.heading() - road.heading())
        if deviation < self.context.config.minimum_intersection_deviation:
            return False
        self._other = other
        return True

    def apply(self, road: RoadSegment) -> bool:
        if self._other is None or self._intersection is None:
            raise RuntimeError("rule applied before any segment was accepted")
        logger.debug("segment %s joins segment %s", road.id, self._other.id)
        self.context.junction(road, self._other, self._intersection)
        return True