"""Procedural city road network generator driven by a population heat map."""

from __future__ import annotations

import logging
import math
import os
import random
from typing import List, Optional, Sequence, Tuple, Union

from .geometry import Vector2
from .heatmap import HeatMap
from .roadgraph import GenerationRule, GeneratorConfig, PriorityQueue, RoadSegment
from .rules import (DummyRule, IntersectingRoadsRule, RadiusIntersectionRule,
                    SnapToCrossingRule)

logger = logging.getLogger(__name__)

_RIGHT_ANGLE = math.pi / 2.0


def non_linear_distribution(limit: float, rng: random.Random) -> float:
    """Draw a value in [-limit, limit] with a density skewed towards -limit.

    A uniform candidate is rejected with a probability growing with the cube
    of its value, so positive values are less likely than negative ones.
    """
    norm = limit * limit * limit
    while True:
        value = rng.uniform(-limit, limit)
        if norm == 0.0:
            return value
        if not rng.uniform(0.0, 1.0) < (value * value * value / norm):
            return value


def random_angle(limit: float, rng: random.Random) -> float:
    """Draw a random angle in radians within [-limit, limit]."""
    return non_linear_distribution(limit, rng)


def _replace_link(links: List[RoadSegment], old: RoadSegment,
                  new: RoadSegment) -> bool:
    for index, link in enumerate(links):
        if link is old:
            links[index] = new
            return True
    return False


class CityGenerator:
    """Grow a road network from two initial highways following local rules."""

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 rng: Optional[random.Random] = None,
                 map_dimension: Sequence[int] = (512, 512)) -> None:
        self.config = config if config is not None else GeneratorConfig()
        self.rng = rng if rng is not None else random.Random()
        self.map_dimension: Tuple[int, int] = (int(map_dimension[0]),
                                               int(map_dimension[1]))
        self.population = HeatMap()
        self.dimension: Optional[Vector2] = None
        self._pendings = PriorityQueue()
        self._branches: List[RoadSegment] = []
        self._roads: List[RoadSegment] = []
        self._initial_roads: List[RoadSegment] = []
        self.rules: List[GenerationRule] = self._make_rules()

    def _make_rules(self) -> List[GenerationRule]:
        # Lower priority value means higher precedence; the priority must
        # match the index of the rule in the list.
        kinds = (DummyRule, RadiusIntersectionRule, SnapToCrossingRule,
                 IntersectingRoadsRule)
        return [kind(self, priority) for priority, kind in enumerate(kinds)]

    @property
    def roads(self) -> List[RoadSegment]:
        """Accepted road segments, in the order they were accepted."""
        return list(self._roads)

    @property
    def branches(self) -> List[RoadSegment]:
        """Every proposed segment, accepted or not."""
        return list(self._branches)

    def generate(self, dimension: Vector2,
                 heatmap_path: Optional[Union[str, os.PathLike]] = None
                 ) -> List[RoadSegment]:
        """Generate the roads of a city of dimension meters.

        When heatmap_path is given the population map is written there as PNG.
        """
        self._pendings.clear()
        self._roads.clear()
        self._branches.clear()
        self.rules = self._make_rules()

        self.dimension = dimension
        self.population.generate(dimension, self.map_dimension)
        if heatmap_path is not None:
            self.population.save(heatmap_path)
        self._generate_initial_roads(Vector2(0.0, 0.0), True)
        return self._generate_roads()

    def _generate_initial_roads(self, initial_position: Vector2,
                                highway: bool) -> None:
        dx = Vector2(self.config.highway_road_length, 0.0)
        first = RoadSegment(initial_position, initial_position + dx, 0, highway)
        second = RoadSegment(initial_position, initial_position - dx, 0, highway)
        first.backwards.append(second)
        second.backwards.append(first)
        self._initial_roads = [first, second]
        self._pendings.push(first)
        self._pendings.push(second)

    def _generate_roads(self) -> List[RoadSegment]:
        while self._pendings and len(self._roads) < self.config.max_roads:
            road = self._pendings.pop()
            logger.debug("evaluating %s", road)
            if self._local_constraints(road):
                road.setup_branch_links()
                self._roads.append(road)
                self._global_goals(road)
        return list(self._roads)

    def _local_constraints(self, road: RoadSegment) -> bool:
        priority = 0
        action = 0
        for other in list(self._roads):
            for rule in reversed(self.rules):
                if priority <= rule.priority and rule.accept(road, other):
                    priority = rule.priority
                    action = priority
        return self.rules[action].apply(road)

    def junction(self, road: RoadSegment, other: RoadSegment,
                 intersection: Vector2) -> None:
        """Split other at intersection where the new segment road crosses it.

        The part of other before the intersection becomes a new segment that
        keeps the id of other; links of both sides are updated.
        """
        new_road = other.copy()
        self._branches.append(new_road)
        self._roads.append(new_road)
        new_road.end = intersection

        road.end = intersection
        road.has_severed = True
        other.start = intersection

        if other.is_inversed():
            for link in new_road.backwards:
                if not (_replace_link(link.backwards, other, new_road)
                        or _replace_link(link.forwards, other, new_road)):
                    raise ValueError(
                        f"segment {link.id} is not linked to segment {other.id}")
            new_road.forwards.extend((road, other))
            other.backwards.extend((road, new_road))
            road.forwards.extend((new_road, other))
        else:
            for link in new_road.forwards:
                if not (_replace_link(link.forwards, other, new_road)
                        or _replace_link(link.backwards, other, new_road)):
                    raise ValueError(
                        f"segment {link.id} is not linked to segment {other.id}")
            other.forwards.extend((road, new_road))
            new_road.backwards.extend((road, other))
            road.forwards.extend((other, new_road))

    def continue_road(self, previous: RoadSegment, direction: float) -> RoadSegment:
        """Return a segment as long as previous, starting at its end, along direction."""
        length = previous.length()
        end = previous.end + Vector2(length * math.cos(direction),
                                     length * math.sin(direction))
        return RoadSegment(previous.end, end, 0, previous.highway)

    def branch_road(self, previous: RoadSegment, direction: float) -> RoadSegment:
        """Return a normal road branching off the end of previous along direction."""
        priority = (self.config.normal_branch_time_delay_from_highway
                    if previous.highway else 0)
        length = self.config.default_road_length
        end = previous.end + Vector2(length * math.cos(direction),
                                     length * math.sin(direction))
        return RoadSegment(previous.end, end, priority, False)

    def _density(self, point: Vector2) -> float:
        try:
            return self.population.get(point)
        except IndexError:
            return 0.0

    def sample_population(self, road: RoadSegment) -> float:
        """Return the mean population density at both ends of road.

        Positions outside the population map count as unpopulated.
        """
        return (self._density(road.start) + self._density(road.end)) / 2.0

    def _global_goals(self, previous: RoadSegment) -> None:
        if previous.has_severed:
            logger.debug("segment %s severed: no growth", previous.id)
            return

        deviation = self.config.straight_angle_deviation
        new_branches: List[RoadSegment] = []

        next_straight = self.continue_road(previous, previous.heading())
        population_straight = self.sample_population(next_straight)
        if previous.highway:
            next_random = self.continue_road(
                previous, previous.heading() + random_angle(deviation, self.rng))
            population_random = self.sample_population(next_random)
            logger.debug("random population %g, straight population %g",
                         population_random, population_straight)
            new_branches.append(next_random)

            angle = (previous.heading() + _RIGHT_ANGLE
                     + random_angle(deviation, self.rng))
            new_branches.append(self.continue_road(previous, angle))
        elif population_straight > self.config.normal_branch_population_threshold:
            new_branches.append(next_straight)

        angle = previous.heading() + _RIGHT_ANGLE + random_angle(deviation, self.rng)
        new_branches.append(self.branch_road(previous, angle))

        for branch in new_branches:
            branch.previous_segment_to_link = previous
            branch.priority += previous.priority + 1
            self._branches.append(branch)
            logger.debug("new branch %s", branch)
            self._pendings.push(branch)