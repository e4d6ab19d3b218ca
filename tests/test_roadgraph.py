import math

import pytest

from citygen.geometry import Vector2
from citygen.roadgraph import (
    GenerationRule,
    GeneratorConfig,
    PriorityQueue,
    RoadSegment,
)


def _drain(queue):
    out = []
    while queue:
        out.append(queue.pop())
    return out


def test_priority_queue_city_cases():
    roads = [
        RoadSegment(Vector2(0, 0), Vector2(400, 0), 0, True),
        RoadSegment(Vector2(0, 0), Vector2(0, 0), 3, True),
        RoadSegment(Vector2(0, 0), Vector2(0, 0), 82, True),
        RoadSegment(Vector2(0, 0), Vector2(-400, 0), 0, True),
        RoadSegment(Vector2(0, 0), Vector2(0, 0), 5, True),
        RoadSegment(Vector2(0, 0), Vector2(0, 0), 32, True),
    ]
    queue = PriorityQueue()
    for road in roads:
        queue.push(road)
    popped = _drain(queue)
    assert [(r.end.x, r.priority) for r in popped] == [
        (400, 0), (-400, 0), (0, 3), (0, 5), (0, 32), (0, 82)]


def test_priority_queue_ordering_cases():
    queue = PriorityQueue()
    for p in (42, 0, 3, 82, 5, 32):
        queue.push(RoadSegment(Vector2(0, 0), Vector2(1, 0), p))
    assert [r.priority for r in _drain(queue)] == [0, 3, 5, 32, 42, 82]


def test_priority_queue_len_clear_and_empty_pop():
    queue = PriorityQueue()
    queue.push(RoadSegment(Vector2(0, 0), Vector2(1, 0)))
    queue.push(RoadSegment(Vector2(0, 0), Vector2(1, 0)))
    assert len(queue) == 2
    queue.clear()
    assert len(queue) == 0
    with pytest.raises(IndexError):
        queue.pop()


def test_ids_increase_and_copy_keeps_id():
    a = RoadSegment(Vector2(0, 0), Vector2(1, 0))
    b = RoadSegment(Vector2(0, 0), Vector2(1, 0))
    assert b.id == a.id + 1
    a.forwards.append(b)
    a.has_severed = True
    c = a.copy()
    assert c.id == a.id
    assert c is not a
    assert c.has_severed is True
    assert c.forwards == [b]
    c.forwards.append(a)
    assert a.forwards == [b]


def test_heading_and_length():
    road = RoadSegment(Vector2(0, 0), Vector2(3, 4))
    assert road.length() == pytest.approx(5.0)
    assert road.heading() == pytest.approx(math.atan2(4, 3))


def test_is_inversed_initial_roads():
    r1 = RoadSegment(Vector2(0, 0), Vector2(400, 0), 0, True)
    r2 = RoadSegment(Vector2(0, 0), Vector2(-400, 0), 0, True)
    r1.backwards.append(r2)
    assert r1.is_inversed() is True


def test_is_inversed_forwards_and_unlinked():
    road = RoadSegment(Vector2(0, 0), Vector2(10, 0))
    assert road.is_inversed() is False
    road.forwards.append(RoadSegment(Vector2(10, 0), Vector2(20, 0)))
    assert road.is_inversed() is True
    far = RoadSegment(Vector2(0, 0), Vector2(10, 0))
    far.forwards.append(RoadSegment(Vector2(50, 0), Vector2(60, 0)))
    assert far.is_inversed() is False


def test_links_for_end_containing():
    road = RoadSegment(Vector2(0, 0), Vector2(1, 0))
    back = RoadSegment(Vector2(0, 0), Vector2(-1, 0))
    front = RoadSegment(Vector2(1, 0), Vector2(2, 0))
    road.backwards.append(back)
    road.forwards.append(front)
    assert road.links_for_end_containing(back) is road.backwards
    assert road.links_for_end_containing(front) is road.forwards
    with pytest.raises(ValueError):
        road.links_for_end_containing(RoadSegment(Vector2(0, 0), Vector2(5, 5)))


def test_setup_branch_links_without_previous():
    road = RoadSegment(Vector2(0, 0), Vector2(1, 0))
    road.setup_branch_links()
    assert road.backwards == [] and road.forwards == []


def test_setup_branch_links_with_previous():
    previous = RoadSegment(Vector2(0, 0), Vector2(10, 0))
    sibling = RoadSegment(Vector2(10, 0), Vector2(20, 0))
    previous.forwards.append(sibling)
    road = RoadSegment(Vector2(10, 0), Vector2(10, 10))
    road.previous_segment_to_link = previous
    road.setup_branch_links()
    assert road.backwards == [sibling, previous]
    assert previous.forwards == [sibling, road]


def test_str_format():
    a = RoadSegment(Vector2(0, 0), Vector2(400, 0), 2, True)
    b = RoadSegment(Vector2(0, 0), Vector2(-400, 0))
    a.backwards.append(b)
    text = str(a)
    assert text == (f"Highway{a.id} ((0, 0) => (400, 0))  Prio: 2, Sev: 0, "
                    f"Backwards: [ {b.id} ], Forwards: [ ]")
    assert str(b).startswith(f"Road{b.id} ")


def test_config_defaults():
    config = GeneratorConfig()
    assert config.max_roads == 8
    assert config.straight_angle_deviation == pytest.approx(math.radians(15))
    assert config.minimum_intersection_deviation == pytest.approx(math.radians(30))
    assert config.default_road_length == 300.0
    assert config.highway_road_length == 400.0
    assert config.normal_branch_time_delay_from_highway == 5
    assert config.max_snap_distance == 50.0


def test_generation_rule_is_abstract():
    with pytest.raises(TypeError):
        GenerationRule(None, 0)


def test_generation_rule_subclass():
    class Always(GenerationRule):
        def accept(self, road, other):
            return True

        def apply(self, road):
            road.has_severed = True
            return True

    context = object()
    rule = Always(context, 3)
    road = RoadSegment(Vector2(0, 0), Vector2(1, 0))
    assert rule.priority == 3
    assert rule.context is context
    assert rule.accept(road, road) is True
    assert rule.apply(road) is True
    assert road.has_severed is True