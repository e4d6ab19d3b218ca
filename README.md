# citygen

Building blocks for laying out a city for a driving simulation: planar
geometry, road graphs, roads with lanes, parking slots, and a procedural
road network generator. Pure Python, no dependencies.

## Modules

- `citygen.geometry`: an immutable `Vector2` (metres) with `+`, `-`,
  scalar `*` and `/`, `dot`, `cross` and `norm`, plus the functions
  `distance`, `distance2`, `orientation`, `normal`, `heading` (rotation by
  an angle in radians), `lerp`, `wrap_angle`, `is_equal_approx`,
  `intersect` (segment intersection, or `None`), `project` and `aligned`.
- `citygen.network`: an undirected graph. A `Path` holds `Node`s and the
  `Way`s joining them. `Path.split_way(way, offset)` cuts a way at a
  fraction of its length and returns the new node. An offset of 0 or less
  returns the way's start node, and 1 or more returns its end node.
  `Node.way_to(other)` finds the way between two nodes. `Way.magnitude`
  is the way's length.
- `citygen.road`: a `Road` built from two centre points, a lane width and a
  number of lanes per `TrafficSide` (`RIGHT_HAND`, `LEFT_HAND`).
  Right-hand lanes run from the first point to the second, and left-hand
  lanes run the other way. `Road.offset(side, lane, x, y)` returns the
  world position at fractions `x` along and `y` across a lane. A lane
  index out of range raises `IndexError`.
- `citygen.parking`: `Parking` slots described by a `ParkingBluePrint`
  (length, width, angle in degrees). The slot's `ParkingType` follows from
  the angle: 0, 45, 60, 75 or 90 degrees. Any other angle raises
  `ValueError`. A slot holds at most one car:
  - `occupy` raises `ValueError` if the slot is already taken.
  - `release` frees the slot.
  - `car()` raises `LookupError` on an empty slot.
  - `delta()` and `next_to()` place the following slot in a row.
- `citygen.roadgraph`: `RoadSegment` (a segment with `backwards` and
  `forwards` links), a `PriorityQueue` that pops the lowest priority value
  first (first pushed wins ties), `GeneratorConfig`, and the abstract
  `GenerationRule`.
- `citygen.rules`: the local rules `DummyRule`, `RadiusIntersectionRule`,
  `SnapToCrossingRule` and `IntersectingRoadsRule`.
- `citygen.heatmap`: 3D `perlin` noise and a grayscale population
  `HeatMap`:
  - `generate` fills the map.
  - `get` returns a density in 0..255 at a world position, with the world
    centred on the origin. It raises `IndexError` outside the map.
  - `save` writes an 8-bit PNG.
- `citygen.generator`: `CityGenerator` grows segments from two opposite
  initial highways. It checks each pending segment against the accepted
  ones with the rules, then proposes continuations and branches. It stops
  when nothing is pending or after `config.max_roads` segments have been
  accepted.

## Installation

```
pip install .
```

Install with the test extra to run the tests:

```
pip install .[test]
pytest
```

## Example

```python
import random

from citygen.geometry import Vector2
from citygen.network import Path
from citygen.road import Road, TrafficSide
from citygen.parking import Parking, ParkingBluePrint
from citygen.generator import CityGenerator

# A small graph
path = Path()
a = path.add_node(Vector2(0.0, 0.0))
b = path.add_node(Vector2(10.0, 0.0))
way = path.add_way(a, b)
middle = path.split_way(way, 0.5)     # new node at (5, 0)

# A road with one lane on each side
road = Road([Vector2(0.0, 0.0), Vector2(100.0, 0.0)], 3.0,
            {TrafficSide.RIGHT_HAND: 1, TrafficSide.LEFT_HAND: 1})
spot = road.offset(TrafficSide.RIGHT_HAND, 0, 0.5, 0.5)

# A row of parallel parking slots
first = Parking(ParkingBluePrint(5.0, 2.0, 0.0), Vector2(0.0, 0.0), 0.0)
second = first.next_to()

# Procedural roads, reproducible with a seeded generator
generator = CityGenerator(rng=random.Random(42), map_dimension=(128, 128))
generator.config.max_roads = 8
for segment in generator.generate(Vector2(2000.0, 2000.0),
                                  heatmap_path="heatmap.png"):
    print(segment)
```

`CityGenerator.generate` returns the accepted segments in the order they
were accepted. Every proposed segment, accepted or not, is in
`generator.branches`. The generator logs its progress at debug level
through the standard `logging` module.

## What it does not do

- It does not draw anything. Colours on lanes and slots are plain RGB
  tuples for a renderer to use.
- It has no vehicle model. The cars held by a parking slot are any
  objects, and `Parking.occupy` only records them; it does not move them.
- There is no command-line program.