import struct
import zlib

import pytest

from citygen.geometry import Vector2
from citygen.heatmap import HeatMap, perlin


def _read_png(path):
    data = path.read_bytes()
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    pos = 8
    chunks = {}
    while pos < len(data):
        (length,) = struct.unpack(">I", data[pos:pos + 4])
        kind = data[pos + 4:pos + 8]
        chunks.setdefault(kind, b"")
        chunks[kind] += data[pos + 8:pos + 8 + length]
        pos += 12 + length
    width, height, depth, color = struct.unpack(">IIBB", chunks[b"IHDR"][:10])
    raw = zlib.decompress(chunks[b"IDAT"])
    stride = width + 1
    rows = [raw[v * stride + 1:(v + 1) * stride] for v in range(height)]
    return width, height, depth, color, rows


@pytest.fixture
def heatmap():
    hm = HeatMap()
    hm.generate(Vector2(80.0, 40.0), (8, 4))
    return hm


@pytest.mark.parametrize("point", [(0, 0, 0), (1, 2, 3), (-4, 7, 1), (10, -3, -2)])
def test_perlin_is_zero_on_lattice(point):
    assert perlin(*point) == 0.0


def test_perlin_bounded_and_deterministic():
    samples = [(x * 0.37, y * 0.53, 0.25) for x in range(-20, 20) for y in range(-10, 10)]
    values = [perlin(*s) for s in samples]
    assert all(-1.1 <= v <= 1.1 for v in values)
    assert values == [perlin(*s) for s in samples]
    assert len(set(values)) > 10


def test_map_dimension_and_scaling(heatmap):
    assert heatmap.map_dimension == (8, 4)
    assert heatmap.scaling == (10.0, 10.0)


def test_get_values_in_byte_range(heatmap):
    for x in range(-40, 40, 5):
        for y in range(-20, 20, 5):
            value = heatmap.get(Vector2(float(x), float(y)))
            assert 0.0 <= value <= 255.0
            assert value == int(value)


def test_get_same_pixel_same_value(heatmap):
    assert heatmap.get(Vector2(-40.0, -20.0)) == heatmap.get(Vector2(-31.0, -11.0))


@pytest.mark.parametrize("point", [Vector2(40.0, 0.0), Vector2(0.0, 20.0),
                                   Vector2(-41.0, 0.0), Vector2(0.0, -25.0)])
def test_get_outside_raises(heatmap, point):
    with pytest.raises(IndexError):
        heatmap.get(point)


def test_get_before_generate_raises():
    with pytest.raises(RuntimeError):
        HeatMap().get(Vector2(0.0, 0.0))


def test_save_before_generate_raises(tmp_path):
    with pytest.raises(RuntimeError):
        HeatMap().save(tmp_path / "map.png")


def test_invalid_dimension_raises():
    with pytest.raises(ValueError):
        HeatMap().generate(Vector2(10.0, 10.0), (0, 4))


def test_save_round_trip(heatmap, tmp_path):
    path = tmp_path / "heatmap.png"
    heatmap.save(path)
    width, height, depth, color, rows = _read_png(path)
    assert (width, height, depth, color) == (8, 4, 8, 0)
    for v in range(height):
        for u in range(width):
            point = Vector2(-40.0 + (u + 0.5) * 10.0, -20.0 + (v + 0.5) * 10.0)
            assert rows[v][u] == heatmap.get(point)


def test_generate_is_reproducible():
    first, second = HeatMap(), HeatMap()
    first.generate(Vector2(100.0, 100.0), (16, 16))
    second.generate(Vector2(100.0, 100.0), (16, 16))
    points = [Vector2(x, y) for x in (-45.0, 0.0, 30.0) for y in (-45.0, 10.0, 49.0)]
    assert [first.get(p) for p in points] == [second.get(p) for p in points]