"""Population density map built from Perlin noise."""

from __future__ import annotations

import math
import os
import struct
import zlib
from typing import Optional, Sequence, Tuple, Union

from .geometry import Vector2

_PERMUTATION = (
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
    140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148,
    247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32,
    57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175,
    74, 165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
    60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
    65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
    200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64,
    52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212,
    207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213,
    119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9,
    129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104,
    218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241,
    81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157,
    184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93,
    222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
)
_P = _PERMUTATION * 2


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _grad(hash_: int, x: float, y: float, z: float) -> float:
    h = hash_ & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h in (12, 14):
        v = x
    else:
        v = z
    return (u if h & 1 == 0 else -u) + (v if h & 2 == 0 else -v)


def _lerp(t: float, a: float, b: float) -> float:
    return a + t * (b - a)


def perlin(x: float, y: float, z: float) -> float:
    """Return 3D gradient noise at (x, y, z), roughly within [-1, 1]."""
    fx, fy, fz = math.floor(x), math.floor(y), math.floor(z)
    xi, yi, zi = int(fx) & 255, int(fy) & 255, int(fz) & 255
    x -= fx
    y -= fy
    z -= fz
    u, v, w = _fade(x), _fade(y), _fade(z)

    a = _P[xi] + yi
    aa = _P[a] + zi
    ab = _P[a + 1] + zi
    b = _P[xi + 1] + yi
    ba = _P[b] + zi
    bb = _P[b + 1] + zi

    return _lerp(
        w,
        _lerp(v,
              _lerp(u, _grad(_P[aa], x, y, z), _grad(_P[ba], x - 1, y, z)),
              _lerp(u, _grad(_P[ab], x, y - 1, z), _grad(_P[bb], x - 1, y - 1, z))),
        _lerp(v,
              _lerp(u, _grad(_P[aa + 1], x, y, z - 1),
                    _grad(_P[ba + 1], x - 1, y, z - 1)),
              _lerp(u, _grad(_P[ab + 1], x, y - 1, z - 1),
                    _grad(_P[bb + 1], x - 1, y - 1, z - 1))),
    )


def _brightness(x: float, y: float) -> int:
    dt = 1.0
    noise = (perlin(x / 64.0, y / 64.0, dt * 0.25) * 1.0
             + perlin(x / 32.0, y / 32.0, dt * 0.75) * 0.5) / 1.5
    value = int((noise * 0.5 + 0.5) * 255.0)
    return min(max(value, 0), 255)


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


class HeatMap:
    """Grayscale map of population density covering a world centred on the origin."""

    def __init__(self) -> None:
        self._world: Optional[Vector2] = None
        self._width = 0
        self._height = 0
        self._pixels = bytearray()
        self.scaling: Tuple[float, float] = (0.0, 0.0)

    @property
    def map_dimension(self) -> Tuple[int, int]:
        """Width and height of the map in pixels."""
        return self._width, self._height

    def generate(self, world_dimension: Vector2,
                 map_dimension: Sequence[int]) -> None:
        """Fill a map of map_dimension pixels covering world_dimension meters."""
        width, height = (int(v) for v in map_dimension)
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid map dimension {width}x{height}")
        if world_dimension.x <= 0.0 or world_dimension.y <= 0.0:
            raise ValueError(f"invalid world dimension {world_dimension}")
        self._world = world_dimension
        self._width, self._height = width, height
        self.scaling = (world_dimension.x / width, world_dimension.y / height)
        self._pixels = bytearray(
            _brightness(float(u), float(v))
            for v in range(height) for u in range(width))

    def _require_map(self) -> Vector2:
        if self._world is None:
            raise RuntimeError("heat map has not been generated")
        return self._world

    def save(self, path: Union[str, os.PathLike]) -> None:
        """Write the map as an 8-bit grayscale PNG file."""
        self._require_map()
        rows = b"".join(
            b"\x00" + bytes(self._pixels[v * self._width:(v + 1) * self._width])
            for v in range(self._height))
        header = struct.pack(">IIBBBBB", self._width, self._height, 8, 0, 0, 0, 0)
        data = (b"\x89PNG\r\n\x1a\n"
                + _png_chunk(b"IHDR", header)
                + _png_chunk(b"IDAT", zlib.compress(rows))
                + _png_chunk(b"IEND", b""))
        with open(path, "wb") as stream:
            stream.write(data)

    def get(self, point: Vector2) -> float:
        """Return the density (0..255) at a world position.

        Raises IndexError when the position lies outside the world.
        """
        world = self._require_map()
        fx = (point.x + world.x / 2.0) * self._width / world.x
        fy = (point.y + world.y / 2.0) * self._height / world.y
        if not (0.0 <= fx < self._width and 0.0 <= fy < self._height):
            raise IndexError(f"position {point} is outside the heat map")
        u, v = int(fx), int(fy)
        return float(self._pixels[v * self._width + u])