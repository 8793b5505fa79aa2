"""Triangle meshes: a compact binary form and the screen area they cover."""

from __future__ import annotations

import struct
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

Point2 = tuple[float, float]
Point3 = tuple[float, float, float]

_U32 = struct.Struct("<I")

# Clip edges of the NDC square: (axis, bound) for left, right, bottom, top.
_EDGES = ((0, -1.0), (0, 1.0), (1, -1.0), (1, 1.0))

# The visible screen in normalised device coordinates is a 2 x 2 square.
_SCREEN_AREA = 4.0


class MeshFormatError(ValueError):
    """Raised when a mesh cannot be encoded or decoded."""


@dataclass
class Mesh:
    """Vertex positions and triangle indices.

    The binary form is a little-endian ``uint32`` vertex count, three
    ``float32`` coordinates per vertex, a ``uint32`` index count and the
    ``uint32`` indices.
    """

    positions: list[Point3] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)

    @property
    def num_verts(self) -> int:
        return len(self.positions)

    @property
    def num_indices(self) -> int:
        return len(self.indices)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> Mesh:
        """Decode a mesh from its binary form; trailing bytes are ignored."""
        buf = bytes(data)
        offset = 0

        if len(buf) - offset < _U32.size:
            raise MeshFormatError("missing vertex count")
        (num_verts,) = _U32.unpack_from(buf, offset)
        offset += _U32.size
        if num_verts == 0:
            raise MeshFormatError("mesh has no vertices")

        pos_size = num_verts * 3 * 4
        if len(buf) - offset < pos_size:
            raise MeshFormatError("truncated vertex positions")
        coords = struct.unpack_from(f"<{num_verts * 3}f", buf, offset)
        offset += pos_size
        positions = list(zip(coords[0::3], coords[1::3], coords[2::3]))

        if len(buf) - offset < _U32.size:
            raise MeshFormatError("missing index count")
        (num_indices,) = _U32.unpack_from(buf, offset)
        offset += _U32.size
        if num_indices == 0:
            raise MeshFormatError("mesh has no indices")

        if len(buf) - offset < num_indices * 4:
            raise MeshFormatError("truncated index array")
        indices = list(struct.unpack_from(f"<{num_indices}I", buf, offset))

        return cls(positions=positions, indices=indices)

    def to_bytes(self) -> bytes:
        """Encode the mesh in its binary form."""
        if not self.positions or not self.indices:
            raise MeshFormatError("an empty mesh cannot be encoded")
        if any(len(point) != 3 for point in self.positions):
            raise MeshFormatError("every position needs three coordinates")
        flat = [coord for point in self.positions for coord in point]
        try:
            return b"".join(
                (
                    _U32.pack(len(self.positions)),
                    struct.pack(f"<{len(flat)}f", *flat),
                    _U32.pack(len(self.indices)),
                    struct.pack(f"<{len(self.indices)}I", *self.indices),
                )
            )
        except struct.error as exc:
            raise MeshFormatError(str(exc)) from exc

    def screen_ratio_from_ndc(self, ndcs: Iterable[Sequence[float]]) -> float:
        """Fraction of the screen covered by front-facing visible triangles.

        ``ndcs`` holds each vertex already projected to normalised device
        coordinates.  A triangle counts only if all its depths lie in
        ``[0, 1]`` and it winds counter-clockwise on screen; its area is
        clipped to the screen square.  Overlapping triangles add up.
        """
        projected = [tuple(point) for point in ndcs]
        if len(projected) != len(self.positions):
            raise ValueError("one projected point is needed per vertex")
        total = 0.0
        for i0, i1, i2 in zip(*[iter(self.indices)] * 3):
            corners = (projected[i0], projected[i1], projected[i2])
            if not all(0 <= point[2] <= 1 for point in corners):
                continue
            a, b, c = ((point[0], point[1]) for point in corners)
            if _faces_viewer(a, b, c):
                total += clipped_triangle_area(a, b, c)
        return total / _SCREEN_AREA


def _faces_viewer(a: Point2, b: Point2, c: Point2) -> bool:
    return (b[0] - a[0]) * (c[1] - a[1]) > (c[0] - a[0]) * (b[1] - a[1])


def polygon_area(points: Sequence[Point2]) -> float:
    """Area of a simple polygon; zero for fewer than three points."""
    if len(points) < 3:
        return 0.0
    pts = list(points)
    doubled = sum(
        p[0] * q[1] - q[0] * p[1] for p, q in zip(pts, pts[1:] + pts[:1])
    )
    return 0.5 * abs(doubled)


def _inside(point: Point2, edge: int) -> bool:
    axis, bound = _EDGES[edge]
    return point[axis] >= bound if bound < 0 else point[axis] <= bound


def _intersection(p: Point2, q: Point2, edge: int) -> Point2:
    axis, bound = _EDGES[edge]
    other = 1 - axis
    t = (bound - p[axis]) / (q[axis] - p[axis])
    crossing = p[other] + t * (q[other] - p[other])
    return (bound, crossing) if axis == 0 else (crossing, bound)


def clip_polygon(points: Sequence[Point2], edge: int) -> list[Point2]:
    """Clip a polygon against one edge of the NDC square.

    Edges are numbered 0 (x = -1), 1 (x = 1), 2 (y = -1) and 3 (y = 1).
    """
    if edge not in range(len(_EDGES)):
        raise ValueError(f"edge must be between 0 and {len(_EDGES) - 1}")
    if not points:
        return []
    clipped: list[Point2] = []
    prev = points[-1]
    prev_inside = _inside(prev, edge)
    for curr in points:
        curr_inside = _inside(curr, edge)
        if curr_inside:
            if not prev_inside:
                clipped.append(_intersection(prev, curr, edge))
            clipped.append(curr)
        elif prev_inside:
            clipped.append(_intersection(prev, curr, edge))
        prev, prev_inside = curr, curr_inside
    return clipped


def clipped_triangle_area(a: Point2, b: Point2, c: Point2) -> float:
    """Area of the part of triangle ``abc`` inside the NDC square."""
    polygon: list[Point2] = [a, b, c]
    for edge in range(len(_EDGES)):
        polygon = clip_polygon(polygon, edge)
    return polygon_area(polygon)