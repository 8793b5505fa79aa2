import struct

import pytest

from pcstream.mesh import (
    Mesh,
    MeshFormatError,
    clip_polygon,
    clipped_triangle_area,
    polygon_area,
)

SCREEN_SQUARE = [(-1.0, -1.0), (1.0, -1.0), (1.0, 1.0), (-1.0, 1.0)]


def _full_screen_mesh():
    positions = [(-1.0, -1.0, 0.5), (1.0, -1.0, 0.5), (1.0, 1.0, 0.5), (-1.0, 1.0, 0.5)]
    return Mesh(positions=positions, indices=[0, 1, 2, 0, 2, 3])


def test_single_vertex_wire_bytes():
    mesh = Mesh(positions=[(0.0, 0.0, 0.0)], indices=[0])
    expected = (
        b"\x01\x00\x00\x00" + b"\x00" * 12 + b"\x01\x00\x00\x00" + b"\x00\x00\x00\x00"
    )
    assert mesh.to_bytes() == expected


def test_round_trip():
    mesh = Mesh(
        positions=[(0.5, -1.25, 2.0), (3.0, 4.5, -0.75), (1.0, 0.0, 8.0)],
        indices=[0, 1, 2, 2, 1, 0],
    )
    decoded = Mesh.from_bytes(mesh.to_bytes())
    assert decoded == mesh
    assert decoded.num_verts == 3
    assert decoded.num_indices == 6


def test_serial_size_matches_layout():
    mesh = Mesh(positions=[(1.0, 2.0, 3.0)] * 5, indices=list(range(5)))
    data = mesh.to_bytes()
    assert len(data) == 4 + 5 * 12 + 4 + 5 * 4
    assert struct.unpack_from("<I", data, 0)[0] == 5


def test_trailing_bytes_are_ignored():
    mesh = Mesh(positions=[(1.0, 2.0, 3.0)], indices=[0, 0, 0])
    assert Mesh.from_bytes(mesh.to_bytes() + b"extra") == mesh


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"\x01\x00",
        b"\x00\x00\x00\x00",
        b"\x02\x00\x00\x00" + b"\x00" * 12,
        b"\x01\x00\x00\x00" + b"\x00" * 12,
        b"\x01\x00\x00\x00" + b"\x00" * 12 + b"\x00\x00\x00\x00",
        b"\x01\x00\x00\x00" + b"\x00" * 12 + b"\x02\x00\x00\x00" + b"\x00" * 4,
    ],
)
def test_malformed_bytes_are_rejected(data):
    with pytest.raises(MeshFormatError):
        Mesh.from_bytes(data)


def test_empty_mesh_cannot_be_encoded():
    with pytest.raises(MeshFormatError):
        Mesh().to_bytes()
    with pytest.raises(MeshFormatError):
        Mesh(positions=[(0.0, 0.0, 0.0)], indices=[]).to_bytes()


def test_polygon_area_needs_three_points():
    assert polygon_area([(0.0, 0.0), (1.0, 1.0)]) == 0.0


def test_screen_square_area():
    assert polygon_area(SCREEN_SQUARE) == pytest.approx(4.0)


def test_polygon_area_ignores_orientation():
    assert polygon_area(SCREEN_SQUARE[::-1]) == pytest.approx(polygon_area(SCREEN_SQUARE))


def test_clip_keeps_points_inside_bounds():
    triangle = [(-3.0, -0.5), (3.0, -0.5), (0.0, 3.0)]
    for edge in range(4):
        clipped = clip_polygon(triangle, edge)
        axis, bound = [(0, -1.0), (0, 1.0), (1, -1.0), (1, 1.0)][edge]
        for point in clipped:
            if bound < 0:
                assert point[axis] >= bound - 1e-9
            else:
                assert point[axis] <= bound + 1e-9


def test_clip_polygon_of_inside_shape_is_unchanged():
    triangle = [(-0.5, -0.5), (0.5, -0.5), (0.0, 0.5)]
    for edge in range(4):
        assert clip_polygon(triangle, edge) == triangle


def test_clip_polygon_fully_outside_is_empty():
    assert clip_polygon([(2.0, 0.0), (3.0, 0.0), (2.5, 1.0)], 1) == []


def test_clip_polygon_rejects_bad_edge():
    with pytest.raises(ValueError):
        clip_polygon(SCREEN_SQUARE, 4)


def test_clipped_area_of_inside_triangle():
    a, b, c = (-0.5, -0.5), (0.5, -0.5), (0.0, 0.5)
    assert clipped_triangle_area(a, b, c) == pytest.approx(polygon_area([a, b, c]))


def test_clipped_area_bounded_by_screen():
    area = clipped_triangle_area((-10.0, -10.0), (10.0, -10.0), (0.0, 10.0))
    assert area <= 4.0 + 1e-9
    assert area > 0


def test_clipped_area_partly_outside():
    assert clipped_triangle_area((0.0, 0.0), (2.0, 0.0), (0.0, 2.0)) == pytest.approx(1.0)


def test_full_screen_ratio():
    mesh = _full_screen_mesh()
    assert mesh.screen_ratio_from_ndc(mesh.positions) == pytest.approx(1.0)


def test_back_facing_triangles_do_not_count():
    mesh = _full_screen_mesh()
    mesh.indices = [0, 2, 1, 0, 3, 2]
    assert mesh.screen_ratio_from_ndc(mesh.positions) == 0.0


def test_triangles_outside_depth_range_do_not_count():
    mesh = _full_screen_mesh()
    ndcs = [(x, y, 1.5) for x, y, _ in mesh.positions]
    assert mesh.screen_ratio_from_ndc(ndcs) == 0.0


def test_screen_ratio_requires_one_point_per_vertex():
    mesh = _full_screen_mesh()
    with pytest.raises(ValueError):
        mesh.screen_ratio_from_ndc(mesh.positions[:2])