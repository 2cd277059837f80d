import warnings

import numpy as np
import pytest

from config import RenderConfig
from geometry import Mesh, hexahedron
from painter import (
    FaceRecord, build_face_records, draw_faces, face_center, face_depth,
    face_normal, is_front_facing, render_frame, shade_color, sort_faces,
)

TRIANGLE = Mesh([(-1, -1, 5), (1, -1, 5), (0, 1, 5)], [[0, 1, 2]])

# Квадрат в плоскости z = 0, нормаль направлена на камеру (-Z)
FACING_QUAD = Mesh([(-1, -1, 0), (-1, 1, 0), (1, 1, 0), (1, -1, 0)], [[0, 1, 2, 3]])


def record(depth, tag):
    return FaceRecord(depth=depth, screen_points=[(0, 0), (1, 0), (0, 1)],
                      face=(tag,), normal=np.zeros(3))


def test_face_normal_uses_first_three_vertices():
    verts = np.array([(0, 0, 0), (1, 0, 0), (0, 1, 0), (5, 5, 5)], dtype=float)
    np.testing.assert_allclose(face_normal(verts), [0, 0, 1])
    np.testing.assert_allclose(face_normal(verts[[0, 2, 1]]), [0, 0, -1])


def test_face_center_and_depth():
    verts = np.array([(0, 0, 2), (2, 0, 4), (1, 3, 6)], dtype=float)
    np.testing.assert_allclose(face_center(verts), [1, 1, 4])
    assert face_depth(verts) == pytest.approx(4.0)


def test_front_facing_is_strict():
    center = (0, 0, 5)
    assert is_front_facing((0, 0, -1), center)
    assert not is_front_facing((0, 0, 1), center)
    # Перпендикулярно вектору обзора - нелицевая
    assert not is_front_facing((1, 0, 0), center)


@pytest.mark.parametrize("angle, visible", [
    (0.0, True),
    (0.5, True),
    (-1.0, True),
    (1.5, True),
    (1.65, False),
    (np.pi, False),
    (-2.0, False),
])
def test_front_facing_follows_rotation(angle, visible):
    records = build_face_records(FACING_QUAD, angle, 800, 800, depth_offset=5.0, cull=True)
    assert (len(records) == 1) is visible


def test_shade_color():
    assert shade_color((0, 0, -3)) == "#20ff20"
    assert shade_color((1, 0, 0)) == "#203020"
    assert shade_color((0, 0, 0)) == "#50FF50"
    assert shade_color((0, 0, 0), default="#123456") == "#123456"


def test_single_triangle_scenario():
    records = build_face_records(TRIANGLE, 0.0, 800, 800, depth_offset=0.0, cull=False)
    assert len(records) == 1
    rec = records[0]
    assert rec.depth == pytest.approx(5.0)
    np.testing.assert_allclose(rec.screen_points, [(320, 480), (480, 480), (400, 320)])
    for x, y in rec.screen_points:
        assert 0 <= x <= 800 and 0 <= y <= 800


def test_centered_cube_shows_only_near_face():
    records = build_face_records(hexahedron(), 0.0, 800, 800, depth_offset=5.0, cull=True)
    assert [r.face for r in records] == [(0, 3, 2, 1)]


def test_offset_cube_shows_three_faces():
    cube = hexahedron()
    mesh = Mesh(cube.vertices + (2.0, 2.0, 0.0), cube.faces)
    records = build_face_records(mesh, 0.0, 800, 800, depth_offset=5.0, cull=True)
    # Грани z = -1, y = -1, x = -1 обращены к камере
    assert [r.face for r in records] == [(0, 3, 2, 1), (0, 1, 5, 4), (0, 4, 7, 3)]


def test_culling_disabled_keeps_all_faces():
    records = build_face_records(hexahedron(), 0.7, 800, 800, depth_offset=5.0, cull=False)
    assert len(records) == 6


def test_reversed_winding_is_culled():
    flipped = Mesh(FACING_QUAD.vertices, [[3, 2, 1, 0]])
    assert build_face_records(flipped, 0.0, 800, 800, depth_offset=5.0, cull=True) == []


def test_edges_are_skipped():
    mesh = Mesh(
        [(-1, -1, 5), (1, -1, 5), (0, 1, 5), (0, 0, 6)],
        [[0, 1, 2], [0, 3], [1, 3, 2]],
    )
    records = build_face_records(mesh, 0.0, 800, 800, depth_offset=0.0, cull=False)
    assert [r.face for r in records] == [(0, 1, 2), (1, 3, 2)]


def test_sort_is_far_to_near_and_stable():
    records = [record(2.0, 'a'), record(5.0, 'b'), record(2.0, 'c'), record(7.0, 'd')]
    assert [r.face for r in sort_faces(records)] == [('d',), ('b',), ('a',), ('c',)]


def test_draw_fills_then_strokes_closed_outline(surface):
    config = RenderConfig()
    rec = FaceRecord(depth=1.0, screen_points=[(0, 0), (10, 0), (10, 10), (0, 10)],
                     face=(0, 1, 2, 3), normal=np.array([0.0, 0.0, -1.0]))
    draw_faces([rec], surface, config)
    assert surface.kinds() == ['fill', 'line', 'line', 'line', 'line']
    assert surface.calls[0][2] == config.background
    assert surface.calls[-1][1:3] == ((0, 10), (0, 0))
    assert all(c[3:] == (config.foreground, config.line_width) for c in surface.calls[1:])


def test_draw_without_occlusion_only_strokes(surface):
    config = RenderConfig(enable_occlusion=False)
    draw_faces([record(1.0, 'a')], surface, config)
    assert surface.kinds() == ['line', 'line', 'line']


def test_shaded_fill_uses_orientation_color(surface):
    config = RenderConfig(shade_faces=True)
    rec = FaceRecord(depth=1.0, screen_points=[(0, 0), (1, 0), (0, 1)],
                     face=(0, 1, 2), normal=np.array([0.0, 0.0, -2.0]))
    draw_faces([rec], surface, config)
    assert surface.calls[0] == ('fill', [(0, 0), (1, 0), (0, 1)], "#20ff20")


def test_render_frame_order(surface):
    config = RenderConfig(depth_offset=5.0, enable_culling=False)
    records = render_frame(hexahedron(), 0.3, surface, config)
    assert surface.calls[0] == ('clear', config.background)
    assert len(records) == 6
    depths = [r.depth for r in records]
    assert depths == sorted(depths, reverse=True)
    # Каждая грань: одна заливка и четыре ребра
    assert surface.kinds()[1:] == (['fill'] + ['line'] * 4) * 6


def test_render_frame_draws_farthest_first(surface):
    mesh = Mesh(
        [(-1, -1, 2), (1, -1, 2), (0, 1, 2), (-1, -1, 8), (1, -1, 8), (0, 1, 8)],
        [[0, 1, 2], [3, 4, 5]],
    )
    config = RenderConfig(depth_offset=0.0, enable_culling=False)
    records = render_frame(mesh, 0.0, surface, config)
    assert [r.face for r in records] == [(3, 4, 5), (0, 1, 2)]


def test_render_frame_vertex_markers(surface):
    config = RenderConfig(depth_offset=5.0, show_vertices=True, point_size=20)
    render_frame(hexahedron(), 0.0, surface, config)
    markers = [c for c in surface.calls if c[0] == 'fill' and c[2] == config.foreground]
    assert len(markers) == 8
    xs = [p[0] for p in markers[0][1]]
    assert max(xs) - min(xs) == pytest.approx(20)


def test_vertex_on_camera_plane_renders_without_error(surface):
    mesh = Mesh([(1, 1, 1), (1, 0, 0), (0, 1, 1)], [[0, 1, 2]])
    config = RenderConfig(depth_offset=0.0, enable_culling=False, shade_faces=True)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        records = render_frame(mesh, 0.0, surface, config)
    assert len(records) == 1
    assert records[0].screen_points[0] == (800.0, 0.0)
    assert not np.isfinite(records[0].screen_points[1]).all()
