"""Отсечение нелицевых граней, сортировка по глубине и отрисовка кадра.

Порядок кадра:
1) очистить поверхность фоновым цветом
2) перевести все вершины в систему камеры (поворот, затем перенос по Z)
3) для каждой грани из ≥3 вершин вычислить нормаль и центр, отбросить
   нелицевые, запомнить среднюю глубину и экранные точки
4) отсортировать грани от дальних к ближним (алгоритм художника)
5) для каждой грани: заливка фоном (перекрытие), затем контур

Z-буфера нет: пересекающиеся и невыпуклые грани могут упорядочиться
неверно. Нормаль зависит от порядка обхода вершин, поэтому грани с
обходом «не в ту сторону» отсекаются ошибочно; это ожидаемо.
"""
import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence, Tuple

import numpy as np

from config import FOREGROUND, RenderConfig
from geometry import Mesh, cross, dot, project, subtract, to_screen, transform_vertices

logger = logging.getLogger("wireframe.painter")

Point2 = Tuple[float, float]


class Surface(Protocol):
    """Поверхность рисования, на которую выводится кадр."""
    width: int
    height: int

    def clear(self, color: str) -> None: ...
    def fill_polygon(self, points: Sequence[Point2], color: str) -> None: ...
    def line(self, p1: Point2, p2: Point2, color: str, width: int) -> None: ...


@dataclass
class FaceRecord:
    """Грань, прошедшая отсечение, в рамках одного кадра."""
    depth: float
    screen_points: List[Point2]
    face: Tuple[int, ...]
    normal: np.ndarray


# --------------------
# Видимость и затенение
# --------------------

def face_normal(face_vertices):
    """Нормаль по первым трём вершинам: (v1 - v0) × (v2 - v0)."""
    v0, v1, v2 = face_vertices[0], face_vertices[1], face_vertices[2]
    return cross(subtract(v1, v0), subtract(v2, v0))

def face_center(face_vertices):
    return np.mean(np.asarray(face_vertices, dtype=float), axis=0)

def face_depth(face_vertices):
    """Средняя глубина грани (z в системе камеры, до проекции)."""
    return float(np.mean(np.asarray(face_vertices, dtype=float)[:, 2]))

def is_front_facing(normal, center):
    """Грань лицевая, если нормаль смотрит на камеру в начале координат.

    Вектор обзора направлен от центра грани к камере: -center.
    Перпендикулярные грани (скалярное произведение 0) считаются нелицевыми.
    """
    return bool(dot(normal, -np.asarray(center, dtype=float)) > 0)

def shade_color(normal, default=FOREGROUND):
    """Цвет грани по её ориентации относительно оси Z.

    Интенсивность |n_z| / |n| отображается в зелёный канал 0x30..0xFF,
    красный и синий фиксированы на 0x20. Для нулевой нормали - default.
    """
    length = float(np.linalg.norm(normal))
    if length == 0:
        return default
    intensity = abs(float(normal[2])) / length
    green = int(np.floor(0x30 + intensity * 0xCF))
    return f"#20{green:02x}20"


# --------------------
# Построение и сортировка граней
# --------------------

def build_face_records(mesh: Mesh, angle, width, height, depth_offset, cull=True):
    """Преобразует вершины и строит записи граней кадра (без сортировки)."""
    transformed = transform_vertices(mesh.vertices, angle, depth_offset)
    records = []
    for face in mesh.faces:
        if len(face) < 3:
            continue  # рёбра и точки не являются многоугольниками
        face_vertices = transformed[list(face)]
        normal = face_normal(face_vertices)
        if cull and not is_front_facing(normal, face_center(face_vertices)):
            continue
        screen = to_screen(project(face_vertices), width, height)
        records.append(FaceRecord(
            depth=face_depth(face_vertices),
            screen_points=[(float(x), float(y)) for x, y in screen],
            face=face,
            normal=normal,
        ))
    return records

def sort_faces(records):
    """Алгоритм художника: дальние грани (большая глубина) идут первыми.

    Сортировка устойчивая: грани с равной глубиной сохраняют исходный порядок.
    """
    return sorted(records, key=lambda r: r.depth, reverse=True)


# --------------------
# Отрисовка
# --------------------

def draw_faces(records, surface: Surface, config: RenderConfig):
    """Рисует отсортированные грани в два прохода на каждую грань."""
    for record in records:
        pts = record.screen_points

        # Проход 1: заливка перекрывает контуры уже нарисованных дальних граней
        if config.shade_faces:
            surface.fill_polygon(pts, shade_color(record.normal, config.foreground))
        elif config.enable_occlusion:
            surface.fill_polygon(pts, config.background)

        # Проход 2: контур, включая замыкающее ребро
        for i in range(len(pts)):
            surface.line(pts[i], pts[(i + 1) % len(pts)], config.foreground, config.line_width)

def draw_vertices(mesh: Mesh, angle, surface: Surface, config: RenderConfig):
    """Маркеры вершин: квадраты со стороной point_size."""
    transformed = transform_vertices(mesh.vertices, angle, config.depth_offset)
    s = config.point_size / 2
    for x, y in to_screen(project(transformed), surface.width, surface.height):
        surface.fill_polygon(
            [(x - s, y - s), (x + s, y - s), (x + s, y + s), (x - s, y + s)],
            config.foreground,
        )

def render_frame(mesh: Mesh, angle, surface: Surface, config: RenderConfig):
    """Один полный проход конвейера для текущего угла поворота."""
    surface.clear(config.background)
    records = build_face_records(
        mesh, angle, surface.width, surface.height,
        config.depth_offset, cull=config.enable_culling,
    )
    records = sort_faces(records)
    draw_faces(records, surface, config)
    if config.show_vertices:
        draw_vertices(mesh, angle, surface, config)
    logger.debug("угол %.3f: нарисовано граней %d из %d", angle, len(records), len(mesh.faces))
    return records
