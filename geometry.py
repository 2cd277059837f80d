import logging

import numpy as np

logger = logging.getLogger("wireframe.geometry")


# =========================================================================
# 1. Векторная алгебра
# =========================================================================
# Все функции работают как с одним вектором формы (3,), так и с массивом
# векторов формы (N, 3): операции идут по последней оси.

def subtract(a, b):
    """Разность векторов a - b."""
    return np.asarray(a, dtype=float) - np.asarray(b, dtype=float)

def cross(a, b):
    """Векторное произведение a × b (правая тройка)."""
    return np.cross(np.asarray(a, dtype=float), np.asarray(b, dtype=float))

def dot(a, b):
    """Скалярное произведение a · b."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return np.sum(a * b, axis=-1)


# =========================================================================
# 2. Преобразования вершин
# =========================================================================

def rotate_xz(points, angle):
    """Поворот вокруг вертикальной оси Y на угол angle (в радианах).

    x' = x·cos − z·sin, z' = x·sin + z·cos, y не меняется.
    """
    p = np.asarray(points, dtype=float)
    c, s = np.cos(angle), np.sin(angle)
    out = p.copy()
    out[..., 0] = p[..., 0] * c - p[..., 2] * s
    out[..., 2] = p[..., 0] * s + p[..., 2] * c
    return out

def translate_z(points, dz):
    """Перенос вдоль оси глубины Z."""
    out = np.array(points, dtype=float)
    out[..., 2] += dz
    return out

def transform_vertices(vertices, angle, dz):
    """Переводит вершины модели в систему камеры: сначала поворот, затем перенос."""
    return translate_z(rotate_xz(vertices, angle), dz)


# =========================================================================
# 3. Проекция
# =========================================================================

def project(points):
    """Перспективное деление: (x, y, z) -> (x/z, y/z).

    При z == 0 результат бесконечен; держать z > 0 обязан вызывающий код
    (через достаточный перенос по глубине).
    """
    p = np.asarray(points, dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        return p[..., :2] / p[..., 2:3]

def to_screen(points, width, height):
    """Перевод нормализованных координат [-1, 1] в пиксели поверхности.

    Ось Y переворачивается: вверх в NDC означает вниз на экране.
    """
    p = np.asarray(points, dtype=float)
    out = np.empty_like(p)
    out[..., 0] = (p[..., 0] + 1) / 2 * width
    out[..., 1] = (1 - (p[..., 1] + 1) / 2) * height
    return out


# =========================================================================
# 4. Модель
# =========================================================================

class Mesh:
    """Полигональная модель: массив вершин (N, 3) и список граней.

    Грань - кортеж индексов вершин. Записи длиной меньше 3 (рёбра из
    OBJ-строк `l`) хранятся, но при рендеринге пропускаются. Порядок
    обхода граней не нормализуется.
    """

    def __init__(self, vertices, faces):
        V = np.asarray(vertices, dtype=float)
        if V.size == 0:
            V = V.reshape(0, 3)
        if V.ndim != 2 or V.shape[1] != 3:
            raise ValueError(f"Ожидался массив вершин формы (N, 3), получено {V.shape}")
        self.vertices = V
        self.faces = [tuple(int(i) for i in f) for f in faces]
        n = len(self.vertices)
        for f in self.faces:
            for i in f:
                if not 0 <= i < n:
                    raise ValueError(f"Индекс вершины {i} вне диапазона 0..{n - 1}")

    def __repr__(self):
        return f"Mesh(vertices={len(self.vertices)}, faces={len(self.faces)})"

    def polygons(self):
        """Грани, пригодные для рендеринга (не меньше трёх вершин)."""
        return [f for f in self.faces if len(f) >= 3]

    def center(self):
        """Центр модели (среднее вершин)."""
        if len(self.vertices) == 0:
            return np.zeros(3)
        return np.mean(self.vertices, axis=0)

    def radius(self):
        """Наибольшее расстояние вершины от начала координат модели."""
        if len(self.vertices) == 0:
            return 0.0
        return float(np.max(np.linalg.norm(self.vertices, axis=1)))

    def fit(self, radius):
        """Копия модели, отцентрированная и вписанная в сферу заданного радиуса.

        Исходная модель не меняется.
        """
        V = self.vertices - self.center()
        if len(V):
            r = float(np.max(np.linalg.norm(V, axis=1)))
            if r > 0:
                V = V * (radius / r)
        return Mesh(V, self.faces)

    def clears_camera(self, depth_offset):
        """Проверяет, что после переноса на depth_offset все вершины останутся при z > 0.

        Поворот вокруг Y сохраняет расстояние до начала координат, поэтому
        достаточно сравнить радиус модели с переносом.
        """
        if self.radius() < depth_offset:
            return True
        logger.warning(
            "Радиус модели %.3f не меньше переноса по глубине %.3f: "
            "вершины могут попасть в плоскость z = 0",
            self.radius(), depth_offset,
        )
        return False


# =========================================================================
# 5. OBJ файл
# =========================================================================

def _obj_index(token, count):
    """Индекс вершины из токена OBJ (`v`, `v/vt`, `v//vn`, `v/vt/vn`)."""
    idx = int(token.split('/')[0])
    # OBJ использует 1-based индексацию, отрицательные индексы - от конца
    return idx - 1 if idx > 0 else count + idx

class OBJModel:
    """Чтение и запись моделей в формате OBJ."""

    def __init__(self, mesh=None):
        self.mesh = mesh

    def parse(self, lines):
        """Разбирает строки OBJ и возвращает Mesh."""
        vertices = []
        faces = []
        for line in lines:
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            parts = line.split()
            if parts[0] == 'v':  # вершина
                if len(parts) >= 4:
                    vertices.append([float(parts[1]), float(parts[2]), float(parts[3])])

            elif parts[0] in ('f', 'l'):  # грань или ломаная
                indices = [_obj_index(p, len(vertices)) for p in parts[1:] if p.split('/')[0]]
                if parts[0] == 'l' and len(indices) > 2:
                    # Ломаная разбивается на отдельные рёбра
                    faces.extend([indices[i], indices[i + 1]] for i in range(len(indices) - 1))
                else:
                    faces.append(indices)

        return Mesh(vertices, faces)

    def load_from_file(self, filename):
        """Загрузка модели из OBJ файла"""
        try:
            with open(filename, 'r') as file:
                self.mesh = self.parse(file)
        except (OSError, ValueError) as e:
            logger.error("Ошибка загрузки файла %s: %s", filename, e)
            return False
        logger.info("Загружена модель %s: %r", filename, self.mesh)
        return True

    def save_to_file(self, filename):
        """Сохранение текущей модели в OBJ файл"""
        if self.mesh is None:
            return False
        try:
            with open(filename, 'w') as file:
                file.write("# OBJ файл\n")
                for x, y, z in self.mesh.vertices:
                    file.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
                for face in self.mesh.faces:
                    tag = 'f' if len(face) >= 3 else 'l'
                    file.write(tag + "".join(f" {i + 1}" for i in face) + "\n")
        except OSError as e:
            logger.error("Ошибка сохранения файла %s: %s", filename, e)
            return False
        logger.info("Модель сохранена в %s", filename)
        return True


# =========================================================================
# 6. Встроенные модели
# =========================================================================
# Грани обходятся так, что нормаль cross(v1 - v0, v2 - v0) смотрит наружу.

def tetrahedron():
    """Правильный тетраэдр с центром в начале координат."""
    V = [(1, 1, 1),
         (1, -1, -1),
         (-1, 1, -1),
         (-1, -1, 1)]
    F = [
        [0, 1, 2],
        [0, 3, 1],
        [0, 2, 3],
        [1, 3, 2],
    ]
    return Mesh(V, F)

def hexahedron():
    """Куб с центром в начале координат и ребром 2."""
    V = [
        (-1, -1, -1),  # 0
        ( 1, -1, -1),  # 1
        ( 1,  1, -1),  # 2
        (-1,  1, -1),  # 3
        (-1, -1,  1),  # 4
        ( 1, -1,  1),  # 5
        ( 1,  1,  1),  # 6
        (-1,  1,  1),  # 7
    ]
    F = [
        [0, 3, 2, 1],  # z = -1
        [4, 5, 6, 7],  # z = +1
        [0, 1, 5, 4],  # y = -1
        [3, 7, 6, 2],  # y = +1
        [0, 4, 7, 3],  # x = -1
        [1, 2, 6, 5],  # x = +1
    ]
    return Mesh(V, F)

def octahedron():
    """Правильный октаэдр с центром в начале координат и ребром √2."""
    V = [
        ( 1,  0,  0),  # 0
        (-1,  0,  0),  # 1
        ( 0,  1,  0),  # 2
        ( 0, -1,  0),  # 3
        ( 0,  0,  1),  # 4
        ( 0,  0, -1),  # 5
    ]
    F = [
        [4, 0, 2],
        [4, 2, 1],
        [4, 1, 3],
        [4, 3, 0],
        [5, 2, 0],
        [5, 1, 2],
        [5, 3, 1],
        [5, 0, 3],
    ]
    return Mesh(V, F)


MESH_BUILDERS = {
    'Тетраэдр': tetrahedron,
    'Гексаэдр (куб)': hexahedron,
    'Октаэдр': octahedron,
}

def make_mesh(name: str) -> Mesh:
    """Создаёт встроенную модель по имени; неизвестное имя даёт куб."""
    builder = MESH_BUILDERS.get(name)
    if builder is None:
        logger.warning("Неизвестная модель %r, используется куб", name)
        builder = hexahedron
    return builder()
