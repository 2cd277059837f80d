import pytest

from config import RenderConfig


class RecordingSurface:
    """Поверхность, запоминающая вызовы рисования."""

    def __init__(self, width=800, height=800):
        self.width = width
        self.height = height
        self.calls = []

    def clear(self, color):
        self.calls.append(('clear', color))

    def fill_polygon(self, points, color):
        self.calls.append(('fill', list(points), color))

    def line(self, p1, p2, color, width):
        self.calls.append(('line', p1, p2, color, width))

    def kinds(self):
        return [c[0] for c in self.calls]


class ManualScheduler:
    """Планировщик, выполняющий отложенные вызовы по команде теста."""

    def __init__(self):
        self.pending = []

    def schedule(self, callback, delay_ms):
        self.pending.append((callback, delay_ms))

    def tick(self):
        callback, _ = self.pending.pop(0)
        callback()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def config():
    return RenderConfig()
