"""Покадровая анимация: вращение модели с фиксированной частотой кадров."""
import logging
from typing import Callable, Protocol

from config import RenderConfig

logger = logging.getLogger("wireframe.animation")


class Scheduler(Protocol):
    """Планировщик: однократно вызывает callback через delay_ms миллисекунд."""

    def schedule(self, callback: Callable[[], None], delay_ms: int) -> None: ...


class FrameDriver:
    """Владеет накопленным углом поворота и запускает кадр на каждом тике.

    render(angle) - функция, рисующая один кадр. После кадра драйвер сам
    планирует следующий, так что цикл идёт бесконечно после start().
    Угол только растёт; заворачивание по 2π не выполняется.
    """

    def __init__(self, render: Callable[[float], None], scheduler: Scheduler,
                 config: RenderConfig):
        self.render = render
        self.scheduler = scheduler
        self.config = config
        self.angle = 0.0
        self.frames = 0

    def start(self):
        logger.info("Анимация запущена: %d кадров/с, %.2f рад/с",
                    self.config.fps, self.config.rotation_speed)
        self.scheduler.schedule(self.step, self.config.frame_delay_ms)

    def step(self):
        """Один тик: продвинуть угол, нарисовать кадр, запланировать следующий."""
        self.angle += self.config.angle_step
        self.render(self.angle)
        self.frames += 1
        self.scheduler.schedule(self.step, self.config.frame_delay_ms)
