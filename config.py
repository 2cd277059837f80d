"""
Настройки рендеринга.

Все константы исходной программы собраны в один dataclass, чтобы их можно
было переопределять из командной строки и из окна приложения.
"""
import argparse
from dataclasses import dataclass, fields

BACKGROUND = "#101010"
FOREGROUND = "#50FF50"


def positive_int(text):
    """Тип argparse: целое число не меньше 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"ожидалось целое число, получено {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"значение должно быть не меньше 1, получено {value}")
    return value


@dataclass
class RenderConfig:
    width: int = 800
    height: int = 800
    fps: int = 60
    rotation_speed: float = 1.0   # рад/с
    depth_offset: float = 1.0     # перенос модели вдоль +Z, держит её перед камерой
    model_radius: float = 0.5     # радиус, в который вписываются модели
    enable_culling: bool = True
    enable_occlusion: bool = True
    shade_faces: bool = False     # заливать грани цветом затенения вместо фона
    show_vertices: bool = False
    background: str = BACKGROUND
    foreground: str = FOREGROUND
    line_width: int = 3
    point_size: int = 20

    def __post_init__(self):
        if self.fps < 1:
            raise ValueError(f"fps должно быть не меньше 1, получено {self.fps}")

    @property
    def frame_delay_ms(self) -> int:
        """Задержка между кадрами для планировщика."""
        return max(1, round(1000 / self.fps))

    @property
    def angle_step(self) -> float:
        """Приращение угла поворота за один кадр."""
        return self.rotation_speed / self.fps

    @classmethod
    def from_args(cls, args) -> 'RenderConfig':
        """Собирает настройки из argparse.Namespace; отсутствующие поля берутся по умолчанию."""
        names = {f.name for f in fields(cls)}
        values = {k: v for k, v in vars(args).items() if k in names and v is not None}
        return cls(**values)
