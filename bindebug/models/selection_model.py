"""Модель выделения области интереса (ROI) жестом «протянуть мышью».

Принципы:
- SRP: только локальное состояние жеста, без I/O и без отрисовки.
- Чистый код: точки неизменяемы, выделение меняется только через `begin`/`update`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Point:
    """Координаты пикселя в пространстве исходного изображения."""
    x: int
    y: int


@dataclass(frozen=True)
class RoiRect:
    """Зафиксированная ROI в порядке протягивания (не нормализованная)."""
    start_x: int
    start_y: int
    end_x: int
    end_y: int

    def as_query(self) -> dict:
        return {
            "start_x": self.start_x,
            "start_y": self.start_y,
            "end_x": self.end_x,
            "end_y": self.end_y,
        }


class Selection:
    """Выделение в процессе жеста: пара точек `start`/`end`.

    `end` может лежать левее/выше `start` — прямоугольник хранится как есть.
    Активность жеста (зажатая кнопка) отслеживает вызывающий код.
    """
    def __init__(self) -> None:
        self.start: Optional[Point] = None
        self.end: Optional[Point] = None

    def begin(self, point: Point) -> None:
        """Начинает новый жест: задаёт `start` и сбрасывает `end`."""
        self.start = point
        self.end = None

    def update(self, point: Point) -> None:
        """Перезаписывает `end`. Без `start` вызов игнорируется."""
        if self.start is None:
            return
        self.end = point

    def reset(self) -> None:
        self.start = None
        self.end = None

    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    def rect(self) -> Optional[Tuple[int, int, int, int]]:
        """Возвращает `(x, y, w, h)` со знаковыми шириной и высотой или None."""
        if self.start is None or self.end is None:
            return None
        return (
            self.start.x,
            self.start.y,
            self.end.x - self.start.x,
            self.end.y - self.start.y,
        )

    def commit(self) -> Optional[RoiRect]:
        """Фиксирует текущее выделение как ROI для отправки на бэкенд."""
        if self.start is None or self.end is None:
            return None
        return RoiRect(self.start.x, self.start.y, self.end.x, self.end.y)


def clamp_point(x: int, y: int, size: Tuple[int, int]) -> Point:
    """Прижимает координаты указателя к пикселям кадра `[0, w - 1] x [0, h - 1]`."""
    width, height = size
    return Point(max(0, min(width - 1, x)), max(0, min(height - 1, y)))
