"""Диаграммы гистограммы: столбцы, окрашенные по точке разбиения и по кластерам.

Принципы:
- SRP: только отрисовка в изображения PIL; данные приходят уже провалидированными.
- Чистый код: каждая диаграмма рисуется целиком в новое изображение.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np
from PIL import Image, ImageDraw

from bindebug.models.histogram_model import BUCKET_COUNT, ClusterRange, Histogram

BACKGROUND_COLOR = "white"
DARK_COLOR = "blue"
LIGHT_COLOR = "yellow"
CLUSTER_PALETTE = ("red", "green", "yellow", "orange")


class HistogramRenderer:
    """Рисует производные гистограммы: бинаризованную и кластерную.

    Обе диаграммы масштабируются по глобальному максимуму полной
    гистограммы, чтобы их можно было сравнивать между собой.
    """
    def __init__(self, width: int = 512, height: int = 200) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Размер диаграммы должен быть положительным")
        self.width = width
        self.height = height
        # границы столбцов по X: столбец i занимает [edges[i], edges[i + 1])
        self._edges = np.rint(np.arange(BUCKET_COUNT + 1) * (width / BUCKET_COUNT)).astype(int)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def bar_heights(self, histogram: Histogram) -> np.ndarray:
        """Высоты столбцов в пикселях: `round(v / max * height)`; нули для пустой ROI."""
        max_value = histogram.max_value
        if max_value <= 0:
            return np.zeros(BUCKET_COUNT, dtype=int)
        return np.clip(np.rint(histogram.as_array() / max_value * self.height), 0, self.height).astype(int)

    def bar_span(self, index: int) -> tuple[int, int]:
        """Возвращает полуинтервал `[x0, x1)` столбца по оси X."""
        return int(self._edges[index]), int(self._edges[index + 1])

    # ---------- Бинаризованная гистограмма ----------
    def render_binarized(self, histogram: Histogram, split_point: int) -> Image.Image:
        """
        Столбцы с индексом <= split_point — тёмные, > split_point — светлые.
        Точка разбиения вне 0..255 не требует обработки: сравнение
        просто окрашивает все столбцы в один цвет.
        """
        image, draw = self._blank()
        heights = self.bar_heights(histogram)
        for i in range(BUCKET_COUNT):
            color = LIGHT_COLOR if i > split_point else DARK_COLOR
            self._draw_bar(draw, i, int(heights[i]), color)
        return image

    # ---------- Кластерная гистограмма ----------
    def render_clustered(self, histogram: Histogram, clusters: Sequence[ClusterRange]) -> Image.Image:
        """
        Корзины кластера k окрашиваются в `CLUSTER_PALETTE[k % len]`.
        Непокрытые корзины остаются фоном; при пересечении побеждает
        кластер, идущий в списке позже.
        """
        image, draw = self._blank()
        heights = self.bar_heights(histogram)
        for k, cluster in enumerate(clusters):
            color = CLUSTER_PALETTE[k % len(CLUSTER_PALETTE)]
            for i in cluster.indices():
                if 0 <= i < BUCKET_COUNT:
                    self._draw_bar(draw, i, int(heights[i]), color)
        return image

    # ---------- Вспомогательные функции ----------
    def _blank(self) -> tuple[Image.Image, ImageDraw.ImageDraw]:
        image = Image.new("RGB", self.size, BACKGROUND_COLOR)
        return image, ImageDraw.Draw(image)

    def _draw_bar(self, draw: ImageDraw.ImageDraw, index: int, bar_height: int, color: str) -> None:
        x0, x1 = self.bar_span(index)
        if bar_height <= 0 or x1 <= x0:
            return
        draw.rectangle((x0, self.height - bar_height, x1 - 1, self.height - 1), fill=color)
