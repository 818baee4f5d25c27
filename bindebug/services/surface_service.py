"""Поверхность выделения: исходное изображение + прямоугольник ROI.

Вызывается синхронно на каждое движение мыши при протягивании, поэтому
фон с изображением кэшируется, а на кадр приходится копия и один контур.
"""
from __future__ import annotations

from typing import Optional

from PIL import Image, ImageDraw

from bindebug.models.selection_model import Selection

BACKGROUND_COLOR = "black"
HIGHLIGHT_COLOR = "red"


class RenderSurface:
    def __init__(self, background: str = BACKGROUND_COLOR, highlight: str = HIGHLIGHT_COLOR, line_width: int = 1) -> None:
        self._background = background
        self._highlight = highlight
        self._line_width = line_width
        self._base_source: Optional[Image.Image] = None
        self._base_frame: Optional[Image.Image] = None

    def render(self, image: Image.Image, selection: Selection) -> Image.Image:
        """Рисует кадр размером с исходное изображение.

        Каждый вызов возвращает новый кадр, предыдущий рисунок не переносится.
        Прямоугольник рисуется, только если выделение завершено; ширина и высота
        знаковые, поэтому поддерживаются все четыре направления протягивания.
        """
        frame = self._get_base_frame(image).copy()
        rect = selection.rect()
        if rect is None:
            return frame

        x, y, w, h = rect
        # ImageDraw требует x0 <= x1 и y0 <= y1; геометрия выделения не меняется
        x0, x1 = sorted((x, x + w))
        y0, y1 = sorted((y, y + h))
        ImageDraw.Draw(frame).rectangle((x0, y0, x1, y1), outline=self._highlight, width=self._line_width)
        return frame

    def _get_base_frame(self, image: Image.Image) -> Image.Image:
        if self._base_source is image and self._base_frame is not None:
            return self._base_frame

        base = Image.new("RGB", image.size, self._background)
        if image.mode == "RGBA":
            base.paste(image, (0, 0), image)
        else:
            base.paste(image.convert("RGB"), (0, 0))
        self._base_source = image
        self._base_frame = base
        return base
