"""Модели данных для изображений.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель изображения и его метаданные.

    Fields:
        path: Путь к исходному файлу; None для изображений, полученных с бэкенда.
        source: Откуда получено изображение (путь или имя эндпоинта).
        pil_image: Изображение PIL в режиме RGBA.
        width: Ширина, px.
        height: Высота, px.
        size_bytes: Размер файла/ответа, если доступен.
    """
    path: Optional[Path]
    source: str
    pil_image: Image.Image
    width: int
    height: int
    size_bytes: Optional[int]
