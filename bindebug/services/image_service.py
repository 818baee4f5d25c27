"""Загрузка исходного изображения с диска и декодирование изображений бэкенда.

Принципы:
- SRP: класс отвечает только за загрузку и базовое извлечение свойств.
- LSP/ISP: возвращает `ImageData` с предсказуемыми полями; интерфейс узкий и конкретный.
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from bindebug.models.image_model import ImageData


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` c `PIL.Image.Image` (в режиме RGBA), размерами и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            pil_image = Image.open(path).convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc

        width, height = pil_image.size
        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        return ImageData(
            path=path,
            source=str(path),
            pil_image=pil_image,
            width=width,
            height=height,
            size_bytes=size_bytes,
        )

    def decode_image(self, data: bytes, source: str) -> ImageData:
        """Декодирует байты изображения, полученные по сети.

        Raises:
            ValueError: если байты не распознаны как изображение.
        """
        try:
            pil_image = Image.open(io.BytesIO(data))
            pil_image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError(f"Ответ {source} не является изображением") from exc

        pil_image = pil_image.convert("RGBA")
        width, height = pil_image.size
        return ImageData(
            path=None,
            source=source,
            pil_image=pil_image,
            width=width,
            height=height,
            size_bytes=len(data),
        )
