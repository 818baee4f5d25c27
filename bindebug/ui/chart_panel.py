"""Нижняя панель результатов: выходное и бинаризованное изображения и обе диаграммы гистограммы."""
from __future__ import annotations

from typing import Dict, Tuple

import customtkinter as ctk
from PIL import Image

from bindebug.models.image_model import ImageData

_PREVIEW_MAX = (320, 240)


class ChartPanel(ctk.CTkFrame):
    """Нижняя панель: выходное и бинаризованное изображения, две диаграммы."""
    def __init__(self, master: ctk.CTk, chart_size: Tuple[int, int] = (512, 200), **kwargs) -> None:
        super().__init__(master, **kwargs)
        self._chart_size = chart_size
        self._images: Dict[str, ctk.CTkImage] = {}

        self.grid_columnconfigure((0, 1), weight=1)

        self._output_label = self._add_slot("Результат", row=0, column=0, size=_PREVIEW_MAX)
        self._binarized_label = self._add_slot("Бинаризация", row=0, column=1, size=_PREVIEW_MAX)
        self._binarized_chart_label = self._add_slot("Гистограмма: тёмные / светлые", row=2, column=0, size=chart_size)
        self._clustered_chart_label = self._add_slot("Гистограмма: кластеры", row=2, column=1, size=chart_size)

    # public API (вызывается контроллером в потоке UI)
    def set_output_image(self, image: ImageData) -> None:
        self._show("output", self._output_label, self._fit_preview(image.pil_image))

    def set_binarized_image(self, image: ImageData) -> None:
        self._show("binarized", self._binarized_label, self._fit_preview(image.pil_image))

    def set_binarized_chart(self, chart: Image.Image) -> None:
        self._show("binarized_chart", self._binarized_chart_label, chart)

    def set_clustered_chart(self, chart: Image.Image) -> None:
        self._show("clustered_chart", self._clustered_chart_label, chart)

    # helpers
    def _add_slot(self, title: str, row: int, column: int, size: Tuple[int, int]) -> ctk.CTkLabel:
        caption = ctk.CTkLabel(self, text=title, font=ctk.CTkFont(size=14, weight="bold"))
        caption.grid(row=row, column=column, padx=8, pady=(8, 2), sticky="w")
        slot = ctk.CTkLabel(self, text="—", width=size[0], height=size[1])
        slot.grid(row=row + 1, column=column, padx=8, pady=(0, 8), sticky="nw")
        return slot

    def _show(self, key: str, label: ctk.CTkLabel, image: Image.Image) -> None:
        # храним ссылку, иначе Tk освободит картинку
        ctk_image = ctk.CTkImage(light_image=image, dark_image=image, size=image.size)
        self._images[key] = ctk_image
        label.configure(image=ctk_image, text="")

    @staticmethod
    def _fit_preview(image: Image.Image) -> Image.Image:
        preview = image.copy()
        preview.thumbnail(_PREVIEW_MAX, Image.Resampling.LANCZOS)
        return preview
