"""Боковая панель: параметры сглаживания гистограммы и текущее состояние анализа.

Принципы:
- SRP: управляет только UI параметров, не ходит в сеть.
- ISP: выдаёт параметры через `get_smoothing_params`, события через `on_smoothing_change`.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk

from bindebug.models.histogram_model import SmoothingParams, resolve_smoothing
from bindebug.models.selection_model import RoiRect


class Sidebar(ctk.CTkFrame):
    """Панель с блоками: сглаживание, выделение, результат анализа."""
    def __init__(
        self,
        master: ctk.CTk,
        defaults: SmoothingParams = SmoothingParams(radius=2, iterations=1),
        max_radius: int = 50,
        **kwargs,
    ) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_smoothing_change: Optional[Callable[[SmoothingParams], None]] = None

        self._committed = defaults

        # Сглаживание
        self._smooth_title = ctk.CTkLabel(self, text="Сглаживание", font=ctk.CTkFont(size=16, weight="bold"))
        self._smooth_title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._radius_val = ctk.StringVar(value=str(defaults.radius))
        self._radius_label = ctk.CTkLabel(self, text="Радиус:")
        self._radius_slider = ctk.CTkSlider(
            self, from_=0, to=max_radius, number_of_steps=max_radius, command=self._on_radius_slide
        )
        self._radius_slider.set(defaults.radius)
        self._radius_value = ctk.CTkLabel(self, textvariable=self._radius_val, width=48, anchor="w")
        self._radius_label.grid(row=1, column=0, padx=8, pady=(0, 2), sticky="w")
        self._radius_slider.grid(row=2, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._radius_value.grid(row=3, column=0, padx=8, pady=(0, 6), sticky="w")
        # как у <input type=range>: значение фиксируется при отпускании
        self._radius_slider.bind("<ButtonRelease-1>", self._on_params_commit)

        self._iterations_val = ctk.StringVar(value=str(defaults.iterations))
        self._iterations_label = ctk.CTkLabel(self, text="Итерации:")
        self._iterations_entry = ctk.CTkEntry(self, textvariable=self._iterations_val, width=80)
        self._iterations_label.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="w")
        self._iterations_entry.grid(row=5, column=0, padx=8, pady=(0, 10), sticky="w")
        self._iterations_entry.bind("<FocusOut>", self._on_params_commit)
        self._iterations_entry.bind("<Return>", self._on_params_commit)

        # Выделение
        self._sel_title = ctk.CTkLabel(self, text="Выделение", font=ctk.CTkFont(size=16, weight="bold"))
        self._sel_title.grid(row=6, column=0, padx=8, pady=(8, 4), sticky="w")

        self._selection_val = ctk.StringVar(value="—")
        self._roi_val = ctk.StringVar(value="ROI: —")
        ctk.CTkLabel(self, textvariable=self._selection_val, anchor="w", justify="left").grid(
            row=7, column=0, padx=8, pady=(0, 2), sticky="ew"
        )
        ctk.CTkLabel(self, textvariable=self._roi_val, anchor="w", justify="left").grid(
            row=8, column=0, padx=8, pady=(0, 10), sticky="ew"
        )

        # Анализ
        self._analysis_title = ctk.CTkLabel(self, text="Анализ", font=ctk.CTkFont(size=16, weight="bold"))
        self._analysis_title.grid(row=9, column=0, padx=8, pady=(8, 4), sticky="w")

        self._split_val = ctk.StringVar(value="Точка разбиения: —")
        self._clusters_val = ctk.StringVar(value="Кластеров: —")
        ctk.CTkLabel(self, textvariable=self._split_val, anchor="w", justify="left").grid(
            row=10, column=0, padx=8, pady=(0, 2), sticky="ew"
        )
        ctk.CTkLabel(self, textvariable=self._clusters_val, anchor="w", justify="left").grid(
            row=11, column=0, padx=8, pady=(0, 2), sticky="ew"
        )

        # filler
        self.grid_rowconfigure(99, weight=1)

    # public API
    def get_smoothing_params(self) -> SmoothingParams:
        """Возвращает последние принятые параметры сглаживания."""
        return self._committed

    def set_selection_info(self, rect: Optional[Tuple[int, int, int, int]]) -> None:
        if rect is None:
            self._selection_val.set("—")
            return
        x, y, w, h = rect
        self._selection_val.set(f"x={x}, y={y}, w={w}, h={h}")

    def set_committed_roi(self, roi: RoiRect) -> None:
        self._roi_val.set(f"ROI: ({roi.start_x}, {roi.start_y}) → ({roi.end_x}, {roi.end_y})")

    def set_analysis_info(self, split_point: int, cluster_count: int) -> None:
        self._split_val.set(f"Точка разбиения: {split_point}")
        self._clusters_val.set(f"Кластеров: {cluster_count}")

    # events
    def _on_radius_slide(self, value: float) -> None:
        self._radius_val.set(str(int(round(value))))

    def _on_params_commit(self, _event: Optional[tk.Event] = None) -> None:
        params = resolve_smoothing(self._committed, self._radius_slider.get(), self._iterations_val.get())
        # некорректный ввод откатывается к последнему принятому значению
        self._iterations_val.set(str(params.iterations))
        if params == self._committed:
            return
        self._committed = params
        if self.on_smoothing_change:
            self.on_smoothing_change(params)
