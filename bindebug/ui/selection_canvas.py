"""Виджет выделения ROI: показывает кадр поверхности и сообщает о жестах мыши.

Принципы:
- SRP: отвечает только за показ кадров и перевод событий Tk в координаты изображения.
- Чистый код: состояние выделения живёт в контроллере, виджет его не хранит.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from bindebug.models.selection_model import clamp_point


class SelectionCanvas(ctk.CTkFrame):
    """Канва в натуральном масштабе: координаты события = координаты изображения."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg(), cursor="crosshair")
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._frame_size: Optional[Tuple[int, int]] = None
        self._tk_frame: Optional[ImageTk.PhotoImage] = None
        self._frame_item: Optional[int] = None

        self.on_gesture_begin: Optional[Callable[[int, int], None]] = None
        self.on_gesture_move: Optional[Callable[[int, int], None]] = None
        self.on_gesture_end: Optional[Callable[[], None]] = None

        # B1-Motion приходит только при зажатой левой кнопке: это и есть активный жест
        self._canvas.bind("<ButtonPress-1>", self._on_press)
        self._canvas.bind("<B1-Motion>", self._on_drag)
        self._canvas.bind("<ButtonRelease-1>", self._on_release)

    # ---- Public API ----
    def show_frame(self, frame: Image.Image) -> None:
        """Заменяет показанный кадр целиком; размер канвы следует за кадром."""
        self._tk_frame = ImageTk.PhotoImage(frame)
        if self._frame_size != frame.size:
            self._frame_size = frame.size
            self._canvas.configure(width=frame.width, height=frame.height)
        if self._frame_item is None:
            self._frame_item = self._canvas.create_image(0, 0, image=self._tk_frame, anchor="nw")
        else:
            self._canvas.itemconfigure(self._frame_item, image=self._tk_frame)

    # ---- Internals ----
    def _to_image_coords(self, event: tk.Event) -> Tuple[int, int]:
        x, y = int(event.x), int(event.y)
        if self._frame_size is None:
            return x, y
        # вне канвы Tk продолжает слать координаты; прижимаем их к кадру
        point = clamp_point(x, y, self._frame_size)
        return point.x, point.y

    def _on_press(self, event: tk.Event) -> None:
        self._canvas.focus_set()
        if self.on_gesture_begin:
            self.on_gesture_begin(*self._to_image_coords(event))

    def _on_drag(self, event: tk.Event) -> None:
        if self.on_gesture_move:
            self.on_gesture_move(*self._to_image_coords(event))

    def _on_release(self, _event: tk.Event) -> None:
        if self.on_gesture_end:
            self.on_gesture_end()

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
