"""Мост между рабочими потоками и циклом событий Tk.

Сетевые шаги потоков обновления выполняются в пуле потоков, а всё, что
трогает виджеты, возвращается в поток Tk через очередь.
"""
from __future__ import annotations

import logging
import queue
import tkinter as tk
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

logger = logging.getLogger(__name__)

_POLL_INTERVAL_MS = 15


class TkDispatcher:
    def __init__(self, widget: tk.Misc, max_workers: int = 4) -> None:
        self._widget = widget
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="bindebug-flow")
        self._ui_queue: "queue.SimpleQueue[tuple[Callable[..., Any], tuple]]" = queue.SimpleQueue()
        self._closed = False
        self._widget.after(_POLL_INTERVAL_MS, self._drain)

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Запускает `fn` в рабочем потоке."""
        future = self._executor.submit(fn, *args)
        future.add_done_callback(self._log_unexpected_error)
        return future

    def call_in_ui(self, fn: Callable[..., Any], *args: Any) -> None:
        """Ставит вызов `fn` в очередь потока Tk; безопасно из любого потока."""
        self._ui_queue.put((fn, args))

    def shutdown(self) -> None:
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _drain(self) -> None:
        while True:
            try:
                fn, args = self._ui_queue.get_nowait()
            except queue.Empty:
                break
            try:
                fn(*args)
            except Exception:
                logger.error(f"UI callback {getattr(fn, '__name__', fn)} failed", exc_info=True)
        if not self._closed:
            self._widget.after(_POLL_INTERVAL_MS, self._drain)

    @staticmethod
    def _log_unexpected_error(future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Update flow crashed", exc_info=(type(exc), exc, exc.__traceback__))
