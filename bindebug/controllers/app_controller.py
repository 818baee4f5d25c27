"""Контроллер приложения: оркестрация жестов, запросов к бэкенду и перерисовок.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики отрисовки и HTTP).
- DIP: зависит от виджетов, бэкенда и диспетчера как от ролей; в тестах их заменяют фейками.
Порядок:
- Протягивание рисуется синхронно и никогда не ждёт сети.
- Внутри одного потока обновления шаги строго последовательны.
- Между потоками взаимного исключения нет: ответ, пришедший последним, побеждает.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, Optional

import requests

from bindebug.models.histogram_model import ClusterRange, Histogram, SmoothingParams
from bindebug.models.image_model import ImageData
from bindebug.models.selection_model import Point, RoiRect, Selection
from bindebug.services.backend_service import BackendError, BackendService
from bindebug.services.histogram_service import HistogramRenderer
from bindebug.services.surface_service import RenderSurface

if TYPE_CHECKING:
    from bindebug.controllers.dispatcher import TkDispatcher
    from bindebug.ui.chart_panel import ChartPanel
    from bindebug.ui.selection_canvas import SelectionCanvas
    from bindebug.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)

FLOW_ERRORS = (requests.RequestException, BackendError)


@dataclass
class AppController:
    """Связывает элементы UI с бэкендом пайплайна.

    Ответственности:
    - Бинд событий (UI -> контроллер) при инициализации.
    - Жест выделения ROI: локальное состояние + синхронная перерисовка.
    - Потоки обновления: фиксация ROI, смена сглаживания, обновление гистограмм.
    """
    viewer: SelectionCanvas
    sidebar: Sidebar
    charts: ChartPanel
    backend: BackendService
    dispatcher: TkDispatcher
    source: ImageData
    renderer: HistogramRenderer = field(default_factory=HistogramRenderer)
    discard_stale_responses: bool = False

    _selection: Selection = field(default_factory=Selection)
    _surface: RenderSurface = field(default_factory=RenderSurface)
    _committed_roi: Optional[RoiRect] = None
    _generation: int = 0

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами."""
        self.viewer.on_gesture_begin = self._handle_gesture_begin
        self.viewer.on_gesture_move = self._handle_gesture_move
        self.viewer.on_gesture_end = self._handle_gesture_end
        self.sidebar.on_smoothing_change = self._handle_smoothing_change

    def start(self) -> None:
        """Первичная отрисовка без выделения и заполнение диаграмм параметрами по умолчанию."""
        self._selection.reset()
        self._render_surface()
        self._handle_smoothing_change(self.sidebar.get_smoothing_params())

    @property
    def committed_roi(self) -> Optional[RoiRect]:
        return self._committed_roi

    # ---- Handlers (UI thread) ----
    def _handle_gesture_begin(self, x: int, y: int) -> None:
        self._selection.begin(Point(x, y))
        self._render_surface()

    def _handle_gesture_move(self, x: int, y: int) -> None:
        self._selection.update(Point(x, y))
        self._render_surface()

    def _handle_gesture_end(self) -> None:
        roi = self._selection.commit()
        if roi is None:
            return
        self._committed_roi = roi
        self.sidebar.set_committed_roi(roi)
        generation = self._next_generation()
        self.dispatcher.submit(self._run_roi_flow, generation, roi)

    def _handle_smoothing_change(self, params: SmoothingParams) -> None:
        generation = self._next_generation()
        self.dispatcher.submit(self._run_smoothing_flow, generation, params)

    def _render_surface(self) -> None:
        frame = self._surface.render(self.source.pil_image, self._selection)
        self.viewer.show_frame(frame)
        self.sidebar.set_selection_info(self._selection.rect())

    # ---- Flows (worker thread) ----
    def _run_roi_flow(self, generation: int, roi: RoiRect) -> None:
        logger.info(f"[flow {generation}] commit ROI {roi}")
        try:
            self.backend.set_roi(roi)
            output = self.backend.fetch_output_image()
            self._post(generation, self.charts.set_output_image, output)
            self._refresh_histograms(generation)
        except FLOW_ERRORS as e:
            logger.warning(f"[flow {generation}] ROI update aborted: {e}")
            return
        logger.info(f"[flow {generation}] ROI update finished")

    def _run_smoothing_flow(self, generation: int, params: SmoothingParams) -> None:
        logger.info(f"[flow {generation}] smoothing radius={params.radius} iterations={params.iterations}")
        try:
            self.backend.set_hist_smoothing(params)
            self._refresh_histograms(generation)
        except FLOW_ERRORS as e:
            logger.warning(f"[flow {generation}] smoothing update aborted: {e}")
            return
        logger.info(f"[flow {generation}] smoothing update finished")

    def _refresh_histograms(self, generation: int) -> None:
        """Общий хвост потоков: бинаризованное изображение, затем обе диаграммы.

        Диаграммы строятся по одной и той же полученной гистограмме, поэтому
        используют общий максимум. Каждая диаграмма рисуется целиком здесь и
        подменяется в UI одним вызовом.
        """
        binarized = self.backend.fetch_binarized_image()
        self._post(generation, self.charts.set_binarized_image, binarized)

        histogram = self.backend.get_histogram()
        split_point = self._draw_binarized(generation, histogram)
        clusters = self._draw_clustered(generation, histogram)
        self._post(generation, self.sidebar.set_analysis_info, split_point, len(clusters))

    def _draw_binarized(self, generation: int, histogram: Histogram) -> int:
        split_point = self.backend.get_split_point()
        chart = self.renderer.render_binarized(histogram, split_point)
        self._post(generation, self.charts.set_binarized_chart, chart)
        return split_point

    def _draw_clustered(self, generation: int, histogram: Histogram) -> List[ClusterRange]:
        clusters = self.backend.get_clusters()
        chart = self.renderer.render_clustered(histogram, clusters)
        self._post(generation, self.charts.set_clustered_chart, chart)
        return clusters

    # ---- Helpers ----
    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _post(self, generation: int, fn: Callable[..., Any], *args: Any) -> None:
        self.dispatcher.call_in_ui(self._apply, generation, fn, args)

    def _apply(self, generation: int, fn: Callable[..., Any], args: tuple) -> None:
        # выполняется в потоке UI, там же меняется self._generation
        if generation < self._generation:
            if self.discard_stale_responses:
                logger.debug(f"[flow {generation}] dropping {fn.__name__}: flow {self._generation} is newer")
                return
            logger.debug(f"[flow {generation}] {fn.__name__} from a superseded flow (latest {self._generation})")
        fn(*args)
