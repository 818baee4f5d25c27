import customtkinter as ctk

from bindebug.config import AppConfig
from bindebug.controllers.app_controller import AppController
from bindebug.controllers.dispatcher import TkDispatcher
from bindebug.models.histogram_model import SmoothingParams
from bindebug.models.image_model import ImageData
from bindebug.services.backend_service import BackendService
from bindebug.services.histogram_service import HistogramRenderer
from bindebug.ui.chart_panel import ChartPanel
from bindebug.ui.selection_canvas import SelectionCanvas
from bindebug.ui.sidebar import Sidebar


class BinarizationDebugApp(ctk.CTk):
    def __init__(self, config: AppConfig, source: ImageData) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title(f"Binarization Debug - {source.source}")
        self.minsize(900, 600)

        # root layout: top-left selection, right sidebar, bottom charts
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = SelectionCanvas(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(
            self,
            defaults=SmoothingParams(radius=config.smoothing_radius, iterations=config.smoothing_iterations),
            max_radius=config.max_smoothing_radius,
        )
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._charts = ChartPanel(self, chart_size=(config.chart_width, config.chart_height))
        self._charts.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._backend = BackendService(config.backend_url, timeout=config.request_timeout)
        self._dispatcher = TkDispatcher(self, max_workers=config.max_workers)

        self._controller = AppController(
            viewer=self._viewer,
            sidebar=self._sidebar,
            charts=self._charts,
            backend=self._backend,
            dispatcher=self._dispatcher,
            source=source,
            renderer=HistogramRenderer(config.chart_width, config.chart_height),
            discard_stale_responses=config.discard_stale_responses,
        )
        self._controller.bind_events()
        self._controller.start()

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _on_close(self) -> None:
        self._dispatcher.shutdown()
        self._backend.close()
        self.destroy()
