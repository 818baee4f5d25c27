"""Shared fakes: views, backend and a manually-driven dispatcher."""

from pathlib import Path

import pytest
from PIL import Image

from bindebug.controllers.app_controller import AppController
from bindebug.models.histogram_model import BUCKET_COUNT, ClusterRange, Histogram, SmoothingParams
from bindebug.models.image_model import ImageData
from bindebug.services.histogram_service import HistogramRenderer


def make_image_data(size=(100, 80), color="gray", source="test"):
    pil_image = Image.new("RGBA", size, color)
    return ImageData(path=Path(source), source=source, pil_image=pil_image,
                     width=size[0], height=size[1], size_bytes=None)


def make_histogram(peaks=None, fill=0.0):
    """Histogram filled with `fill`, with `peaks` as {index: value}."""
    buckets = [float(fill)] * BUCKET_COUNT
    for index, value in (peaks or {}).items():
        buckets[index] = float(value)
    return Histogram(buckets=tuple(buckets))


class FakeViewer:
    def __init__(self):
        self.on_gesture_begin = None
        self.on_gesture_move = None
        self.on_gesture_end = None
        self.frames = []

    def show_frame(self, frame):
        self.frames.append(frame)


class FakeSidebar:
    def __init__(self, params=SmoothingParams(radius=2, iterations=1)):
        self.on_smoothing_change = None
        self.params = params
        self.selection_info = []
        self.committed = []
        self.analysis = []

    def get_smoothing_params(self):
        return self.params

    def set_selection_info(self, rect):
        self.selection_info.append(rect)

    def set_committed_roi(self, roi):
        self.committed.append(roi)

    def set_analysis_info(self, split_point, cluster_count):
        self.analysis.append((split_point, cluster_count))


class FakeCharts:
    def __init__(self):
        self.output_images = []
        self.binarized_images = []
        self.binarized_charts = []
        self.clustered_charts = []

    def set_output_image(self, image):
        self.output_images.append(image)

    def set_binarized_image(self, image):
        self.binarized_images.append(image)

    def set_binarized_chart(self, chart):
        self.binarized_charts.append(chart)

    def set_clustered_chart(self, chart):
        self.clustered_charts.append(chart)


class FakeBackend:
    """In-memory backend; histogram peak height follows the smoothing radius."""

    def __init__(self):
        self.calls = []
        self.roi = None
        self.smoothing = None
        self.split_point = 3
        self.clusters = [ClusterRange(lo=0, hi=10), ClusterRange(lo=11, hi=20)]
        self.failures = {}

    def _record(self, name):
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    def set_roi(self, roi):
        self._record("set_roi")
        self.roi = roi

    def set_hist_smoothing(self, params):
        self._record("set_hist_smoothing")
        self.smoothing = params

    def fetch_output_image(self):
        self._record("fetch_output_image")
        return make_image_data(source="/image_output")

    def fetch_binarized_image(self):
        self._record("fetch_binarized_image")
        return make_image_data(color="white", source="/binarized_image")

    def get_histogram(self):
        self._record("get_histogram")
        radius = self.smoothing.radius if self.smoothing else 0
        values = [1.0] * BUCKET_COUNT
        values[5] = 10.0 + radius
        return Histogram(buckets=tuple(values))

    def get_split_point(self):
        self._record("get_split_point")
        return self.split_point

    def get_clusters(self):
        self._record("get_clusters")
        return list(self.clusters)


class QueueDispatcher:
    """Holds submitted flows and UI callbacks until the test runs them."""

    def __init__(self):
        self.jobs = []
        self.ui_calls = []

    def submit(self, fn, *args):
        self.jobs.append((fn, args))

    def call_in_ui(self, fn, *args):
        self.ui_calls.append((fn, args))

    def run_job(self, index=0):
        fn, args = self.jobs.pop(index)
        fn(*args)

    def run_jobs(self):
        while self.jobs:
            self.run_job()

    def drain_ui(self):
        while self.ui_calls:
            fn, args = self.ui_calls.pop(0)
            fn(*args)

    def run_all(self):
        self.run_jobs()
        self.drain_ui()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def dispatcher():
    return QueueDispatcher()


@pytest.fixture
def make_controller(backend, dispatcher):
    def _make(discard_stale_responses=False):
        controller = AppController(
            viewer=FakeViewer(),
            sidebar=FakeSidebar(),
            charts=FakeCharts(),
            backend=backend,
            dispatcher=dispatcher,
            source=make_image_data(),
            renderer=HistogramRenderer(512, 200),
            discard_stale_responses=discard_stale_responses,
        )
        controller.bind_events()
        return controller
    return _make
