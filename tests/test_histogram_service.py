"""Tests for the binarized and clustered histogram charts."""

import pytest
from PIL import ImageColor

from bindebug.models.histogram_model import ClusterRange
from bindebug.services.histogram_service import CLUSTER_PALETTE, HistogramRenderer

from conftest import make_histogram

WHITE = (255, 255, 255)
DARK = ImageColor.getrgb("blue")
LIGHT = ImageColor.getrgb("yellow")
H = 200


def _column(chart, index, renderer):
    """Pixels of the first column of bucket `index`, top to bottom."""
    x0, _x1 = renderer.bar_span(index)
    return [chart.getpixel((x0, y)) for y in range(chart.height)]


def _painted_height(chart, index, renderer):
    return sum(1 for c in _column(chart, index, renderer) if c != WHITE)


def _bar_color(chart, index, renderer):
    x0, _x1 = renderer.bar_span(index)
    return chart.getpixel((x0, chart.height - 1))


@pytest.fixture
def renderer():
    return HistogramRenderer(512, H)


class TestBarScaling:

    def test_bar_heights_scale_by_histogram_max(self, renderer):
        heights = renderer.bar_heights(make_histogram({0: 10, 1: 5}))
        assert heights[0] == H
        assert heights[1] == H // 2
        assert not heights[2:].any()

    def test_empty_histogram_gives_zero_heights(self, renderer):
        heights = renderer.bar_heights(make_histogram())
        assert len(heights) == 256
        assert not heights.any()

    def test_charts_share_global_max(self, renderer):
        hist = make_histogram({0: 4, 1: 8, 2: 2})
        binarized = renderer.render_binarized(hist, 128)
        clustered = renderer.render_clustered(hist, [ClusterRange(lo=0, hi=2)])
        for index, value in [(0, 4), (1, 8), (2, 2)]:
            expected = round(value / 8 * H)
            assert _painted_height(binarized, index, renderer) == expected
            assert _painted_height(clustered, index, renderer) == expected

    def test_sub_range_not_renormalised(self, renderer):
        # the cluster covers only small buckets; they must not grow to full height
        hist = make_histogram({0: 2, 100: 10})
        clustered = renderer.render_clustered(hist, [ClusterRange(lo=0, hi=5)])
        assert _painted_height(clustered, 0, renderer) == round(2 / 10 * H)

    def test_all_zero_histogram_renders_empty(self, renderer):
        hist = make_histogram()
        for chart in (renderer.render_binarized(hist, 10),
                      renderer.render_clustered(hist, [ClusterRange(lo=0, hi=255)])):
            assert chart.getcolors() == [(chart.width * chart.height, WHITE)]

    def test_bars_cover_full_width_for_uneven_width(self):
        renderer = HistogramRenderer(300, 50)
        spans = [renderer.bar_span(i) for i in range(256)]
        assert spans[0][0] == 0
        assert spans[-1][1] == 300
        assert all(a[1] == b[0] for a, b in zip(spans, spans[1:]))
        assert all(x1 > x0 for x0, x1 in spans)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            HistogramRenderer(0, 100)


class TestBinarizedChart:

    def test_peak_beyond_split_is_light_full_height(self, renderer):
        hist = make_histogram({5: 10})
        chart = renderer.render_binarized(hist, 3)
        assert _bar_color(chart, 5, renderer) == LIGHT
        assert _painted_height(chart, 5, renderer) == H
        assert chart.getpixel((renderer.bar_span(5)[0], 0)) == LIGHT
        for index in (0, 3, 4, 6, 255):
            assert _painted_height(chart, index, renderer) == 0

    def test_split_point_bucket_is_dark(self, renderer):
        hist = make_histogram(fill=1)
        chart = renderer.render_binarized(hist, 100)
        assert _bar_color(chart, 99, renderer) == DARK
        assert _bar_color(chart, 100, renderer) == DARK
        assert _bar_color(chart, 101, renderer) == LIGHT

    def test_bar_fills_its_whole_span(self, renderer):
        hist = make_histogram(fill=1)
        chart = renderer.render_binarized(hist, 0)
        x0, x1 = renderer.bar_span(1)
        assert all(chart.getpixel((x, H - 1)) == LIGHT for x in range(x0, x1))

    @pytest.mark.parametrize("split,color", [(-1, LIGHT), (300, DARK)])
    def test_out_of_range_split_point(self, renderer, split, color):
        hist = make_histogram(fill=1)
        chart = renderer.render_binarized(hist, split)
        assert {_bar_color(chart, i, renderer) for i in range(256)} == {color}


class TestClusteredChart:

    def test_two_clusters(self, renderer):
        hist = make_histogram(fill=1)
        chart = renderer.render_clustered(hist, [ClusterRange(lo=0, hi=10), ClusterRange(lo=11, hi=20)])
        first = ImageColor.getrgb(CLUSTER_PALETTE[0])
        second = ImageColor.getrgb(CLUSTER_PALETTE[1])
        assert all(_bar_color(chart, i, renderer) == first for i in range(0, 11))
        assert all(_bar_color(chart, i, renderer) == second for i in range(11, 21))
        assert all(_painted_height(chart, i, renderer) == 0 for i in range(21, 256))

    def test_palette_cycles(self, renderer):
        hist = make_histogram(fill=1)
        clusters = [ClusterRange(lo=i, hi=i) for i in range(6)]
        chart = renderer.render_clustered(hist, clusters)
        for k in range(6):
            expected = ImageColor.getrgb(CLUSTER_PALETTE[k % len(CLUSTER_PALETTE)])
            assert _bar_color(chart, k, renderer) == expected

    def test_overlap_last_writer_wins(self, renderer):
        hist = make_histogram(fill=1)
        chart = renderer.render_clustered(hist, [ClusterRange(lo=0, hi=10), ClusterRange(lo=5, hi=6)])
        assert _bar_color(chart, 4, renderer) == ImageColor.getrgb(CLUSTER_PALETTE[0])
        assert _bar_color(chart, 5, renderer) == ImageColor.getrgb(CLUSTER_PALETTE[1])

    def test_empty_cluster_list(self, renderer):
        chart = renderer.render_clustered(make_histogram(fill=1), [])
        assert chart.getcolors() == [(chart.width * chart.height, WHITE)]


class TestIdempotence:

    def test_same_input_same_pixels(self, renderer):
        hist = make_histogram({3: 7, 40: 2, 200: 9})
        clusters = [ClusterRange(lo=0, hi=50), ClusterRange(lo=100, hi=220)]
        assert renderer.render_binarized(hist, 60).tobytes() == renderer.render_binarized(hist, 60).tobytes()
        assert renderer.render_clustered(hist, clusters).tobytes() == renderer.render_clustered(hist, clusters).tobytes()
