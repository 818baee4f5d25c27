"""Tests for the selection render surface."""

import pytest
from PIL import Image

from bindebug.models.selection_model import Point, Selection
from bindebug.services.surface_service import RenderSurface

RED = (255, 0, 0)
GRAY = (128, 128, 128)


def _selection(start, end=None):
    sel = Selection()
    sel.begin(Point(*start))
    if end is not None:
        sel.update(Point(*end))
    return sel


@pytest.fixture
def source():
    return Image.new("RGBA", (100, 80), (128, 128, 128, 255))


class TestRenderSurface:

    def test_frame_has_natural_image_size(self, source):
        frame = RenderSurface().render(source, Selection())
        assert frame.size == (100, 80)

    def test_no_rectangle_until_complete(self, source):
        frame = RenderSurface().render(source, _selection((10, 10)))
        colors = {c for _, c in frame.getcolors(maxcolors=10)}
        assert colors == {GRAY}

    def test_rectangle_outline(self, source):
        frame = RenderSurface().render(source, _selection((10, 10), (50, 60)))
        assert frame.getpixel((10, 10)) == RED
        assert frame.getpixel((50, 60)) == RED
        assert frame.getpixel((30, 10)) == RED
        assert frame.getpixel((10, 40)) == RED
        # unfilled
        assert frame.getpixel((30, 30)) == GRAY
        assert frame.getpixel((70, 70)) == GRAY

    @pytest.mark.parametrize("start,end", [
        ((10, 10), (50, 60)),
        ((50, 60), (10, 10)),
        ((50, 10), (10, 60)),
        ((10, 60), (50, 10)),
    ])
    def test_any_drag_direction_draws_same_box(self, source, start, end):
        frame = RenderSurface().render(source, _selection(start, end))
        reference = RenderSurface().render(source, _selection((10, 10), (50, 60)))
        assert frame.tobytes() == reference.tobytes()

    def test_previous_rectangle_does_not_survive(self, source):
        surface = RenderSurface()
        sel = _selection((10, 10), (50, 60))
        surface.render(source, sel)
        sel.update(Point(20, 20))
        frame = surface.render(source, sel)
        assert frame.getpixel((50, 60)) == GRAY
        assert frame.getpixel((20, 20)) == RED

    def test_transparent_pixels_show_background(self):
        source = Image.new("RGBA", (20, 20), (255, 255, 255, 0))
        frame = RenderSurface().render(source, Selection())
        assert frame.getpixel((5, 5)) == (0, 0, 0)

    def test_base_frame_follows_source_change(self, source):
        surface = RenderSurface()
        surface.render(source, Selection())
        other = Image.new("RGB", (40, 30), (0, 255, 0))
        frame = surface.render(other, Selection())
        assert frame.size == (40, 30)
        assert frame.getpixel((5, 5)) == (0, 255, 0)
