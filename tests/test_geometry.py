import pytest
from PIL import Image

from printpack.imaging.errors import ConfigurationError, ResourceLimitWarning
from printpack.imaging.geometry import clamp_to_limits, crop_box, crop_to_ratio, resize_to_exact_size
from printpack.models.settings import CanvasLimits

SOURCES = [(1000, 700), (700, 1000), (1200, 1200), (3000, 400), (333, 2000)]
RATIOS = [2 / 3, 3 / 4, 4 / 5, 11 / 14, 210 / 297, 13 / 19, 1.0, 16 / 9]


@pytest.mark.parametrize("size", SOURCES)
@pytest.mark.parametrize("ratio", RATIOS)
def test_crop_box_matches_ratio_and_is_centered(size, ratio):
    sw, sh = size
    x, y, w, h = crop_box(sw, sh, ratio)
    assert w / h == pytest.approx(ratio)
    assert w <= sw + 1e-9 and h <= sh + 1e-9
    assert x == pytest.approx((sw - w) / 2)
    assert y == pytest.approx((sh - h) / 2)
    # only one axis is ever reduced
    assert x == 0 or y == 0


@pytest.mark.parametrize("size", SOURCES)
@pytest.mark.parametrize("ratio", RATIOS)
def test_crop_to_ratio_pixels(size, ratio):
    src = Image.new("RGB", size, (10, 20, 30))
    out = crop_to_ratio(src, ratio)
    assert out.width <= src.width and out.height <= src.height
    assert abs(out.width / out.height - ratio) < 2.0 / min(out.width, out.height) + 1e-9


def test_crop_takes_the_center():
    src = Image.new("RGB", (300, 100), (0, 0, 0))
    src.paste((255, 0, 0), (100, 0, 200, 100))
    out = crop_to_ratio(src, 1.0)
    assert out.size == (100, 100)
    assert out.getcolors() == [(100 * 100, (255, 0, 0))]


def test_crop_does_not_touch_source():
    src = Image.new("RGB", (400, 300), (1, 2, 3))
    before = src.tobytes()
    crop_to_ratio(src, 2 / 3)
    assert src.tobytes() == before and src.size == (400, 300)


@pytest.mark.parametrize("ratio", [0, -1.5])
def test_crop_rejects_non_positive_ratio(ratio):
    with pytest.raises(ConfigurationError):
        crop_to_ratio(Image.new("RGB", (10, 10)), ratio)


@pytest.mark.parametrize("target", [(50, 75), (640, 960), (300, 200), (1, 1)])
def test_resize_is_exact(target):
    src = Image.new("RGB", (400, 600), (90, 90, 90))
    assert resize_to_exact_size(src, *target).size == target


def test_large_downscale_takes_two_passes(monkeypatch):
    sizes = []
    real_resize = Image.Image.resize

    def spy(self, size, *args, **kwargs):
        sizes.append(tuple(size))
        return real_resize(self, size, *args, **kwargs)

    monkeypatch.setattr(Image.Image, "resize", spy)
    out = resize_to_exact_size(Image.new("RGB", (1000, 1500)), 100, 150)
    assert out.size == (100, 150)
    # max(0.5, 0.1 * 2) = 0.5 -> halfway stop
    assert sizes == [(500, 750), (100, 150)]


def test_small_change_is_single_pass(monkeypatch):
    sizes = []
    real_resize = Image.Image.resize

    def spy(self, size, *args, **kwargs):
        sizes.append(tuple(size))
        return real_resize(self, size, *args, **kwargs)

    monkeypatch.setattr(Image.Image, "resize", spy)
    resize_to_exact_size(Image.new("RGB", (300, 450)), 200, 300)
    assert sizes == [(200, 300)]


def test_clamp_area_preserves_aspect():
    limits = CanvasLimits(max_area=10_000, max_dimension=1_000)
    w, h, clamped = clamp_to_limits(400, 600, limits)
    assert clamped
    assert w * h <= 10_000
    assert w / h == pytest.approx(400 / 600, rel=0.02)


def test_clamp_single_axis():
    limits = CanvasLimits(max_area=10 ** 9, max_dimension=500)
    w, h, clamped = clamp_to_limits(2000, 400, limits)
    assert clamped
    assert (w, h) == (500, 100)


def test_clamp_noop_inside_limits():
    assert clamp_to_limits(800, 600) == (800, 600, False)


def test_resize_clamps_and_warns(caplog):
    limits = CanvasLimits(max_area=40_000, max_dimension=1_000)
    with pytest.warns(ResourceLimitWarning):
        out = resize_to_exact_size(Image.new("RGB", (100, 150)), 400, 600, limits)
    assert out.width * out.height <= 40_000
    assert out.width / out.height == pytest.approx(400 / 600, rel=0.02)
    assert "exceeds raster limits" in caplog.text
