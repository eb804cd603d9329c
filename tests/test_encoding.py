import io

import pytest
from PIL import Image

from printpack.imaging import encoding
from printpack.imaging.encoding import encode_jpeg, encode_preview, pillow_quality
from printpack.imaging.errors import EncodingError


def test_quality_mapping():
    assert pillow_quality(0.9) == 90
    assert pillow_quality(1.0) == 100
    assert pillow_quality(0.1) == 10


def test_primary_encoder_tags_dpi():
    data = encode_jpeg(Image.new("RGB", (64, 48), (200, 100, 50)), 0.9, dpi=300)
    with Image.open(io.BytesIO(data)) as im:
        assert im.format == "JPEG"
        assert im.size == (64, 48)
        assert tuple(round(v) for v in im.info["dpi"]) == (300, 300)


def test_fallback_handles_rgba():
    # JPEG cannot store alpha, so the primary path fails
    data = encode_jpeg(Image.new("RGBA", (32, 32), (10, 20, 30, 128)), 0.8)
    assert data.startswith(b"\xff\xd8")


def test_empty_primary_output_uses_fallback(monkeypatch):
    monkeypatch.setattr(encoding, "_save_primary", lambda image, quality, dpi: b"")
    data = encode_jpeg(Image.new("RGB", (8, 8)), 0.8)
    assert data.startswith(b"\xff\xd8")


def test_both_paths_failing_raises(monkeypatch):
    def broken(image, quality, dpi):
        raise OSError("encoder unavailable")

    monkeypatch.setattr(encoding, "_save_fallback", broken)
    with pytest.raises(EncodingError):
        encode_jpeg(Image.new("RGBA", (8, 8)), 0.8)


def test_preview_is_small():
    data = encode_preview(Image.new("RGB", (2048, 1024)), max_dimension=512)
    with Image.open(io.BytesIO(data)) as im:
        assert im.size == (512, 256)


def test_fallback_keeps_dpi(monkeypatch):
    def broken(image, quality, dpi):
        raise OSError("primary unavailable")

    monkeypatch.setattr(encoding, "_save_primary", broken)
    data = encode_jpeg(Image.new("RGB", (16, 16)), 0.8, dpi=300)
    with Image.open(io.BytesIO(data)) as im:
        assert tuple(round(v) for v in im.info["dpi"]) == (300, 300)
