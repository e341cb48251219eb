"""Tests for the PNG codec - round-trip law and decode failures."""

import io
import random

import pytest
from PIL import Image

from conftest import make_spec, solid_image
from savepattern import codec
from savepattern.errors import DecodeError
from savepattern.pattern import PatternKind, Stroke
from savepattern.raster import RasterImage, rasterize


class TestRoundTrip:
    """decode(encode(x)) == x."""

    @pytest.mark.parametrize("color", [(0, 0, 0, 0), (255, 255, 255, 255), (12, 200, 7, 99)])
    def test_solid_buffers(self, color):
        img = solid_image(color)
        assert codec.decode(codec.encode(img)) == img

    def test_random_buffer(self):
        rng = random.Random(1234)
        img = RasterImage(bytes(rng.randrange(256) for _ in range(200 * 200 * 4)))
        assert codec.decode(codec.encode(img)) == img

    @pytest.mark.parametrize("kind", list(PatternKind))
    def test_rasterized_patterns(self, kind):
        stroke = Stroke.from_points([(5, 5), (150, 80), (30, 190)])
        img = rasterize(make_spec(kind, secondary=(0, 0, 255, 77)), [stroke])
        assert codec.decode(codec.encode(img)) == img

    def test_encode_is_png(self):
        data = codec.encode(solid_image((1, 2, 3, 4)))
        assert data.startswith(codec.PNG_SIGNATURE)

    def test_encode_deterministic(self):
        img = solid_image((5, 6, 7, 8))
        assert codec.encode(img) == codec.encode(img)


class TestDecodeErrors:
    """decode() raises DecodeError instead of returning partial images."""

    def test_empty(self):
        with pytest.raises(DecodeError):
            codec.decode(b"")

    def test_not_an_image(self):
        with pytest.raises(DecodeError):
            codec.decode(b"hello, this is not a png at all")

    def test_signature_only(self):
        with pytest.raises(DecodeError):
            codec.decode(codec.PNG_SIGNATURE)

    @pytest.mark.parametrize("keep", [0.25, 0.5, 0.9])
    def test_truncated(self, keep):
        img = rasterize(make_spec(PatternKind.POLKA_DOTS))
        data = codec.encode(img)
        with pytest.raises(DecodeError):
            codec.decode(data[:int(len(data) * keep)])

    def test_wrong_dimensions(self):
        buffer = io.BytesIO()
        Image.new("RGBA", (100, 200), (0, 0, 0, 255)).save(buffer, format="PNG")
        with pytest.raises(DecodeError, match="200x200"):
            codec.decode(buffer.getvalue())

    def test_other_format_rejected(self):
        buffer = io.BytesIO()
        Image.new("RGB", (200, 200), (0, 0, 0)).save(buffer, format="BMP")
        with pytest.raises(DecodeError):
            codec.decode(buffer.getvalue())

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            codec.decode(b"x")


class TestModeConversion:
    """Right-sized PNGs in other modes decode to RGBA."""

    def test_rgb_png(self):
        buffer = io.BytesIO()
        Image.new("RGB", (200, 200), (10, 20, 30)).save(buffer, format="PNG")
        img = codec.decode(buffer.getvalue())
        assert img.pixel(0, 0) == (10, 20, 30, 255)
