"""
Rasterizer - PatternSpec + strokes → fixed 200×200 RGBA image.

Deterministic and pure: same inputs give byte-identical output.

Drawing order:
1. Fill the canvas with the primary color
2. Tile the secondary color by the pattern kind
3. Overlay strokes as 2px black polylines, in recorded order

Each layer is drawn onto a transparent sheet and alpha-composited onto the
canvas, so translucent colors blend source-over and opaque ones replace.
"""

import sys
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .colors import ResolvedColor, Unresolved, resolve_color, with_fallback
from .config import RenderConfig
from .pattern import CANVAS_HEIGHT, CANVAS_WIDTH, PatternKind, PatternSpec, Stroke


# Tiling geometry
STRIPE_STEP = 20
STRIPE_WIDTH = 10
DOT_ORIGIN = 20
DOT_STEP = 40
DOT_SIZE = 20
CHECKER_STEP = 40
CHECKER_PERIOD = 80

TRANSPARENT = (0, 0, 0, 0)


@dataclass(frozen=True)
class RasterImage:
    """Immutable RGBA8 pixel buffer, row-major, 4 bytes per pixel."""
    data: bytes
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT

    def __post_init__(self):
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(
                f"RGBA buffer for {self.width}x{self.height} needs {expected} bytes, got {len(self.data)}"
            )

    @classmethod
    def filled(cls, color: Tuple[int, int, int, int]) -> "RasterImage":
        """Canvas-sized image of a single color."""
        return cls(bytes(color) * (CANVAS_WIDTH * CANVAS_HEIGHT))

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        return cls(image.tobytes(), width, height)

    def to_pil(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), self.data)

    def to_array(self) -> np.ndarray:
        """Read-only (height, width, 4) uint8 view, for preview renderers."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        i = (y * self.width + x) * 4
        return tuple(self.data[i:i + 4])


def _paint_stripes(draw: ImageDraw.ImageDraw, color: Tuple[int, int, int, int]):
    for i in range(0, CANVAS_WIDTH, STRIPE_STEP):
        # PIL rectangles include their far edge
        draw.rectangle([i, 0, i + STRIPE_WIDTH - 1, CANVAS_HEIGHT - 1], fill=color)


def _paint_polka_dots(draw: ImageDraw.ImageDraw, color: Tuple[int, int, int, int]):
    for x in range(DOT_ORIGIN, CANVAS_WIDTH, DOT_STEP):
        for y in range(DOT_ORIGIN, CANVAS_HEIGHT, DOT_STEP):
            draw.ellipse([x, y, x + DOT_SIZE - 1, y + DOT_SIZE - 1], fill=color)


def _paint_checkerboard(draw: ImageDraw.ImageDraw, color: Tuple[int, int, int, int]):
    for x in range(0, CANVAS_WIDTH, CHECKER_STEP):
        for y in range(0, CANVAS_HEIGHT, CHECKER_STEP):
            if (x + y) % CHECKER_PERIOD == 0:
                draw.rectangle([x, y, x + CHECKER_STEP - 1, y + CHECKER_STEP - 1], fill=color)


_TILE_PAINTERS = {
    PatternKind.STRIPES: _paint_stripes,
    PatternKind.POLKA_DOTS: _paint_polka_dots,
    PatternKind.CHECKERBOARD: _paint_checkerboard,
}


def _resolve(value, role: str, fallback) -> ResolvedColor:
    result = resolve_color(value)
    if isinstance(result, Unresolved):
        print(
            f"[Raster] Warning: {role} color unresolved ({result.reason}), "
            f"painting with fallback {fallback}",
            file=sys.stderr, flush=True,
        )
    return with_fallback(result, fallback)


def _new_layer() -> Tuple[Image.Image, ImageDraw.ImageDraw]:
    layer = Image.new("RGBA", (CANVAS_WIDTH, CANVAS_HEIGHT), TRANSPARENT)
    return layer, ImageDraw.Draw(layer)


def rasterize(
    spec: PatternSpec,
    strokes: Iterable[Stroke] = (),
    config: Optional[RenderConfig] = None,
) -> RasterImage:
    """Render a pattern and its strokes.

    Raises:
        InvalidPatternKind: before anything is drawn, if spec.kind is not a
            built-in tiling rule.
    """
    kind = PatternKind.parse(spec.kind)
    strokes = tuple(strokes)
    if config is None:
        config = RenderConfig()

    primary = _resolve(spec.primary_color, "primary", config.fallback_color)
    secondary = _resolve(spec.secondary_color, "secondary", config.fallback_color)

    canvas = Image.new("RGBA", (CANVAS_WIDTH, CANVAS_HEIGHT), primary.rgba)

    tiles, draw = _new_layer()
    _TILE_PAINTERS[kind](draw, secondary.rgba)
    canvas = Image.alpha_composite(canvas, tiles)

    drawable = [s for s in strokes if len(s.points) >= 2]
    if drawable:
        ink, draw = _new_layer()
        for stroke in drawable:
            draw.line(list(stroke.points), fill=tuple(config.stroke_color), width=config.stroke_width)
        canvas = Image.alpha_composite(canvas, ink)

    return RasterImage.from_pil(canvas)
