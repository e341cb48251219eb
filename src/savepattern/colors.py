"""Color resolution: user-supplied color values → concrete RGBA.

Channels are integers in [0, 255]. Resolution never raises; a value that
cannot be painted comes back as Unresolved, and with_fallback() is the one
place that substitutes the fallback color.
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union

from PIL import ImageColor


RGBA = Tuple[int, int, int, int]

BLACK: RGBA = (0, 0, 0, 255)
FALLBACK_COLOR: RGBA = (255, 0, 0, 255)  # Pure red


@dataclass(frozen=True)
class ResolvedColor:
    """A paintable RGBA color."""
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self):
        if not all(is_channel(c) for c in (self.r, self.g, self.b, self.a)):
            raise ValueError(f"channels must be integers 0-255, got {(self.r, self.g, self.b, self.a)!r}")

    @property
    def rgba(self) -> RGBA:
        return (self.r, self.g, self.b, self.a)

    @property
    def is_opaque(self) -> bool:
        return self.a == 255


@dataclass(frozen=True)
class Unresolved:
    """A color value that could not be turned into RGBA."""
    value: Any
    reason: str


ColorResult = Union[ResolvedColor, Unresolved]


def is_channel(c: Any) -> bool:
    return isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255


def resolve_color(value: Any) -> ColorResult:
    """Resolve a color value.

    Accepts:
    - ResolvedColor (returned as-is)
    - (r, g, b) or (r, g, b, a) sequences of ints in [0, 255]
    - color strings Pillow understands ("#ff8800", "#ff880080", "navy", "rgb(1,2,3)")
    """
    if isinstance(value, ResolvedColor):
        return value

    if value is None:
        return Unresolved(value, "no color")

    if isinstance(value, str):
        try:
            r, g, b, a = ImageColor.getcolor(value, "RGBA")
        except ValueError as e:
            return Unresolved(value, str(e))
        return ResolvedColor(r, g, b, a)

    if isinstance(value, (tuple, list)):
        if len(value) not in (3, 4):
            return Unresolved(value, f"expected 3 or 4 channels, got {len(value)}")
        if not all(is_channel(c) for c in value):
            return Unresolved(value, "channels must be integers 0-255")
        return ResolvedColor(*value)

    return Unresolved(value, f"unsupported color type {type(value).__name__}")


def with_fallback(result: ColorResult, fallback: RGBA = FALLBACK_COLOR) -> ResolvedColor:
    """Substitute the fallback for an unresolved color."""
    if isinstance(result, ResolvedColor):
        return result
    return ResolvedColor(*fallback)
