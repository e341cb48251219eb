"""
Pattern model - what the user composed before it becomes pixels.

A PatternSpec is an immutable description: two colors and one of the three
built-in tiling rules. Strokes are the freehand lines drawn on top.
Neither is persisted; only the rasterized output is.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Tuple

from .errors import InvalidPatternKind


# Logical canvas - every pattern is drawn on this fixed square
CANVAS_WIDTH = 200
CANVAS_HEIGHT = 200

Point = Tuple[float, float]


class PatternKind(Enum):
    """The three built-in tiling rules."""
    STRIPES = "stripes"
    POLKA_DOTS = "polka_dots"
    CHECKERBOARD = "checkerboard"

    @property
    def label(self) -> str:
        """Display label, as shown by the pattern picker."""
        return _LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> "PatternKind":
        """Accept the enum, its value, or its display label.

        Raises:
            InvalidPatternKind: for anything else. Unknown kinds are never
                silently defaulted.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for kind in cls:
                if key == kind.value or key == kind.label or key.upper() == kind.name:
                    return kind
        raise InvalidPatternKind(value)


_LABELS = {
    PatternKind.STRIPES: "Stripes",
    PatternKind.POLKA_DOTS: "Polka Dots",
    PatternKind.CHECKERBOARD: "Checkerboard",
}


def _new_pattern_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class PatternSpec:
    """Immutable description of one pattern.

    Colors are kept as given; they are resolved to RGBA at render time so an
    unresolvable color degrades to the fallback instead of failing here.
    """
    primary_color: Any
    secondary_color: Any
    kind: PatternKind
    id: str = field(default_factory=_new_pattern_id)

    def __post_init__(self):
        # frozen: go through object.__setattr__ to normalize the kind
        object.__setattr__(self, "kind", PatternKind.parse(self.kind))


@dataclass(frozen=True)
class Stroke:
    """One continuous freehand line, as an ordered point sequence."""
    points: Tuple[Point, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "points", tuple((float(x), float(y)) for x, y in self.points)
        )

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "Stroke":
        return cls(points=tuple(points))

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points
