"""
Drawing session - pointer events → strokes.

The UI feeds one ordered event stream: begin (pointer down), extend
(pointer move)*, end (pointer up). Only finished strokes are visible to the
rasterizer; the stroke being drawn is never read mid-gesture.
"""

import threading
from typing import List, Optional, Tuple

from .pattern import Point, Stroke


class DrawingSession:
    """Append-only stroke recorder for one drawing session."""

    def __init__(self):
        self._strokes: List[Stroke] = []
        self._current: Optional[List[Point]] = None
        self._lock = threading.Lock()

    @property
    def is_drawing(self) -> bool:
        """True between begin() and end()."""
        return self._current is not None

    def begin(self, point: Optional[Point] = None) -> None:
        """Pointer down. Starts a new stroke, optionally with its first point.

        A begin() while a stroke is open ends that stroke first.
        """
        with self._lock:
            if self._current is not None:
                self._finish_locked()
            self._current = [] if point is None else [point]

    def extend(self, point: Point) -> None:
        """Pointer move. Appends to the open stroke (opens one if needed)."""
        with self._lock:
            if self._current is None:
                self._current = []
            self._current.append(point)

    def end(self) -> Optional[Stroke]:
        """Pointer up. Freezes the open stroke and returns it."""
        with self._lock:
            if self._current is None:
                return None
            return self._finish_locked()

    def _finish_locked(self) -> Stroke:
        stroke = Stroke.from_points(self._current)
        self._strokes.append(stroke)
        self._current = None
        return stroke

    def strokes(self) -> Tuple[Stroke, ...]:
        """Snapshot of finished strokes, in recorded order."""
        with self._lock:
            return tuple(self._strokes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._strokes)
