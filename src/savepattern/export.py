"""Export payloads for share, copy and download actions.

The UI hands these to the system share sheet, clipboard or photo library.
"""

import base64
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from . import codec
from .atomic_write import atomic_bytes_write
from .raster import RasterImage


def to_base64_png(image: RasterImage) -> str:
    """PNG bytes as base64 text (clipboard / share payload)."""
    return base64.b64encode(codec.encode(image)).decode("ascii")


def to_data_uri(image: RasterImage) -> str:
    """Inline PNG for HTML previews: data:image/png;base64,..."""
    return f"data:image/png;base64,{to_base64_png(image)}"


def export_png(
    image: RasterImage,
    directory: Union[str, Path],
    name: Optional[str] = None,
) -> Path:
    """Write image as a PNG file and return its path.

    Without a name the file is pattern_<timestamp>.png; an existing file
    is never overwritten, a numeric suffix is added instead.
    """
    directory = Path(directory).expanduser()
    stem = name or f"pattern_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    filepath = directory / f"{stem}.png"
    counter = 1
    while filepath.exists():
        filepath = directory / f"{stem}_{counter}.png"
        counter += 1

    atomic_bytes_write(filepath, codec.encode(image))
    print(f"[Export] Saved pattern to {filepath}", file=sys.stderr, flush=True)
    return filepath
