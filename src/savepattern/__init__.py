"""
SavePattern - tiled patterns, freehand strokes, and a local gallery.

Compose a pattern over two colors, draw on top, rasterize to a fixed
200x200 bitmap, and keep the results in a gallery persisted as one blob.
"""

__version__ = "0.1.0"

from .errors import (
    SavePatternError,
    InvalidPatternKind,
    DecodeError,
    IndexOutOfRange,
    StorageError,
)
from .pattern import PatternKind, PatternSpec, Stroke, CANVAS_WIDTH, CANVAS_HEIGHT
from .colors import ResolvedColor, Unresolved, resolve_color, with_fallback, FALLBACK_COLOR
from .session import DrawingSession
from .raster import RasterImage, rasterize
from .codec import encode, decode
from .storage import KeyValueStore, MemoryKeyValueStore, FileKeyValueStore, SqliteKeyValueStore
from .gallery import Gallery, GalleryEntry, GalleryStore
from .config import (
    RenderConfig,
    GalleryConfig,
    SavePatternConfig,
    ConfigManager,
    get_config_manager,
)
from .studio import PatternStudio

__all__ = [
    "SavePatternError",
    "InvalidPatternKind",
    "DecodeError",
    "IndexOutOfRange",
    "StorageError",
    "PatternKind",
    "PatternSpec",
    "Stroke",
    "CANVAS_WIDTH",
    "CANVAS_HEIGHT",
    "ResolvedColor",
    "Unresolved",
    "resolve_color",
    "with_fallback",
    "FALLBACK_COLOR",
    "DrawingSession",
    "RasterImage",
    "rasterize",
    "encode",
    "decode",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "FileKeyValueStore",
    "SqliteKeyValueStore",
    "Gallery",
    "GalleryEntry",
    "GalleryStore",
    "RenderConfig",
    "GalleryConfig",
    "SavePatternConfig",
    "ConfigManager",
    "get_config_manager",
    "PatternStudio",
]
