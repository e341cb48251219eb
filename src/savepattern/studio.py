"""
Pattern Studio - the entry point the UI talks to.

Wires the rasterizer, codec, gallery store and exports together:
- preview() renders synchronously
- render_async() renders on a single background worker; the Future only
  ever resolves to a complete image
- save(), browse(), delete() go through the GalleryStore, whose lock keeps
  overlapping mutations from interleaving
"""

import concurrent.futures
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .config import ConfigManager, RenderConfig, get_config_manager
from .export import export_png
from .gallery import Gallery, GalleryEntry, GalleryStore
from .pattern import PatternKind, PatternSpec, Stroke
from .raster import RasterImage, rasterize
from .session import DrawingSession


class PatternStudio:
    """Create, save, browse and delete patterns."""

    def __init__(
        self,
        gallery: GalleryStore,
        render_config: Optional[RenderConfig] = None,
        export_dir: Optional[Path] = None,
    ):
        self.gallery = gallery
        self.render_config = render_config or RenderConfig()
        self.export_dir = Path(export_dir) if export_dir else None
        # Single worker: renders complete in submission order
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="savepattern-render"
        )

    @classmethod
    def from_config(cls, manager: Optional[ConfigManager] = None) -> "PatternStudio":
        """Build a studio from the (global) configuration."""
        manager = manager or get_config_manager()
        config = manager.load()
        store = GalleryStore(manager.build_kv_store(), key=config.gallery.key)
        return cls(
            store,
            render_config=config.render,
            export_dir=config.gallery.resolved_export_dir(),
        )

    @staticmethod
    def new_spec(primary_color, secondary_color, kind) -> PatternSpec:
        """PatternSpec from raw picker values; kind may be a label like "Polka Dots"."""
        return PatternSpec(primary_color, secondary_color, PatternKind.parse(kind))

    @staticmethod
    def new_session() -> DrawingSession:
        return DrawingSession()

    def preview(self, spec: PatternSpec, strokes: Iterable[Stroke] = ()) -> RasterImage:
        return rasterize(spec, strokes, self.render_config)

    def render_async(
        self, spec: PatternSpec, strokes: Iterable[Stroke] = ()
    ) -> "concurrent.futures.Future[RasterImage]":
        """Render off the calling thread.

        Strokes are snapshotted now; strokes added afterwards don't affect
        this render.
        """
        snapshot = tuple(strokes)
        return self._executor.submit(rasterize, spec, snapshot, self.render_config)

    def save(self, spec: PatternSpec, strokes: Iterable[Stroke] = ()) -> Tuple[RasterImage, Gallery]:
        """Rasterize and append to the gallery."""
        image = self.preview(spec, strokes)
        gallery = self.gallery.append(image)
        return image, gallery

    def browse(self) -> List[GalleryEntry]:
        return self.gallery.load_images()

    def delete(self, index: int) -> Gallery:
        gallery = self.gallery.remove(index)
        print(f"[Studio] Deleted pattern at {index}, {len(gallery)} remaining", file=sys.stderr, flush=True)
        return gallery

    def export(self, image: RasterImage, name: Optional[str] = None) -> Path:
        """Download action: write image to the export directory."""
        if self.export_dir is None:
            raise ValueError("No export directory configured")
        return export_png(image, self.export_dir, name=name)

    def close(self):
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "PatternStudio":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
