"""
Configuration - how patterns are drawn and where the gallery lives.

Rendering values default to the fixed canvas rules (2px black strokes,
pure red fallback). Gallery values choose the persistence backend.
"""

import json
import sys
import yaml
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Tuple, Optional, Dict, Any

from .atomic_write import atomic_json_write
from .colors import BLACK, FALLBACK_COLOR, is_channel


GALLERY_KEY = "savedPatterns"
BACKENDS = ("file", "sqlite", "memory")


def _default_data_dir() -> str:
    return str(Path.home() / ".savepattern")


def _is_rgba(value: Any) -> bool:
    return (
        isinstance(value, (tuple, list))
        and len(value) == 4
        and all(is_channel(c) for c in value)
    )


@dataclass
class RenderConfig:
    """Rasterizer settings."""
    stroke_width: int = 2
    stroke_color: Tuple[int, int, int, int] = BLACK
    fallback_color: Tuple[int, int, int, int] = FALLBACK_COLOR  # Used when a color can't be resolved

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["stroke_color"] = list(self.stroke_color)
        data["fallback_color"] = list(self.fallback_color)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderConfig":
        data = dict(data)
        for key in ("stroke_color", "fallback_color"):
            if key in data and isinstance(data[key], list):
                data[key] = tuple(data[key])
        return cls(**data)

    def validate(self) -> Tuple[bool, Optional[str]]:
        if not isinstance(self.stroke_width, int) or self.stroke_width < 1:
            return False, "stroke_width must be a positive integer"
        if not _is_rgba(self.stroke_color):
            return False, "stroke_color must be 4 channels 0-255"
        if not _is_rgba(self.fallback_color):
            return False, "fallback_color must be 4 channels 0-255"
        return True, None


@dataclass
class GalleryConfig:
    """Gallery persistence settings."""
    backend: str = "file"  # "file", "sqlite", "memory"
    path: str = field(default_factory=_default_data_dir)
    key: str = GALLERY_KEY
    export_dir: Optional[str] = None  # Defaults to <path>/exports

    def resolved_export_dir(self) -> Path:
        if self.export_dir:
            return Path(self.export_dir).expanduser()
        return Path(self.path).expanduser() / "exports"

    def validate(self) -> Tuple[bool, Optional[str]]:
        if self.backend not in BACKENDS:
            return False, f"backend must be one of {', '.join(BACKENDS)}"
        if not self.key:
            return False, "key must not be empty"
        if self.backend != "memory" and not self.path:
            return False, "path is required for persistent backends"
        return True, None


@dataclass
class SavePatternConfig:
    """Complete configuration for savepattern."""
    render: RenderConfig = field(default_factory=RenderConfig)
    gallery: GalleryConfig = field(default_factory=GalleryConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "render": self.render.to_dict(),
            "gallery": asdict(self.gallery),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavePatternConfig":
        return cls(
            render=RenderConfig.from_dict(data.get("render") or {}),
            gallery=GalleryConfig(**(data.get("gallery") or {})),
        )

    def validate(self) -> Tuple[bool, Optional[str]]:
        valid, error = self.render.validate()
        if not valid:
            return False, f"Render: {error}"
        valid, error = self.gallery.validate()
        if not valid:
            return False, f"Gallery: {error}"
        return True, None


class ConfigManager:
    """Manages configuration loading and saving."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to config file (default: savepattern.yaml in current dir)
        """
        if config_path is None:
            config_path = Path("savepattern.yaml")
        self.config_path = Path(config_path)
        self._config: Optional[SavePatternConfig] = None

    def _is_yaml(self) -> bool:
        return self.config_path.suffix in (".yaml", ".yml")

    def load(self, force_reload: bool = False) -> SavePatternConfig:
        """Load configuration from file or return defaults."""
        if self._config is not None and not force_reload:
            return self._config

        if not self.config_path.exists():
            self._config = SavePatternConfig()
            return self._config

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f) if self._is_yaml() else json.load(f)
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ValueError("config root must be a mapping")
            config = SavePatternConfig.from_dict(data)
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            print(f"[Config] Error loading config, using defaults: {e}", file=sys.stderr, flush=True)
            self._config = SavePatternConfig()
            return self._config

        valid, error = config.validate()
        if not valid:
            print(f"[Config] Warning: Invalid config, using defaults: {error}", file=sys.stderr, flush=True)
            config = SavePatternConfig()

        self._config = config
        return self._config

    def save(self, config: Optional[SavePatternConfig] = None) -> bool:
        """
        Save configuration to file.

        Returns:
            True if saved successfully
        """
        if config is None:
            config = self._config or self.load()

        valid, error = config.validate()
        if not valid:
            print(f"[Config] Cannot save invalid config: {error}", file=sys.stderr, flush=True)
            return False

        try:
            data = config.to_dict()
            if self._is_yaml():
                text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
                self.config_path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.config_path, "w") as f:
                    f.write(text)
            else:
                atomic_json_write(self.config_path, data, indent=2)
        except OSError as e:
            print(f"[Config] Error saving config: {e}", file=sys.stderr, flush=True)
            return False

        self._config = config
        return True

    def reload(self) -> SavePatternConfig:
        """Force reload configuration from file."""
        self._config = None
        return self.load()

    def get_gallery_config(self) -> GalleryConfig:
        return self.load().gallery

    def build_kv_store(self):
        """Construct the key/value backend named by the gallery config."""
        from .storage import FileKeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore

        gallery = self.get_gallery_config()
        if gallery.backend == "memory":
            return MemoryKeyValueStore()
        base = Path(gallery.path).expanduser()
        if gallery.backend == "sqlite":
            return SqliteKeyValueStore(db_path=str(base / "savepattern.db"))
        return FileKeyValueStore(base / "store")


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[Path] = None) -> ConfigManager:
    """Get global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_path)
    return _config_manager

