"""
Gallery Store - the saved patterns, persisted as one blob.

The whole collection is the unit of storage: every mutation reads the full
list, changes it, and writes the full list back with one atomic set().
Individual entries are never updated in place.

Blob layout (version 1), UTF-8 JSON:
    {"version": 1, "patterns": ["<base64 PNG>", ...]}

A bare JSON list of base64 strings is the legacy layout; it loads fine and is
rewritten in the versioned layout on the next mutation.
"""

import base64
import binascii
import json
import sys
import threading
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from . import codec
from .config import GALLERY_KEY
from .errors import DecodeError, IndexOutOfRange, StorageError
from .raster import RasterImage
from .storage import KeyValueStore

FORMAT_VERSION = 1


@dataclass(frozen=True)
class Gallery:
    """Ordered encoded images. Insertion order is display order."""
    entries: Tuple[bytes, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> bytes:
        return self.entries[index]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.entries)


@dataclass(frozen=True)
class GalleryEntry:
    """A decoded gallery image and its position in the persisted collection."""
    index: int
    image: RasterImage


def serialize_gallery(entries: Tuple[bytes, ...]) -> bytes:
    payload = {
        "version": FORMAT_VERSION,
        "patterns": [base64.b64encode(e).decode("ascii") for e in entries],
    }
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def deserialize_gallery(blob: bytes) -> Tuple[bytes, ...]:
    """Parse a persisted blob.

    Raises:
        ValueError: the blob is not a recognizable collection.
    """
    try:
        data = json.loads(blob.decode("utf-8"))
    except RecursionError as e:
        raise ValueError(f"gallery blob nested too deeply: {e}") from e
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        version = data.get("version")
        if version != FORMAT_VERSION:
            raise ValueError(f"unsupported gallery version {version!r}")
        items = data.get("patterns")
        if not isinstance(items, list):
            raise ValueError("'patterns' must be a list")
    else:
        raise ValueError(f"unexpected gallery root {type(data).__name__}")

    entries = []
    for item in items:
        if not isinstance(item, str):
            raise ValueError("gallery entries must be base64 strings")
        try:
            entries.append(base64.b64decode(item, validate=True))
        except binascii.Error as e:
            raise ValueError(f"bad base64 entry: {e}") from e
    return tuple(entries)


class GalleryStore:
    """Persists the gallery under a single key of an injected store."""

    def __init__(self, store: KeyValueStore, key: str = GALLERY_KEY):
        self._store = store
        self.key = key
        # Serializes read-modify-write cycles within this process
        self._lock = threading.Lock()

    def _read(self) -> Tuple[bytes, ...]:
        blob = self._store.get(self.key)
        if blob is None:
            return ()
        try:
            return deserialize_gallery(blob)
        except (ValueError, UnicodeDecodeError) as e:
            print(f"[Gallery] Malformed gallery blob under {self.key!r}, treating as empty: {e}",
                  file=sys.stderr, flush=True)
            return ()

    def _write(self, entries: Tuple[bytes, ...]) -> Gallery:
        self._store.set(self.key, serialize_gallery(entries))
        return Gallery(entries)

    def load(self) -> Gallery:
        """Current collection. Absent, malformed or unreadable blobs load as empty.

        Mutations don't get this leniency: a read failure there propagates
        as StorageError and nothing is written.
        """
        with self._lock:
            try:
                return Gallery(self._read())
            except StorageError as e:
                print(f"[Gallery] Could not read {self.key!r}, showing empty: {e}",
                      file=sys.stderr, flush=True)
                return Gallery(())

    def load_images(self) -> List[GalleryEntry]:
        """Decode every entry, skipping ones that fail to decode.

        Skipped entries keep their slot, so GalleryEntry.index stays valid
        for remove().
        """
        images = []
        for index, data in enumerate(self.load()):
            try:
                images.append(GalleryEntry(index, codec.decode(data)))
            except DecodeError as e:
                print(f"[Gallery] Skipping entry {index}: {e}", file=sys.stderr, flush=True)
        return images

    def append(self, image: RasterImage) -> Gallery:
        """Encode image and add it to the end of the collection."""
        return self.append_encoded(codec.encode(image), validate=False)

    def append_encoded(self, data: bytes, validate: bool = True) -> Gallery:
        """Add already-encoded bytes to the end of the collection.

        Raises:
            DecodeError: when validate is set and data is not a canvas image.
        """
        data = bytes(data)
        if validate:
            codec.decode(data)
        with self._lock:
            entries = self._read() + (data,)
            gallery = self._write(entries)
        print(f"[Gallery] Saved pattern #{len(gallery)}", file=sys.stderr, flush=True)
        return gallery

    def remove(self, index: int) -> Gallery:
        """Remove the entry at index.

        Raises:
            IndexOutOfRange: index outside [0, len); nothing is written.
        """
        with self._lock:
            entries = self._read()
            if isinstance(index, bool) or not isinstance(index, int) or not (0 <= index < len(entries)):
                raise IndexOutOfRange(index, len(entries))
            return self._write(entries[:index] + entries[index + 1:])

    def remove_image(self, image: RasterImage) -> Gallery:
        """Remove the first entry whose pixels are byte-for-byte equal to image.

        Raises:
            IndexOutOfRange: no entry matches; nothing is written.
        """
        with self._lock:
            entries = self._read()
            for index, data in enumerate(entries):
                try:
                    candidate = codec.decode(data)
                except DecodeError:
                    continue
                if candidate == image:
                    return self._write(entries[:index] + entries[index + 1:])
            raise IndexOutOfRange(None, len(entries))

    def clear(self) -> Gallery:
        """Overwrite the collection with an empty one."""
        with self._lock:
            return self._write(())
