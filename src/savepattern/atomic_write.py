"""Atomic file writes for crash-safe persistence.

Uses the write-to-temp-then-rename pattern:
1. Write to a uniquely named .tmp file in the same directory
2. Flush + fsync the file descriptor
3. Path.replace() onto the target path (atomic on POSIX)

Readers see either the previous file or the new one, never a torn write.
Each writer gets its own tmp file, so concurrent writers to the same path
never share an inode; the last replace() wins.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union


def atomic_bytes_write(path: Union[str, Path], data: bytes) -> None:
    """Write raw bytes to path atomically.

    Args:
        path: Target file path.
        data: Bytes to store.

    Raises:
        Any exception from file I/O. The tmp file is cleaned up on error.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name + ".", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except BaseException:
        # Clean up tmp file on any error (including KeyboardInterrupt)
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def atomic_json_write(
    path: Union[str, Path],
    data: Any,
    *,
    indent: int = None,
) -> None:
    """Write data as JSON to path atomically.

    Serialization happens before the tmp file is opened, so an unserializable
    value never touches the filesystem.
    """
    payload = json.dumps(data, indent=indent).encode("utf-8")
    atomic_bytes_write(path, payload)
