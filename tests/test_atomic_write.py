"""Tests for atomic write utilities."""

import concurrent.futures
import json
import pytest
from pathlib import Path
from unittest.mock import patch

from savepattern.atomic_write import atomic_bytes_write, atomic_json_write


class TestAtomicBytesWrite:
    """Test atomic_bytes_write function."""

    def test_basic_write(self, tmp_path):
        target = tmp_path / "blob.bin"
        atomic_bytes_write(target, b"\x00\x01\x02")
        assert target.read_bytes() == b"\x00\x01\x02"

    def test_overwrites_existing(self, tmp_path):
        target = tmp_path / "blob.bin"
        target.write_bytes(b"old")
        atomic_bytes_write(target, b"new")
        assert target.read_bytes() == b"new"

    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "sub" / "dir" / "blob.bin"
        atomic_bytes_write(target, b"nested")
        assert target.read_bytes() == b"nested"

    def test_no_tmp_file_on_success(self, tmp_path):
        target = tmp_path / "blob.bin"
        atomic_bytes_write(target, b"data")
        assert list(tmp_path.iterdir()) == [target]

    def test_preserves_original_when_write_fails(self, tmp_path):
        """A failure mid-write leaves the previous file intact and no tmp behind."""
        target = tmp_path / "blob.bin"
        target.write_bytes(b"original")

        with patch("savepattern.atomic_write.os.fsync", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                atomic_bytes_write(target, b"replacement")

        assert target.read_bytes() == b"original"
        assert list(tmp_path.iterdir()) == [target]

    def test_accepts_string_path(self, tmp_path):
        target = str(tmp_path / "blob.bin")
        atomic_bytes_write(target, b"abc")
        assert Path(target).read_bytes() == b"abc"

    def test_uses_rename(self, tmp_path):
        """Verifies the rename (replace) pattern is used."""
        target = tmp_path / "blob.bin"

        original_replace = Path.replace
        replace_called = []

        def tracking_replace(self_path, target_path):
            replace_called.append((str(self_path), str(target_path)))
            return original_replace(self_path, target_path)

        with patch.object(Path, "replace", tracking_replace):
            atomic_bytes_write(target, b"data")

        assert len(replace_called) == 1
        assert replace_called[0][0].endswith(".tmp")

    def test_each_write_uses_its_own_tmp_file(self, tmp_path):
        target = tmp_path / "blob.bin"
        original_replace = Path.replace
        sources = []

        def tracking_replace(self_path, target_path):
            sources.append(self_path)
            return original_replace(self_path, target_path)

        with patch.object(Path, "replace", tracking_replace):
            atomic_bytes_write(target, b"one")
            atomic_bytes_write(target, b"two")

        assert len(sources) == 2
        assert sources[0] != sources[1]
        assert all(s.parent == tmp_path for s in sources)

    def test_concurrent_writers_never_tear(self, tmp_path):
        """Overlapping writers to one path publish a whole payload, never a mix."""
        target = tmp_path / "blob.bin"
        payloads = [bytes([i]) * 200_000 for i in range(8)]

        with concurrent.futures.ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda p: atomic_bytes_write(target, p), payloads))

        assert target.read_bytes() in payloads
        assert list(tmp_path.iterdir()) == [target]


class TestAtomicJsonWrite:
    """Test atomic_json_write function."""

    def test_round_trip(self, tmp_path):
        target = tmp_path / "test.json"
        data = {"key": "value", "number": 42}
        atomic_json_write(target, data)
        assert json.loads(target.read_text()) == data

    def test_write_with_indent(self, tmp_path):
        target = tmp_path / "test.json"
        atomic_json_write(target, {"a": 1}, indent=2)
        assert "  " in target.read_text()

    def test_unserializable_never_touches_disk(self, tmp_path):
        target = tmp_path / "test.json"
        target.write_text('{"original": true}')

        class Unserializable:
            pass

        with pytest.raises(TypeError):
            atomic_json_write(target, {"bad": Unserializable()})

        assert json.loads(target.read_text()) == {"original": True}
        assert list(tmp_path.iterdir()) == [target]
