"""Tests for elara.services.scanner.ScanService - ordering, caching, invalidation."""

import os

import pytest

from elara.services.extractor import TagData
from elara.services.scanner import InvalidPathsError, ScanService

pytestmark = pytest.mark.integration


@pytest.fixture
def scanner(store, metadata_service):
    return ScanService(store, metadata_service)


def _touch(path, content=b"audio"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return str(path)


class TestValidation:
    @pytest.mark.parametrize("paths", [None, [], "not-a-list", {"a": 1}])
    def test_rejects_missing_or_empty(self, scanner, store, paths):
        with pytest.raises(InvalidPathsError):
            scanner.scan_paths(paths)
        assert not store.path.exists()


class TestScanPaths:
    def test_one_result_per_path_in_order(self, scanner, tmp_path):
        paths = [_touch(tmp_path / name) for name in ["c.mp3", "a.mp3", "b.mp3"]]

        results = scanner.scan_paths(paths)

        assert [r["path"] for r in results] == paths
        assert results[0]["title"] == "Title of c.mp3"

    def test_result_shape(self, scanner, tmp_path):
        path = _touch(tmp_path / "song.mp3")
        [result] = scanner.scan_paths([path])
        assert result == {
            "path": path,
            "title": "Title of song.mp3",
            "artist": "Artist",
            "album": "Album",
            "duration": 180.0,
            "coverUrl": None,
        }

    def test_default_filling(self, scanner, fake_extractor, tmp_path):
        path = _touch(tmp_path / "Untitled Demo.mp3")
        fake_extractor.tags["Untitled Demo.mp3"] = TagData()

        [result] = scanner.scan_paths([path])

        assert result["title"] == "Untitled Demo"
        assert result["artist"] == "Unknown"
        assert result["album"] == "Unknown"
        assert result["duration"] is None

    def test_unreadable_path_does_not_abort(self, scanner, tmp_path):
        good = _touch(tmp_path / "good.mp3")
        missing = str(tmp_path / "missing.mp3")
        broken = _touch(tmp_path / "fail.mp3")
        later = _touch(tmp_path / "later.mp3")

        results = scanner.scan_paths([good, missing, broken, later])

        assert results[1] == {"path": missing, "error": "unreadable"}
        assert results[2] == {"path": broken, "error": "unreadable"}
        assert results[0]["title"] == "Title of good.mp3"
        assert results[3]["title"] == "Title of later.mp3"

    def test_failures_are_not_cached(self, scanner, store, tmp_path):
        broken = _touch(tmp_path / "fail.mp3")
        scanner.scan_paths([broken])
        assert broken not in store.load().metadata

    def test_cover_is_materialized_on_miss(self, scanner, fake_extractor, uploads_dir, tmp_path):
        path = _touch(tmp_path / "art.flac")
        fake_extractor.tags["art.flac"] = TagData(title="Art", picture=b"img", picture_mime="image/png")

        [result] = scanner.scan_paths([path])

        assert result["coverUrl"].endswith(".png")
        assert (uploads_dir / result["coverUrl"].rsplit("/", 1)[1]).read_bytes() == b"img"


class TestCache:
    def test_second_scan_hits_cache(self, scanner, fake_extractor, tmp_path):
        path = _touch(tmp_path / "song.mp3")

        first = scanner.scan_paths([path])
        second = scanner.scan_paths([path])

        assert fake_extractor.calls == ["song.mp3"]
        assert second == first

    def test_duplicate_path_in_batch_extracts_once(self, scanner, fake_extractor, tmp_path):
        path = _touch(tmp_path / "song.mp3")
        results = scanner.scan_paths([path, path])
        assert fake_extractor.calls == ["song.mp3"]
        assert results[0] == results[1]

    def test_entry_persisted_with_stat_values(self, scanner, store, tmp_path):
        path = _touch(tmp_path / "song.mp3", b"12345")
        scanner.scan_paths([path])

        entry = store.load().metadata[path]
        st = os.stat(path)
        assert entry.size == 5
        assert entry.mtime_ms == st.st_mtime_ns / 1_000_000
        assert entry.meta.title == "Title of song.mp3"

    def test_size_change_invalidates(self, scanner, fake_extractor, store, tmp_path):
        path = _touch(tmp_path / "song.mp3", b"short")
        st = os.stat(path)
        scanner.scan_paths([path])

        fake_extractor.tags["song.mp3"] = TagData(title="Retagged")
        with open(path, "ab") as f:
            f.write(b"more")
        os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns))

        [result] = scanner.scan_paths([path])

        assert fake_extractor.calls == ["song.mp3", "song.mp3"]
        assert result["title"] == "Retagged"
        assert store.load().metadata[path].size == 9

    def test_mtime_change_invalidates(self, scanner, fake_extractor, store, tmp_path):
        path = _touch(tmp_path / "song.mp3")
        st = os.stat(path)
        scanner.scan_paths([path])

        new_mtime = st.st_mtime_ns + 5_000_000_000
        os.utime(path, ns=(st.st_atime_ns, new_mtime))
        scanner.scan_paths([path])

        assert fake_extractor.calls == ["song.mp3", "song.mp3"]
        assert store.load().metadata[path].mtime_ms == new_mtime / 1_000_000

    def test_scan_keeps_concurrent_plays(self, scanner, store, tmp_path):
        path = _touch(tmp_path / "song.mp3")
        store.update(lambda data: data.plays.update({"t": 4}))

        scanner.scan_paths([path])

        data = store.load()
        assert data.plays == {"t": 4}
        assert path in data.metadata

    def test_all_hits_skip_store_write(self, scanner, store, tmp_path):
        path = _touch(tmp_path / "song.mp3")
        scanner.scan_paths([path])
        before = store.path.stat().st_mtime_ns

        scanner.scan_paths([path])

        assert store.path.stat().st_mtime_ns == before
