"""Root test fixtures for the elara test suite."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from elara.core.config import Settings
from elara.main import create_app
from elara.services.covers import CoverWriter
from elara.services.extractor import ExtractionError, TagData
from elara.services.metadata import MetadataService
from elara.services.store import JsonStore


class FakeExtractor:
    """Records calls; returns preset tags per file name, fails on names containing 'fail'."""

    def __init__(self, tags=None):
        self.tags = tags or {}
        self.calls = []

    def extract(self, source, filename=None):
        key = filename if isinstance(source, bytes) else Path(source).name
        self.calls.append(key)
        if "fail" in key:
            raise ExtractionError(f"cannot parse {key}")
        return self.tags.get(key, TagData(title=f"Title of {key}", artist="Artist", album="Album", duration=180.0))


@pytest.fixture
def fake_extractor():
    return FakeExtractor()


@pytest.fixture
def store(tmp_path):
    return JsonStore(tmp_path / "db.json")


@pytest.fixture
def uploads_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def metadata_service(fake_extractor, uploads_dir):
    return MetadataService(fake_extractor, CoverWriter(uploads_dir))


@pytest.fixture
def isolated_settings(tmp_path):
    """Settings with all on-disk state under tmp_path."""
    return Settings(
        DB_PATH=tmp_path / "db.json",
        UPLOADS_DIR=tmp_path / "uploads",
        EXPENSES_DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'expenses.db'}",
        MAX_UPLOAD_BYTES=1024,
    )


@pytest.fixture
def client(isolated_settings, fake_extractor):
    app = create_app(isolated_settings, extractor=fake_extractor)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def audio_file(tmp_path):
    """Small file on disk standing in for a track; contents are never parsed."""
    path = tmp_path / "music" / "song.mp3"
    path.parent.mkdir()
    path.write_bytes(b"ID3" + b"\x00" * 64)
    return path
