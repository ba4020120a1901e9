"""
JSON file persistence for play counts and the scan cache.

The whole document is read on every load and rewritten on every save.
Writes go through JsonStore.update(), which serializes read-modify-write
cycles on a per-store lock so concurrent requests cannot drop each
other's keys.

Usage:
    from elara.services.store import JsonStore

    store = JsonStore("db.json")
    count = store.update(lambda data: data.plays.setdefault("track", 0))
"""

import json
import logging
import math
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, TypeVar, Union

from pydantic import ValidationError

from elara.models.schemas import CacheEntry, StoreData

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonStore:
    """Single JSON document holding `plays` and `metadata` maps."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> StoreData:
        """
        Read the backing file.

        Only an unreadable or unparseable file falls back to the empty
        default. Within a parsed document, invalid play counts and cache
        entries are skipped one by one so the rest of the store survives.

        Returns:
            Parsed store, or an empty default when the file is missing,
            unreadable or not a JSON object
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return StoreData()
        except OSError as e:
            logger.warning(f"Could not read store {self.path}: {e}")
            return StoreData()

        try:
            document = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Ignoring unparseable store {self.path}: {e}")
            return StoreData()

        if not isinstance(document, dict):
            logger.warning(f"Ignoring store {self.path}: top level is not an object")
            return StoreData()

        return StoreData(
            plays=_load_plays(document.get("plays")),
            metadata=_load_metadata(document.get("metadata")),
        )

    def save(self, data: StoreData) -> None:
        """Replace the backing file with the serialized store via temp file + rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data.model_dump(by_alias=True), indent=2)

        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp.write(payload)
            tmp_path = tmp.name

        try:
            os.replace(tmp_path, self.path)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def update(self, mutator: Callable[[StoreData], T]) -> T:
        """
        Load, apply `mutator` to the fresh copy, save, and return its result.

        Holding the lock across the whole cycle makes each update atomic
        with respect to other updates on this store.
        """
        with self._lock:
            data = self.load()
            result = mutator(data)
            self.save(data)
            return result


def _load_plays(raw: Any) -> Dict[str, int]:
    """Counters from a parsed document; legacy fractional counts are rounded."""
    if not isinstance(raw, dict):
        return {}

    plays: Dict[str, int] = {}
    for track_id, count in raw.items():
        # bool is an int subclass but never a count
        if isinstance(count, bool) or not isinstance(count, (int, float)) or not math.isfinite(count) or count < 0:
            logger.warning(f"Skipping invalid play count for {track_id!r}: {count!r}")
            continue
        plays[track_id] = int(round(count))
    return plays


def _load_metadata(raw: Any) -> Dict[str, CacheEntry]:
    """Cache entries from a parsed document, dropping any that fail validation."""
    if not isinstance(raw, dict):
        return {}

    metadata: Dict[str, CacheEntry] = {}
    for path, entry in raw.items():
        try:
            metadata[path] = CacheEntry.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Dropping malformed cache entry for {path!r}: {e}")
    return metadata
