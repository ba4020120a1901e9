"""
Batch metadata lookup for filesystem paths with an mtime+size cache.

For each path the cached entry is reused while the file's modification
time and size are unchanged; otherwise the file is re-extracted and the
entry overwritten. Per-path failures are reported inline and never abort
the batch. New entries are persisted with a single store update.
"""

import logging
import os
from typing import Any, Dict, List

from elara.models.schemas import CacheEntry
from elara.services.metadata import MetadataService
from elara.services.store import JsonStore

logger = logging.getLogger(__name__)

UNREADABLE = "unreadable"


class InvalidPathsError(ValueError):
    """Raised when the request does not carry a non-empty list of paths."""


class ScanService:
    def __init__(self, store: JsonStore, metadata_service: MetadataService):
        self.store = store
        self.metadata_service = metadata_service

    def scan_paths(self, paths: Any) -> List[Dict[str, Any]]:
        """
        Resolve lite metadata for each path, in input order.

        Args:
            paths: Non-empty list of filesystem paths

        Returns:
            One dict per input path: {"path", **metadata} on success,
            {"path", "error": "unreadable"} on failure

        Raises:
            InvalidPathsError: before any I/O if paths is missing or empty
        """
        if not isinstance(paths, list) or not paths:
            raise InvalidPathsError("paths must be a non-empty list")

        snapshot = self.store.load()
        fresh: Dict[str, CacheEntry] = {}
        results: List[Dict[str, Any]] = []

        for path in paths:
            try:
                st = os.stat(path)
            except (OSError, TypeError, ValueError) as e:
                logger.warning(f"Cannot stat {path!r}: {e}")
                results.append({"path": path, "error": UNREADABLE})
                continue

            mtime_ms = st.st_mtime_ns / 1_000_000
            cached = fresh.get(path) or snapshot.metadata.get(path)
            if cached is not None and cached.is_fresh(mtime_ms, st.st_size):
                logger.debug(f"Cache hit for {path}")
                results.append({"path": path, **cached.meta.model_dump(by_alias=True)})
                continue

            logger.debug(f"Cache miss for {path}, extracting")
            try:
                tags = self.metadata_service.extractor.extract(path)
                meta = self.metadata_service.lite_from_tags(tags, path)
            except Exception as e:
                logger.warning(f"Failed to extract metadata from {path}: {e}")
                results.append({"path": path, "error": UNREADABLE})
                continue

            fresh[path] = CacheEntry(mtime_ms=mtime_ms, size=st.st_size, meta=meta)
            results.append({"path": path, **meta.model_dump(by_alias=True)})

        if fresh:
            self.store.update(lambda data: data.metadata.update(fresh))
            logger.info(f"Scanned {len(paths)} paths, cached {len(fresh)} new entries")

        return results
