from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class MetadataLite(BaseModel):
    """Default-filled subset of tag data returned to clients."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    artist: str = "Unknown"
    album: str = "Unknown"
    duration: Optional[float] = None
    cover_url: Optional[str] = Field(default=None, alias="coverUrl")


class CacheEntry(BaseModel):
    """Scan cache record, valid while mtime and size match the file on disk."""
    model_config = ConfigDict(populate_by_name=True)

    mtime_ms: float = Field(alias="mtimeMs")
    size: int
    meta: MetadataLite

    def is_fresh(self, mtime_ms: float, size: int) -> bool:
        return self.mtime_ms == mtime_ms and self.size == size


class StoreData(BaseModel):
    plays: Dict[str, int] = Field(default_factory=dict)
    metadata: Dict[str, CacheEntry] = Field(default_factory=dict)


class UploadMetadataResponse(MetadataLite):
    source_name: str = Field(alias="sourceName")


class ScanPathsRequest(BaseModel):
    paths: Optional[List[str]] = None


class ScanPathsResponse(BaseModel):
    items: List[Dict[str, Any]]


class PlayCount(BaseModel):
    id: str
    count: int


class SetCountRequest(BaseModel):
    # Validated by PlaysService so strings and bools are rejected, not coerced
    count: Any = None


class HealthResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str
