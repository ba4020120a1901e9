"""
Lite metadata derivation and the single-file upload flow.
"""
import logging
from pathlib import PurePath
from typing import Optional

from elara.models.schemas import MetadataLite, UploadMetadataResponse
from elara.services.covers import CoverWriter
from elara.services.extractor import MetadataExtractor, TagData

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


def file_stem(name: str) -> str:
    """Filename without directory or final extension."""
    # PurePath handles both upload names and absolute paths
    return PurePath(name).stem


def build_lite(tags: TagData, source_name: str, cover_url: Optional[str] = None) -> MetadataLite:
    """Apply default filling to extracted tags."""
    return MetadataLite(
        title=tags.title or file_stem(source_name),
        artist=tags.artist or UNKNOWN,
        album=tags.album or UNKNOWN,
        duration=tags.duration if isinstance(tags.duration, (int, float)) else None,
        cover_url=cover_url,
    )


class MetadataService:
    """Extracts lite metadata, materializing embedded cover art."""

    def __init__(self, extractor: MetadataExtractor, covers: CoverWriter):
        self.extractor = extractor
        self.covers = covers

    def lite_from_tags(self, tags: TagData, source_name: str) -> MetadataLite:
        cover_url = None
        if tags.picture:
            cover_url = self.covers.write(tags.picture, tags.picture_mime)
        return build_lite(tags, source_name, cover_url)

    def describe_upload(
        self,
        data: bytes,
        filename: str,
        content_type: Optional[str] = None,
        size: Optional[int] = None,
    ) -> UploadMetadataResponse:
        """
        Extract metadata from an uploaded file held in memory. Never cached.

        Raises:
            ExtractionError: if the buffer is not a parseable audio file
        """
        logger.info(f"Extracting metadata from upload {filename} ({content_type}, {size or len(data)} bytes)")
        tags = self.extractor.extract(data, filename=filename)
        lite = self.lite_from_tags(tags, filename)
        return UploadMetadataResponse(source_name=filename, **lite.model_dump())
