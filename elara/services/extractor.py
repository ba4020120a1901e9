"""
Audio tag extraction.

MetadataExtractor is the seam the scan and upload services depend on;
MutagenExtractor is the production backend. Tags are normalized to
canonical fields regardless of container (ID3, Vorbis comments, MP4 atoms).
"""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Union

import mutagen
from mutagen import File
from mutagen.flac import Picture
from mutagen.mp4 import MP4Cover

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes]

TITLE_KEYS = ["TIT2", "title", "\xa9nam"]
ARTIST_KEYS = ["TPE1", "artist", "\xa9ART"]
ALBUM_KEYS = ["TALB", "album", "\xa9alb"]

_MP4_COVER_MIME = {
    MP4Cover.FORMAT_JPEG: "image/jpeg",
    MP4Cover.FORMAT_PNG: "image/png",
}


class ExtractionError(Exception):
    """Raised when a source cannot be parsed as a tagged audio file."""


@dataclass
class TagData:
    title: str | None = None
    artist: str | None = None
    album: str | None = None
    duration: float | None = None
    picture: bytes | None = None
    picture_mime: str | None = None


class MetadataExtractor(Protocol):
    def extract(self, source: Source, filename: str | None = None) -> TagData:
        """Parse a file path or an in-memory buffer. Raises ExtractionError."""
        ...


class MutagenExtractor:
    """MetadataExtractor backed by mutagen."""

    def extract(self, source: Source, filename: str | None = None) -> TagData:
        """
        Extract tag data from a path or raw bytes.

        Args:
            source: Filesystem path, or the file contents
            filename: Original name for in-memory sources; helps mutagen
                pick a format when the header alone is ambiguous

        Returns:
            TagData with whatever fields the file carries
        """
        if isinstance(source, bytes):
            target: Any = io.BytesIO(source)
            if filename:
                target.name = filename
            label = filename or "<upload>"
        else:
            target = str(source)
            label = target

        try:
            audio = File(target)
        except mutagen.MutagenError as e:
            raise ExtractionError(f"Could not parse {label}: {e}") from e

        if audio is None:
            raise ExtractionError(f"Unsupported audio format: {label}")

        tags = audio.tags
        info = getattr(audio, "info", None)
        length = getattr(info, "length", None)
        picture, picture_mime = _extract_picture(audio)

        return TagData(
            title=_get_tag_value(tags, TITLE_KEYS) if tags else None,
            artist=_get_tag_value(tags, ARTIST_KEYS) if tags else None,
            album=_get_tag_value(tags, ALBUM_KEYS) if tags else None,
            duration=float(length) if isinstance(length, (int, float)) else None,
            picture=picture,
            picture_mime=picture_mime,
        )


def _get_tag_value(tags: Any, keys: list[str]) -> str | None:
    """First non-empty value among format-specific keys."""
    for key in keys:
        if key not in tags:
            continue
        value = tags[key]
        if hasattr(value, "text"):
            # ID3 frame
            values = value.text
        elif isinstance(value, list):
            # Vorbis comments, MP4 atoms
            values = value
        else:
            values = [value]
        for item in values:
            text = str(item).strip()
            if text:
                return text
    return None


def _extract_picture(audio: Any) -> tuple[bytes | None, str | None]:
    """First embedded cover image and its MIME type, if any."""
    # FLAC picture blocks
    pictures = getattr(audio, "pictures", None)
    if pictures:
        return bytes(pictures[0].data), pictures[0].mime or None

    tags = audio.tags
    if not tags:
        return None, None

    # ID3 APIC frames
    for key in list(tags.keys()):
        if isinstance(key, str) and key.startswith("APIC"):
            apic = tags[key]
            return bytes(apic.data), apic.mime or None

    # MP4 cover atoms
    if "covr" in tags and tags["covr"]:
        cover = tags["covr"][0]
        return bytes(cover), _MP4_COVER_MIME.get(getattr(cover, "imageformat", None))

    # Ogg Vorbis/Opus base64 FLAC picture blocks
    if "metadata_block_picture" in tags:
        for encoded in tags["metadata_block_picture"]:
            try:
                block = Picture(base64.b64decode(encoded))
            except (ValueError, mutagen.MutagenError) as e:
                logger.debug(f"Skipping undecodable picture block: {e}")
                continue
            return bytes(block.data), block.mime or None

    return None, None
