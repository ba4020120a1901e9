import logging
import mimetypes
import time
import uuid
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "jpg"
PUBLIC_PREFIX = "/uploads"


def extension_for(mime: Optional[str]) -> str:
    """File extension for an image MIME type, `jpg` when unknown."""
    if not mime:
        return DEFAULT_EXTENSION
    # mimetypes maps image/jpeg to .jpg on current interpreters but not all platforms
    if mime.lower() in ("image/jpeg", "image/jpg"):
        return "jpg"
    ext = mimetypes.guess_extension(mime.lower(), strict=False)
    return ext.lstrip(".") if ext else DEFAULT_EXTENSION


class CoverWriter:
    """Writes extracted cover art into the public uploads directory."""

    def __init__(self, uploads_dir: Union[str, Path]):
        self.uploads_dir = Path(uploads_dir)

    def write(self, data: bytes, mime: Optional[str] = None) -> str:
        """
        Persist image bytes under a unique name.

        Returns:
            Public URL of the image, e.g. /uploads/cover-1700000000000-3f9a.jpg
        """
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        filename = f"cover-{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}.{extension_for(mime)}"
        (self.uploads_dir / filename).write_bytes(data)
        logger.debug(f"Wrote cover {filename} ({len(data)} bytes)")
        return f"{PUBLIC_PREFIX}/{filename}"
