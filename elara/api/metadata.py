"""
Single-file metadata extraction from a multipart upload.
"""
import logging
from typing import Optional

from fastapi import APIRouter, File, UploadFile

from elara.core.config import Settings
from elara.core.dependencies import MetadataServiceDep, SettingsDep
from elara.core.errors import ApiError
from elara.models.schemas import ErrorResponse, UploadMetadataResponse
from elara.services.metadata import MetadataService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


@router.post(
    "/metadata",
    response_model=UploadMetadataResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def extract_upload_metadata(
    file: Optional[UploadFile] = File(None),
    metadata_service: MetadataService = MetadataServiceDep,
    settings: Settings = SettingsDep,
):
    """Parse tags from an uploaded audio file. Every call re-parses."""
    if file is None:
        raise ApiError(400, "file_required")

    data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ApiError(413, "file_too_large")

    try:
        return metadata_service.describe_upload(
            data,
            filename=file.filename or "upload",
            content_type=file.content_type,
            size=len(data),
        )
    except Exception:
        logger.exception(f"Metadata extraction failed for {file.filename}")
        raise ApiError(500, "metadata_parse_failed")
