import logging

from fastapi import APIRouter

from elara.core.dependencies import ScanServiceDep
from elara.core.errors import ApiError
from elara.models.schemas import ErrorResponse, ScanPathsRequest, ScanPathsResponse
from elara.services.scanner import InvalidPathsError, ScanService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


@router.post(
    "/scan-paths",
    response_model=ScanPathsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def scan_paths(payload: ScanPathsRequest, scan_service: ScanService = ScanServiceDep):
    """Metadata for local files, served from the mtime+size cache when fresh."""
    try:
        items = scan_service.scan_paths(payload.paths)
    except InvalidPathsError:
        raise ApiError(400, "paths_required")
    except Exception:
        logger.exception("Scan failed")
        raise ApiError(500, "scan_failed")

    return ScanPathsResponse(items=items)
