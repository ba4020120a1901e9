from typing import Dict, Optional

from fastapi import APIRouter

from elara.core.dependencies import PlaysServiceDep
from elara.core.errors import ApiError
from elara.models.schemas import ErrorResponse, PlayCount, SetCountRequest
from elara.services.plays import InvalidCountError, PlaysService

router = APIRouter(prefix="/api/plays")


@router.get("", response_model=Dict[str, int])
def get_plays(plays_service: PlaysService = PlaysServiceDep):
    return plays_service.get_all()


@router.post("/{track_id}", response_model=PlayCount)
def record_play(track_id: str, plays_service: PlaysService = PlaysServiceDep):
    return plays_service.increment(track_id)


@router.put("/{track_id}", response_model=PlayCount, responses={400: {"model": ErrorResponse}})
def set_plays(
    track_id: str,
    payload: Optional[SetCountRequest] = None,
    plays_service: PlaysService = PlaysServiceDep,
):
    count = payload.count if payload is not None else None
    try:
        return plays_service.set_count(track_id, count)
    except InvalidCountError:
        raise ApiError(400, "invalid_count")
