import logging
from typing import Any, Dict

from elara.models.schemas import PlayCount
from elara.services.store import JsonStore

logger = logging.getLogger(__name__)


class InvalidCountError(ValueError):
    """Raised when a play count is not a non-negative whole number."""


def validate_count(count: Any) -> int:
    # bool is an int subclass but never a count
    if isinstance(count, bool) or not isinstance(count, (int, float)):
        raise InvalidCountError("count must be a number")
    if count < 0:
        raise InvalidCountError("count must be >= 0")
    if isinstance(count, float) and not count.is_integer():
        raise InvalidCountError("count must be a whole number")
    return int(count)


class PlaysService:
    """Play counters keyed by an opaque track identifier."""

    def __init__(self, store: JsonStore):
        self.store = store

    def get_all(self) -> Dict[str, int]:
        return self.store.load().plays

    def increment(self, track_id: str) -> PlayCount:
        def bump(data) -> int:
            data.plays[track_id] = data.plays.get(track_id, 0) + 1
            return data.plays[track_id]

        count = self.store.update(bump)
        logger.debug(f"Play recorded for {track_id}: {count}")
        return PlayCount(id=track_id, count=count)

    def set_count(self, track_id: str, count: Any) -> PlayCount:
        """Overwrite a counter. Raises InvalidCountError before touching the store."""
        value = validate_count(count)

        def assign(data) -> None:
            data.plays[track_id] = value

        self.store.update(assign)
        return PlayCount(id=track_id, count=value)
