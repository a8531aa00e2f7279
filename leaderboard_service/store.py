import json
import logging
import math
import threading
from typing import List, Tuple

from pydantic import ValidationError

from leaderboard_service.errors import BlobNotFound, InvalidEntryError, StoreError
from leaderboard_service.models import Difficulty, Entry, Leaderboard
from leaderboard_service.object_store import ObjectStore
from leaderboard_service.ranking import MAX_ENTRIES, rank

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _is_non_finite(score) -> bool:
    if isinstance(score, bool):
        return False
    try:
        return not math.isfinite(float(score))
    except OverflowError:
        return True
    except (TypeError, ValueError):
        return False


def normalize_difficulty(value, strict: bool = False) -> str:
    """Upper-case a tier name.

    Unknown tiers become EASY, or raise InvalidEntryError when ``strict``.
    """
    tier = str(value).strip().upper()
    if tier in Difficulty.__members__:
        return tier
    if strict:
        raise InvalidEntryError(f"unknown difficulty {value!r}, expected one of EASY, MEDIUM, HARD")
    return Difficulty.EASY.value


def encode_blob(users) -> bytes:
    return Leaderboard(users=list(users)).model_dump_json().encode("utf-8")


def decode_blob(raw: bytes) -> List[Entry]:
    return [Entry.model_validate(u) for u in json.loads(raw)["users"]]


class LeaderboardStore:
    """The single ranked list, mirrored to one blob in the object store.

    Mutations hold ``_lock`` across append, rank and persist so concurrent
    submissions within the process do not drop each other.
    """

    def __init__(self, object_store: ObjectStore, bucket: str, key: str, max_entries: int = MAX_ENTRIES):
        self.object_store = object_store
        self.bucket = bucket
        self.key = key
        self.max_entries = max_entries
        self._users: List[Entry] = []
        self._lock = threading.Lock()

    @property
    def location(self) -> str:
        return f"{self.bucket}/{self.key}"

    def snapshot(self) -> Tuple[Entry, ...]:
        return tuple(self._users)

    def load(self) -> bool:
        with self._lock:
            try:
                users = decode_blob(self.object_store.get(self.bucket, self.key))
            except BlobNotFound:
                logger.info("No leaderboard stored at %s yet", self.location)
                return False
            except StoreError as e:
                logger.error("Error loading leaderboard from %s: %s", self.location, e)
                return False
            except (ValueError, KeyError, TypeError) as e:
                # ValidationError and JSONDecodeError are both ValueErrors
                logger.error("Malformed leaderboard blob at %s: %s", self.location, e)
                return False
            self._users = users
        logger.info("Leaderboard loaded from %s (%d entries)", self.location, len(users))
        return True

    def submit(self, username, score, time, difficulty, strict: bool = False) -> Entry:
        fields = {"username": username, "score": score, "time": time, "difficulty": difficulty}
        missing = [name for name, value in fields.items() if _is_missing(value)]
        if missing:
            raise InvalidEntryError("missing required fields: " + ", ".join(missing))
        if _is_non_finite(score):
            raise InvalidEntryError(f"score must be a finite number, got {score!r}")

        try:
            entry = Entry(
                username=username,
                score=score,
                time=time,
                difficulty=normalize_difficulty(difficulty, strict=strict),
            )
        except ValidationError as e:
            raise InvalidEntryError(f"invalid entry: {e.error_count()} field error(s)") from e

        with self._lock:
            self._users = rank(self._users + [entry], self.max_entries)
            logger.info(
                "Added entry {Username: %s, Score: %s, Time: %s, Difficulty: %s}",
                entry.username, entry.score, entry.time, entry.difficulty,
            )
            self._persist_locked()
        return entry

    def clear(self) -> None:
        with self._lock:
            self._users = []
            try:
                self.object_store.delete(self.bucket, self.key)
            except StoreError:
                logger.exception("Error erasing leaderboard at %s", self.location)
                raise
        logger.info("Leaderboard erased from %s", self.location)

    def persist(self) -> None:
        with self._lock:
            self._persist_locked()

    def _persist_locked(self) -> None:
        try:
            self.object_store.put(self.bucket, self.key, encode_blob(self._users), CONTENT_TYPE)
        except StoreError:
            # in-memory state is kept; the next successful persist catches the blob up
            logger.exception("Error saving leaderboard to %s", self.location)
            raise
        logger.info("Leaderboard saved to %s", self.location)
