"""Workout journal core: the logged-set model, its JSON codec and the store.

The store owns the whole workout history for the running app. Every change is
written back as one JSON document under a single storage key; anything that
cannot be read back is treated as an empty history.
"""
import json
import logging
import uuid
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, List, Optional, Sequence, Tuple

import pandas as pd

from config import STORAGE_KEY
from storage import StorageError

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


# =============================================================
# Model
# =============================================================
@dataclass(frozen=True)
class LoggedSet:
    exercise: str
    reps: int
    weight: int  # lbs
    id: str = field(default_factory=_new_id, compare=False)


@dataclass
class WorkoutDay:
    date: datetime
    sets: List[LoggedSet] = field(default_factory=list)
    id: str = field(default_factory=_new_id, compare=False)


def total_weight_moved(workout: WorkoutDay) -> int:
    return sum(s.reps * s.weight for s in workout.sets)


def same_day(a: datetime, b: datetime, tz: Optional[tzinfo] = None) -> bool:
    """True when both instants fall on one calendar day in ``tz`` (None = host zone)."""
    return a.astimezone(tz).date() == b.astimezone(tz).date()


# =============================================================
# Codec
# =============================================================
def encode_workouts(workouts: Sequence[WorkoutDay]) -> bytes:
    payload = [
        {
            "date": w.date.isoformat(),
            "sets": [{"exercise": s.exercise, "reps": s.reps, "weight": s.weight} for s in w.sets],
        }
        for w in workouts
    ]
    return json.dumps(payload, indent=2).encode("utf-8")


def _require(obj, key, kind):
    value = obj[key]
    # bool is an int subclass but never a valid count or load
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise TypeError(f"{key!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _decode_set(obj) -> LoggedSet:
    if not isinstance(obj, dict):
        raise TypeError("set entry must be an object")
    return LoggedSet(
        exercise=_require(obj, "exercise", str),
        reps=_require(obj, "reps", int),
        weight=_require(obj, "weight", int),
    )


_EARLIEST = datetime.min + timedelta(days=1)
_LATEST = datetime.max - timedelta(days=1)


def _decode_day(obj) -> WorkoutDay:
    if not isinstance(obj, dict):
        raise TypeError("workout entry must be an object")
    date = datetime.fromisoformat(_require(obj, "date", str))
    if date.tzinfo is None:
        raise ValueError(f"date {obj['date']!r} has no UTC offset")
    # UTC offsets stay under a day, so this margin keeps any zone conversion in range
    utc = date.astimezone(timezone.utc).replace(tzinfo=None)
    if not _EARLIEST < utc < _LATEST:
        raise ValueError(f"date {obj['date']!r} is out of range")
    return WorkoutDay(date=date, sets=[_decode_set(s) for s in _require(obj, "sets", list)])


def decode_workouts(raw: bytes) -> List[WorkoutDay]:
    """Strict decode; raises on malformed JSON or any shape mismatch."""
    data = json.loads(raw.decode("utf-8"))
    if not isinstance(data, list):
        raise TypeError("workouts document must be a list")
    return [_decode_day(d) for d in data]


def try_decode(raw: Optional[bytes]) -> Optional[List[WorkoutDay]]:
    if raw is None:
        return None
    try:
        return decode_workouts(raw)
    except Exception as e:
        logger.warning("Ignoring unreadable workout history: %s", e)
        return None


# =============================================================
# Journal summaries
# =============================================================
def journal_frame(workouts: Sequence[WorkoutDay], tz: Optional[tzinfo] = None) -> pd.DataFrame:
    """One row per workout day: date, set count and total weight moved."""
    rows = [
        {
            "date": w.date.astimezone(tz).date(),
            "sets": len(w.sets),
            "total_weight": total_weight_moved(w),
        }
        for w in workouts
    ]
    return pd.DataFrame(rows, columns=["date", "sets", "total_weight"])


# =============================================================
# Store
# =============================================================
class WorkoutStore:
    """Single owner of the workout history and its durable copy.

    ``storage`` is anything with ``get(key) -> bytes | None`` and
    ``set(key, bytes)``. ``tz`` fixes the day boundary used both to find
    today's workout and to stamp a new one; None follows the host zone.
    """

    def __init__(
        self,
        storage,
        tz: Optional[tzinfo] = None,
        now: Optional[Callable[[], datetime]] = None,
        key: str = STORAGE_KEY,
    ) -> None:
        self.storage = storage
        self.tz = tz
        self.key = key
        self._now = now or self._default_now
        self._workouts: List[WorkoutDay] = []
        self._subscribers: List[Callable[["WorkoutStore"], None]] = []
        # one store may back several Streamlit sessions, each on its own thread
        self._lock = threading.RLock()

    def _default_now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone(self.tz)

    # ---- persistence ----

    def load(self) -> None:
        try:
            raw = self.storage.get(self.key)
        except StorageError as e:
            logger.warning("Could not read workout history: %s", e)
            raw = None
        with self._lock:
            self._workouts = try_decode(raw) or []
        logger.debug("Loaded %d workout(s)", len(self._workouts))
        self._notify()

    initialize = load

    def save(self) -> bool:
        """Overwrite the stored history; False when the write was dropped."""
        with self._lock:
            try:
                self.storage.set(self.key, encode_workouts(self._workouts))
            except (StorageError, TypeError, ValueError) as e:
                logger.warning("Workout history not saved: %s", e)
                return False
        return True

    # ---- operations ----

    def record_set(self, exercise: str, reps: int, weight: int) -> None:
        logged = LoggedSet(exercise=exercise, reps=reps, weight=weight)
        with self._lock:
            now = self._now()
            today = self.workout_for(now)
            if today is not None:
                today.sets.append(logged)
            else:
                self._workouts.append(WorkoutDay(date=now, sets=[logged]))
            self.save()
        self._notify()

    def workout_for(self, when: datetime) -> Optional[WorkoutDay]:
        for w in self._workouts:
            if same_day(w.date, when, self.tz):
                return w
        return None

    def current_workouts(self) -> Tuple[WorkoutDay, ...]:
        """Snapshot for display; the copies share ids with the stored days."""
        with self._lock:
            return tuple(replace(w, sets=list(w.sets)) for w in self._workouts)

    @staticmethod
    def total_weight_moved(workout: WorkoutDay) -> int:
        return total_weight_moved(workout)

    # ---- change notification ----

    def subscribe(self, callback: Callable[["WorkoutStore"], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)
