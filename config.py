import logging
import os
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

# =============================================================
# Constants & Files
# =============================================================
DEFAULT_DATA_DIR = "."
DEFAULT_TIMEZONE = "local"
DEFAULT_LOG_LEVEL = "WARNING"

STORAGE_KEY = "Workouts"

EXERCISES = [
    "Bench Press",
    "Deadlift",
    "Squat",
    "Shoulder Press",
    "Barbell Row",
]

# Entry form bounds (inclusive)
REPS_RANGE = (1, 20)
WEIGHT_RANGE = (45, 500)  # lbs

DEFAULT_REPS = 1
DEFAULT_WEIGHT = 45


# =============================================================
# Environment overrides (read on each call)
# =============================================================
def data_dir() -> str:
    return os.environ.get("GYM_JOURNAL_DATA_DIR", DEFAULT_DATA_DIR)


def log_level() -> str:
    return os.environ.get("GYM_JOURNAL_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def timezone_name() -> str:
    return os.environ.get("GYM_JOURNAL_TIMEZONE", DEFAULT_TIMEZONE)


def resolve_timezone(name=None) -> Optional[tzinfo]:
    """Timezone used for day boundaries.

    ``local`` (or empty) gives None: the host zone as of each call, so DST
    shifts are honoured.
    """
    if name is None:
        name = timezone_name()
    if not name or name.lower() == "local":
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using the local zone", name)
        return None
