import os
from datetime import timedelta


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    return int(raw)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


LOAN_PERIOD_DAYS = _env_int("APP_LOAN_PERIOD_DAYS", 30)
LOAN_PERIOD = timedelta(days=LOAN_PERIOD_DAYS)

STATUS_AVAILABLE = os.getenv("APP_STATUS_AVAILABLE", "Available")
STATUS_CHECKED_OUT = os.getenv("APP_STATUS_CHECKED_OUT", "Checked Out")
STATUS_ON_HOLD = os.getenv("APP_STATUS_ON_HOLD", "On Hold")

CORE_STATUSES = (STATUS_AVAILABLE, STATUS_CHECKED_OUT, STATUS_ON_HOLD)

DEFAULT_PER_PAGE = _env_int("APP_DEFAULT_PER_PAGE", 20)
MAX_PER_PAGE = _env_int("APP_MAX_PER_PAGE", 500)

# one queued hold per card and asset unless enabled
ALLOW_DUPLICATE_HOLDS = _env_bool("APP_ALLOW_DUPLICATE_HOLDS", False)

LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO").upper()
