from datetime import datetime


def now_local() -> datetime:
    """Return the naive local time truncated to whole seconds (DATETIME precision)."""
    return datetime.now().replace(microsecond=0)
