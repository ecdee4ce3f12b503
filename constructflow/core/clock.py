# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Server-side timestamps, stored as sortable ISO-8601 UTC strings."""
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")
