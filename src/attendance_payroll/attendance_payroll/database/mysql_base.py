from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, time, timedelta, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..common.logging_config import get_logger
from .connection import DatabaseConnection

logger = get_logger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One connection, one transaction: commit on success, roll back on any error."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        logger.debug("rolling back transaction", exc_info=True)
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns come back as ``time``, ``timedelta`` or 'HH:MM[:SS]' depending on the connector."""
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        # TIME may exceed 24h or be negative; only the wall-clock part matters here.
        hours, rest = divmod(int(value.total_seconds()) % 86400, 3600)
        return time(hours, *divmod(rest, 60))

    if isinstance(value, (bytes, str)):
        text = value.decode() if isinstance(value, bytes) else value
        parts = [int(p) for p in text.strip().split(":") if p != ""]
        if not 2 <= len(parts) <= 3:
            raise ValueError(f"Invalid TIME value: {value!r}")
        return time(*parts)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def to_utc_naive(value: datetime) -> datetime:
    """DATETIME columns hold UTC without tzinfo."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
