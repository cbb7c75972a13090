"""
Shared helpers for the aggregators: flattening the event log into a DataFrame,
zero-guarded rates and ISO timestamp handling.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Iterable, List, Optional

import pandas as pd

from ..config import UNKNOWN
from ..events import Event

COLUMNS = [
    "id", "type", "timestamp", "user_id", "session_id", "video_id", "product_id",
    "video_timestamp", "video_duration", "product_price", "product_name",
    "product_category", "quantity", "total_amount", "device_type", "referrer",
]
NUMERIC = ["video_timestamp", "video_duration", "product_price", "quantity", "total_amount"]
END_TYPES = ("video_complete", "video_pause")


def events_frame(events: Iterable[Event]) -> pd.DataFrame:
    """
    One row per event in input order, metadata flattened into columns.
    Adds `ts` (tz-aware UTC, NaT when unparseable) for ordering and window checks;
    the raw `timestamp` string is kept for output.
    """
    rows = []
    for e in events:
        meta = e.metadata
        rows.append((
            e.id, e.type, e.timestamp, e.user_id, e.session_id, e.video_id, e.product_id,
            meta.video_timestamp, meta.video_duration, meta.product_price, meta.product_name,
            meta.product_category, meta.quantity, meta.total_amount, meta.device_type, meta.referrer,
        ))
    df = pd.DataFrame(rows, columns=COLUMNS)
    # ensure numeric
    for col in NUMERIC:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("float64")
    df["ts"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601", errors="coerce")
    return df


def safe_rate(num, den) -> float:
    # 0 on an empty denominator, never nan/inf
    if not den:
        return 0.0
    return float(num) / float(den)


def amount_sum(s: pd.Series) -> float:
    return float(s.fillna(0.0).sum())


def unique_in_order(values: Iterable) -> List[str]:
    # ids are opaque: "" is a real id, only missing values are skipped
    seen = {}
    for v in values:
        if v is None or (isinstance(v, float) and pd.isna(v)):
            continue
        seen.setdefault(v, None)
    return list(seen)


def text_or_unknown(value) -> str:
    return value if isinstance(value, str) and value else UNKNOWN


def number_or_zero(value) -> float:
    if value is None or pd.isna(value):
        return 0.0
    return float(value)


def type_counts(df: pd.DataFrame) -> pd.Series:
    return df["type"].value_counts()


def count_of(counts: pd.Series, ev_type: str) -> int:
    return int(counts.get(ev_type, 0))


# ---------- instants ----------

def parse_instant(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def format_instant(dt: datetime) -> str:
    """ISO-8601 with milliseconds, UTC rendered as `Z`."""
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def hour_key(value: str) -> Optional[str]:
    # truncate in the instant's own offset, no re-zoning
    dt = parse_instant(value)
    if dt is None:
        return None
    return format_instant(dt.replace(minute=0, second=0, microsecond=0))


def utc_now(now: Optional[datetime] = None) -> pd.Timestamp:
    """Injectable clock. Naive datetimes are taken as UTC."""
    ts = pd.Timestamp(now if now is not None else datetime.now(timezone.utc))
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")
