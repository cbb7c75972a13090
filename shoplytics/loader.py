from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from .events import Event

log = logging.getLogger(__name__)


def _records_from_parquet(path: Path) -> List[dict]:
    df = pd.read_parquet(path)
    # parquet nulls come back as nan; pydantic wants None
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


def load_events(path) -> List[Event]:
    """Read a .json array or .parquet table of camelCase event records."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No event log at {path}")

    if path.suffix == ".json":
        records = json.loads(path.read_text(encoding="utf-8"))
    elif path.suffix == ".parquet":
        records = _records_from_parquet(path)
    else:
        raise ValueError(f"unsupported event log format: {path.suffix}")

    if isinstance(records, dict):
        records = [records]
    events = [Event.model_validate(r) for r in records]
    log.info("[loader] %d events from %s", len(events), path)
    return events


def dump_events(events: Iterable[Event], path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [e.model_dump(by_alias=True, exclude_none=True) for e in events]
    if path.suffix == ".parquet":
        pd.DataFrame(payload).to_parquet(path, engine="pyarrow", index=False)
    else:
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    log.info("[loader] wrote %d events → %s", len(payload), path)
    return path


def select_events(
    events: Iterable[Event],
    user_id: Optional[str] = None,
    session_id: Optional[str] = None,
    video_id: Optional[str] = None,
    product_id: Optional[str] = None,
    event_type: Optional[str] = None,
) -> List[Event]:
    """Events matching every given key, input order kept."""
    out = []
    for e in events:
        if user_id is not None and e.user_id != user_id: continue
        if session_id is not None and e.session_id != session_id: continue
        if video_id is not None and e.video_id != video_id: continue
        if product_id is not None and e.product_id != product_id: continue
        if event_type is not None and e.type != event_type: continue
        out.append(e)
    return out
