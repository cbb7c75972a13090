from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Dict, List

import pandas as pd

from ..aggregations import (
    aggregate_by_hour,
    aggregate_product_performance,
    aggregate_video_analytics,
    analyze_cohorts,
    analyze_funnel,
    find_high_value_users,
)
from ..config import DEFAULTS, EVENTS_PATH, REPORTS_DIR
from ..events import Event
from ..loader import load_events
from ..synthetic.personas import reference_events


def setup_logging(level=logging.INFO):
    """Console logging for batch runs"""
    logger = logging.getLogger("shoplytics")
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter("[%(asctime)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(ch)
    return logger


def _frame(records) -> pd.DataFrame:
    return pd.DataFrame([r.model_dump() for r in records])


def build_tables(events: List[Event]) -> Dict[str, pd.DataFrame]:
    product_ids = sorted({e.product_id for e in events if e.product_id})
    video_ids = sorted({e.video_id for e in events})

    high_value = _frame(find_high_value_users(events, DEFAULTS["high_value_limit"]))
    if not high_value.empty:
        high_value["sessions"] = high_value["sessions"].map(";".join)

    videos = _frame(aggregate_video_analytics(events, v) for v in video_ids)
    if not videos.empty:
        videos["top_products"] = videos["top_products"].map(
            lambda tops: ";".join(f"{t['product_id']}:{t['clicks']}" for t in tops))
        videos["drop_off_points"] = videos["drop_off_points"].map(lambda pts: ";".join(f"{p:g}" for p in pts))

    return {
        "funnel": _frame([analyze_funnel(events)]),
        "high_value_users": high_value,
        "hourly": _frame(aggregate_by_hour(events)),
        "cohorts": _frame(analyze_cohorts(events)),
        "products": _frame(aggregate_product_performance(events, p) for p in product_ids),
        "videos": videos,
    }


def write_report(events: List[Event], out_dir: Path = REPORTS_DIR) -> Dict[str, Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = {}
    for name, table in build_tables(events).items():
        path = out_dir / f"{name}.csv"
        table.to_csv(path, index=False)
        written[name] = path
        print(f"[report] wrote {len(table)} rows → {path}")
    return written


def main(argv=None):
    setup_logging()
    argv = sys.argv[1:] if argv is None else argv
    src = Path(argv[0]) if argv else EVENTS_PATH
    if argv or src.exists():
        events = load_events(src)
    else:
        logging.getLogger("shoplytics").info("[report] no event log at %s, using reference data", src)
        events = reference_events()
    write_report(events)


if __name__ == "__main__":
    main()
