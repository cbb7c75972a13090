from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from ..config import DEFAULTS
from ..events import Event, HourlyMetrics, UserCohort, WindowMetrics
from .frame import amount_sum, events_frame, format_instant, hour_key, safe_rate, utc_now


def _with_revenue(df: pd.DataFrame) -> pd.DataFrame:
    is_purchase = df["type"] == "purchase"
    return df.assign(
        purchase=is_purchase.astype(int),
        revenue=df["total_amount"].fillna(0.0).where(is_purchase, 0.0),
    )


def aggregate_by_hour(events: Iterable[Event]) -> List[HourlyMetrics]:
    df = _with_revenue(events_frame(events))
    df["hour"] = df["timestamp"].map(hour_key)

    g = df.groupby("hour", sort=True).agg(
        event_count=("id", "size"),
        purchases=("purchase", "sum"),
        revenue=("revenue", "sum"),
    )
    return [
        HourlyMetrics(hour=hour, event_count=int(r.event_count), purchases=int(r.purchases), revenue=float(r.revenue))
        for hour, r in g.iterrows()
    ]


def analyze_cohorts(events: Iterable[Event]) -> List[UserCohort]:
    """
    Users grouped by the calendar date of their first purchase. Revenue and the
    repeat flag count every purchase the user made in the log.
    """
    df = events_frame(events)
    buys = df[df["type"] == "purchase"].sort_values("ts", kind="mergesort")
    if buys.empty:
        return []
    buys = buys.assign(
        day=buys["timestamp"].str.split("T").str[0],
        amount=buys["total_amount"].fillna(0.0),
    )

    per_user = buys.groupby("user_id", sort=False).agg(
        cohort_date=("day", "first"),
        purchases=("id", "size"),
        revenue=("amount", "sum"),
    )
    per_user["repeat"] = np.where(per_user["purchases"] > 1, 1, 0)

    cohorts = per_user.groupby("cohort_date", sort=True).agg(
        user_count=("purchases", "size"),
        total_revenue=("revenue", "sum"),
        repeat_users=("repeat", "sum"),
    )
    return [
        UserCohort(
            cohort_date=day,
            user_count=int(c.user_count),
            total_revenue=float(c.total_revenue),
            avg_revenue_per_user=safe_rate(c.total_revenue, c.user_count),
            repeat_purchase_rate=safe_rate(c.repeat_users, c.user_count),
        )
        for day, c in cohorts.iterrows()
    ]


def calculate_sliding_window(
    events: Iterable[Event],
    window_size: float = DEFAULTS["window_size"],
    now: Optional[datetime] = None,
) -> WindowMetrics:
    """Metrics over events stamped within [now - window_size, now]."""
    df = events_frame(events)
    end = utc_now(now)
    start = end - pd.Timedelta(seconds=window_size)

    win = df[(df["ts"] >= start) & (df["ts"] <= end)]
    buys = win[win["type"] == "purchase"]

    return WindowMetrics(
        window_start=format_instant(start.to_pydatetime()),
        window_end=format_instant(end.to_pydatetime()),
        event_count=len(win),
        unique_users=int(win["user_id"].nunique()),
        purchase_count=len(buys),
        revenue=amount_sum(buys["total_amount"]),
        events_per_second=safe_rate(len(win), window_size),
    )
