from __future__ import annotations
import logging
from typing import Iterable, List

import pandas as pd

from ..config import DEFAULTS
from ..events import Event, UserEngagement
from .frame import END_TYPES, amount_sum, events_frame, safe_rate, unique_in_order

log = logging.getLogger(__name__)


def paired_watch_time(user_df: pd.DataFrame) -> float:
    """
    Sum of (end position - play position) over play events, where the end is the
    earliest later video_complete/video_pause in the same session and video.
    Ends are not consumed: two plays may pair with the same end.
    """
    plays = user_df[user_df["type"] == "video_play"]
    ends = user_df[user_df["type"].isin(END_TYPES)]
    total = 0.0
    for play in plays.itertuples(index=False):
        cand = ends[
            (ends["session_id"] == play.session_id)
            & (ends["video_id"] == play.video_id)
            & (ends["ts"] > play.ts)
        ]
        if cand.empty:
            continue
        end = cand.sort_values("ts", kind="mergesort").iloc[0]
        end_pos = end["video_timestamp"]
        # a zero/missing end position counts as no watch time
        if pd.isna(end_pos) or end_pos == 0:
            continue
        start_pos = 0.0 if pd.isna(play.video_timestamp) else play.video_timestamp
        total += float(end_pos) - float(start_pos)
    return total


def _engagement(df: pd.DataFrame, user_id: str) -> UserEngagement:
    user = df[df["user_id"] == user_id]
    purchases = user[user["type"] == "purchase"]
    clicks = int((user["type"] == "product_click").sum())

    return UserEngagement(
        user_id=user_id,
        total_watch_time=paired_watch_time(user),
        videos_watched=int(user.loc[user["type"] == "video_play", "video_id"].nunique()),
        products_clicked=clicks,
        purchase_count=len(purchases),
        total_spent=amount_sum(purchases["total_amount"]),
        conversion_rate=safe_rate(len(purchases), clicks),
        sessions=unique_in_order(user["session_id"]),
    )


def aggregate_user_engagement(events: Iterable[Event], user_id: str) -> UserEngagement:
    df = events_frame(events)
    out = _engagement(df, user_id)
    log.debug("[engagement] %s: %d purchases, %.2f spent", user_id, out.purchase_count, out.total_spent)
    return out


def find_high_value_users(events: Iterable[Event], limit: int = DEFAULTS["high_value_limit"]) -> List[UserEngagement]:
    """Purchasing users ranked by total spent, highest first."""
    df = events_frame(events)
    ranked = [_engagement(df, uid) for uid in unique_in_order(df["user_id"])]
    ranked = [u for u in ranked if u.total_spent > 0]
    ranked.sort(key=lambda u: u.total_spent, reverse=True)
    return ranked[:max(limit, 0)]
