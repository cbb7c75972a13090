from __future__ import annotations
from collections import Counter
from typing import Iterable

from ..config import DEFAULTS
from ..events import Event, ProductClicks, VideoAnalytics
from .frame import END_TYPES, count_of, events_frame, safe_rate, type_counts


def aggregate_video_analytics(events: Iterable[Event], video_id: str) -> VideoAnalytics:
    df = events_frame(events)
    video = df[df["video_id"] == video_id]
    counts = type_counts(video)

    views = count_of(counts, "video_play")
    completions = count_of(counts, "video_complete")

    # mean end position over pause/complete events, independent of any play pairing
    ends = video.loc[video["type"].isin(END_TYPES), "video_timestamp"].fillna(0.0)
    avg_watch = float(ends.mean()) if len(ends) else 0.0

    clicks = video[video["type"] == "product_click"]
    per_product = Counter(p for p in clicks["product_id"] if isinstance(p, str) and p)
    # most_common keeps first-encountered order among equal counts
    top = [ProductClicks(product_id=p, clicks=n) for p, n in per_product.most_common(DEFAULTS["top_products"])]

    marks = video.loc[video["type"].isin(("video_pause", "video_seek")), "video_timestamp"].fillna(0.0)
    drop_offs = [float(t) for t in marks if t > 0]

    return VideoAnalytics(
        video_id=video_id,
        total_views=views,
        completion_rate=safe_rate(completions, views),
        avg_watch_time=avg_watch,
        total_product_clicks=len(clicks),
        top_products=top,
        drop_off_points=drop_offs,
    )
