from __future__ import annotations
from typing import Iterable

from ..events import Event, FunnelMetrics
from .frame import count_of, events_frame, safe_rate, type_counts


def analyze_funnel(events: Iterable[Event]) -> FunnelMetrics:
    """View → Click → Add to cart → Purchase over the whole log."""
    counts = type_counts(events_frame(events))
    views = count_of(counts, "video_play")
    clicks = count_of(counts, "product_click")
    carts = count_of(counts, "add_to_cart")
    purchases = count_of(counts, "purchase")

    return FunnelMetrics(
        video_views=views,
        product_clicks=clicks,
        add_to_carts=carts,
        purchases=purchases,
        view_to_click_rate=safe_rate(clicks, views),
        click_to_cart_rate=safe_rate(carts, clicks),
        cart_to_purchase_rate=safe_rate(purchases, carts),
        overall_conversion_rate=safe_rate(purchases, views),
    )
