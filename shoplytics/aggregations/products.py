from __future__ import annotations
from typing import Iterable

from ..config import UNKNOWN
from ..events import Event, ProductPerformance
from .frame import amount_sum, count_of, events_frame, safe_rate, text_or_unknown, type_counts


def aggregate_product_performance(events: Iterable[Event], product_id: str) -> ProductPerformance:
    df = events_frame(events)
    product = df[df["product_id"] == product_id]

    # display name/category from the first event that carries a name
    named = product[product["product_name"].notna() & (product["product_name"] != "")]
    name, category = UNKNOWN, UNKNOWN
    if not named.empty:
        first = named.iloc[0]
        name = text_or_unknown(first["product_name"])
        category = text_or_unknown(first["product_category"])

    counts = type_counts(product)
    hovers = count_of(counts, "product_hover")
    clicks = count_of(counts, "product_click")
    purchases = product[product["type"] == "purchase"]

    # hover and click are both impression surfaces
    impressions = hovers + clicks
    return ProductPerformance(
        product_id=product_id,
        product_name=name,
        product_category=category,
        impressions=impressions,
        clicks=clicks,
        hovers=hovers,
        add_to_cart_count=count_of(counts, "add_to_cart"),
        purchases=len(purchases),
        revenue=amount_sum(purchases["total_amount"]),
        click_through_rate=safe_rate(clicks, impressions),
        conversion_rate=safe_rate(len(purchases), clicks),
    )
