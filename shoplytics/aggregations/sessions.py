from __future__ import annotations
import logging
from datetime import datetime
from typing import Iterable, List, Optional

import pandas as pd

from ..events import AbandonedCart, CartItem, Event, SessionSummary
from .frame import amount_sum, events_frame, number_or_zero, text_or_unknown, unique_in_order, utc_now

log = logging.getLogger(__name__)


def build_session_summary(events: Iterable[Event], session_id: str) -> SessionSummary:
    df = events_frame(events)
    sess = df[df["session_id"] == session_id].sort_values("ts", kind="mergesort")
    if sess.empty:
        return SessionSummary(session_id=session_id)

    first, last = sess.iloc[0], sess.iloc[-1]
    duration = (last["ts"] - first["ts"]).total_seconds()
    purchases = sess[sess["type"] == "purchase"]

    return SessionSummary(
        session_id=session_id,
        user_id=first["user_id"],
        start_time=first["timestamp"],
        end_time=last["timestamp"],
        duration=0.0 if pd.isna(duration) else float(duration),
        videos_watched=unique_in_order(sess["video_id"]),
        products_interacted=[p for p in unique_in_order(sess["product_id"]) if p],
        purchased=not purchases.empty,
        total_spent=amount_sum(purchases["total_amount"]),
    )


def _abandoned_items(sess: pd.DataFrame) -> List[CartItem]:
    purchased = set(sess.loc[sess["type"] == "purchase", "product_id"])
    added = sess[sess["type"] == "add_to_cart"]
    items = []
    for row in added.itertuples(index=False):
        pid = row.product_id
        if not isinstance(pid, str) or not pid or pid in purchased:
            continue
        items.append(CartItem(
            product_id=pid,
            product_name=text_or_unknown(row.product_name),
            price=number_or_zero(row.product_price),
        ))
    return items


def find_abandoned_carts(events: Iterable[Event], now: Optional[datetime] = None) -> List[AbandonedCart]:
    """
    Sessions holding add_to_cart items that were not purchased in the same session,
    most valuable cart first. `now` defaults to the current UTC time.
    """
    df = events_frame(events)
    clock = utc_now(now)

    carts = []
    for session_id, sess in df.groupby("session_id", sort=False):
        items = _abandoned_items(sess)
        if not items:
            continue
        latest = sess.sort_values("ts", ascending=False, kind="mergesort", na_position="last").iloc[0]
        since = (clock - latest["ts"]).total_seconds()
        carts.append(AbandonedCart(
            session_id=session_id,
            user_id=latest["user_id"],
            cart_items=items,
            cart_value=sum(i.price for i in items),
            last_activity=latest["timestamp"],
            time_since_last_activity=0.0 if pd.isna(since) else float(since),
        ))

    carts.sort(key=lambda c: c.cart_value, reverse=True)
    log.debug("[abandoned] %d carts across %d sessions", len(carts), df["session_id"].nunique())
    return carts
