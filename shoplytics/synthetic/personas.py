from __future__ import annotations
from typing import Dict, List

from ..events import Event

DAY = "2026-01-15"

PRODUCTS = {
    "prod_001": ("Summer Dress", "Fashion", 79.99),
    "prod_002": ("Wireless Earbuds", "Tech", 149.99),
    "prod_003": ("Modern Lamp", "Home", 89.99),
    "prod_004": ("Yoga Mat", "Fitness", 39.99),
    "prod_005": ("Running Shoes", "Fitness", 129.99),
    "prod_006": ("Smart Watch", "Tech", 299.99),
    "prod_007": ("Denim Jacket", "Fashion", 119.99),
    "prod_008": ("Plant Pot Set", "Home", 45.99),
}


class _Journey:
    """Builds one session's events for a user watching one video."""

    def __init__(self, uid, sid, vid, duration, device):
        self.uid, self.sid, self.vid = uid, sid, vid
        self.duration, self.device = duration, device
        self.events: List[Dict] = []

    def _add(self, ev, clock, product=None, **meta):
        e = {
            "type": ev,
            "timestamp": f"{DAY}T{clock}.000Z",
            "userId": self.uid,
            "sessionId": self.sid,
            "videoId": self.vid,
            "metadata": {"deviceType": self.device, **meta},
        }
        if product:
            name, category, price = PRODUCTS[product]
            e["productId"] = product
            e["metadata"].update(productPrice=price, productName=name, productCategory=category)
        self.events.append(e)
        return self

    def playback(self, ev, clock, at):
        return self._add(ev, clock, videoTimestamp=at, videoDuration=self.duration)

    def product(self, ev, clock, product, at):
        return self._add(ev, clock, product, videoTimestamp=at, videoDuration=self.duration)

    def cart(self, clock, product, qty=1):
        return self._add("add_to_cart", clock, product, quantity=qty)

    def purchase(self, clock, product, qty=1):
        amount = round(PRODUCTS[product][2] * qty, 2)
        return self._add("purchase", clock, product, quantity=qty, totalAmount=amount)


def full_converter(uid="user_001") -> List[Dict]:
    """Buys from a fashion video, later browses tech without buying."""
    first = (_Journey(uid, "session_001", "vid_fashion_summer", 180, "mobile")
             .playback("video_play", "09:00:00", 0)
             .product("product_hover", "09:00:45", "prod_001", 45)
             .product("product_click", "09:00:50", "prod_001", 50)
             .cart("09:01:30", "prod_001")
             .playback("video_complete", "09:03:00", 180)
             .purchase("09:05:00", "prod_001"))
    second = (_Journey(uid, "session_002", "vid_tech_review", 300, "desktop")
              .playback("video_play", "14:00:00", 0)
              .product("product_click", "14:02:00", "prod_002", 120)
              .playback("video_pause", "14:03:30", 210))
    return first.events + second.events


def multi_buyer(uid="user_002") -> List[Dict]:
    """Two items carted and bought in one visit."""
    return (_Journey(uid, "session_003", "vid_fitness_gear", 240, "tablet")
            .playback("video_play", "10:00:00", 0)
            .product("product_click", "10:01:00", "prod_004", 60)
            .product("product_click", "10:02:30", "prod_005", 150)
            .cart("10:03:00", "prod_004", qty=2)
            .cart("10:03:30", "prod_005")
            .playback("video_complete", "10:04:00", 240)
            .purchase("10:06:00", "prod_004", qty=2)
            .purchase("10:06:00", "prod_005")).events


def window_shopper(uid="user_003") -> List[Dict]:
    """Many clicks, no purchase."""
    first = (_Journey(uid, "session_004", "vid_home_decor", 200, "mobile")
             .playback("video_play", "11:00:00", 0)
             .product("product_hover", "11:00:30", "prod_003", 30)
             .product("product_click", "11:00:35", "prod_003", 35)
             .product("product_hover", "11:01:00", "prod_008", 60)
             .product("product_click", "11:01:05", "prod_008", 65)
             .playback("video_seek", "11:01:30", 150)
             .playback("video_pause", "11:02:00", 180))
    second = (_Journey(uid, "session_005", "vid_fashion_summer", 180, "desktop")
              .playback("video_play", "16:00:00", 0)
              .product("product_click", "16:01:00", "prod_007", 60)
              .playback("video_complete", "16:03:00", 180))
    return first.events + second.events


def quick_converter(uid="user_004") -> List[Dict]:
    """Click, cart, buy within two minutes; never ends the video."""
    return (_Journey(uid, "session_006", "vid_tech_review", 300, "mobile")
            .playback("video_play", "12:00:00", 0)
            .product("product_click", "12:00:30", "prod_006", 30)
            .cart("12:00:45", "prod_006")
            .purchase("12:02:00", "prod_006")).events


def browser(uid="user_005") -> List[Dict]:
    """Watches videos, no product clicks."""
    first = (_Journey(uid, "session_007", "vid_home_decor", 200, "desktop")
             .playback("video_play", "13:00:00", 0)
             .playback("video_seek", "13:01:00", 100)
             .playback("video_complete", "13:02:40", 200))
    second = (_Journey(uid, "session_008", "vid_tech_review", 300, "desktop")
              .playback("video_play", "15:00:00", 0)
              .product("product_hover", "15:01:30", "prod_002", 90)
              .playback("video_pause", "15:03:00", 180))
    return first.events + second.events


def reference_events() -> List[Event]:
    """The 37-event reference log, ids evt_001.. in journey order."""
    raw = []
    raw += full_converter()
    raw += multi_buyer()
    raw += window_shopper()
    raw += quick_converter()
    raw += browser()
    return [Event.model_validate({"id": f"evt_{i:03d}", **e}) for i, e in enumerate(raw, start=1)]
