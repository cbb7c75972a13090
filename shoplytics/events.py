from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal

EventType = Literal[
    "video_play",
    "video_pause",
    "video_complete",
    "video_seek",
    "product_hover",
    "product_click",
    "add_to_cart",
    "purchase",
]
DeviceType = Literal["mobile", "desktop", "tablet"]


class _Record(BaseModel):
    # snake_case in python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventMetadata(_Record):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    video_timestamp: Optional[float] = Field(None, description="seconds into the video")
    video_duration: Optional[float] = None
    product_price: Optional[float] = None
    product_name: Optional[str] = None
    product_category: Optional[str] = None
    quantity: Optional[int] = None
    total_amount: Optional[float] = Field(None, description="line-item total of a purchase")
    device_type: DeviceType
    referrer: Optional[str] = None


class Event(_Record):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    type: EventType
    timestamp: str = Field(..., description="ISO-8601 instant")
    user_id: str
    session_id: str
    video_id: str
    product_id: Optional[str] = None
    metadata: EventMetadata


# ---------- derived records ----------

class UserEngagement(_Record):
    user_id: str
    total_watch_time: float = 0.0
    videos_watched: int = 0
    products_clicked: int = 0
    purchase_count: int = 0
    total_spent: float = 0.0
    conversion_rate: float = 0.0
    sessions: List[str] = []


class ProductPerformance(_Record):
    product_id: str
    product_name: str = "Unknown"
    product_category: str = "Unknown"
    impressions: int = 0
    clicks: int = 0
    hovers: int = 0
    add_to_cart_count: int = 0
    purchases: int = 0
    revenue: float = 0.0
    click_through_rate: float = 0.0
    conversion_rate: float = 0.0


class ProductClicks(_Record):
    product_id: str
    clicks: int


class VideoAnalytics(_Record):
    video_id: str
    total_views: int = 0
    completion_rate: float = 0.0
    avg_watch_time: float = 0.0
    total_product_clicks: int = 0
    top_products: List[ProductClicks] = []
    drop_off_points: List[float] = []


class SessionSummary(_Record):
    session_id: str
    user_id: str = ""
    start_time: str = ""
    end_time: str = ""
    duration: float = 0.0
    videos_watched: List[str] = []
    products_interacted: List[str] = []
    purchased: bool = False
    total_spent: float = 0.0


class FunnelMetrics(_Record):
    video_views: int = 0
    product_clicks: int = 0
    add_to_carts: int = 0
    purchases: int = 0
    view_to_click_rate: float = 0.0
    click_to_cart_rate: float = 0.0
    cart_to_purchase_rate: float = 0.0
    overall_conversion_rate: float = 0.0


class HourlyMetrics(_Record):
    hour: str
    event_count: int
    purchases: int
    revenue: float


class CartItem(_Record):
    product_id: str
    product_name: str
    price: float


class AbandonedCart(_Record):
    session_id: str
    user_id: str
    cart_items: List[CartItem]
    cart_value: float
    last_activity: str
    time_since_last_activity: float = Field(..., description="seconds")


class UserCohort(_Record):
    cohort_date: str = Field(..., description="first purchase date, day granularity")
    user_count: int
    total_revenue: float
    avg_revenue_per_user: float
    repeat_purchase_rate: float


class WindowMetrics(_Record):
    window_start: str
    window_end: str
    event_count: int = 0
    unique_users: int = 0
    purchase_count: int = 0
    revenue: float = 0.0
    events_per_second: float = 0.0
