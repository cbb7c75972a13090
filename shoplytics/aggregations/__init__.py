from .engagement import aggregate_user_engagement, find_high_value_users
from .products import aggregate_product_performance
from .videos import aggregate_video_analytics
from .sessions import build_session_summary, find_abandoned_carts
from .funnel import analyze_funnel
from .timeseries import aggregate_by_hour, analyze_cohorts, calculate_sliding_window

__all__ = [
    "aggregate_user_engagement",
    "aggregate_product_performance",
    "aggregate_video_analytics",
    "build_session_summary",
    "find_high_value_users",
    "analyze_funnel",
    "aggregate_by_hour",
    "find_abandoned_carts",
    "analyze_cohorts",
    "calculate_sliding_window",
]
