from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .aggregations import (
    aggregate_by_hour,
    aggregate_product_performance,
    aggregate_user_engagement,
    aggregate_video_analytics,
    analyze_cohorts,
    analyze_funnel,
    build_session_summary,
    calculate_sliding_window,
    find_abandoned_carts,
    find_high_value_users,
)
from .config import DEFAULTS, EVENTS_PATH
from .events import Event
from .loader import load_events
from .synthetic.personas import reference_events

app = FastAPI(title="Shoplytics API", version="0.1.0")

# read-only dashboard clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_events() -> List[Event]:
    """Configured event log, or the reference data when none is present."""
    if EVENTS_PATH.exists():
        return load_events(EVENTS_PATH)
    return reference_events()


@app.exception_handler(FileNotFoundError)
def _missing_log(request, exc):
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(ValueError)
def _bad_log(request, exc):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.get("/health")
def health():
    return {"ok": True, "service": "shoplytics-api", "events_path": str(EVENTS_PATH)}


@app.get("/users/high-value")
def high_value_users(
    limit: int = Query(DEFAULTS["high_value_limit"], ge=0),
    events: List[Event] = Depends(get_events),
):
    return find_high_value_users(events, limit)


@app.get("/users/{user_id}/engagement")
def user_engagement(user_id: str, events: List[Event] = Depends(get_events)):
    return aggregate_user_engagement(events, user_id)


@app.get("/products/{product_id}")
def product_performance(product_id: str, events: List[Event] = Depends(get_events)):
    return aggregate_product_performance(events, product_id)


@app.get("/videos/{video_id}")
def video_analytics(video_id: str, events: List[Event] = Depends(get_events)):
    return aggregate_video_analytics(events, video_id)


@app.get("/sessions/{session_id}")
def session_summary(session_id: str, events: List[Event] = Depends(get_events)):
    return build_session_summary(events, session_id)


@app.get("/funnel")
def funnel(events: List[Event] = Depends(get_events)):
    return analyze_funnel(events)


@app.get("/hourly")
def hourly(events: List[Event] = Depends(get_events)):
    return aggregate_by_hour(events)


@app.get("/abandoned-carts")
def abandoned_carts(
    now: Optional[datetime] = Query(None, description="reference instant, defaults to current UTC time"),
    events: List[Event] = Depends(get_events),
):
    return find_abandoned_carts(events, now)


@app.get("/cohorts")
def cohorts(events: List[Event] = Depends(get_events)):
    return analyze_cohorts(events)


@app.get("/window")
def sliding_window(
    window_size: float = Query(DEFAULTS["window_size"], ge=0),
    now: Optional[datetime] = Query(None),
    events: List[Event] = Depends(get_events),
):
    return calculate_sliding_window(events, window_size, now)
