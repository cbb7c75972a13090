import math
from datetime import datetime, timezone

import pytest

from shoplytics.aggregations import (
    aggregate_by_hour,
    analyze_cohorts,
    analyze_funnel,
    calculate_sliding_window,
)


def test_funnel(events):
    f = analyze_funnel(events)
    assert (f.video_views, f.product_clicks, f.add_to_carts, f.purchases) == (8, 8, 4, 4)
    assert f.view_to_click_rate == 1.0
    assert f.click_to_cart_rate == 0.5
    assert f.cart_to_purchase_rate == 1.0
    assert f.overall_conversion_rate == 0.5


def test_empty_funnel_is_zero():
    f = analyze_funnel([])
    assert f.model_dump() == {
        "video_views": 0,
        "product_clicks": 0,
        "add_to_carts": 0,
        "purchases": 0,
        "view_to_click_rate": 0.0,
        "click_to_cart_rate": 0.0,
        "cart_to_purchase_rate": 0.0,
        "overall_conversion_rate": 0.0,
    }


def test_rates_are_bounded(events):
    f = analyze_funnel(events)
    for rate in (f.view_to_click_rate, f.click_to_cart_rate, f.cart_to_purchase_rate, f.overall_conversion_rate):
        assert not math.isnan(rate)
        assert 0 <= rate <= 1


# ---------------------------------------------------------------------------
# hourly
# ---------------------------------------------------------------------------


def test_hourly_buckets(events):
    hours = aggregate_by_hour(events)
    keys = [h.hour for h in hours]
    assert keys == sorted(keys)
    assert len(set(keys)) == len(keys) == 8
    assert keys[0] == "2026-01-15T09:00:00.000Z"
    assert sum(h.event_count for h in hours) == len(events)

    by_hour = {h.hour: h for h in hours}
    ten = by_hour["2026-01-15T10:00:00.000Z"]
    assert (ten.event_count, ten.purchases) == (8, 2)
    assert ten.revenue == pytest.approx(209.97)
    assert by_hour["2026-01-15T11:00:00.000Z"].revenue == 0


def test_hour_keeps_input_offset(make_event):
    evs = [
        make_event("video_play", "2026-01-15T10:59:59+02:00"),
        make_event("video_play", "2026-01-15T10:15:00+02:00"),
    ]
    hours = aggregate_by_hour(evs)
    assert [(h.hour, h.event_count) for h in hours] == [("2026-01-15T10:00:00.000+02:00", 2)]


def test_hourly_empty_log():
    assert aggregate_by_hour([]) == []


# ---------------------------------------------------------------------------
# cohorts
# ---------------------------------------------------------------------------


def test_reference_cohort(events):
    cohorts = analyze_cohorts(events)
    assert len(cohorts) == 1
    c = cohorts[0]
    assert c.cohort_date == "2026-01-15"
    assert c.user_count == 3
    assert c.total_revenue == pytest.approx(589.95)
    assert c.avg_revenue_per_user == pytest.approx(196.65)
    # only user_002 bought twice
    assert c.repeat_purchase_rate == pytest.approx(1 / 3)


def test_cohort_from_first_purchase_in_time_order(make_event):
    evs = [
        make_event("purchase", "2026-01-17T09:00:00Z", user_id="a", total_amount=5),
        make_event("purchase", "2026-01-16T09:00:00Z", user_id="a", total_amount=10),
        make_event("purchase", "2026-01-17T12:00:00Z", user_id="b", total_amount=7),
        make_event("product_click", "2026-01-01T09:00:00Z", user_id="c"),
    ]
    cohorts = analyze_cohorts(evs)
    assert [c.cohort_date for c in cohorts] == ["2026-01-16", "2026-01-17"]
    first, second = cohorts
    assert (first.user_count, first.total_revenue, first.repeat_purchase_rate) == (1, 15, 1.0)
    assert (second.user_count, second.total_revenue, second.repeat_purchase_rate) == (1, 7, 0.0)


def test_no_purchases_no_cohorts(make_event):
    assert analyze_cohorts([make_event("video_play", "2026-01-15T10:00:00Z")]) == []


# ---------------------------------------------------------------------------
# sliding window
# ---------------------------------------------------------------------------


def test_window_over_reference_data(events):
    now = datetime(2026, 1, 15, 10, 6, tzinfo=timezone.utc)
    w = calculate_sliding_window(events, 300, now=now)
    assert w.window_start == "2026-01-15T10:01:00.000Z"
    assert w.window_end == "2026-01-15T10:06:00.000Z"
    assert w.event_count == 7
    assert w.unique_users == 1
    assert w.purchase_count == 2
    assert w.revenue == pytest.approx(209.97)
    assert w.events_per_second == pytest.approx(7 / 300)


def test_window_bounds_are_inclusive(events):
    now = datetime(2026, 1, 15, 10, 5, tzinfo=timezone.utc)
    w = calculate_sliding_window(events, 300, now=now)
    # 10:00:00 through 10:04:00, purchases at 10:06 fall outside
    assert w.event_count == 6
    assert w.purchase_count == 0


def test_window_against_wall_clock_is_empty(events):
    w = calculate_sliding_window(events)
    assert w.event_count == 0
    assert w.events_per_second == 0


def test_zero_window_size_rate_is_zero(events):
    now = datetime(2026, 1, 15, 10, 6, tzinfo=timezone.utc)
    w = calculate_sliding_window(events, 0, now=now)
    assert w.event_count == 2
    assert w.events_per_second == 0
