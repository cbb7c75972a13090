import json

import pandas as pd
import pytest
from pydantic import ValidationError

from shoplytics.analysis.report import build_tables, write_report
from shoplytics.loader import dump_events, load_events, select_events


def test_reference_log_shape(events):
    assert len(events) == 37
    assert len({e.id for e in events}) == 37
    assert {e.user_id for e in events} == {f"user_00{i}" for i in range(1, 6)}


def test_load_camel_case_json(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(json.dumps([{
        "id": "x1",
        "type": "purchase",
        "timestamp": "2026-01-15T09:05:00.000Z",
        "userId": "user_001",
        "sessionId": "session_001",
        "videoId": "vid_fashion_summer",
        "productId": "prod_001",
        "metadata": {"deviceType": "mobile", "totalAmount": 79.99, "productName": "Summer Dress"},
    }]))
    (e,) = load_events(path)
    assert e.user_id == "user_001"
    assert e.metadata.total_amount == 79.99
    assert e.metadata.video_timestamp is None


def test_dump_then_load_json(events, tmp_path):
    path = dump_events(events, tmp_path / "log.json")
    assert load_events(path) == events


def test_load_parquet(events, tmp_path):
    path = dump_events(events, tmp_path / "log.parquet")
    loaded = load_events(path)
    assert [e.id for e in loaded] == [e.id for e in events]
    assert loaded[5].metadata.total_amount == pytest.approx(79.99)
    assert loaded[0].product_id is None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_events(tmp_path / "none.json")


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text("id,type\n")
    with pytest.raises(ValueError):
        load_events(path)


def test_unknown_event_type_rejected(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(json.dumps([{
        "id": "x", "type": "video_rewind", "timestamp": "2026-01-15T09:00:00Z",
        "userId": "u", "sessionId": "s", "videoId": "v", "metadata": {"deviceType": "mobile"},
    }]))
    with pytest.raises(ValidationError):
        load_events(path)


def test_events_are_immutable(events):
    with pytest.raises(ValidationError):
        events[0].user_id = "someone"


def test_select_events(events):
    assert len(select_events(events, user_id="user_001")) == 9
    assert len(select_events(events, video_id="vid_fashion_summer", event_type="video_play")) == 2
    assert [e.id for e in select_events(events, product_id="prod_006")] == ["evt_029", "evt_030", "evt_031"]
    assert select_events(events, session_id="session_999") == []


# ---------------------------------------------------------------------------
# report
# ---------------------------------------------------------------------------


def test_build_tables(events):
    tables = build_tables(events)
    assert set(tables) == {"funnel", "high_value_users", "hourly", "cohorts", "products", "videos"}
    assert list(tables["high_value_users"]["user_id"]) == ["user_004", "user_002", "user_001"]
    assert len(tables["products"]) == 8
    fashion = tables["videos"].set_index("video_id").loc["vid_fashion_summer"]
    assert fashion["top_products"] == "prod_001:1;prod_007:1"


def test_write_report(events, tmp_path):
    written = write_report(events, tmp_path)
    assert written["hourly"].exists()
    hourly = pd.read_csv(written["hourly"])
    assert hourly["event_count"].sum() == 37
