import pytest

from shoplytics.events import Event
from shoplytics.synthetic.personas import reference_events


@pytest.fixture
def events():
    return reference_events()


@pytest.fixture
def make_event():
    """Build an Event from a few keyword fields, metadata defaults to desktop."""
    counter = iter(range(1, 10_000))

    def _make(type, timestamp, user_id="u1", session_id="s1", video_id="v1", product_id=None, **meta):
        meta.setdefault("device_type", "desktop")
        return Event(
            id=f"t_{next(counter)}",
            type=type,
            timestamp=timestamp,
            user_id=user_id,
            session_id=session_id,
            video_id=video_id,
            product_id=product_id,
            metadata=meta,
        )

    return _make
