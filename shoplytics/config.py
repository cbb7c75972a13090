import os
from pathlib import Path

# .../shoplytics/config.py → repo root is 2 levels up
REPO = Path(__file__).resolve().parents[1]

EVENTS_PATH = Path(os.environ.get("SHOPLYTICS_EVENTS", REPO / "data" / "events.json"))
REPORTS_DIR = Path(os.environ.get("SHOPLYTICS_REPORTS", REPO / "data" / "reports"))

DEFAULTS = {
    "window_size": 300,     # seconds, sliding window
    "high_value_limit": 10,
    "top_products": 5,
}

UNKNOWN = "Unknown"
