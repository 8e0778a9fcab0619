from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "Lanecal"
APP_AUTHOR = "Lanecal"
DATA_DIR = Path(os.getenv("LANECAL_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))
EVENTS_FILE = DATA_DIR / "events.json"
MINUTES_PER_DAY = 24 * 60


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
