from __future__ import annotations

import os
from pathlib import Path

# repository_root/data (we are in backend/notebox/)
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"
DEFAULT_SWIPE_THRESHOLD_PX = 80


def data_dir() -> Path:
    return Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def swipe_threshold_px() -> int:
    try:
        value = int(os.getenv("SWIPE_THRESHOLD_PX", str(DEFAULT_SWIPE_THRESHOLD_PX)))
    except ValueError:
        return DEFAULT_SWIPE_THRESHOLD_PX
    return value if value > 0 else DEFAULT_SWIPE_THRESHOLD_PX
