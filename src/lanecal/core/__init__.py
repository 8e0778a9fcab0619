"""Temporal layout and conflict engine.

Submodules are imported directly (``lanecal.core.clipper`` and friends) so that
the domain models can depend on :mod:`lanecal.core.ranges` without a cycle.
"""

from .config import APP_NAME, DATA_DIR, EVENTS_FILE, MINUTES_PER_DAY, ensure_data_dir

__all__ = ["APP_NAME", "DATA_DIR", "EVENTS_FILE", "MINUTES_PER_DAY", "ensure_data_dir"]
