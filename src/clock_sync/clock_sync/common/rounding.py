from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round like the dashboards did (``.5`` always goes up)."""
    return int(math.floor(value + 0.5))
