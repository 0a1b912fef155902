"""Trailing-window wellness aggregation."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from models.wellness_log import WellnessLog

STATS_WINDOW_DAYS = 30

# output key -> model attribute
_AVERAGED = {
    "mood": "mood",
    "energy": "energy",
    "sleepHours": "sleep_hours",
    "sleepQuality": "sleep_quality",
    "nutritionQuality": "nutrition_quality",
    "hydration": "nutrition_hydration",
    "stress": "stress",
    "physicalActivity": "physical_activity",
}

_TRENDS = {
    "mood": "mood",
    "energy": "energy",
    "sleep": "sleep_quality",
    "stress": "stress",
}


def window_start(today: date, days: int = STATS_WINDOW_DAYS) -> date:
    return today - timedelta(days=days)


def _round1(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def summarize(logs: Iterable[WellnessLog]) -> dict:
    """Average and trend the given logs, expected in ascending date order.

    A missing value adds 0 to its sum while still counting toward the divisor,
    so sparse fields pull their average down.
    """

    logs = list(logs)
    total = len(logs)
    sums = dict.fromkeys(_AVERAGED, 0.0)
    trend = {key: [] for key in _TRENDS}

    for log in logs:
        for key, attribute in _AVERAGED.items():
            sums[key] += getattr(log, attribute) or 0
        day = log.date.isoformat()
        for key, attribute in _TRENDS.items():
            trend[key].append({"date": day, "value": getattr(log, attribute)})

    averages = {key: (_round1(value / total) if total else 0) for key, value in sums.items()}

    return {
        "mood": averages["mood"],
        "energy": averages["energy"],
        "sleep": {"hours": averages["sleepHours"], "quality": averages["sleepQuality"]},
        "nutrition": {
            "quality": averages["nutritionQuality"],
            "hydration": averages["hydration"],
        },
        "stress": averages["stress"],
        "physicalActivity": averages["physicalActivity"],
        "totalEntries": total,
        "trend": trend,
    }
