"""Pace-ranking policies: observed vs. required pace to color and level."""

from __future__ import annotations

from typing import Callable

from pace_engine.schema import PaceColor, PaceLevel, PaceStatus

PaceRankingPolicy = Callable[[float, float, int, int], PaceStatus]


def pace_based_status(user_pace: float, required_pace: float, days_left: int, progress_percentage: int) -> PaceStatus:
    """Default policy.

    Red when overdue, when nothing has been read with under 3 days left, or when
    the reader would need to more than double their pace. Orange when behind by
    less than that. Green otherwise.
    """

    if days_left <= 0:
        return PaceStatus(PaceColor.RED, PaceLevel.OVERDUE, "Return or renew")

    if progress_percentage == 0 and days_left < 3:
        return PaceStatus(PaceColor.RED, PaceLevel.IMPOSSIBLE, "Start reading now")

    if user_pace < required_pace:
        if user_pace <= 0 or (required_pace - user_pace) / user_pace * 100 > 100:
            return PaceStatus(PaceColor.RED, PaceLevel.IMPOSSIBLE, "Pace too slow")
        return PaceStatus(PaceColor.ORANGE, PaceLevel.APPROACHING, "Pick up the pace")

    return PaceStatus(PaceColor.GREEN, PaceLevel.GOOD, "You're on track")
