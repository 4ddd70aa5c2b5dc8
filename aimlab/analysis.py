"""
Session Analyzer for the aim-lab trainer.

Turns a finished session's shot log into:
- Directional miss counts (left/right/top/bottom of the intended target)
- Overshoot/undershoot counts for moving targets (TRACKING only)
- One coaching recommendation picked by a fixed-threshold heuristic

The analysis is a pure function of the log and the scenario and is run once,
after the log has been frozen.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable

import numpy as np

from .scenarios import ScenarioType
from .shot_log import ShotRecord

if TYPE_CHECKING:
    from .session import SessionStats


# =============================================================================
# HEURISTIC CONSTANTS
# =============================================================================

# A tracking bias must beat the opposite count by this factor...
TRACKING_DOMINANCE_RATIO = 1.5
# ...and exceed this many misses
TRACKING_MIN_COUNT = 3

# Directional bias must exceed this fraction of all misses
BIAS_FRACTION = 0.5

# Mean |relative_x| above which the scatter counts as wide
WIDE_SPREAD_THRESHOLD = 1.5


class Recommendation(Enum):
    """Coaching messages, one per heuristic outcome."""
    PERFECT = "Perfect run! Your sensitivity is well-tuned."
    BALANCED = "Your aim is balanced. Continue training to build consistency."
    OVERSHOOT = (
        "You consistently OVERSHOOT moving targets. "
        "Try LOWERING your sensitivity or DPI slightly."
    )
    UNDERSHOOT = (
        "You consistently UNDERSHOOT moving targets. "
        "Try INCREASING your sensitivity or DPI slightly."
    )
    MISS_LEFT = (
        "You consistently miss to the LEFT. "
        "Check your initial crosshair placement or grip stability."
    )
    MISS_RIGHT = (
        "You consistently miss to the RIGHT. "
        "You might be pulling your mouse too fast."
    )
    VERTICAL_DRIFT = (
        "Significant vertical drift detected. "
        "Check your posture and mousepad friction."
    )
    WIDE_SCATTER = (
        "Wide horizontal scatter detected. "
        "Your sensitivity might be too high for precise micro-adjustments."
    )


@dataclass(frozen=True)
class Analysis:
    """
    Aggregate miss analysis for one session.

    Attributes:
        left: Misses with relative_x < 0.
        right: Misses with relative_x > 0.
        top: Misses with relative_y > 0.
        bottom: Misses with relative_y < 0.
        overshoots: Tracking misses landing ahead of the target's motion.
        undershoots: Tracking misses landing behind the target's motion.
        kind: Which heuristic branch produced the recommendation.
        total_misses: Number of miss records analysed.
    """
    left: int = 0
    right: int = 0
    top: int = 0
    bottom: int = 0
    overshoots: int = 0
    undershoots: int = 0
    kind: Recommendation = Recommendation.PERFECT
    total_misses: int = 0

    @property
    def recommendation(self) -> str:
        return self.kind.value

    @property
    def horizontal_bias(self) -> int:
        return abs(self.left - self.right)

    @property
    def vertical_bias(self) -> int:
        return abs(self.top - self.bottom)

    def to_dict(self) -> dict[str, Any]:
        return {
            "left": self.left,
            "right": self.right,
            "top": self.top,
            "bottom": self.bottom,
            "overshoots": self.overshoots,
            "undershoots": self.undershoots,
            "total_misses": self.total_misses,
            "recommendation": self.recommendation,
        }


def _count_tracking_bias(misses: list[ShotRecord]) -> tuple[int, int]:
    """Count (overshoots, undershoots) over misses carrying a target velocity."""
    overshoots = 0
    undershoots = 0
    for miss in misses:
        vel_x = miss.target_velocity_x
        rel_x = miss.relative_x
        if vel_x is None or rel_x is None:
            continue
        if (vel_x > 0 and rel_x > 0) or (vel_x < 0 and rel_x < 0):
            overshoots += 1
        elif (vel_x > 0 and rel_x < 0) or (vel_x < 0 and rel_x > 0):
            undershoots += 1
    return overshoots, undershoots


def _recommend(
    scenario: ScenarioType,
    misses: list[ShotRecord],
    left: int,
    right: int,
    top: int,
    bottom: int,
    overshoots: int,
    undershoots: int
) -> Recommendation:
    """Pick the first matching heuristic branch."""
    if scenario == ScenarioType.TRACKING:
        if overshoots > undershoots * TRACKING_DOMINANCE_RATIO and overshoots > TRACKING_MIN_COUNT:
            return Recommendation.OVERSHOOT
        if undershoots > overshoots * TRACKING_DOMINANCE_RATIO and undershoots > TRACKING_MIN_COUNT:
            return Recommendation.UNDERSHOOT
        return Recommendation.BALANCED

    total_misses = len(misses)
    if abs(left - right) > total_misses * BIAS_FRACTION:
        return Recommendation.MISS_LEFT if left > right else Recommendation.MISS_RIGHT
    if abs(top - bottom) > total_misses * BIAS_FRACTION:
        return Recommendation.VERTICAL_DRIFT

    # Offset-less misses count as zero spread
    spreads = np.abs(np.array([m.relative_x or 0.0 for m in misses], dtype=float))
    if float(np.mean(spreads)) > WIDE_SPREAD_THRESHOLD:
        return Recommendation.WIDE_SCATTER
    return Recommendation.BALANCED


def analyze(shot_log: Iterable[ShotRecord], scenario: ScenarioType) -> Analysis:
    """
    Analyse a completed shot log.

    Args:
        shot_log: Every shot record of the session, in fire order.
        scenario: The session's scenario.

    Returns:
        Analysis with directional counts, tracking counts and recommendation.
    """
    misses = [record for record in shot_log if not record.hit]
    if not misses:
        return Analysis(kind=Recommendation.PERFECT)

    left = sum(1 for m in misses if m.relative_x is not None and m.relative_x < 0)
    right = sum(1 for m in misses if m.relative_x is not None and m.relative_x > 0)
    top = sum(1 for m in misses if m.relative_y is not None and m.relative_y > 0)
    bottom = sum(1 for m in misses if m.relative_y is not None and m.relative_y < 0)

    overshoots = undershoots = 0
    if scenario == ScenarioType.TRACKING:
        overshoots, undershoots = _count_tracking_bias(misses)

    kind = _recommend(scenario, misses, left, right, top, bottom, overshoots, undershoots)

    return Analysis(
        left=left,
        right=right,
        top=top,
        bottom=bottom,
        overshoots=overshoots,
        undershoots=undershoots,
        kind=kind,
        total_misses=len(misses),
    )


def analyze_session(stats: SessionStats) -> Analysis:
    """Analyse the frozen log carried by a session's final stats."""
    return analyze(stats.shot_log, stats.scenario)


def impact_distribution(shot_log: Iterable[ShotRecord]) -> list[tuple[float, float]]:
    """
    Scatter points for every miss, in camera-local (right, up) units.

    Misses recorded without an offset are plotted at the centre.
    """
    return [
        (record.relative_x or 0.0, record.relative_y or 0.0)
        for record in shot_log
        if not record.hit
    ]
