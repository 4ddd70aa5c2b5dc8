"""
Scenario Definitions for the aim-lab trainer.

A scenario fixes, for the whole session:
- How many targets are live at once
- Where the first targets appear (fixed or random placement)
- Whether targets move (horizontal oscillation) or stay put
- Target sphere radius (reduced for precision work)

Scenarios:
    GRIDSHOT  - three static targets, rapid-fire clearing
    TRACKING  - one target sliding left/right, starts dead ahead
    FLICKING  - one small static target for micro-adjustments
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .physics import Vector3D


# =============================================================================
# CONSTANTS
# =============================================================================

# Random spawn volume (world units)
SPAWN_X_RANGE = (-5.0, 5.0)
SPAWN_Y_RANGE = (1.0, 4.0)
SPAWN_Z_RANGE = (-13.0, -8.0)

# Horizontal reflection bound for moving targets
HORIZONTAL_BOUND = 8.0

# Tracking target speed magnitude range (units/s)
TRACKING_SPEED_RANGE = (2.0, 4.0)

DEFAULT_TARGET_RADIUS = 0.5
PRECISION_TARGET_RADIUS = 0.3

# Tracking sessions start with the target straight ahead
TRACKING_START_POSITION = (0.0, 1.5, -10.0)


class ScenarioType(Enum):
    """Training scenarios offered by the trainer."""
    GRIDSHOT = "GRIDSHOT"
    TRACKING = "TRACKING"
    FLICKING = "FLICKING"

    @classmethod
    def from_name(cls, name: str) -> ScenarioType:
        """Look up a scenario by name, case-insensitive."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown scenario '{name}'") from None


@dataclass(frozen=True)
class ScenarioProfile:
    """
    Immutable target configuration for a scenario.

    Attributes:
        scenario: Which scenario this profile describes.
        target_count: Number of targets kept live at all times.
        radius: Hit-test sphere radius for every target.
        moving: Whether targets get a horizontal velocity.
        start_position: Fixed placement for the session-start spawn, or None
                        for random placement. Replacements are always random.
        display_name: Human-readable name.
        description: One-line summary of what the scenario trains.
    """
    scenario: ScenarioType
    target_count: int
    radius: float
    moving: bool = False
    start_position: Optional[tuple[float, float, float]] = None
    display_name: str = ""
    description: str = ""

    def start_vector(self) -> Optional[Vector3D]:
        """Fixed session-start position as a vector, if any."""
        if self.start_position is None:
            return None
        return Vector3D.from_tuple(self.start_position)


SCENARIO_PROFILES: dict[ScenarioType, ScenarioProfile] = {
    ScenarioType.GRIDSHOT: ScenarioProfile(
        scenario=ScenarioType.GRIDSHOT,
        target_count=3,
        radius=DEFAULT_TARGET_RADIUS,
        display_name="Gridshot",
        description="Speed & precision. Static targets.",
    ),
    ScenarioType.TRACKING: ScenarioProfile(
        scenario=ScenarioType.TRACKING,
        target_count=1,
        radius=DEFAULT_TARGET_RADIUS,
        moving=True,
        start_position=TRACKING_START_POSITION,
        display_name="Tracking",
        description="Smoothness. Moving targets.",
    ),
    ScenarioType.FLICKING: ScenarioProfile(
        scenario=ScenarioType.FLICKING,
        target_count=1,
        radius=PRECISION_TARGET_RADIUS,
        display_name="Micro-Flick",
        description="Small adjustments. Tiny targets.",
    ),
}


def get_profile(scenario: ScenarioType) -> ScenarioProfile:
    """Return the profile for a scenario."""
    return SCENARIO_PROFILES[scenario]
