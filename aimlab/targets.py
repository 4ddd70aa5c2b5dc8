"""
Target Store for the aim-lab shot-resolution engine.

Owns the live targets of a session and their kinematic state:
- Spawning (scenario-fixed or random placement inside the spawn volume)
- Per-frame kinematics with reflective bounds on the horizontal axis
- Remove-and-respawn on hit, keeping the pool size constant

Target ids come from a per-store counter, so they are unique by construction
for the store's whole lifetime, not merely probabilistically.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from typing import Iterator, Optional

from .errors import TargetNotFoundError
from .physics import Vector3D
from .scenarios import (
    HORIZONTAL_BOUND,
    SPAWN_X_RANGE,
    SPAWN_Y_RANGE,
    SPAWN_Z_RANGE,
    TRACKING_SPEED_RANGE,
    ScenarioType,
    get_profile,
)

logger = logging.getLogger(__name__)


# =============================================================================
# TARGET
# =============================================================================

@dataclass
class Target:
    """
    A live sphere to shoot at.

    Attributes:
        id: Opaque identifier, stable for the target's lifetime.
        position: Sphere centre in world coordinates.
        velocity: Units per second; zero for stationary scenarios.
        radius: Hit-test sphere radius.
        active: Always True while the target is in a store.
    """
    id: str
    position: Vector3D
    velocity: Vector3D
    radius: float
    active: bool = True

    @property
    def is_moving(self) -> bool:
        return self.velocity.magnitude > 0

    def copy(self) -> Target:
        """Detached copy; later ticks do not change it."""
        return Target(
            id=self.id,
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            radius=self.radius,
            active=self.active,
        )

    def __str__(self) -> str:
        p = self.position
        return f"Target {self.id} at ({p.x:.2f}, {p.y:.2f}, {p.z:.2f}) r={self.radius}"


def spawn_target(
    scenario: ScenarioType,
    target_id: str,
    rng: random.Random,
    fixed_position: Optional[Vector3D] = None
) -> Target:
    """
    Create a target following the scenario's spawn rule.

    Args:
        scenario: Active scenario (decides velocity and radius).
        target_id: Identifier for the new target.
        rng: Random source for placement and speed.
        fixed_position: Used verbatim when given; otherwise a random point in
                        the spawn volume in front of the eye.

    Returns:
        The new Target.
    """
    profile = get_profile(scenario)

    if fixed_position is not None:
        position = fixed_position.copy()
    else:
        position = Vector3D(
            rng.uniform(*SPAWN_X_RANGE),
            rng.uniform(*SPAWN_Y_RANGE),
            rng.uniform(*SPAWN_Z_RANGE),
        )

    if profile.moving:
        direction = 1.0 if rng.random() > 0.5 else -1.0
        velocity = Vector3D(direction * rng.uniform(*TRACKING_SPEED_RANGE), 0.0, 0.0)
    else:
        velocity = Vector3D.zero()

    return Target(id=target_id, position=position, velocity=velocity, radius=profile.radius)


# =============================================================================
# TARGET STORE
# =============================================================================

class TargetStore:
    """
    Authoritative set of live targets for one session.

    Iteration order is insertion order; replacements are appended at the end.
    That order is what the raycast resolver uses to break ties.
    """

    def __init__(
        self,
        scenario: ScenarioType,
        rng: Optional[random.Random] = None,
        horizontal_bound: float = HORIZONTAL_BOUND
    ):
        """
        Initialize an empty store.

        Args:
            scenario: Scenario fixed for the store's lifetime.
            rng: Optional random number generator for reproducible sessions.
            horizontal_bound: Absolute X limit where moving targets bounce.
        """
        self.scenario = scenario
        self.profile = get_profile(scenario)
        self.rng = rng or random.Random()
        self.horizontal_bound = horizontal_bound
        self._targets: dict[str, Target] = {}
        self._ids = itertools.count(1)

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[Target]:
        return iter(list(self._targets.values()))

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._targets

    @property
    def targets(self) -> list[Target]:
        """Live targets in iteration order."""
        return list(self._targets.values())

    def get(self, target_id: str) -> Optional[Target]:
        """Get a target by id."""
        return self._targets.get(target_id)

    # -------------------------------------------------------------------------
    # Spawning
    # -------------------------------------------------------------------------

    def _next_id(self) -> str:
        return f"target-{next(self._ids)}"

    def spawn(self, fixed_position: Optional[Vector3D] = None) -> Target:
        """
        Spawn one target into the store.

        Args:
            fixed_position: Optional placement used verbatim.

        Returns:
            The newly live target.
        """
        target = spawn_target(self.scenario, self._next_id(), self.rng, fixed_position)
        self._targets[target.id] = target
        logger.debug("Spawned %s", target)
        return target

    def spawn_initial(self) -> list[Target]:
        """
        Fill the store for session start.

        GRIDSHOT gets three random targets, TRACKING one target at the fixed
        start position, FLICKING one random target.
        """
        start = self.profile.start_vector()
        for _ in range(self.profile.target_count):
            self.spawn(start)
        return self.targets

    def remove_and_respawn(self, target_id: str) -> Target:
        """
        Remove a hit target and spawn its replacement.

        The replacement always uses random placement.

        Args:
            target_id: Id of the target that was hit.

        Returns:
            The replacement target.

        Raises:
            TargetNotFoundError: If the id is not live. The store is unchanged.
        """
        if self._targets.pop(target_id, None) is None:
            raise TargetNotFoundError(target_id)
        logger.debug("Removed target %s", target_id)
        return self.spawn()

    # -------------------------------------------------------------------------
    # Kinematics
    # -------------------------------------------------------------------------

    def tick(self, elapsed_seconds: float) -> None:
        """
        Advance moving targets along X by ``velocity * elapsed_seconds``.

        When the step would carry a target past +/-horizontal_bound, the X
        velocity is negated and the step is recomputed from the old position
        with the reflected velocity, all within the same tick. If that step
        is still out of range the position is clamped to the bound. Y and Z
        are never touched.

        Args:
            elapsed_seconds: Frame time; negative values are treated as zero.
        """
        dt = max(0.0, elapsed_seconds)
        if dt == 0:
            return

        bound = self.horizontal_bound
        for target in self._targets.values():
            if not target.is_moving:
                continue

            vel_x = target.velocity.x
            new_x = target.position.x + vel_x * dt

            if new_x > bound or new_x < -bound:
                vel_x = -vel_x
                new_x = target.position.x + vel_x * dt
                # A long frame can overshoot the opposite bound too
                new_x = max(-bound, min(bound, new_x))

            target.position = Vector3D(new_x, target.position.y, target.position.z)
            target.velocity = Vector3D(vel_x, target.velocity.y, target.velocity.z)
