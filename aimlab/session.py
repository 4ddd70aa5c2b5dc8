"""
Session controller for the aim-lab trainer.

Owns the single authoritative state of one training session:
- The target store (live targets and their kinematics)
- The shot log (one record per fired shot, in fire order)
- Score and elapsed session time

Collaborators drive it through a small surface:
- spawn_initial() once at session start
- tick(dt) once per rendered frame
- fire(...) once per fire input
- end_session() once when the countdown runs out

Every call reads the store fresh and runs to completion under a lock, so
fire and tick never interleave and nothing is resolved after the session has
ended.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional

from .config import SessionConfig
from .errors import TargetNotFoundError
from .miss import MissOffset, project_miss
from .physics import CameraFrame, Ray, Vector3D
from .raycast import resolve
from .scenarios import ScenarioType
from .shot_log import ShotLog, ShotRecord
from .targets import Target, TargetStore

logger = logging.getLogger(__name__)


# =============================================================================
# EVENTS
# =============================================================================

class SessionEventType(Enum):
    """Things a renderer or recorder may want to react to."""
    SESSION_STARTED = auto()
    TARGET_SPAWNED = auto()
    TARGET_HIT = auto()
    SHOT_MISSED = auto()
    FIRE_REJECTED = auto()
    SESSION_ENDED = auto()


@dataclass
class SessionEvent:
    """
    An event that occurred during a session.

    Attributes:
        event_type: The type of event.
        timestamp: Session time when the event occurred (seconds of ticks).
        target_id: Target involved (if applicable).
        data: Additional event-specific data.
    """
    event_type: SessionEventType
    timestamp: float
    target_id: Optional[str] = None
    data: dict = field(default_factory=dict)

    def __str__(self) -> str:
        target_str = f" -> {self.target_id}" if self.target_id else ""
        return f"T+{self.timestamp:.1f}s {self.event_type.name}{target_str}"


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class ShotOutcome:
    """
    Everything the view needs to re-render after a fire event.

    Attributes:
        accepted: False when the session had already ended.
        hit: Whether a target was destroyed.
        target_id: Id of the destroyed target (hits only).
        intended_id: Angularly closest target at firing, if any.
        miss: Miss offset, when one could be computed.
        record: The shot record appended (None when rejected).
        score: Score after this shot.
        shots_fired: Shots fired after this shot.
        targets: Copies of the live targets after this shot.
    """
    accepted: bool
    hit: bool
    score: int
    shots_fired: int
    targets: tuple[Target, ...] = ()
    target_id: Optional[str] = None
    intended_id: Optional[str] = None
    miss: Optional[MissOffset] = None
    record: Optional[ShotRecord] = None


def compute_accuracy(shots_hit: int, shots_fired: int) -> float:
    """Hit percentage; 0.0 when nothing was fired."""
    if shots_fired == 0:
        return 0.0
    return shots_hit / shots_fired * 100


@dataclass(frozen=True)
class SessionStats:
    """
    Final tally of a finished session.

    Attributes:
        score: Targets destroyed.
        shots_fired: Shots fired.
        shots_hit: Shots that hit.
        accuracy: Percentage of shots that hit.
        shot_log: Every shot record, in fire order.
        scenario: Scenario played.
        sensitivity: Sensitivity multiplier (display only).
        duration_s: Session time covered by ticks.
    """
    score: int
    shots_fired: int
    shots_hit: int
    accuracy: float
    shot_log: tuple[ShotRecord, ...]
    scenario: ScenarioType
    sensitivity: float
    duration_s: float = 0.0

    @property
    def shots_missed(self) -> int:
        return self.shots_fired - self.shots_hit

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "shots_fired": self.shots_fired,
            "shots_hit": self.shots_hit,
            "accuracy": self.accuracy,
            "scenario": self.scenario.value,
            "sensitivity": self.sensitivity,
            "duration_s": self.duration_s,
            "shots": [record.to_dict() for record in self.shot_log],
        }


# =============================================================================
# SESSION
# =============================================================================

class AimSession:
    """
    One timed training session.

    The session is the only owner of score, shot count and the shot log;
    views read them from the values it returns instead of keeping their own
    copies.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None
    ) -> None:
        """
        Initialize a session.

        Args:
            config: Session settings (defaults to GRIDSHOT, sensitivity 1.0).
            rng: Optional random number generator; seeded from config.seed
                 when omitted.
            clock: Wall-clock source for shot timestamps (default time.time).
        """
        self.config = config or SessionConfig()
        self.scenario = self.config.scenario
        self.rng = rng or random.Random(self.config.seed)
        self.clock = clock or time.time

        self.store = TargetStore(self.scenario, rng=self.rng)
        self.shot_log = ShotLog()
        self.score = 0
        self.elapsed_s = 0.0

        self.events: list[SessionEvent] = []
        self._event_callbacks: list[Callable[[SessionEvent], None]] = []

        self._lock = threading.RLock()
        self._started = False
        self._stats: Optional[SessionStats] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def shots_fired(self) -> int:
        return len(self.shot_log)

    @property
    def accuracy(self) -> float:
        return compute_accuracy(self.score, self.shots_fired)

    @property
    def is_ended(self) -> bool:
        return self._stats is not None

    @property
    def targets(self) -> list[Target]:
        """Live targets, read fresh from the store."""
        return self.store.targets

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def spawn_initial(self) -> list[Target]:
        """
        Populate the target store for session start.

        Only the first call spawns; later calls return the live targets.
        """
        with self._lock:
            if not self._started and not self.is_ended:
                self._started = True
                spawned = self.store.spawn_initial()
                self._log_event(
                    SessionEventType.SESSION_STARTED,
                    data={"scenario": self.scenario.value, "targets": len(spawned)}
                )
                for target in spawned:
                    self._log_event(SessionEventType.TARGET_SPAWNED, target_id=target.id)
                logger.info(
                    "Session started: %s with %d target(s)",
                    self.scenario.value, len(spawned)
                )
            return self.store.targets

    def tick(self, elapsed_seconds: float) -> None:
        """
        Advance target kinematics by one frame.

        Args:
            elapsed_seconds: Frame time; negative values are treated as zero.
        """
        with self._lock:
            if self.is_ended:
                return
            dt = max(0.0, elapsed_seconds)
            self.elapsed_s += dt
            self.store.tick(dt)

    def fire(
        self,
        ray_origin: Vector3D,
        ray_direction: Vector3D,
        camera_right: Vector3D,
        camera_up: Vector3D,
        camera_forward: Vector3D
    ) -> ShotOutcome:
        """
        Resolve one fire event to completion.

        Raycast, then respawn on a hit or miss projection on a miss, then one
        shot record is appended. After end_session() the shot is rejected and
        nothing is recorded.

        Args:
            ray_origin: Eye position at firing.
            ray_direction: Fire direction (normalized here).
            camera_right: Camera-local right axis at firing (used as passed,
                          offsets scale with its length).
            camera_up: Camera-local up axis at firing (used as passed).
            camera_forward: Camera forward axis at firing.

        Returns:
            ShotOutcome for the view to re-render from.
        """
        with self._lock:
            if self.is_ended:
                logger.warning("Fire ignored: session has ended")
                self._log_event(SessionEventType.FIRE_REJECTED)
                return ShotOutcome(
                    accepted=False,
                    hit=False,
                    score=self.score,
                    shots_fired=self.shots_fired,
                    targets=self._snapshot(),
                )

            timestamp = self.clock()
            ray = Ray(ray_origin, ray_direction)
            result = resolve(ray.origin, ray.direction, self.store)

            if result.is_hit:
                return self._record_hit(timestamp, result.hit, result.intended)
            return self._record_miss(
                timestamp, ray, result.intended,
                camera_forward, camera_right, camera_up
            )

    def fire_from_camera(self, frame: CameraFrame) -> ShotOutcome:
        """Fire through the crosshair of a camera frame."""
        return self.fire(frame.position, frame.forward, frame.right, frame.up, frame.forward)

    def end_session(self) -> SessionStats:
        """
        Freeze the shot log and return the final tally.

        Safe to call more than once; later calls return the same stats.
        """
        with self._lock:
            if self._stats is not None:
                return self._stats

            self.shot_log.freeze()
            self._stats = SessionStats(
                score=self.score,
                shots_fired=self.shots_fired,
                shots_hit=self.score,
                accuracy=self.accuracy,
                shot_log=self.shot_log.records,
                scenario=self.scenario,
                sensitivity=self.config.sensitivity,
                duration_s=self.elapsed_s,
            )
            self._log_event(
                SessionEventType.SESSION_ENDED,
                data={"score": self.score, "shots_fired": self.shots_fired}
            )
            logger.info(
                "Session ended: %d/%d hits (%.1f%%)",
                self.score, self.shots_fired, self._stats.accuracy
            )
            return self._stats

    # -------------------------------------------------------------------------
    # Shot recording
    # -------------------------------------------------------------------------

    def _snapshot(self) -> tuple[Target, ...]:
        return tuple(target.copy() for target in self.store.targets)

    def _record_hit(
        self,
        timestamp: float,
        target_id: str,
        intended_id: Optional[str]
    ) -> ShotOutcome:
        self.score += 1

        replacement: Optional[Target] = None
        try:
            replacement = self.store.remove_and_respawn(target_id)
        except TargetNotFoundError as exc:
            logger.warning("Respawn skipped: %s", exc)

        record = ShotRecord.for_hit(timestamp, target_id)
        self.shot_log.append(record)

        self._log_event(SessionEventType.TARGET_HIT, target_id=target_id)
        if replacement is not None:
            self._log_event(SessionEventType.TARGET_SPAWNED, target_id=replacement.id)
        logger.debug("Hit %s (score %d)", target_id, self.score)

        return ShotOutcome(
            accepted=True,
            hit=True,
            score=self.score,
            shots_fired=self.shots_fired,
            targets=self._snapshot(),
            target_id=target_id,
            intended_id=intended_id,
            record=record,
        )

    def _record_miss(
        self,
        timestamp: float,
        ray: Ray,
        intended_id: Optional[str],
        camera_forward: Vector3D,
        camera_right: Vector3D,
        camera_up: Vector3D
    ) -> ShotOutcome:
        miss: Optional[MissOffset] = None
        intended = self.store.get(intended_id) if intended_id is not None else None
        if intended is not None:
            miss = project_miss(
                ray, ray.origin, camera_forward, camera_right, camera_up, intended
            )

        record = ShotRecord.for_miss(timestamp, miss)
        self.shot_log.append(record)

        self._log_event(SessionEventType.SHOT_MISSED, target_id=intended_id, data=record.to_dict())

        return ShotOutcome(
            accepted=True,
            hit=False,
            score=self.score,
            shots_fired=self.shots_fired,
            targets=self._snapshot(),
            intended_id=intended_id,
            miss=miss,
            record=record,
        )

    # -------------------------------------------------------------------------
    # Event Logging
    # -------------------------------------------------------------------------

    def add_event_callback(self, callback: Callable[[SessionEvent], None]) -> None:
        """
        Register a callback to be called for each session event.

        Args:
            callback: Function that takes a SessionEvent.
        """
        self._event_callbacks.append(callback)

    def remove_event_callback(self, callback: Callable[[SessionEvent], None]) -> None:
        """Remove an event callback."""
        if callback in self._event_callbacks:
            self._event_callbacks.remove(callback)

    def _log_event(
        self,
        event_type: SessionEventType,
        target_id: Optional[str] = None,
        data: Optional[dict] = None
    ) -> SessionEvent:
        """Log a session event and notify callbacks."""
        event = SessionEvent(
            event_type=event_type,
            timestamp=self.elapsed_s,
            target_id=target_id,
            data=data or {}
        )
        self.events.append(event)

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Event callback failed for %s", event.event_type.name)

        return event
