"""Aim-lab shot-resolution and miss-analysis engine."""

from .analysis import (
    Analysis,
    Recommendation,
    analyze,
    analyze_session,
    impact_distribution,
)

from .config import SessionConfig

from .errors import (
    AimLabError,
    ConfigError,
    DegenerateGeometryError,
    SessionEndedError,
    TargetNotFoundError,
)

from .miss import MissOffset, intersect_ray_plane, project_miss

from .physics import CameraFrame, Ray, Vector3D

from .raycast import ResolveResult, resolve

from .report import SessionReport

from .scenarios import SCENARIO_PROFILES, ScenarioProfile, ScenarioType

from .session import (
    AimSession,
    SessionEvent,
    SessionEventType,
    SessionStats,
    ShotOutcome,
)

from .shot_log import ShotLog, ShotRecord

from .targets import Target, TargetStore

__all__ = [
    # Analysis
    "Analysis",
    "Recommendation",
    "analyze",
    "analyze_session",
    "impact_distribution",
    # Configuration
    "SessionConfig",
    # Errors
    "AimLabError",
    "ConfigError",
    "DegenerateGeometryError",
    "SessionEndedError",
    "TargetNotFoundError",
    # Miss projection
    "MissOffset",
    "intersect_ray_plane",
    "project_miss",
    # Geometry
    "CameraFrame",
    "Ray",
    "Vector3D",
    # Raycast
    "ResolveResult",
    "resolve",
    # Reporting
    "SessionReport",
    # Scenarios
    "SCENARIO_PROFILES",
    "ScenarioProfile",
    "ScenarioType",
    # Session
    "AimSession",
    "SessionEvent",
    "SessionEventType",
    "SessionStats",
    "ShotOutcome",
    # Shot log
    "ShotLog",
    "ShotRecord",
    # Targets
    "Target",
    "TargetStore",
]
