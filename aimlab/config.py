"""
Session configuration for the aim-lab trainer.

A session is configured by scenario, sensitivity multiplier, duration and an
optional random seed. Configuration can come from a dict, a JSON file, or the
environment (a local ``.env`` file is loaded first):

    AIMLAB_SCENARIO=tracking
    AIMLAB_SENSITIVITY=1.2
    AIMLAB_DURATION_S=30
    AIMLAB_SEED=7
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .scenarios import ScenarioType


MIN_SENSITIVITY = 0.1
MAX_SENSITIVITY = 5.0
DEFAULT_SENSITIVITY = 1.0

DEFAULT_DURATION_S = 30.0
MIN_DURATION_S = 1.0

ENV_PREFIX = "AIMLAB_"


@dataclass
class SessionConfig:
    """
    Settings for one training session.

    The sensitivity multiplier is carried through to the final stats for
    display only; the shot-resolution core never reads it.
    """
    scenario: ScenarioType = ScenarioType.GRIDSHOT
    sensitivity: float = DEFAULT_SENSITIVITY
    duration_s: float = DEFAULT_DURATION_S
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.scenario, str):
            self.scenario = _parse_scenario(self.scenario)
        self.sensitivity = max(MIN_SENSITIVITY, min(MAX_SENSITIVITY, float(self.sensitivity)))
        self.duration_s = max(MIN_DURATION_S, float(self.duration_s))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionConfig':
        """Create configuration from a dictionary."""
        seed = data.get("seed")
        try:
            return cls(
                scenario=_parse_scenario(data.get("scenario", ScenarioType.GRIDSHOT.value)),
                sensitivity=float(data.get("sensitivity", DEFAULT_SENSITIVITY)),
                duration_s=float(data.get("duration_s", DEFAULT_DURATION_S)),
                seed=int(seed) if seed is not None else None,
            )
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid session config: {exc}") from exc

    @classmethod
    def from_json(cls, path: str) -> 'SessionConfig':
        """Load configuration from a JSON file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Session config not found: {path}")

        with open(config_path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'SessionConfig':
        """Create configuration from AIMLAB_* environment variables."""
        load_dotenv(dotenv_path)

        data: Dict[str, Any] = {}
        for key in ("scenario", "sensitivity", "duration_s", "seed"):
            value = os.getenv(ENV_PREFIX + key.upper())
            if value not in (None, ""):
                data[key] = value
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario": self.scenario.value,
            "sensitivity": self.sensitivity,
            "duration_s": self.duration_s,
            "seed": self.seed,
        }


def _parse_scenario(value: Any) -> ScenarioType:
    if isinstance(value, ScenarioType):
        return value
    try:
        return ScenarioType.from_name(str(value))
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
