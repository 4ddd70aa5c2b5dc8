#!/usr/bin/env python3
"""
Play a headless aim-lab session with a synthetic shooter and print the report.

The shooter aims at the first live target with configurable noise, a fixed
horizontal bias, and an aim lag on moving targets (negative lag leads the
target, which shows up as overshoot).

Usage:
    python scripts/run_session.py --scenario gridshot
    python scripts/run_session.py --scenario tracking --lag -0.15 --seed 3
    python scripts/run_session.py --config session.json --json
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aimlab.config import SessionConfig
from aimlab.physics import CameraFrame, Vector3D
from aimlab.report import SessionReport
from aimlab.session import AimSession


FRAME_TIME_S = 1.0 / 60.0


def aim_point(target, frame: CameraFrame, rng, noise: float, bias_x: float, lag_s: float) -> Vector3D:
    """Where the synthetic shooter puts the crosshair for one shot."""
    point = target.position - target.velocity * lag_s
    jitter_x, jitter_y = rng.normal(0.0, noise, size=2) if noise > 0 else (0.0, 0.0)
    return point + frame.right * (bias_x + float(jitter_x)) + frame.up * float(jitter_y)


def run(config: SessionConfig, shots_per_second: float, noise: float, bias_x: float, lag_s: float) -> SessionReport:
    session = AimSession(config)
    rng = np.random.default_rng(config.seed)
    eye = Vector3D.zero()

    session.spawn_initial()

    frames = int(config.duration_s / FRAME_TIME_S)
    frames_per_shot = max(1, int(round(1.0 / (shots_per_second * FRAME_TIME_S))))

    for frame_index in range(frames):
        session.tick(FRAME_TIME_S)
        if frame_index % frames_per_shot != 0:
            continue

        targets = session.targets
        if not targets:
            continue
        target = targets[0]

        # Square up to the target first so right/up are meaningful
        frame = CameraFrame.look_at(eye, target.position)
        frame = CameraFrame.look_at(eye, aim_point(target, frame, rng, noise, bias_x, lag_s))
        session.fire_from_camera(frame)

    return SessionReport(session.end_session())


def main():
    parser = argparse.ArgumentParser(
        description="Run a headless aim-lab session with a synthetic shooter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_session.py --scenario flicking --noise 0.4
    python scripts/run_session.py --scenario gridshot --bias -0.6
    python scripts/run_session.py --scenario tracking --lag 0.2
        """,
    )

    # Session settings
    parser.add_argument(
        "--config",
        help="JSON session config (overrides the flags below)",
    )
    parser.add_argument(
        "--scenario",
        choices=["gridshot", "tracking", "flicking"],
        default="gridshot",
        help="Scenario to play (default: gridshot)",
    )
    parser.add_argument(
        "--sensitivity",
        type=float,
        default=1.0,
        help="Sensitivity multiplier, display only (default: 1.0)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=30.0,
        help="Session length in seconds (default: 30)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible sessions",
    )

    # Shooter model
    parser.add_argument(
        "--rate",
        type=float,
        default=2.0,
        help="Shots per second (default: 2)",
    )
    parser.add_argument(
        "--noise",
        type=float,
        default=0.35,
        help="Std-dev of aim jitter in world units (default: 0.35)",
    )
    parser.add_argument(
        "--bias",
        type=float,
        default=0.0,
        help="Constant horizontal aim bias in world units (default: 0)",
    )
    parser.add_argument(
        "--lag",
        type=float,
        default=0.0,
        help="Aim lag on moving targets in seconds; negative leads (default: 0)",
    )

    # Output
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.config:
            config = SessionConfig.from_json(args.config)
        else:
            config = SessionConfig(
                scenario=args.scenario,
                sensitivity=args.sensitivity,
                duration_s=args.duration,
                seed=args.seed,
            )
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    report = run(config, args.rate, args.noise, args.bias, args.lag)
    print(report.to_json() if args.json else report.to_text())


if __name__ == "__main__":
    main()
