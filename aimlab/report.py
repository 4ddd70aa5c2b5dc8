"""
Session Report Generator for the aim-lab trainer.

Renders a finished session's stats and miss analysis as:
- A fixed-width text block for terminals
- A JSON document (stats, analysis and impact scatter points)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from .analysis import Analysis, analyze_session, impact_distribution
from .scenarios import ScenarioType, get_profile
from .session import SessionStats


# =============================================================================
# CONSTANTS
# =============================================================================

REPORT_WIDTH = 65
SEPARATOR_CHAR = "="
SUB_SEPARATOR_CHAR = "-"


@dataclass
class SessionReport:
    """
    Results of one session ready for display.

    Attributes:
        stats: Final session tally.
        analysis: Miss analysis; computed from the stats when omitted.
    """
    stats: SessionStats
    analysis: Optional[Analysis] = None

    def __post_init__(self) -> None:
        if self.analysis is None:
            self.analysis = analyze_session(self.stats)

    def to_text(self) -> str:
        """
        Generate a human-readable session summary.

        Returns:
            Formatted text report.
        """
        stats = self.stats
        analysis = self.analysis
        profile = get_profile(stats.scenario)
        lines = []

        lines.append(SEPARATOR_CHAR * REPORT_WIDTH)
        lines.append("SESSION ANALYSIS".center(REPORT_WIDTH))
        lines.append(SEPARATOR_CHAR * REPORT_WIDTH)

        lines.append(f"Scenario: {profile.display_name} ({profile.description})")
        lines.append(f"Sensitivity: {stats.sensitivity:.1f}x")
        lines.append(f"Duration: {stats.duration_s:.1f}s")
        lines.append("")

        lines.append(f"  {'Accuracy':<18}{stats.accuracy:>10.1f}%")
        lines.append(f"  {'Score':<18}{stats.score:>10}")
        lines.append(f"  {'Hits':<18}{stats.shots_hit:>10}")
        lines.append(f"  {'Misses':<18}{stats.shots_missed:>10}")
        lines.append("")

        lines.append("MISS DIRECTION:")
        lines.append(SUB_SEPARATOR_CHAR * REPORT_WIDTH)
        lines.append(f"  {'Left':<18}{analysis.left:>10}")
        lines.append(f"  {'Right':<18}{analysis.right:>10}")
        lines.append(f"  {'High':<18}{analysis.top:>10}")
        lines.append(f"  {'Low':<18}{analysis.bottom:>10}")

        if stats.scenario == ScenarioType.TRACKING:
            lines.append(f"  {'Overshoots':<18}{analysis.overshoots:>10}")
            lines.append(f"  {'Undershoots':<18}{analysis.undershoots:>10}")
        lines.append("")

        lines.append("RECOMMENDATION:")
        lines.append(f"  {analysis.recommendation}")
        lines.append(SEPARATOR_CHAR * REPORT_WIDTH)

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "analysis": self.analysis.to_dict(),
            "impacts": [list(point) for point in impact_distribution(self.stats.shot_log)],
        }

    def to_json(self, indent: int = 2) -> str:
        """Generate a JSON document for the session."""
        return json.dumps(self.to_dict(), indent=indent)
