"""
Tests for session report rendering.
"""

import json
import pytest

from aimlab.analysis import Recommendation
from aimlab.report import SessionReport
from aimlab.scenarios import ScenarioType
from aimlab.session import SessionStats
from aimlab.shot_log import ShotRecord


def make_stats(scenario: ScenarioType, records) -> SessionStats:
    hits = sum(1 for r in records if r.hit)
    return SessionStats(
        score=hits,
        shots_fired=len(records),
        shots_hit=hits,
        accuracy=hits / len(records) * 100 if records else 0.0,
        shot_log=tuple(records),
        scenario=scenario,
        sensitivity=1.2,
        duration_s=30.0,
    )


@pytest.fixture
def tracking_stats():
    records = [ShotRecord.for_hit(1.0, "target-1")]
    records += [
        ShotRecord(timestamp=2.0 + i, hit=False, relative_x=0.6, relative_y=0.1,
                   distance_from_center=0.61, target_velocity_x=3.0)
        for i in range(4)
    ]
    records.append(ShotRecord.for_miss(9.0))
    return make_stats(ScenarioType.TRACKING, records)


class TestSessionReport:
    """Tests for text and JSON output."""

    def test_analysis_computed_when_omitted(self, tracking_stats):
        report = SessionReport(tracking_stats)
        assert report.analysis.overshoots == 4
        assert report.analysis.kind == Recommendation.OVERSHOOT

    def test_text_contains_summary(self, tracking_stats):
        text = SessionReport(tracking_stats).to_text()
        assert "SESSION ANALYSIS" in text
        assert "Tracking" in text
        assert "16.7%" in text
        assert "Overshoots" in text
        assert Recommendation.OVERSHOOT.value in text

    def test_text_omits_tracking_rows_for_static(self):
        stats = make_stats(ScenarioType.GRIDSHOT, [ShotRecord.for_hit(1.0, "a")])
        text = SessionReport(stats).to_text()
        assert "Overshoots" not in text
        assert Recommendation.PERFECT.value in text

    def test_json(self, tracking_stats):
        data = json.loads(SessionReport(tracking_stats).to_json())
        assert data["stats"]["scenario"] == "TRACKING"
        assert data["stats"]["shots_fired"] == 6
        assert len(data["stats"]["shots"]) == 6
        assert data["analysis"]["overshoots"] == 4
        assert data["impacts"][-1] == [0.0, 0.0]
        assert len(data["impacts"]) == 5
