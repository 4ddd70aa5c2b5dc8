"""
Tests for the shot log and shot records.
"""

import dataclasses
import pytest

from aimlab.errors import SessionEndedError
from aimlab.miss import MissOffset
from aimlab.shot_log import ShotLog, ShotRecord


@pytest.fixture
def offset():
    return MissOffset(relative_x=-0.4, relative_y=0.2, distance_from_center=0.447, target_velocity_x=0.0)


class TestShotRecord:
    """Tests for record construction."""

    def test_hit_record(self):
        record = ShotRecord.for_hit(10.0, "target-3")
        assert record.hit
        assert record.target_id == "target-3"
        assert record.relative_x is None
        assert not record.has_offset

    def test_miss_record_copies_offset(self, offset):
        record = ShotRecord.for_miss(11.0, offset)
        assert not record.hit
        assert record.relative_x == -0.4
        assert record.relative_y == 0.2
        assert record.distance_from_center == 0.447
        assert record.target_velocity_x == 0.0
        assert record.has_offset

    def test_offsetless_miss(self):
        record = ShotRecord.for_miss(12.0)
        assert not record.hit
        assert not record.has_offset
        assert record.target_velocity_x is None

    def test_records_are_immutable(self):
        record = ShotRecord.for_hit(1.0, "a")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.hit = False

    def test_to_dict_skips_missing_fields(self, offset):
        assert ShotRecord.for_hit(1.0, "a").to_dict() == {"timestamp": 1.0, "hit": True, "target_id": "a"}
        assert ShotRecord.for_miss(2.0).to_dict() == {"timestamp": 2.0, "hit": False}
        assert ShotRecord.for_miss(3.0, offset).to_dict()["relative_x"] == -0.4


class TestShotLog:
    """Tests for the append-only log."""

    def test_preserves_fire_order(self):
        log = ShotLog()
        records = [ShotRecord.for_miss(float(i)) for i in range(5)]
        for record in records:
            log.append(record)
        assert list(log) == records
        assert log[2] is records[2]
        assert len(log) == 5

    def test_hits_and_misses(self, offset):
        log = ShotLog()
        log.append(ShotRecord.for_hit(1.0, "a"))
        log.append(ShotRecord.for_miss(2.0, offset))
        log.append(ShotRecord.for_miss(3.0))
        assert len(log.hits()) == 1
        assert len(log.misses()) == 2

    def test_frozen_log_rejects_appends(self):
        log = ShotLog()
        log.append(ShotRecord.for_hit(1.0, "a"))
        log.freeze()
        assert log.frozen
        with pytest.raises(SessionEndedError):
            log.append(ShotRecord.for_miss(2.0))
        assert len(log) == 1

    def test_records_snapshot_is_tuple(self):
        log = ShotLog()
        log.append(ShotRecord.for_hit(1.0, "a"))
        snapshot = log.records
        log.append(ShotRecord.for_hit(2.0, "b"))
        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1
