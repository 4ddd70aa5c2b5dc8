"""
Shot Log for the aim-lab shot-resolution engine.

An append-only, chronological record of every shot fired in a session.
Records are immutable; the log itself is frozen when the session ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from .errors import SessionEndedError
from .miss import MissOffset


@dataclass(frozen=True)
class ShotRecord:
    """
    One fired shot.

    Attributes:
        timestamp: Wall-clock time of firing (seconds since the epoch).
        hit: Whether a target was destroyed.
        target_id: Id of the destroyed target (hits only).
        relative_x: Camera-right offset from the intended target (misses).
        relative_y: Camera-up offset from the intended target (misses).
        distance_from_center: Offset magnitude in the projection plane (misses).
        target_velocity_x: Intended target's horizontal velocity (misses).
    """
    timestamp: float
    hit: bool
    target_id: Optional[str] = None
    relative_x: Optional[float] = None
    relative_y: Optional[float] = None
    distance_from_center: Optional[float] = None
    target_velocity_x: Optional[float] = None

    @classmethod
    def for_hit(cls, timestamp: float, target_id: str) -> ShotRecord:
        return cls(timestamp=timestamp, hit=True, target_id=target_id)

    @classmethod
    def for_miss(cls, timestamp: float, offset: Optional[MissOffset] = None) -> ShotRecord:
        """Miss record; without an offset every measurement stays None."""
        if offset is None:
            return cls(timestamp=timestamp, hit=False)
        return cls(
            timestamp=timestamp,
            hit=False,
            relative_x=offset.relative_x,
            relative_y=offset.relative_y,
            distance_from_center=offset.distance_from_center,
            target_velocity_x=offset.target_velocity_x,
        )

    @property
    def has_offset(self) -> bool:
        return self.relative_x is not None and self.relative_y is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize, leaving out fields that do not apply to this record."""
        data: dict[str, Any] = {"timestamp": self.timestamp, "hit": self.hit}
        for name in (
            "target_id", "relative_x", "relative_y",
            "distance_from_center", "target_velocity_x",
        ):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


class ShotLog:
    """
    Append-only sequence of ShotRecords in fire order.

    Once frozen, any further append raises SessionEndedError.
    """

    def __init__(self) -> None:
        self._records: list[ShotRecord] = []
        self._frozen = False

    def append(self, record: ShotRecord) -> None:
        """
        Append a record.

        Raises:
            SessionEndedError: If the log has been frozen.
        """
        if self._frozen:
            raise SessionEndedError("Shot log is frozen; the session has ended")
        self._records.append(record)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ShotRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> ShotRecord:
        return self._records[index]

    @property
    def records(self) -> tuple[ShotRecord, ...]:
        """Snapshot of all records."""
        return tuple(self._records)

    def hits(self) -> list[ShotRecord]:
        return [r for r in self._records if r.hit]

    def misses(self) -> list[ShotRecord]:
        return [r for r in self._records if not r.hit]
