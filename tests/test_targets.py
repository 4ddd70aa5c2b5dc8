"""
Tests for the target store.

Tests cover:
- Spawn rule per scenario (placement volume, velocity, radius)
- Initial pool sizes and the tracking start position
- Kinematics with within-tick reflection at the horizontal bound
- Remove-and-respawn keeping the pool size constant
- Id uniqueness
"""

import random
import pytest

from aimlab.errors import TargetNotFoundError
from aimlab.physics import Vector3D
from aimlab.scenarios import (
    HORIZONTAL_BOUND,
    PRECISION_TARGET_RADIUS,
    DEFAULT_TARGET_RADIUS,
    TRACKING_START_POSITION,
    ScenarioType,
)
from aimlab.targets import Target, TargetStore, spawn_target


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def tracking_store(rng):
    return TargetStore(ScenarioType.TRACKING, rng=rng)


def moving_target(x: float, vel_x: float) -> Target:
    return Target(
        id="t",
        position=Vector3D(x, 2.0, -10.0),
        velocity=Vector3D(vel_x, 0.0, 0.0),
        radius=0.5,
    )


# =============================================================================
# SPAWN RULE
# =============================================================================

class TestSpawnTarget:
    """Tests for the per-scenario spawn rule."""

    @pytest.mark.parametrize("scenario", list(ScenarioType))
    def test_random_placement_inside_volume(self, rng, scenario):
        for i in range(200):
            target = spawn_target(scenario, f"id-{i}", rng)
            assert -5.0 <= target.position.x <= 5.0
            assert 1.0 <= target.position.y <= 4.0
            assert -13.0 <= target.position.z <= -8.0

    def test_fixed_position_used_verbatim(self, rng):
        fixed = Vector3D(0.25, 1.5, -10.0)
        target = spawn_target(ScenarioType.GRIDSHOT, "a", rng, fixed)
        assert target.position == fixed
        assert target.position is not fixed

    def test_tracking_velocity_is_horizontal(self, rng):
        signs = set()
        for i in range(200):
            target = spawn_target(ScenarioType.TRACKING, f"id-{i}", rng)
            assert 2.0 <= abs(target.velocity.x) <= 4.0
            assert target.velocity.y == 0.0
            assert target.velocity.z == 0.0
            signs.add(target.velocity.x > 0)
        assert signs == {True, False}

    @pytest.mark.parametrize("scenario", [ScenarioType.GRIDSHOT, ScenarioType.FLICKING])
    def test_static_scenarios_have_zero_velocity(self, rng, scenario):
        target = spawn_target(scenario, "a", rng)
        assert target.velocity == Vector3D.zero()
        assert not target.is_moving

    @pytest.mark.parametrize("scenario,radius", [
        (ScenarioType.GRIDSHOT, DEFAULT_TARGET_RADIUS),
        (ScenarioType.TRACKING, DEFAULT_TARGET_RADIUS),
        (ScenarioType.FLICKING, PRECISION_TARGET_RADIUS),
    ])
    def test_radius_per_scenario(self, rng, scenario, radius):
        assert spawn_target(scenario, "a", rng).radius == radius

    def test_new_target_is_active(self, rng):
        assert spawn_target(ScenarioType.GRIDSHOT, "a", rng).active


# =============================================================================
# STORE
# =============================================================================

class TestTargetStore:
    """Tests for pool management."""

    @pytest.mark.parametrize("scenario,count", [
        (ScenarioType.GRIDSHOT, 3),
        (ScenarioType.TRACKING, 1),
        (ScenarioType.FLICKING, 1),
    ])
    def test_initial_pool_size(self, rng, scenario, count):
        store = TargetStore(scenario, rng=rng)
        assert len(store.spawn_initial()) == count
        assert len(store) == count

    def test_tracking_starts_dead_ahead(self, tracking_store):
        (target,) = tracking_store.spawn_initial()
        assert target.position == Vector3D.from_tuple(TRACKING_START_POSITION)

    def test_ids_are_unique(self, rng):
        store = TargetStore(ScenarioType.GRIDSHOT, rng=rng)
        store.spawn_initial()
        seen = {t.id for t in store}
        for _ in range(100):
            victim = store.targets[0].id
            replacement = store.remove_and_respawn(victim)
            assert replacement.id not in seen
            seen.add(replacement.id)

    @pytest.mark.parametrize("scenario", list(ScenarioType))
    def test_respawn_keeps_pool_size(self, rng, scenario):
        store = TargetStore(scenario, rng=rng)
        store.spawn_initial()
        size = len(store)
        for _ in range(20):
            victim = store.targets[-1].id
            store.remove_and_respawn(victim)
            assert len(store) == size
            assert victim not in store

    def test_respawn_uses_random_placement(self, tracking_store):
        (first,) = tracking_store.spawn_initial()
        replacement = tracking_store.remove_and_respawn(first.id)
        assert replacement.id != first.id
        assert replacement.is_moving

    def test_replacement_appended_last(self, rng):
        store = TargetStore(ScenarioType.GRIDSHOT, rng=rng)
        store.spawn_initial()
        first = store.targets[0].id
        replacement = store.remove_and_respawn(first)
        assert store.targets[-1].id == replacement.id

    def test_respawn_unknown_id_raises_and_keeps_store(self, rng):
        store = TargetStore(ScenarioType.GRIDSHOT, rng=rng)
        store.spawn_initial()
        before = [t.id for t in store]
        with pytest.raises(TargetNotFoundError) as exc_info:
            store.remove_and_respawn("missing")
        assert exc_info.value.target_id == "missing"
        assert [t.id for t in store] == before

    def test_get(self, rng):
        store = TargetStore(ScenarioType.FLICKING, rng=rng)
        (target,) = store.spawn_initial()
        assert store.get(target.id) is target
        assert store.get("nope") is None


# =============================================================================
# KINEMATICS
# =============================================================================

class TestTick:
    """Tests for per-frame kinematics."""

    def _store_with(self, *targets):
        store = TargetStore(ScenarioType.TRACKING, rng=random.Random(0))
        for target in targets:
            store._targets[target.id] = target
        return store

    def test_linear_advance(self):
        target = moving_target(0.0, 3.0)
        self._store_with(target).tick(0.5)
        assert target.position.x == pytest.approx(1.5)
        assert target.velocity.x == 3.0

    def test_bounce_reflects_within_tick(self):
        target = moving_target(7.9, 3.0)
        self._store_with(target).tick(0.1)
        assert target.velocity.x == -3.0
        assert target.position.x == pytest.approx(7.6)

    def test_bounce_at_negative_bound(self):
        target = moving_target(-7.95, -2.0)
        self._store_with(target).tick(0.1)
        assert target.velocity.x == 2.0
        assert target.position.x == pytest.approx(-7.75)

    def test_landing_exactly_on_bound_does_not_reflect(self):
        target = moving_target(HORIZONTAL_BOUND - 0.5, 5.0)
        self._store_with(target).tick(0.1)
        assert target.position.x == pytest.approx(HORIZONTAL_BOUND)
        assert target.velocity.x == 5.0

    def test_vertical_and_depth_untouched(self):
        target = moving_target(0.0, 3.0)
        self._store_with(target).tick(1.0)
        assert target.position.y == 2.0
        assert target.position.z == -10.0

    @pytest.mark.parametrize("dt", [0.0, -0.5])
    def test_zero_or_negative_dt_is_noop(self, dt):
        target = moving_target(1.0, 3.0)
        self._store_with(target).tick(dt)
        assert target.position.x == 1.0

    def test_static_targets_never_move(self, rng):
        store = TargetStore(ScenarioType.GRIDSHOT, rng=rng)
        store.spawn_initial()
        before = [t.position.copy() for t in store]
        store.tick(1.0)
        assert [t.position for t in store] == before

    def test_long_frame_is_clamped_to_bound(self):
        target = moving_target(7.9, 3.0)
        store = self._store_with(target)
        store.tick(6.0)
        assert target.position.x == -HORIZONTAL_BOUND
        assert target.velocity.x == -3.0

        positions = []
        for _ in range(120):
            store.tick(1 / 60)
            positions.append(target.position.x)
        assert all(abs(x) <= HORIZONTAL_BOUND for x in positions)
        assert target.velocity.x == 3.0
        assert positions[-1] > -HORIZONTAL_BOUND

    def test_targets_stay_within_bound(self, tracking_store):
        (target,) = tracking_store.spawn_initial()
        for _ in range(2000):
            tracking_store.tick(1 / 60)
            assert abs(target.position.x) <= HORIZONTAL_BOUND
