import pathlib
import sys

import numpy as np
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "src"))

from hazard_ma_env import Experience, ExperiencePool, HazardGrid, SharedLearningState  # noqa: E402


def _experience(i: int) -> Experience:
    return Experience(source_state=i, action=i + 1, reward=float(i), destination_state=i + 1)


def test_pool_evicts_oldest_first():
    pool = ExperiencePool(capacity=3)
    for i in range(5):
        pool.push(_experience(i))
        assert len(pool) <= 3
    assert [e.source_state for e in pool.buffer] == [2, 3, 4]


def test_default_pool_capacity_is_fifty():
    state = SharedLearningState(states_count=9)
    for i in range(60):
        state.push_experience(_experience(i))
    assert len(state.pool) == 50
    assert state.experiences()[0].source_state == 10


def test_sampling_empty_pool_raises():
    state = SharedLearningState(states_count=9)
    with pytest.raises(ValueError):
        state.sample_experience(np.random.default_rng(0))


def test_pool_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        ExperiencePool(capacity=0)


def test_sample_draws_from_pool():
    state = SharedLearningState(states_count=9)
    entries = [_experience(i) for i in range(4)]
    for e in entries:
        state.push_experience(e)
    rng = np.random.default_rng(5)
    for _ in range(20):
        assert state.sample_experience(rng) in entries


def test_valid_actions_are_non_normal_neighbours_in_order():
    grid = HazardGrid(width=5, height=5)
    learning = SharedLearningState(grid.states_count)
    center = grid.state_index(2, 2)
    grid.ignite(2, 2)
    grid.ignite(3, 3)
    grid.ignite(1, 2)
    grid.ignite(2, 1)
    grid.suppress_at(2, 1)
    grid.ignite(4, 4)  # two cells away

    actions = learning.valid_actions(grid, center)
    assert actions == sorted(actions)
    assert set(actions) == {grid.state_index(3, 3), grid.state_index(1, 2), grid.state_index(2, 1)}
    assert center not in actions


@pytest.mark.parametrize("width,height", [(3, 3), (6, 4)])
def test_valid_actions_stay_in_range_and_adjacent(width, height):
    grid = HazardGrid(width=width, height=height)
    for state in range(grid.states_count):
        grid.ignite(*grid.location_of(state))
    learning = SharedLearningState(grid.states_count)
    for state in range(grid.states_count):
        origin = grid.cell_for_state(state)
        for action in learning.valid_actions(grid, state):
            assert 0 <= action < grid.states_count
            assert origin.is_neighbor_of(grid.cell_for_state(action))


def test_best_value_is_max_over_valid_actions_or_none():
    grid = HazardGrid(width=5, height=5)
    learning = SharedLearningState(grid.states_count)
    center = grid.state_index(2, 2)
    assert learning.best_value(grid, center) is None

    east, south = grid.state_index(3, 2), grid.state_index(2, 3)
    grid.ignite(3, 2)
    grid.ignite(2, 3)
    learning.update(center, east, -0.4)
    learning.update(center, south, -0.1)
    # Not a valid action, must be ignored.
    learning.update(center, grid.state_index(1, 1), 5.0)

    assert learning.best_value(grid, center) == pytest.approx(-0.1)
    assert learning.best_value(grid, center) == learning.best_value(grid, center)
    assert learning.lookup(center, east) == pytest.approx(-0.4)


def test_q_table_shape_matches_states():
    learning = SharedLearningState(states_count=625)
    assert learning.q_table.shape == (625, 625)
    assert not learning.q_table.any()
