import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "src"))

from hazard_ma_env import Cell, CellType, HazardGrid  # noqa: E402


@pytest.mark.parametrize("width,height", [(3, 3), (25, 25), (7, 4), (4, 9)])
def test_states_count_and_index_round_trip(width, height):
    grid = HazardGrid(width=width, height=height)
    assert grid.states_count == width * height
    for state in range(grid.states_count):
        col, row = grid.location_of(state)
        assert grid.in_bounds(col, row)
        assert grid.state_index(col, row) == state
        cell = grid.cell_for_state(state)
        assert (cell.col, cell.row) == (col, row)


def test_grid_rejects_degenerate_size():
    with pytest.raises(ValueError):
        HazardGrid(width=2, height=5)


def test_neighbor_predicate_is_chebyshev_one_without_self():
    center = Cell(col=5, row=5)
    assert not center.is_neighbor_of(Cell(col=5, row=5))
    for dc in (-1, 0, 1):
        for dr in (-1, 0, 1):
            if dc == 0 and dr == 0:
                continue
            assert center.is_neighbor_of(Cell(col=5 + dc, row=5 + dr))
    assert not center.is_neighbor_of(Cell(col=7, row=5))
    assert not center.is_neighbor_of(Cell(col=6, row=3))


def test_ignite_and_suppress_track_hazard_counter():
    grid = HazardGrid(width=5, height=5)
    grid.ignite(1, 1)
    grid.ignite(1, 1)
    grid.ignite(2, 3)
    assert grid.hazard_count == 2

    assert grid.suppress_at(1, 1)
    assert grid.cell_at(1, 1).type == CellType.CLEARED
    assert grid.hazard_count == 1
    # Suppressing anything that is not burning is a no-op.
    assert not grid.suppress_at(1, 1)
    assert not grid.suppress_at(0, 0)
    assert grid.cell_at(0, 0).type == CellType.NORMAL
    assert grid.hazard_count == 1


class BurnsOutCell(Cell):
    def on_step(self, grid):
        if self.type == CellType.HAZARD:
            self.type = CellType.BURNED
            grid.hazard_count -= 1


def test_grid_step_hands_each_cell_its_own_evolution():
    grid = HazardGrid(width=3, height=3)
    grid.cells[1, 1] = BurnsOutCell(col=1, row=1)
    grid.ignite(1, 1)
    grid.ignite(0, 0)
    assert grid.hazard_count == 2

    grid.step()
    assert grid.cell_at(1, 1).type == CellType.BURNED
    assert grid.cell_at(0, 0).type == CellType.HAZARD
    assert grid.hazard_count == 1
    assert grid.count(CellType.BURNED) == 1
