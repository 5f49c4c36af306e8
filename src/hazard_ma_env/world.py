from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, NewType, Optional, Tuple

import numpy as np

# A state is "being located at a grid cell"; an action is "become located at
# state s'". Both are plain ints today but kept apart so a richer action space
# does not change the Q table's shape contract.
StateIndex = NewType("StateIndex", int)
ActionId = NewType("ActionId", int)


class CellType(Enum):
    NORMAL = auto()
    HAZARD = auto()
    CLEARED = auto()
    BURNED = auto()
    WATER = auto()


@dataclass
class Cell:
    col: int
    row: int
    type: CellType = CellType.NORMAL

    def location(self) -> Tuple[int, int]:
        return (self.col, self.row)

    def is_neighbor_of(self, other: "Cell") -> bool:
        """True for the 8 surrounding cells, never for the cell itself."""
        dc = abs(self.col - other.col)
        dr = abs(self.row - other.row)
        return max(dc, dr) == 1

    def suppress(self, grid: "HazardGrid") -> bool:
        if self.type != CellType.HAZARD:
            return False
        self.type = CellType.CLEARED
        grid.hazard_count -= 1
        return True

    def on_step(self, grid: "HazardGrid") -> None:
        """Per-tick hook for autonomous spread/burn-out behaviour."""
        return


@dataclass
class Task:
    task_id: int
    centroid: Tuple[int, int]
    cells: List[Cell] = field(default_factory=list)
    radius: int = 0

    def add_cell(self, cell: Cell) -> None:
        self.cells.append(cell)

    def notify_new_hazard(self, cell: Cell) -> None:
        if cell not in self.cells:
            self.add_cell(cell)


class HazardGrid:
    """Discrete forest lattice; cells are stored row-major as ``cells[row, col]``."""

    def __init__(self, width: int, height: int):
        if width < 3 or height < 3:
            raise ValueError("Grid width and height must be at least 3.")
        self.width = width
        self.height = height
        self.cells = np.empty((height, width), dtype=object)
        for r in range(height):
            for c in range(width):
                self.cells[r, c] = Cell(col=c, row=r)
        self.hazard_count: int = 0

    @property
    def states_count(self) -> int:
        return self.width * self.height

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.width and 0 <= row < self.height

    def cell_at(self, col: int, row: int) -> Cell:
        return self.cells[row, col]

    def state_index(self, col: int, row: int) -> StateIndex:
        return StateIndex(row * self.width + col)

    def location_of(self, state: int) -> Tuple[int, int]:
        return (state % self.width, state // self.width)

    def cell_for_state(self, state: int) -> Cell:
        col, row = self.location_of(state)
        return self.cells[row, col]

    def ignite(self, col: int, row: int) -> Cell:
        cell = self.cell_at(col, row)
        if cell.type != CellType.HAZARD:
            cell.type = CellType.HAZARD
            self.hazard_count += 1
        return cell

    def suppress_at(self, col: int, row: int) -> bool:
        return self.cell_at(col, row).suppress(self)

    def count(self, cell_type: CellType) -> int:
        return sum(1 for cell in self.cells.flat if cell.type == cell_type)

    def step(self, env: Optional[object] = None) -> None:
        for cell in self.cells.flat:
            cell.on_step(self)
