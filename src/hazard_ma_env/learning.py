from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

import numpy as np

from .world import ActionId, CellType, HazardGrid, StateIndex


@dataclass(frozen=True)
class Experience:
    source_state: StateIndex
    action: ActionId
    reward: float
    destination_state: StateIndex


class ExperiencePool:
    """Bounded FIFO pool of transitions shared by every agent and the trainer."""

    def __init__(self, capacity: int = 50):
        if capacity <= 0:
            raise ValueError("Experience pool capacity must be positive.")
        self.capacity = capacity
        self.buffer: Deque[Experience] = deque(maxlen=capacity)

    def push(self, experience: Experience) -> None:
        self.buffer.append(experience)

    def sample(self, rng: np.random.Generator) -> Experience:
        if not self.buffer:
            raise ValueError("Cannot sample from an empty experience pool.")
        return self.buffer[int(rng.integers(len(self.buffer)))]

    def __len__(self) -> int:
        return len(self.buffer)


class SharedLearningState:
    """
    Action-value table plus experience pool, owned once and handed to every agent.

    All mutation goes through this object. The table is dense,
    ``states_count x states_count``, indexed ``[state, action]``.
    """

    def __init__(self, states_count: int, capacity: int = 50):
        self.states_count = states_count
        self.q_table = np.zeros((states_count, states_count), dtype=np.float64)
        self.pool = ExperiencePool(capacity=capacity)

    def lookup(self, state: int, action: int) -> float:
        return float(self.q_table[state, action])

    def update(self, state: int, action: int, value: float) -> None:
        self.q_table[state, action] = value

    def valid_actions(self, grid: HazardGrid, state: int) -> List[ActionId]:
        """Neighbouring states whose cell is not NORMAL, in ascending state order."""
        assert grid.states_count == self.states_count, "Grid does not match the Q table shape."
        origin = grid.cell_for_state(state)
        actions: List[ActionId] = []
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                col, row = origin.col + dc, origin.row + dr
                if not grid.in_bounds(col, row):
                    continue
                cell = grid.cell_at(col, row)
                if origin.is_neighbor_of(cell) and cell.type != CellType.NORMAL:
                    actions.append(ActionId(grid.state_index(col, row)))
        return actions

    def best_value(self, grid: HazardGrid, state: int) -> Optional[float]:
        """Max Q over the valid actions from ``state``; ``None`` when there are none."""
        actions = self.valid_actions(grid, state)
        if not actions:
            return None
        return float(np.max(self.q_table[state, actions]))

    def push_experience(self, experience: Experience) -> None:
        self.pool.push(experience)

    def sample_experience(self, rng: np.random.Generator) -> Experience:
        return self.pool.sample(rng)

    def experiences(self) -> List[Experience]:
        return list(self.pool.buffer)
