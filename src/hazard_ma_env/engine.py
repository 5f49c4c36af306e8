from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

Position = Tuple[float, float, float]


class Schedule:
    """Tick-driven scheduler: every participant is stepped once per tick, lowest order first."""

    def __init__(self, max_steps: Optional[int] = None):
        self.max_steps = max_steps
        self._participants: List[Tuple[int, int, object]] = []
        self._steps = 0

    @property
    def steps(self) -> int:
        return self._steps

    def schedule_repeating(self, participant: object, order: int = 0) -> None:
        # Registration index keeps the ordering stable within one priority.
        self._participants.append((order, len(self._participants), participant))
        self._participants.sort(key=lambda entry: (entry[0], entry[1]))

    def step(self, env: object) -> bool:
        if not self._participants:
            return False
        if self.max_steps is not None and self._steps >= self.max_steps:
            return False
        for _, _, participant in self._participants:
            participant.step(env)
        self._steps += 1
        return True


class AirField:
    """Continuous 3D space the agents fly through, discretised onto the grid at unit resolution."""

    def __init__(self, width: int, height: int, depth: int):
        self.width = width
        self.height = height
        self.depth = depth
        self._positions: Dict[str, Position] = {}

    def place(self, agent_id: str, position: Position) -> None:
        self._positions[agent_id] = (float(position[0]), float(position[1]), float(position[2]))

    def position_of(self, agent_id: str) -> Position:
        return self._positions[agent_id]

    def discretize(self, position: Position) -> Tuple[int, int, int]:
        return (math.floor(position[0]), math.floor(position[1]), math.floor(position[2]))

    def in_bounds(self, position: Position) -> bool:
        x, y, z = position
        return 0 <= x < self.width and 0 <= y < self.height and 1 <= z < self.depth
