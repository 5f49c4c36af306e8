from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .agent import UAVAgent
from .engine import AirField, Schedule
from .ignition import ignite_field
from .learning import SharedLearningState
from .world import CellType, HazardGrid, Task

AGENT_ORDER = 1
GRID_ORDER = 2


@dataclass
class RewardConfig:
    normal: float = 0.0
    cleared: float = -0.25
    hazard: float = 1.0
    burned: float = -0.5
    water: float = 0.0

    def for_cell(self, cell_type: CellType) -> float:
        if cell_type == CellType.NORMAL:
            return self.normal
        if cell_type == CellType.CLEARED:
            return self.cleared
        if cell_type == CellType.HAZARD:
            return self.hazard
        if cell_type == CellType.BURNED:
            return self.burned
        return self.water


@dataclass
class EnvConfig:
    width: int = 25
    height: int = 25
    depth: int = 50  # max altitude
    num_agents: int = 1
    max_steps: Optional[int] = 20000  # ticks per episode before the schedule gives up
    seed: Optional[int] = None
    epsilon: float = 0.1
    linear_velocity: float = 0.02
    step_to_extinguish: int = 10
    experience_capacity: int = 50
    start_position: Tuple[float, float, float] = (0.0, 0.0, 49.0)
    reward: RewardConfig = field(default_factory=RewardConfig)


class HazardEnv:
    """Per-episode world: grid, hazard task, air space and schedule around a persistent set of agents."""

    def __init__(self, config: Optional[EnvConfig] = None, learning: Optional[SharedLearningState] = None):
        self.config = config or EnvConfig()
        if not 0.0 <= self.config.epsilon <= 1.0:
            raise ValueError("epsilon must lie in [0, 1].")
        if self.config.step_to_extinguish < 1:
            raise ValueError("step_to_extinguish must be at least 1.")
        if self.config.num_agents < 1:
            raise ValueError("num_agents must be at least 1.")
        if not AirField(self.config.width, self.config.height, self.config.depth).in_bounds(self.config.start_position):
            raise ValueError(f"start_position {self.config.start_position} lies outside the air space.")
        states_count = self.config.width * self.config.height
        self.learning = learning or SharedLearningState(states_count, capacity=self.config.experience_capacity)
        if self.learning.states_count != states_count:
            raise ValueError("Shared learning state does not match the grid size.")
        self.rng = np.random.default_rng(self.config.seed)
        self.agents: List[UAVAgent] = [UAVAgent(agent_id=f"uav_{idx}") for idx in range(self.config.num_agents)]
        self.grid: Optional[HazardGrid] = None
        self.air: Optional[AirField] = None
        self.schedule: Optional[Schedule] = None
        self.tasks: List[Task] = []
        self.active_task: Optional[Task] = None
        self.cumulative_reward: float = 0.0

    def reset(self) -> Task:
        self.grid = HazardGrid(width=self.config.width, height=self.config.height)
        self.tasks = [ignite_field(self.grid, self.rng, task_id=0)]
        # Only the first cluster is ever handed out.
        self.active_task = self.tasks[0]
        self.cumulative_reward = 0.0

        self.air = AirField(self.config.width, self.config.height, self.config.depth)
        self.schedule = Schedule(max_steps=self.config.max_steps)
        for agent in self.agents:
            agent.reset()
            self.air.place(agent.agent_id, self.config.start_position)
            self.schedule.schedule_repeating(agent, AGENT_ORDER)
        self.schedule.schedule_repeating(self.grid, GRID_ORDER)
        return self.active_task

    def step(self) -> bool:
        assert self.schedule is not None, "Environment not reset."
        return self.schedule.step(self)

    @property
    def done(self) -> bool:
        return self.grid is not None and self.grid.hazard_count == 0

    def reward(self, state: int) -> float:
        assert self.grid is not None, "Environment not reset."
        return self.config.reward.for_cell(self.grid.cell_for_state(state).type)

    def add_reward(self, value: float) -> None:
        self.cumulative_reward += value
