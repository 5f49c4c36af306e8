from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING, List, Optional, Set, Tuple

from .learning import Experience
from .world import ActionId, Cell, CellType, StateIndex, Task

if TYPE_CHECKING:
    from .env import HazardEnv


class AgentAction(Enum):
    ACQUIRE_TASK = auto()
    SELECT_TARGET = auto()
    MOVE = auto()
    SUPPRESS = auto()


class UAVAgent:
    """
    One suppression agent, stepped once per tick by the schedule.

    Control loop: acquire the active task, pick a neighbouring cell from the
    shared Q table, fly there, suppress it if it is burning, pick again.
    Moving and waiting on suppression are carried as state across ticks.
    """

    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        self.task: Optional[Task] = None
        self.target: Optional[Tuple[int, int]] = None
        self.current_state: Optional[StateIndex] = None
        self.visited_states: Set[int] = set()
        self.known_cells: List[Cell] = []
        self.started_suppressing_at: int = -1
        self.last_action: Optional[AgentAction] = None

    def reset(self) -> None:
        self.task = None
        self.target = None
        self.current_state = None
        self.visited_states = set()
        self.known_cells = []
        self.started_suppressing_at = -1
        self.last_action = None

    def grid_location(self, env: "HazardEnv") -> Tuple[int, int]:
        col, row, _ = env.air.discretize(env.air.position_of(self.agent_id))
        return (col, row)

    def next_action(self, env: "HazardEnv") -> AgentAction:
        if self.task is None:
            return AgentAction.ACQUIRE_TASK
        if self.target is None:
            return AgentAction.SELECT_TARGET
        location = self.grid_location(env)
        if location == self.target:
            if env.grid.cell_at(*location).type == CellType.HAZARD:
                return AgentAction.SUPPRESS
            return AgentAction.SELECT_TARGET
        return AgentAction.MOVE

    def step(self, env: "HazardEnv") -> None:
        action = self.next_action(env)
        if action != AgentAction.SUPPRESS:
            # Another agent may have put the fire out mid-countdown.
            self.started_suppressing_at = -1
        if action == AgentAction.ACQUIRE_TASK:
            self.acquire_task(env)
        elif action == AgentAction.SELECT_TARGET:
            if self.target is not None:
                self._remember(env.grid.cell_at(*self.target))
            self.select_target(env)
        elif action == AgentAction.MOVE:
            self.move(env)
        elif action == AgentAction.SUPPRESS:
            self._remember(env.grid.cell_at(*self.target))
            if self.suppress(env):
                env.grid.suppress_at(*self.target)
                self.target = None
        self.last_action = action

    def acquire_task(self, env: "HazardEnv") -> None:
        self.task = env.active_task
        self.target = self.task.centroid
        self.current_state = env.grid.state_index(*self.task.centroid)
        self.visited_states.add(self.current_state)
        # Rewarded here and again by every SelectTarget.
        env.add_reward(env.reward(self.current_state))

    def select_target(self, env: "HazardEnv") -> None:
        actions = env.learning.valid_actions(env.grid, self.current_state)
        if not actions:
            # Nothing reachable: hold position and re-inspect the current cell.
            self.target = env.grid.location_of(self.current_state)
            return

        if env.rng.random() < env.config.epsilon:
            next_state = actions[int(env.rng.integers(len(actions)))]
        else:
            next_state = self.greedy_action(env, actions)

        reward = env.reward(next_state)
        env.learning.push_experience(
            Experience(
                source_state=self.current_state,
                action=next_state,
                reward=reward,
                destination_state=StateIndex(next_state),
            )
        )
        self.current_state = StateIndex(next_state)
        self.visited_states.add(self.current_state)
        env.add_reward(env.reward(self.current_state))
        self.target = env.grid.location_of(self.current_state)

    def greedy_action(self, env: "HazardEnv", actions: List[ActionId]) -> ActionId:
        """Highest-valued unvisited action; first strictly greater value wins ties."""
        candidates = [a for a in actions if a not in self.visited_states] or actions
        best_action = candidates[0]
        best_value = float("-inf")
        for action in candidates:
            value = env.learning.lookup(self.current_state, action)
            if value > best_value:
                best_value = value
                best_action = action
        return best_action

    def move(self, env: "HazardEnv") -> None:
        """Bounded step toward the target on each planar axis; altitude is kept."""
        x, y, z = env.air.position_of(self.agent_id)
        speed = env.config.linear_velocity
        dx = self.target[0] - x
        dy = self.target[1] - y
        x += min(dx, speed) if dx >= 0 else -min(-dx, speed)
        y += min(dy, speed) if dy >= 0 else -min(-dy, speed)
        env.air.place(self.agent_id, (x, y, z))

    def suppress(self, env: "HazardEnv") -> bool:
        """Count consecutive suppression ticks; True on the tick the hazard goes out."""
        now = env.schedule.steps
        if self.started_suppressing_at == -1:
            self.started_suppressing_at = now
        if now - self.started_suppressing_at == env.config.step_to_extinguish:
            self.started_suppressing_at = -1
            return True
        return False

    def _remember(self, cell: Cell) -> None:
        if cell not in self.known_cells:
            self.known_cells.append(cell)

    def __repr__(self) -> str:
        return f"UAVAgent({self.agent_id}, state={self.current_state}, target={self.target}, action={self.last_action})"
