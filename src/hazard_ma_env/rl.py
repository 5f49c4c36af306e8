from __future__ import annotations

import json
import logging
import pickle
from collections import deque
from typing import Dict, List, Optional

import numpy as np

from .env import EnvConfig, HazardEnv
from .learning import Experience, SharedLearningState
from .world import CellType

logger = logging.getLogger(__name__)

MISSING_BOOTSTRAP_POLICIES = ("zero", "skip")


class TabularQTrainer:
    """
    Episode driver for the shared tabular Q function.

    Agents only record transitions while an episode runs; the table itself is
    updated off-policy in batches replayed from the shared pool every
    ``batch_period`` episodes.
    """

    def __init__(
        self,
        env: HazardEnv,
        learning: Optional[SharedLearningState] = None,
        alpha: float = 0.1,
        gamma: float = 0.9,
        batch_period: int = 1,
        updates_per_batch: int = 10,
        missing_bootstrap: str = "zero",
        log_path: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> None:
        if missing_bootstrap not in MISSING_BOOTSTRAP_POLICIES:
            raise ValueError(f"missing_bootstrap must be one of {MISSING_BOOTSTRAP_POLICIES}, got {missing_bootstrap!r}.")
        if batch_period < 1:
            raise ValueError("batch_period must be at least 1.")
        self.env = env
        self.learning = learning or env.learning
        if self.learning is not env.learning:
            raise ValueError("Trainer and environment must share one learning state.")
        self.alpha = alpha
        self.gamma = gamma
        self.batch_period = batch_period
        self.updates_per_batch = updates_per_batch
        self.missing_bootstrap = missing_bootstrap
        self.log_path = log_path
        self.rng = np.random.default_rng(seed)
        self.episodes_since_update = 0
        self.episodes_done = 0

    def run_episode(self) -> Dict[str, float]:
        """Run one episode to exhaustion or until the hazard is gone, then maybe replay."""
        self.env.reset()
        steps = 0
        while self.env.step():
            steps += 1
            if self.env.done:
                break

        self.episodes_done += 1
        self.episodes_since_update += 1
        updates = 0
        if self.episodes_since_update == self.batch_period:
            updates = self.batch_update()
            self.episodes_since_update = 0

        grid = self.env.grid
        summary = {
            "episode": self.episodes_done,
            "reward": self.env.cumulative_reward,
            "steps": steps,
            "hazard_remaining": grid.hazard_count,
            "cleared": grid.count(CellType.CLEARED),
            "cluster_size": len(self.env.active_task.cells),
            "known_cells": sum(len(agent.known_cells) for agent in self.env.agents),
            "pool_size": len(self.learning.pool),
            "q_updates": updates,
        }
        if self.log_path:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(summary) + "\n")
        return summary

    def batch_update(self) -> int:
        """Replay ``updates_per_batch`` sampled transitions; returns how many touched the table."""
        if len(self.learning.pool) == 0:
            logger.warning("Experience pool is empty; skipping batch update.")
            return 0
        applied = 0
        for _ in range(self.updates_per_batch):
            experience = self.learning.sample_experience(self.rng)
            if self.apply_update(experience):
                applied += 1
        return applied

    def apply_update(self, experience: Experience) -> bool:
        """Q(s,a) += alpha * (r + gamma * max_a' Q(s',a') - Q(s,a))."""
        s, a = experience.source_state, experience.action
        q = self.learning.lookup(s, a)
        bootstrap = self.learning.best_value(self.env.grid, experience.destination_state)
        if bootstrap is None:
            if self.missing_bootstrap == "skip":
                return False
            bootstrap = 0.0
        value = q + self.alpha * (experience.reward + self.gamma * bootstrap - q)
        self.learning.update(s, a, value)
        return True

    def train(self, episodes: int) -> List[float]:
        return [self.run_episode()["reward"] for _ in range(episodes)]

    def save_checkpoint(self, path: str) -> None:
        payload = {
            "q_table": self.learning.q_table,
            "experiences": self.learning.experiences(),
            "episodes_since_update": self.episodes_since_update,
            "episodes_done": self.episodes_done,
        }
        with open(path, "wb") as f:
            pickle.dump(payload, f)

    def load_checkpoint(self, path: str) -> None:
        with open(path, "rb") as f:
            payload = pickle.load(f)
        q_table = np.asarray(payload["q_table"], dtype=np.float64)
        if q_table.shape != self.learning.q_table.shape:
            raise ValueError(f"Checkpoint Q table has shape {q_table.shape}, expected {self.learning.q_table.shape}.")
        self.learning.q_table[...] = q_table
        pool = self.learning.pool
        pool.buffer = deque(payload["experiences"], maxlen=pool.capacity)
        self.episodes_since_update = payload.get("episodes_since_update", 0)
        self.episodes_done = payload.get("episodes_done", 0)


def build_default_trainer(config: Optional[EnvConfig] = None, log_path: Optional[str] = None) -> TabularQTrainer:
    config = config or EnvConfig()
    learning = SharedLearningState(config.width * config.height, capacity=config.experience_capacity)
    env = HazardEnv(config=config, learning=learning)
    return TabularQTrainer(env=env, learning=learning, log_path=log_path, seed=config.seed)
