from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .env import EnvConfig


@dataclass
class ScenarioSpec:
    name: str
    description: str
    env_config: EnvConfig
    episodes: int = 1000


def scenario_presets() -> Dict[str, ScenarioSpec]:
    """Return predefined training scenarios."""
    return {
        "single_uav": ScenarioSpec(
            name="single_uav",
            description="One UAV on a 25x25 forest with a single central fire; the evaluation setup.",
            env_config=EnvConfig(width=25, height=25, num_agents=1),
        ),
        "uav_team": ScenarioSpec(
            name="uav_team",
            description="Three UAVs sharing one Q table and experience pool on the same fire.",
            env_config=EnvConfig(width=25, height=25, num_agents=3),
        ),
        "small_field": ScenarioSpec(
            name="small_field",
            description="Two fast UAVs on an 11x11 forest; quick smoke runs.",
            env_config=EnvConfig(
                width=11,
                height=11,
                num_agents=2,
                max_steps=5000,
                linear_velocity=0.25,
                start_position=(0.0, 0.0, 10.0),
                depth=20,
            ),
            episodes=50,
        ),
    }
