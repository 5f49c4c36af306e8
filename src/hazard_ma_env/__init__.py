"""Shared tabular Q-learning for multi-UAV fire suppression on a discrete forest grid."""

from .agent import AgentAction, UAVAgent  # noqa: F401
from .engine import AirField, Schedule  # noqa: F401
from .env import EnvConfig, HazardEnv, RewardConfig  # noqa: F401
from .ignition import gaussian_pdf, ignite_field  # noqa: F401
from .learning import Experience, ExperiencePool, SharedLearningState  # noqa: F401
from .presets import ScenarioSpec, scenario_presets  # noqa: F401
from .rl import TabularQTrainer, build_default_trainer  # noqa: F401
from .world import ActionId, Cell, CellType, HazardGrid, StateIndex, Task  # noqa: F401
