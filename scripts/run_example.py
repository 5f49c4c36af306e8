import argparse
from copy import deepcopy
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "src"))

import numpy as np  # noqa: E402

from hazard_ma_env import HazardEnv, SharedLearningState, TabularQTrainer, scenario_presets  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Train UAVs to suppress a fire with a shared tabular Q function.")
    parser.add_argument("--scenario", type=str, default="single_uav", choices=list(scenario_presets().keys()))
    parser.add_argument("--episodes", type=int, default=None, help="Defaults to the scenario's episode count.")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--epsilon", type=float, default=None)
    parser.add_argument("--log_path", type=str, default=None, help="Optional JSONL log file.")
    parser.add_argument("--checkpoint", type=str, default=None, help="Optional checkpoint path to save at end.")
    parser.add_argument("--resume", type=str, default=None, help="Optional checkpoint to load before training.")
    args = parser.parse_args()

    preset = scenario_presets()[args.scenario]
    config = deepcopy(preset.env_config)
    if args.seed is not None:
        config.seed = args.seed
    if args.epsilon is not None:
        config.epsilon = args.epsilon

    learning = SharedLearningState(config.width * config.height, capacity=config.experience_capacity)
    env = HazardEnv(config=config, learning=learning)
    trainer = TabularQTrainer(env=env, learning=learning, log_path=args.log_path, seed=config.seed)
    if args.resume:
        trainer.load_checkpoint(args.resume)

    episodes = args.episodes or preset.episodes
    rewards = []
    for ep in range(episodes):
        summary = trainer.run_episode()
        rewards.append(summary["reward"])
        print(
            f"Episode {ep+1}/{episodes}: reward={summary['reward']:.3f}, steps={summary['steps']}, "
            f"cluster={summary['cluster_size']}, cleared={summary['cleared']}, remaining={summary['hazard_remaining']}"
        )
    print(f"Mean reward over {episodes} episodes: {float(np.mean(rewards)):.3f}")

    if args.checkpoint:
        trainer.save_checkpoint(args.checkpoint)


if __name__ == "__main__":
    main()
