from __future__ import annotations

import math
from typing import Set, Tuple

from .world import HazardGrid, Task

IGNITION_THRESHOLD = 0.85
IGNITION_VARIANCE = 3.0


def gaussian_pdf(x: float, mean: float, variance: float) -> float:
    """Unnormalised Gaussian bell; peaks at 1.0 when ``x == mean``."""
    return math.exp(-((x - mean) * (x - mean)) / (2 * (variance * variance)))


def ignite_field(grid: HazardGrid, rng, task_id: int = 0) -> Task:
    """
    Grow one hazard cluster around the grid centre and return its Task.

    Rings are visited outward from radius 1. Both loop bounds are re-drawn
    before every ring, so growth stops after a random, per-axis-uneven number
    of rings. Each candidate cell is scored once with a perturbed Gaussian of
    its distance from the centre and ignites when the score clears the
    threshold.

    ``rng`` must provide numpy ``Generator``-style ``integers(high)`` and
    ``random()``.
    """
    center = (grid.width // 2, grid.height // 2)
    cell = grid.ignite(*center)
    task = Task(task_id=task_id, centroid=center)
    task.add_cell(cell)

    visited: Set[Tuple[int, int]] = {center}
    radius = 1
    while radius <= int(rng.integers(grid.width)) + 2 and radius <= int(rng.integers(grid.height)) + 2:
        for i in range(-radius, radius + 1):
            for j in range(-radius, radius + 1):
                col, row = center[0] + i, center[1] + j
                if not grid.in_bounds(col, row) or (col, row) in visited:
                    continue
                distance = math.sqrt(i * i + j * j)
                mean = (int(rng.integers(3)) - 1) * float(rng.random())
                score = gaussian_pdf(distance, mean, IGNITION_VARIANCE)
                visited.add((col, row))
                if score > IGNITION_THRESHOLD:
                    task.notify_new_hazard(grid.ignite(col, row))
        task.radius = radius
        radius += 1
    return task
