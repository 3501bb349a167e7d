"""Shared fixtures for the antsim test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

import numpy as np
import pytest
from numpy.random import Generator

from antsim.colony.policies import Policies
from antsim.pheromones.fields import PheromoneField
from antsim.simulation.config import SimulationConfig
from antsim.world.board import Board
from antsim.world.grid import DEFAULT_POINTS, Grid

DocumentFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_board() -> Board:
    """A small 8x8 board with default pheromone limits."""
    grid = Grid(width=8, height=8)
    return Board(grid=grid, pheromones=PheromoneField(size=grid.size))


@pytest.fixture
def small_pheromone_field() -> PheromoneField:
    """An 8x8 pheromone field with a low cap for fast tests."""
    return PheromoneField(size=64, maximum=100.0, floor=1.0)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def policies() -> Policies:
    """Foraging rules with a visual range of 3 and a haul of 5."""
    return Policies(haul_amount=5, visual_range=3, deposit_amount=50.0)


def _ant_entry(entry: Mapping[str, Any]) -> dict[str, Any]:
    ant = {
        "position": entry["position"],
        "last_position": entry.get("last_position", entry["position"]),
        "exploration_factor": entry.get("exploration_factor", 0.5),
        "state": entry.get("state", "Foraging"),
        "carrying": entry.get("carrying", 0),
    }
    return ant


@pytest.fixture
def make_document() -> DocumentFactory:
    """Build save documents with sensible defaults for omitted fields."""

    def build(
        *,
        width: int = 8,
        height: int = 8,
        seed: int = 7,
        decay_rate: int = 2,
        haul_amount: int = 1,
        ant_visual_range: int = 3,
        points: Iterable[Iterable[float]] = DEFAULT_POINTS,
        ants: Iterable[Mapping[str, Any]] = (),
        blockers: Iterable[int] = (),
        homes: Iterable[int] = (),
        foods: Iterable[tuple[int, int]] = (),
        paths: Iterable[tuple[int, float, float]] = (),
        colony: Mapping[str, int] | None = None,
    ) -> dict[str, Any]:
        document: dict[str, Any] = {
            "env": {
                "seed": seed,
                "decay_rate": decay_rate,
                "haul_amount": haul_amount,
                "points": [list(p) for p in points],
                "ant_visual_range": ant_visual_range,
                "dimensions": {"width": width, "height": height},
            },
            "ants": [_ant_entry(a) for a in ants],
            "board": {
                "blockers": list(blockers),
                "homes": list(homes),
                "foods": [[i, q] for i, q in foods],
                "paths_with_pheromones": [
                    [i, {"p_h": home, "p_f": food}] for i, home, food in paths
                ],
            },
        }
        if colony is not None:
            document["colony"] = dict(colony)
        return document

    return build
