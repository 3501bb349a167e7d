"""Config — load simulation tuning parameters from YAML files.

Save documents describe a world; this config describes how the engine
treats any world (pheromone scale, decay horizon, sensing cap) plus the
knobs used to generate a fresh scenario when no save is supplied.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from antsim.errors import InvalidConfigurationError
from antsim.world.environment import MAX_CELLS


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        pheromone_max: Cap on either pheromone channel of a cell.
        pheromone_floor: Concentrations below this count as zero.
        deposit_amount: Pheromone laid per step on the cell just left.
        decay_horizon: Scales ``decay_rate`` into a per-tick factor
            ``1 - 1 / (decay_rate * decay_horizon)``.
        max_visual_range: Largest ``ant_visual_range`` a world may use.
        max_cells: Largest board (``width * height``) a world may use.
        seed: RNG seed for generated scenarios.
        world_width: Number of grid columns for generated scenarios.
        world_height: Number of grid rows for generated scenarios.
        decay_rate: Decay rate for generated scenarios.
        haul_amount: Food units per harvest for generated scenarios.
        ant_visual_range: Sensing radius for generated scenarios.
        initial_ants: Starting population for generated scenarios.
        exploration_range: (min, max) exploration factor sampled per ant.
        home_radius: Half-width of the square home at the board centre.
        food_patches: Number of food patches scattered at random.
        patch_radius: Radius of each food patch.
        food_per_cell: Food at the centre of a patch.
    """

    pheromone_max: float = 65534.0
    pheromone_floor: float = 1.0
    deposit_amount: float = 65534.0
    decay_horizon: float = 64.0
    max_visual_range: int = 20
    max_cells: int = MAX_CELLS

    # Scenario generation
    seed: int = 42
    world_width: int = 128
    world_height: int = 128
    decay_rate: int = 2
    haul_amount: int = 1
    ant_visual_range: int = 3
    initial_ants: int = 20
    exploration_range: tuple[float, float] = (0.3, 0.6)
    home_radius: int = 1
    food_patches: int = 6
    patch_radius: int = 3
    food_per_cell: int = 255

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            InvalidConfigurationError: If any tuning value is unusable.
        """
        for fld in fields(self):
            value = getattr(self, fld.name)
            if fld.type == "int":
                valid = isinstance(value, int) and not isinstance(value, bool)
            elif fld.type == "float":
                valid = (
                    isinstance(value, (int, float))
                    and not isinstance(value, bool)
                    and math.isfinite(value)
                )
            else:
                continue
            if not valid:
                msg = f"{fld.name} must be {fld.type}, got {value!r}"
                raise InvalidConfigurationError(msg)

        if self.pheromone_max <= 0:
            msg = f"pheromone_max must be positive, got {self.pheromone_max}"
            raise InvalidConfigurationError(msg)
        if not 0 < self.pheromone_floor <= self.pheromone_max:
            msg = (
                "pheromone_floor must be within (0, pheromone_max], "
                f"got {self.pheromone_floor}"
            )
            raise InvalidConfigurationError(msg)
        if self.deposit_amount < 0:
            msg = f"deposit_amount must be >= 0, got {self.deposit_amount}"
            raise InvalidConfigurationError(msg)
        if self.decay_horizon < 1:
            msg = f"decay_horizon must be >= 1, got {self.decay_horizon}"
            raise InvalidConfigurationError(msg)
        if self.max_visual_range < 0:
            msg = f"max_visual_range must be >= 0, got {self.max_visual_range}"
            raise InvalidConfigurationError(msg)
        if self.max_cells < 1:
            msg = f"max_cells must be >= 1, got {self.max_cells}"
            raise InvalidConfigurationError(msg)
        bounds = self.exploration_range
        if (
            not isinstance(bounds, tuple)
            or len(bounds) != 2
            or not all(
                isinstance(b, (int, float)) and not isinstance(b, bool) for b in bounds
            )
        ):
            msg = f"exploration_range must be a (min, max) pair, got {bounds!r}"
            raise InvalidConfigurationError(msg)
        lo, hi = bounds
        if not 0.0 <= lo <= hi <= 1.0:
            msg = f"exploration_range must lie within [0, 1], got ({lo}, {hi})"
            raise InvalidConfigurationError(msg)
        if self.initial_ants < 0:
            msg = f"initial_ants must be >= 0, got {self.initial_ants}"
            raise InvalidConfigurationError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Keys not present in the file keep their defaults.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated, validated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            InvalidConfigurationError: If the file is not valid YAML, is not
                a mapping, or has unknown keys, mistyped or out-of-range values.
        """
        path = Path(path)
        with path.open("r") as f:
            try:
                data = yaml.safe_load(f) or {}
            except (yaml.YAMLError, UnicodeDecodeError) as err:
                msg = f"could not parse {path}: {err}"
                raise InvalidConfigurationError(msg) from err
        if not isinstance(data, dict):
            msg = f"{path} must hold a mapping of settings, got {type(data).__name__}"
            raise InvalidConfigurationError(msg)

        known = {fld.name for fld in fields(cls)}
        unknown = sorted(str(key) for key in set(data) - known)
        if unknown:
            msg = f"unknown config keys in {path}: {', '.join(unknown)}"
            raise InvalidConfigurationError(msg)

        if isinstance(data.get("exploration_range"), list):
            data["exploration_range"] = tuple(data["exploration_range"])

        config = cls(**data)
        config.validate()
        return config
