"""SimulationEngine — the main tick loop.

Owns all top-level simulation state and advances it in the canonical
tick order:

1. Decay pheromone fields
2. Update ants in population order (sense, move, harvest or deliver),
   drawing from one seeded generator in that same order
3. Lay the trail marks queued in step 2
4. Advance the seed

Trail marks are applied after every ant has moved, so ants sense the
pheromone field as it stood before this tick's movement.  Food taken
during step 2 is visible to later ants in the same tick.

The engine is not reentrant: drivers that render or edit state from
another thread should work on ``snapshot()`` documents rather than the
live engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from antsim.colony.colony import Colony
from antsim.colony.policies import Policies
from antsim.persistence.document import build_document, parse_document
from antsim.pheromones.decay import decay, decay_factor
from antsim.pheromones.fields import PheromoneField, PheromoneType
from antsim.simulation.config import SimulationConfig
from antsim.simulation.rng import tick_generator
from antsim.world.board import Board
from antsim.world.environment import Environment

logger = logging.getLogger(__name__)


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        environment: World parameters; its seed advances every tick.
        board: The shared cellular world.
        colony: Ant population and food tally.
        config: Tuning configuration.
        tick: Ticks advanced since construction.
        policies: Foraging rules derived from environment and config.
    """

    environment: Environment
    board: Board
    colony: Colony
    config: SimulationConfig = field(default_factory=SimulationConfig)
    tick: int = 0
    policies: Policies = field(init=False)
    _decay_factor: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Derive per-run constants from environment and config."""
        self.environment.validate(
            self.config.max_visual_range,
            self.config.max_cells,
        )
        self.policies = Policies(
            haul_amount=self.environment.haul_amount,
            visual_range=self.environment.ant_visual_range,
            deposit_amount=self.config.deposit_amount,
        )
        self._decay_factor = decay_factor(
            self.environment.decay_rate,
            self.config.decay_horizon,
        )
        logger.info(
            "engine ready: %dx%d board, %d ants, %d food cells, seed %d",
            self.environment.width,
            self.environment.height,
            len(self.colony.ants),
            len(self.board.foods),
            self.environment.seed,
        )

    @classmethod
    def from_document(
        cls,
        data: Any,
        config: SimulationConfig | None = None,
    ) -> SimulationEngine:
        """Build an engine from a save document.

        Args:
            data: Decoded save document.
            config: Tuning config; defaults apply when omitted.

        Raises:
            MalformedSaveError: If the document does not match the schema.
            InvalidConfigurationError: If the config or the world the
                document describes is unusable.
        """
        config = config or SimulationConfig()
        config.validate()
        parsed = parse_document(data, config)
        return cls(
            environment=parsed.environment,
            board=parsed.board,
            colony=parsed.colony,
            config=config,
        )

    @classmethod
    def from_config(cls, config: SimulationConfig) -> SimulationEngine:
        """Generate a fresh scenario from the config's scenario fields.

        A square home is marked at the board centre, food patches are
        scattered at random, and ``initial_ants`` foragers start on the
        centre cell.
        """
        config.validate()
        environment = Environment(
            width=config.world_width,
            height=config.world_height,
            seed=config.seed,
            decay_rate=config.decay_rate,
            haul_amount=config.haul_amount,
            ant_visual_range=config.ant_visual_range,
        )
        environment.validate(config.max_visual_range, config.max_cells)
        grid = environment.make_grid()
        board = Board(
            grid=grid,
            pheromones=PheromoneField(
                size=grid.size,
                maximum=config.pheromone_max,
                floor=config.pheromone_floor,
            ),
        )
        cx, cy = config.world_width // 2, config.world_height // 2
        board.mark_home(cx, cy, radius=config.home_radius)

        rng = tick_generator(config.seed)
        board.populate(
            rng,
            num_patches=config.food_patches,
            patch_radius=config.patch_radius,
            food_per_cell=config.food_per_cell,
        )

        colony = Colony()
        centre = grid.index_of(cx, cy)
        for _ in range(config.initial_ants):
            colony.spawn_ant(centre, rng, config.exploration_range)
        return cls(environment=environment, board=board, colony=colony, config=config)

    def step(self) -> None:
        """Advance the simulation by one tick.

        Follows the canonical tick order:
        1. Pheromone decay
        2. Ants
        3. Trail deposits
        4. Seed advance
        """
        # 1. Decay
        decay(self.board.pheromones, self._decay_factor)

        # 2. Ants
        rng = tick_generator(self.environment.seed)
        pending: list[tuple[PheromoneType, int]] = []
        for ant in self.colony.ants:
            move = ant.update(self.board, self.policies, rng)
            if move is None:
                continue
            pending.append((move.trail, move.origin))
            if move.completed_trip:
                self.colony.credit(move.delivered)

        # 3. Trail deposits
        for ptype, index in pending:
            self.board.deposit(ptype, index, self.policies.deposit_amount)

        # 4. Seed
        self.environment.advance_seed()
        self.tick += 1
        logger.debug(
            "tick %d: seed %d, food collected %d over %d deliveries",
            self.tick,
            self.environment.seed,
            self.colony.food_collected,
            self.colony.deliveries,
        )

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    def snapshot(self) -> dict[str, Any]:
        """Return the current state as an independent save document."""
        return build_document(self.environment, self.board, self.colony)
