"""Ant -- individual agent with local decision-making.

An ant is a two-state machine.  While FORAGING it looks for food and
lays home pheromone behind it; while RETURNING it carries its haul back
and lays food pheromone behind it.  Ants never talk to each other: they
only read and write the shared pheromone field on the board.

Key movement model:

- **Candidates**: the non-blocker neighbours of the current cell.  The
  cell the ant just came from is dropped whenever another candidate
  exists, so ants do not immediately reverse.
- **Sensing**: if a target (food with something left, or home) lies
  within the visual range, the ant steps greedily toward the nearest.
- **Exploration**: otherwise, with probability ``exploration_factor``
  the ant picks a uniformly random candidate.
- **Gradient**: failing that, it steps onto the candidate with the
  strongest pheromone of the channel it follows.  Ties, including the
  all-zero case, are broken uniformly at random.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from antsim.pheromones.fields import PheromoneType

if TYPE_CHECKING:
    from numpy.random import Generator

    from antsim.colony.policies import Policies
    from antsim.world.board import Board
    from antsim.world.grid import Grid

logger = logging.getLogger(__name__)


class AntState(Enum):
    """Behavioural state; values are the save-file spellings."""

    FORAGING = "Foraging"
    RETURNING = "Returning"

    @property
    def followed(self) -> PheromoneType:
        """Pheromone channel this state climbs."""
        if self is AntState.FORAGING:
            return PheromoneType.FOOD
        return PheromoneType.HOME

    @property
    def trail(self) -> PheromoneType:
        """Pheromone channel this state leaves behind."""
        if self is AntState.FORAGING:
            return PheromoneType.HOME
        return PheromoneType.FOOD


@dataclass(frozen=True)
class Move:
    """Outcome of one ant's turn.

    Attributes:
        origin: Cell the ant left (where its trail mark goes).
        destination: Cell the ant moved onto.
        trail: Channel to deposit at ``origin``.
        harvested: Food taken on arrival (FORAGING -> RETURNING).
        delivered: Food handed in on arrival.
        completed_trip: True when the ant reached home while returning.
    """

    origin: int
    destination: int
    trail: PheromoneType
    harvested: int = 0
    delivered: int = 0
    completed_trip: bool = False


@dataclass
class Ant:
    """A single ant agent.

    Attributes:
        position: Current board index.
        last_position: Board index occupied before the last move.
        exploration_factor: Probability (0.0-1.0) of ignoring the
            pheromone gradient in favour of a random legal step.
        state: Current behavioural state.
        carrying: Food units hauled (0 while foraging).
    """

    position: int
    last_position: int
    exploration_factor: float = 0.5
    state: AntState = AntState.FORAGING
    carrying: int = 0

    @classmethod
    def at(cls, index: int, exploration_factor: float) -> Ant:
        """Create a fresh forager standing on ``index``."""
        return cls(
            position=index,
            last_position=index,
            exploration_factor=exploration_factor,
        )

    def update(
        self,
        board: Board,
        policies: Policies,
        rng: Generator,
    ) -> Move | None:
        """Perform one tick of decision-making, movement and transition.

        Food is taken from the board immediately.  The trail mark is *not*
        laid here: it is returned in the ``Move`` so the caller can apply
        all deposits after every ant has sensed the board.

        Args:
            board: Shared board to read and harvest from.
            policies: Colony-wide foraging rules.
            rng: Random generator for this tick.

        Returns:
            The move taken, or None if the ant is walled in.
        """
        destination = self.choose_next(board, policies, rng)
        if destination is None:
            return None

        trail = self.state.trail
        origin = self.position
        self.last_position, self.position = origin, destination

        harvested = delivered = 0
        completed_trip = False
        if self.state is AntState.FORAGING and board.foods.get(destination, 0) > 0:
            harvested = board.take_food(destination, policies.haul_amount)
            self.carrying = harvested
            self.state = AntState.RETURNING
            logger.debug("ant harvested %d at %d", harvested, destination)
        elif self.state is AntState.RETURNING and destination in board.homes:
            delivered = self.carrying
            completed_trip = True
            self.carrying = 0
            self.state = AntState.FORAGING
            logger.debug("ant delivered %d at %d", delivered, destination)

        return Move(
            origin=origin,
            destination=destination,
            trail=trail,
            harvested=harvested,
            delivered=delivered,
            completed_trip=completed_trip,
        )

    def candidates(self, board: Board) -> list[int]:
        """Return the cells this ant may step onto next.

        Blockers and off-board cells are never candidates.  The previous
        cell is dropped unless it is the only way out.
        """
        options = board.legal_neighbours(self.position)
        if len(options) > 1 and self.last_position in options:
            options.remove(self.last_position)
        return options

    def choose_next(
        self,
        board: Board,
        policies: Policies,
        rng: Generator,
    ) -> int | None:
        """Pick the next cell without moving.

        Returns:
            Chosen board index, or None if no candidate exists.
        """
        options = self.candidates(board)
        if not options:
            return None

        target = self.sense(board, policies.visual_range)
        if target is not None:
            return _step_toward(board.grid, options, target, rng)

        if rng.random() < self.exploration_factor:
            return options[int(rng.integers(len(options)))]

        return self._follow_gradient(board, options, rng)

    def sense(self, board: Board, radius: int) -> int | None:
        """Return the nearest visible target, if any.

        Foragers look for food cells with something left; returning ants
        look for home cells.  Nearest means smallest Chebyshev distance,
        then smallest Euclidean distance, then lowest index.
        """
        grid = board.grid
        if self.state is AntState.FORAGING:
            visible = [
                i
                for i in grid.within_radius(self.position, radius)
                if board.foods.get(i, 0) > 0
            ]
        else:
            visible = [
                i for i in grid.within_radius(self.position, radius) if i in board.homes
            ]
        if not visible:
            return None
        return min(
            visible,
            key=lambda i: (
                grid.distance(self.position, i),
                grid.squared_distance(self.position, i),
                i,
            ),
        )

    def _follow_gradient(
        self,
        board: Board,
        options: list[int],
        rng: Generator,
    ) -> int:
        """Step onto the strongest followed-pheromone candidate."""
        layer = board.pheromones.get_layer(self.state.followed)
        strengths = [float(layer[i]) for i in options]
        best = max(strengths)
        tied = [i for i, s in zip(options, strengths) if s == best]
        if len(tied) == 1:
            return tied[0]
        return tied[int(rng.integers(len(tied)))]


def _step_toward(
    grid: Grid,
    options: list[int],
    target: int,
    rng: Generator,
) -> int:
    """Return the candidate closest to ``target``, ties broken at random."""
    dists = [grid.squared_distance(i, target) for i in options]
    best = min(dists)
    tied = [i for i, d in zip(options, dists) if d == best]
    if len(tied) == 1:
        return tied[0]
    return tied[int(rng.integers(len(tied)))]
