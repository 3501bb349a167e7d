"""Save documents — the serialisable shape of a simulation.

A document is a plain JSON-compatible mapping with four blocks:

- ``env``: seed, decay rate, haul amount, movement directions, visual
  range and dimensions.
- ``ants``: position, last position, exploration factor, state and the
  amount carried, in acting order.
- ``board``: blockers, homes, foods (``[index, remaining]`` pairs) and the
  sparse ``paths_with_pheromones`` list
  (``[index, {"p_h": home, "p_f": food}]``).
- ``colony`` (optional): food delivered home and the number of trips.

``parse_document`` validates the whole document before building any
state, so a malformed save is never partially applied.
``build_document`` is the inverse; loading and immediately re-building
reproduces the same content (lists come back in ascending index order).
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from antsim.colony.ant import Ant, AntState
from antsim.colony.colony import Colony
from antsim.errors import InvalidConfigurationError, MalformedSaveError
from antsim.pheromones.fields import PheromoneField, PheromoneType
from antsim.simulation.config import SimulationConfig
from antsim.world.board import Board
from antsim.world.cell import CellType
from antsim.world.environment import Environment

# Spelling used by older saves for a returning ant.
_LEGACY_RETURNING = "Hauling"


@dataclass
class ParsedSave:
    """Simulation state rebuilt from a document.

    Attributes:
        environment: World parameters.
        board: Cells, food and pheromones.
        colony: Ant population and food tally.
    """

    environment: Environment
    board: Board
    colony: Colony


# -- Field checks ------------------------------------------------------------


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in data:
        msg = f"{where}.{key} is missing"
        raise MalformedSaveError(msg)
    return data[key]


def _expect_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        msg = f"{where} must be an object, got {type(value).__name__}"
        raise MalformedSaveError(msg)
    return value


def _expect_list(value: Any, where: str) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        msg = f"{where} must be a list, got {type(value).__name__}"
        raise MalformedSaveError(msg)
    return list(value)


def _expect_int(value: Any, where: str, *, minimum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{where} must be an integer, got {type(value).__name__}"
        raise MalformedSaveError(msg)
    if minimum is not None and value < minimum:
        msg = f"{where} must be >= {minimum}, got {value}"
        raise MalformedSaveError(msg)
    return value


def _expect_number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"{where} must be a number, got {type(value).__name__}"
        raise MalformedSaveError(msg)
    if not math.isfinite(value):
        msg = f"{where} must be finite, got {value}"
        raise MalformedSaveError(msg)
    return float(value)


def _expect_index(value: Any, where: str, size: int) -> int:
    index = _expect_int(value, where)
    if not 0 <= index < size:
        msg = f"{where} = {index} is outside the board (0..{size - 1})"
        raise MalformedSaveError(msg)
    return index


def _expect_pair(value: Any, where: str) -> tuple[Any, Any]:
    items = _expect_list(value, where)
    if len(items) != 2:
        msg = f"{where} must have exactly 2 entries, got {len(items)}"
        raise MalformedSaveError(msg)
    return items[0], items[1]


# -- Parsing -----------------------------------------------------------------


def _parse_env(data: Any) -> Environment:
    env = _expect_mapping(data, "env")
    dims = _expect_mapping(_require(env, "dimensions", "env"), "env.dimensions")
    points = []
    for i, raw in enumerate(_expect_list(_require(env, "points", "env"), "env.points")):
        px, py = _expect_pair(raw, f"env.points[{i}]")
        points.append(
            (
                _expect_number(px, f"env.points[{i}][0]"),
                _expect_number(py, f"env.points[{i}][1]"),
            ),
        )
    return Environment(
        width=_expect_int(_require(dims, "width", "env.dimensions"), "env.dimensions.width"),
        height=_expect_int(
            _require(dims, "height", "env.dimensions"),
            "env.dimensions.height",
        ),
        seed=_expect_int(_require(env, "seed", "env"), "env.seed"),
        decay_rate=_expect_int(_require(env, "decay_rate", "env"), "env.decay_rate"),
        haul_amount=_expect_int(_require(env, "haul_amount", "env"), "env.haul_amount"),
        points=tuple(points),
        ant_visual_range=_expect_int(
            _require(env, "ant_visual_range", "env"),
            "env.ant_visual_range",
        ),
    )


def _parse_state(value: Any, where: str) -> tuple[AntState, int | None]:
    """Return the state and, for the legacy shape, the amount carried."""
    if isinstance(value, str):
        for state in AntState:
            if state.value == value:
                return state, None
    elif isinstance(value, Mapping) and set(value) == {_LEGACY_RETURNING}:
        body = _expect_mapping(value[_LEGACY_RETURNING], f"{where}.{_LEGACY_RETURNING}")
        amount = _require(body, "amount", f"{where}.{_LEGACY_RETURNING}")
        return AntState.RETURNING, _expect_int(
            amount,
            f"{where}.{_LEGACY_RETURNING}.amount",
            minimum=0,
        )
    msg = f"{where} must be 'Foraging' or 'Returning', got {value!r}"
    raise MalformedSaveError(msg)


def _parse_ant(data: Any, where: str, size: int) -> Ant:
    ant = _expect_mapping(data, where)
    exploration = _expect_number(
        _require(ant, "exploration_factor", where),
        f"{where}.exploration_factor",
    )
    if not 0.0 <= exploration <= 1.0:
        msg = f"{where}.exploration_factor must lie within [0, 1], got {exploration}"
        raise MalformedSaveError(msg)

    state, legacy_amount = _parse_state(_require(ant, "state", where), f"{where}.state")
    if "carrying" in ant:
        carrying = _expect_int(ant["carrying"], f"{where}.carrying", minimum=0)
    else:
        carrying = legacy_amount or 0
    if state is AntState.FORAGING and carrying:
        msg = f"{where} is foraging but carries {carrying}"
        raise MalformedSaveError(msg)

    return Ant(
        position=_expect_index(_require(ant, "position", where), f"{where}.position", size),
        last_position=_expect_index(
            _require(ant, "last_position", where),
            f"{where}.last_position",
            size,
        ),
        exploration_factor=exploration,
        state=state,
        carrying=carrying,
    )


def _parse_board(data: Any, environment: Environment, config: SimulationConfig) -> Board:
    raw = _expect_mapping(data, "board")
    grid = environment.make_grid()
    board = Board(
        grid=grid,
        pheromones=PheromoneField(
            size=grid.size,
            maximum=config.pheromone_max,
            floor=config.pheromone_floor,
        ),
    )
    claimed: dict[int, str] = {}

    def claim(index: int, where: str) -> None:
        if index in claimed:
            msg = f"{where} = {index} is already classified by {claimed[index]}"
            raise MalformedSaveError(msg)
        claimed[index] = where

    for i, value in enumerate(_expect_list(_require(raw, "blockers", "board"), "board.blockers")):
        where = f"board.blockers[{i}]"
        index = _expect_index(value, where, grid.size)
        claim(index, where)
        board.set_blocker(index)

    for i, value in enumerate(_expect_list(_require(raw, "homes", "board"), "board.homes")):
        where = f"board.homes[{i}]"
        index = _expect_index(value, where, grid.size)
        claim(index, where)
        board.set_home(index)

    for i, value in enumerate(_expect_list(_require(raw, "foods", "board"), "board.foods")):
        where = f"board.foods[{i}]"
        raw_index, raw_amount = _expect_pair(value, where)
        index = _expect_index(raw_index, f"{where}[0]", grid.size)
        amount = _expect_int(raw_amount, f"{where}[1]", minimum=0)
        claim(index, where)
        board.set_food(index, amount)

    paths = _expect_list(
        _require(raw, "paths_with_pheromones", "board"),
        "board.paths_with_pheromones",
    )
    for i, value in enumerate(paths):
        where = f"board.paths_with_pheromones[{i}]"
        raw_index, raw_levels = _expect_pair(value, where)
        index = _expect_index(raw_index, f"{where}[0]", grid.size)
        levels = _expect_mapping(raw_levels, f"{where}[1]")
        home = _expect_number(_require(levels, "p_h", f"{where}[1]"), f"{where}[1].p_h")
        food = _expect_number(_require(levels, "p_f", f"{where}[1]"), f"{where}[1].p_f")
        for name, level in (("p_h", home), ("p_f", food)):
            if not 0.0 <= level <= config.pheromone_max:
                msg = (
                    f"{where}[1].{name} must lie within "
                    f"[0, {config.pheromone_max}], got {level}"
                )
                raise MalformedSaveError(msg)
        claim(index, where)
        board.pheromones.set(index, home, food)

    return board


def _parse_colony(data: Any, ants: list[Ant]) -> Colony:
    if data is None:
        return Colony(ants=ants)
    raw = _expect_mapping(data, "colony")
    return Colony(
        ants=ants,
        food_collected=_expect_int(
            raw.get("food_collected", 0),
            "colony.food_collected",
            minimum=0,
        ),
        deliveries=_expect_int(raw.get("deliveries", 0), "colony.deliveries", minimum=0),
    )


def parse_document(
    data: Any,
    config: SimulationConfig | None = None,
) -> ParsedSave:
    """Validate a save document and rebuild simulation state from it.

    Args:
        data: Decoded document (e.g. the result of ``loads``).
        config: Tuning config supplying pheromone limits; defaults apply
            when omitted.

    Returns:
        The environment, board and colony described by the document.

    Raises:
        MalformedSaveError: If the document does not match the schema.
        InvalidConfigurationError: If it is well-formed but describes an
            unusable world.
    """
    config = config or SimulationConfig()
    root = _expect_mapping(data, "document")

    environment = _parse_env(_require(root, "env", "document"))
    environment.validate(config.max_visual_range, config.max_cells)
    size = environment.width * environment.height

    ants = [
        _parse_ant(item, f"ants[{i}]", size)
        for i, item in enumerate(_expect_list(_require(root, "ants", "document"), "ants"))
    ]
    board = _parse_board(_require(root, "board", "document"), environment, config)

    for i, ant in enumerate(ants):
        if board.kind_at(ant.position) is CellType.BLOCKER:
            msg = f"ants[{i}] stands on blocker {ant.position}"
            raise InvalidConfigurationError(msg)

    colony = _parse_colony(root.get("colony"), ants)
    return ParsedSave(environment=environment, board=board, colony=colony)


# -- Building ----------------------------------------------------------------


def _number(value: float) -> int | float:
    """Write integral values as integers so integer saves round-trip."""
    value = float(value)
    return int(value) if value.is_integer() else value


def build_document(
    environment: Environment,
    board: Board,
    colony: Colony,
) -> dict[str, Any]:
    """Serialise simulation state into a fresh document.

    The result shares no mutable state with the simulation.

    Args:
        environment: World parameters.
        board: Cells, food and pheromones.
        colony: Ant population and food tally.

    Returns:
        A JSON-compatible document.
    """
    home = board.pheromones.get_layer(PheromoneType.HOME)
    food = board.pheromones.get_layer(PheromoneType.FOOD)
    return {
        "env": {
            "seed": environment.seed,
            "decay_rate": environment.decay_rate,
            "haul_amount": environment.haul_amount,
            "points": [[float(px), float(py)] for px, py in environment.points],
            "ant_visual_range": environment.ant_visual_range,
            "dimensions": {
                "width": environment.width,
                "height": environment.height,
            },
        },
        "ants": [
            {
                "position": ant.position,
                "last_position": ant.last_position,
                "exploration_factor": float(ant.exploration_factor),
                "state": ant.state.value,
                "carrying": ant.carrying,
            }
            for ant in colony.ants
        ],
        "board": {
            "blockers": sorted(board.blockers),
            "homes": sorted(board.homes),
            "foods": [[index, amount] for index, amount in sorted(board.foods.items())],
            "paths_with_pheromones": [
                [int(i), {"p_h": _number(home[i]), "p_f": _number(food[i])}]
                for i in board.pheromones.active_indices()
            ],
        },
        "colony": {
            "food_collected": colony.food_collected,
            "deliveries": colony.deliveries,
        },
    }


# -- JSON --------------------------------------------------------------------


def loads(text: str | bytes) -> Any:
    """Decode a JSON save.

    Raises:
        MalformedSaveError: If the text is not valid JSON or the bytes
            are not valid Unicode.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as err:
        msg = f"invalid data format at L{err.lineno}:C{err.colno}: {err.msg}"
        raise MalformedSaveError(msg) from err
    except UnicodeDecodeError as err:
        msg = f"invalid data format at byte {err.start}: {err.reason}"
        raise MalformedSaveError(msg) from err


def dumps(document: Mapping[str, Any], indent: int | None = None) -> str:
    """Encode a document as JSON text."""
    return json.dumps(document, indent=indent)
