"""Tests for antsim.world — grid, cell, board, environment."""

import pytest
from numpy.random import Generator

from antsim.errors import InvalidConfigurationError
from antsim.pheromones.fields import PheromoneField, PheromoneType
from antsim.world.board import Board
from antsim.world.cell import Cell, CellType
from antsim.world.environment import SEED_MODULUS, Environment
from antsim.world.grid import DEFAULT_POINTS, Grid, offsets_from_points


class TestGrid:
    """Tests for flat-index geometry."""

    def test_index_round_trip(self) -> None:
        grid = Grid(width=300, height=300)
        assert grid.index_of(125, 125) == 37625
        assert grid.coords_of(37625) == (125, 125)
        assert grid.coords_of(37590) == (90, 125)

    def test_index_out_of_bounds(self) -> None:
        grid = Grid(width=4, height=3)
        with pytest.raises(IndexError):
            grid.index_of(4, 0)
        with pytest.raises(IndexError):
            grid.coords_of(12)
        with pytest.raises(IndexError):
            grid.coords_of(-1)

    def test_zero_size_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            Grid(width=0, height=5)

    def test_neighbours_center(self) -> None:
        grid = Grid(width=8, height=8)
        neighbours = grid.neighbours(grid.index_of(3, 3))
        assert len(neighbours) == 8
        assert grid.index_of(4, 3) == neighbours[0]  # east comes first

    def test_neighbours_corner(self) -> None:
        # Top-left corner, no wraparound
        grid = Grid(width=8, height=8)
        assert sorted(grid.neighbours(0)) == [1, 8, 9]

    def test_neighbours_right_edge_does_not_wrap(self) -> None:
        grid = Grid(width=8, height=8)
        neighbours = grid.neighbours(grid.index_of(7, 3))
        assert len(neighbours) == 5
        assert all(grid.coords_of(n)[0] >= 6 for n in neighbours)

    def test_neighbours_follow_direction_set(self) -> None:
        grid = Grid(
            width=5,
            height=5,
            offsets=offsets_from_points([(1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0)]),
        )
        assert sorted(grid.neighbours(12)) == [7, 11, 13, 17]

    def test_within_radius_clipped(self) -> None:
        grid = Grid(width=10, height=10)
        window = grid.within_radius(0, 2)
        assert len(window) == 8  # 3x3 block minus the centre
        assert 0 not in window
        assert all(0 <= i < grid.size for i in window)

    def test_within_radius_interior(self) -> None:
        grid = Grid(width=10, height=10)
        window = grid.within_radius(grid.index_of(5, 5), 3)
        assert len(window) == 48
        assert all(grid.distance(grid.index_of(5, 5), i) <= 3 for i in window)

    def test_within_radius_zero(self) -> None:
        grid = Grid(width=10, height=10)
        assert grid.within_radius(55, 0) == []

    def test_distances(self) -> None:
        grid = Grid(width=10, height=10)
        a, b = grid.index_of(1, 1), grid.index_of(4, 3)
        assert grid.distance(a, b) == 3
        assert grid.squared_distance(a, b) == 13


class TestOffsetsFromPoints:
    """Tests for converting direction vectors into steps."""

    def test_default_points_cover_compass(self) -> None:
        offsets = offsets_from_points(DEFAULT_POINTS)
        assert len(offsets) == 8
        assert set(offsets) == {
            (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
        }

    def test_empty_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            offsets_from_points([])

    def test_null_direction_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            offsets_from_points([(0.1, 0.2)])

    def test_duplicate_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            offsets_from_points([(1.0, 0.0), (0.9, 0.1)])


class TestCell:
    """Tests for the Cell view."""

    def test_default_values(self) -> None:
        cell = Cell(index=0)
        assert cell.kind == CellType.PATH
        assert cell.home_pheromone == 0.0
        assert cell.food_pheromone == 0.0
        assert cell.food == 0
        assert cell.is_passable

    def test_blocker_not_passable(self) -> None:
        assert not Cell(index=0, kind=CellType.BLOCKER).is_passable


class TestBoard:
    """Tests for the shared board."""

    def test_starts_as_paths(self, small_board: Board) -> None:
        assert small_board.size == 64
        assert all(small_board.kind_at(i) is CellType.PATH for i in range(64))
        assert not small_board.homes
        assert not small_board.foods
        assert not small_board.blockers

    def test_mismatched_field_rejected(self) -> None:
        with pytest.raises(ValueError, match="does not match"):
            Board(grid=Grid(width=4, height=4), pheromones=PheromoneField(size=9))

    def test_classification_stays_consistent(self, small_board: Board) -> None:
        small_board.set_home(5)
        small_board.set_food(5, 10)
        assert small_board.kind_at(5) is CellType.FOOD
        assert 5 not in small_board.homes
        assert small_board.foods == {5: 10}

        small_board.set_blocker(5)
        assert small_board.kind_at(5) is CellType.BLOCKER
        assert small_board.blockers == {5}
        assert not small_board.foods

        small_board.set_path(5)
        assert small_board.kind_at(5) is CellType.PATH
        assert not small_board.blockers

    def test_reclassify_clears_pheromone(self, small_board: Board) -> None:
        small_board.deposit(PheromoneType.HOME, 9, 20.0)
        assert 9 in small_board.pheromones.active
        small_board.set_blocker(9)
        assert small_board.pheromones.read(PheromoneType.HOME, 9) == 0.0
        assert 9 not in small_board.pheromones.active

    def test_deposit_ignored_off_path(self, small_board: Board) -> None:
        small_board.set_home(3)
        small_board.set_food(4, 10)
        small_board.deposit(PheromoneType.HOME, 3, 20.0)
        small_board.deposit(PheromoneType.FOOD, 4, 20.0)
        assert small_board.pheromones.read(PheromoneType.HOME, 3) == 0.0
        assert small_board.pheromones.read(PheromoneType.FOOD, 4) == 0.0
        assert not small_board.pheromones.active

    def test_cell_view(self, small_board: Board) -> None:
        small_board.set_food(10, 42)
        small_board.deposit(PheromoneType.FOOD, 11, 7.0)
        assert small_board.cell(10) == Cell(index=10, kind=CellType.FOOD, food=42)
        assert small_board.cell(11).food_pheromone == 7.0
        with pytest.raises(IndexError):
            small_board.cell(64)

    def test_legal_neighbours_skip_blockers(self, small_board: Board) -> None:
        small_board.set_blocker(1)
        small_board.set_blocker(9)
        assert small_board.legal_neighbours(0) == [8]

    def test_take_food_clamps_at_zero(self, small_board: Board) -> None:
        small_board.set_food(20, 3)
        assert small_board.take_food(20, 5) == 3
        assert small_board.foods[20] == 0
        assert small_board.kind_at(20) is CellType.FOOD
        assert small_board.take_food(20, 5) == 0

    def test_take_food_from_path(self, small_board: Board) -> None:
        assert small_board.take_food(20, 5) == 0
        assert 20 not in small_board.foods

    def test_total_food(self, small_board: Board) -> None:
        small_board.set_food(1, 3)
        small_board.set_food(2, 4)
        assert small_board.total_food() == 7

    def test_mark_home(self, small_board: Board) -> None:
        small_board.mark_home(4, 4, radius=1)
        grid = small_board.grid
        assert grid.index_of(4, 4) in small_board.homes
        assert grid.index_of(3, 3) in small_board.homes
        assert grid.index_of(5, 5) in small_board.homes
        # Outside radius
        assert grid.index_of(2, 2) not in small_board.homes
        assert len(small_board.homes) == 9

    def test_populate_scatters_food(self, rng: Generator) -> None:
        grid = Grid(width=16, height=16)
        board = Board(grid=grid, pheromones=PheromoneField(size=grid.size))
        board.populate(rng, num_patches=3, patch_radius=2, food_per_cell=100)
        assert board.total_food() > 0
        assert all(board.kind_at(i) is CellType.FOOD for i in board.foods)

    def test_populate_skips_home(self, rng: Generator) -> None:
        grid = Grid(width=4, height=4)
        board = Board(grid=grid, pheromones=PheromoneField(size=grid.size))
        board.mark_home(1, 1, radius=4)
        board.populate(rng, num_patches=5, patch_radius=2)
        assert not board.foods
        assert len(board.homes) == 16

    def test_populate_zero_patches(self, small_board: Board, rng: Generator) -> None:
        small_board.populate(rng, num_patches=0)
        assert small_board.total_food() == 0


class TestEnvironment:
    """Tests for world parameters."""

    def test_defaults_validate(self) -> None:
        Environment(width=10, height=10).validate()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"width": 0},
            {"height": 0},
            {"decay_rate": 0},
            {"haul_amount": 0},
            {"ant_visual_range": 21},
            {"ant_visual_range": -1},
            {"points": ()},
            {"seed": -1},
            {"seed": SEED_MODULUS},
        ],
    )
    def test_invalid_parameters(self, overrides: dict) -> None:
        params = {"width": 10, "height": 10, **overrides}
        with pytest.raises(InvalidConfigurationError):
            Environment(**params).validate()

    def test_visual_range_cap_configurable(self) -> None:
        env = Environment(width=10, height=10, ant_visual_range=5)
        with pytest.raises(InvalidConfigurationError):
            env.validate(max_visual_range=4)

    def test_oversized_board(self) -> None:
        env = Environment(width=10**10, height=10**10)
        with pytest.raises(InvalidConfigurationError, match="exceeds"):
            env.validate()

    def test_cell_limit_configurable(self) -> None:
        env = Environment(width=10, height=10)
        env.validate(max_cells=100)
        with pytest.raises(InvalidConfigurationError, match="exceeds"):
            env.validate(max_cells=99)

    def test_make_grid(self) -> None:
        grid = Environment(width=6, height=4).make_grid()
        assert (grid.width, grid.height, grid.size) == (6, 4, 24)

    def test_seed_wraps(self) -> None:
        env = Environment(width=1, height=1, seed=SEED_MODULUS - 1)
        env.advance_seed()
        assert env.seed == 0
