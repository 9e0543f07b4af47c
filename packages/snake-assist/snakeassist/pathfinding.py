"""
Route planning for the snake assistant.

``GridPathfinder`` finds the shortest unobstructed route from the snake's
head to the food on a bounded 4-connected board, and ranks the immediate
moves when no such route exists.

Search order is fully deterministic: the A* frontier is a binary heap keyed
by ``(f, discovery_order)`` and neighbours are discovered in the fixed
order UP, DOWN, LEFT, RIGHT. Among equal ``f = g + h`` the node that was
discovered first is expanded first.
"""

import heapq
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from snakeassist.dtypes import (
    DIRECTION_ORDER,
    Direction,
    GridPosition,
    Path,
    manhattan_distance,
)
from snakeassist.grid import OccupancyGrid, validate_board_size
from snakeassist.logging_config import logger

# Reasoning thresholds
CLOSE_TO_GOAL_DISTANCE = 3
FAR_FROM_GOAL_DISTANCE = 10
GOOD_SPACE_NEIGHBORS = 3
LIMITED_SPACE_NEIGHBORS = 1
EXCELLENT_SCORE = 80
GOOD_SCORE = 60
ACCEPTABLE_SCORE = 40
RISKY_SCORE = 30

# Sub-scores are normalised to this range before weighting
SUB_SCORE_MAX = 4.0


class MoveScoringConfig(BaseModel):
    """Weights for ranking fallback moves.

    Attributes
    ----------
    proximity_cap : float
        Maximum contribution from being close to the goal.
    space_weight : float
        Weight per open neighbour of the candidate cell.
    centrality_weight : float
        Weight of the 0-4 centrality sub-score.
    mobility_weight : float
        Weight of the 0-4 two-step mobility sub-score.
    """

    proximity_cap: float = Field(default=50.0, ge=0.0)
    space_weight: float = Field(default=10.0, ge=0.0)
    centrality_weight: float = Field(default=5.0, ge=0.0)
    mobility_weight: float = Field(default=15.0, ge=0.0)


class Priority(str, Enum):
    """Urgency of the fallback situation."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class MoveCandidate:
    """A legal move from the current cell with its safety score.

    Attributes
    ----------
    direction : Direction
        Direction of the move.
    position : GridPosition
        Cell the head would occupy after the move.
    score : float
        Weighted score, higher is better.
    reasons : tuple[str, ...]
        Human-readable tags derived from the sub-scores.
    """

    direction: Direction
    position: GridPosition
    score: float
    reasons: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FallbackSuggestions:
    """Ranked moves plus an overall assessment of the situation."""

    moves: list[MoveCandidate]
    summary: str
    priority: Priority


class GridPathfinder:
    """
    A* shortest-path search and fallback move ranking on a bounded grid.

    Parameters
    ----------
    width : int
        Board width in cells.
    height : int
        Board height in cells.
    scoring : MoveScoringConfig | None
        Weights for ``rank_safe_moves``. Defaults are used when omitted.
    """

    def __init__(
        self,
        width: int,
        height: int,
        scoring: MoveScoringConfig | None = None,
    ) -> None:
        validate_board_size(width, height)
        self.width = width
        self.height = height
        self.scoring = scoring or MoveScoringConfig()

    def resize(self, width: int, height: int) -> None:
        """Update the board dimensions used by later calls."""
        validate_board_size(width, height)
        self.width = width
        self.height = height

    def is_valid_position(self, position: GridPosition) -> bool:
        """Check whether ``position`` lies on the board."""
        return 0 <= position[0] < self.width and 0 <= position[1] < self.height

    def find_path(
        self,
        start: GridPosition,
        goal: GridPosition,
        obstacles: Iterable[GridPosition] = (),
    ) -> Path | None:
        """
        Find the shortest unobstructed path from ``start`` to ``goal``.

        Parameters
        ----------
        start : GridPosition
            Starting cell, usually the snake's head. It is never treated as
            blocked even if it appears in ``obstacles``.
        goal : GridPosition
            Target cell.
        obstacles : Iterable[GridPosition]
            Cells that may not be entered.

        Returns
        -------
        Path | None
            Cells from ``start`` to ``goal`` inclusive, or None when either
            endpoint is off the board, the goal is blocked, or no route exists.
        """
        if not self.is_valid_position(start) or not self.is_valid_position(goal):
            logger.debug(f"Rejected path query with out-of-bounds endpoint: {start} -> {goal}")
            return None

        grid = OccupancyGrid(self.width, self.height, obstacles)
        if grid.is_blocked(goal):
            return None

        if start == goal:
            return [start]

        start_key = grid.key(start)
        g_score: dict[int, int] = {start_key: 0}
        came_from: dict[int, GridPosition] = {}
        closed: set[int] = set()

        discovery = 0
        start_h = manhattan_distance(start, goal)
        frontier: list[tuple[int, int, GridPosition]] = [(start_h, discovery, start)]

        while frontier:
            _, _, current = heapq.heappop(frontier)
            current_key = grid.key(current)
            if current_key in closed:
                continue

            if current == goal:
                path = self._reconstruct_path(came_from, grid, current)
                logger.debug(f"Path found from {start} to {goal} with {len(path) - 1} moves")
                return path

            closed.add(current_key)
            tentative_g = g_score[current_key] + 1

            for _, neighbor in grid.open_neighbors(current):
                neighbor_key = grid.key(neighbor)
                if neighbor_key in closed:
                    continue
                if tentative_g >= g_score.get(neighbor_key, math.inf):
                    continue

                came_from[neighbor_key] = current
                g_score[neighbor_key] = tentative_g
                h = manhattan_distance(neighbor, goal)
                discovery += 1
                heapq.heappush(frontier, (tentative_g + h, discovery, neighbor))

        logger.debug(f"No path from {start} to {goal}")
        return None

    @staticmethod
    def _reconstruct_path(
        came_from: dict[int, GridPosition],
        grid: OccupancyGrid,
        current: GridPosition,
    ) -> Path:
        path = [current]
        key = grid.key(current)
        while key in came_from:
            current = came_from[key]
            path.append(current)
            key = grid.key(current)
        path.reverse()
        return path

    @staticmethod
    def next_move_from_path(path: Path | None) -> Direction | None:
        """
        Get the direction of the first move along a path.

        Returns
        -------
        Direction | None
            The first move, or None for paths shorter than two cells or
            whose first two cells are not orthogonally adjacent.
        """
        if not path or len(path) < 2:  # noqa: PLR2004
            return None

        dx = path[1][0] - path[0][0]
        dy = path[1][1] - path[0][1]
        for direction in DIRECTION_ORDER:
            if direction.offset == (dx, dy):
                return direction
        return None

    def is_path_safe(self, path: Path | None, obstacles: Iterable[GridPosition]) -> bool:
        """Check that no cell after the start of ``path`` is an obstacle."""
        if not path:
            return False

        grid = OccupancyGrid(self.width, self.height, obstacles)
        return all(grid.is_open(cell) for cell in path[1:])

    def find_safe_moves(
        self,
        position: GridPosition,
        obstacles: Iterable[GridPosition],
    ) -> list[Direction]:
        """List the directions leading to in-bounds, unobstructed cells."""
        if not self.is_valid_position(position):
            return []
        grid = OccupancyGrid(self.width, self.height, obstacles)
        return [direction for direction, _ in grid.open_neighbors(position)]

    def rank_safe_moves(
        self,
        position: GridPosition,
        obstacles: Iterable[GridPosition],
        goal: GridPosition,
    ) -> list[MoveCandidate]:
        """
        Score every legal move from ``position`` and sort best first.

        The score combines proximity to the goal, open space around the
        candidate, closeness to the board centre and the number of moves
        still available one step further on.

        Returns
        -------
        list[MoveCandidate]
            Candidates sorted by descending score. An empty list means the
            head is fully enclosed or off the board.
        """
        if not self.is_valid_position(position):
            logger.debug(f"No moves ranked from off-board position {position}")
            return []
        grid = OccupancyGrid(self.width, self.height, obstacles)
        candidates = []

        for direction, cell in grid.open_neighbors(position):
            distance = manhattan_distance(cell, goal)
            space = grid.escape_routes(cell)
            score = (
                max(0.0, self.scoring.proximity_cap - distance)
                + space * self.scoring.space_weight
                + self._centrality(cell) * self.scoring.centrality_weight
                + self._mobility(cell, grid) * self.scoring.mobility_weight
            )
            candidates.append(
                MoveCandidate(
                    direction=direction,
                    position=cell,
                    score=score,
                    reasons=self._reasons(distance, space, score),
                ),
            )

        # sorted() is stable, so equal scores keep the UP, DOWN, LEFT, RIGHT order
        return sorted(candidates, key=lambda candidate: candidate.score, reverse=True)

    def fallback_suggestions(
        self,
        position: GridPosition,
        goal: GridPosition,
        obstacles: Iterable[GridPosition],
    ) -> FallbackSuggestions:
        """Rank the legal moves and summarise how dire the situation is."""
        moves = self.rank_safe_moves(position, list(obstacles), goal)
        best_score = moves[0].score if moves else 0.0
        return FallbackSuggestions(
            moves=moves,
            summary=self._summary(moves),
            priority=self._priority(len(moves), best_score),
        )

    def _centrality(self, position: GridPosition) -> float:
        center_x = self.width / 2
        center_y = self.height / 2
        max_distance = max(center_x, center_y)
        distance = math.hypot(position[0] - center_x, position[1] - center_y)
        return max(0.0, SUB_SCORE_MAX - (distance / max_distance) * SUB_SCORE_MAX)

    @staticmethod
    def _mobility(cell: GridPosition, grid: OccupancyGrid) -> float:
        # Stepping back onto the candidate cell is not a further move
        future_moves = 0
        for _, neighbor in grid.open_neighbors(cell):
            future_moves += sum(
                1 for _, onward in grid.open_neighbors(neighbor) if onward != cell
            )
        return min(SUB_SCORE_MAX, future_moves / 2)

    @staticmethod
    def _reasons(distance: int, space: int, score: float) -> tuple[str, ...]:
        reasons = []
        if distance <= CLOSE_TO_GOAL_DISTANCE:
            reasons.append("close to goal")
        elif distance > FAR_FROM_GOAL_DISTANCE:
            reasons.append("far from goal")

        if space >= GOOD_SPACE_NEIGHBORS:
            reasons.append("good open space")
        elif space <= LIMITED_SPACE_NEIGHBORS:
            reasons.append("limited space")

        if score > EXCELLENT_SCORE:
            reasons.append("excellent choice")
        elif score > GOOD_SCORE:
            reasons.append("good option")
        elif score > ACCEPTABLE_SCORE:
            reasons.append("acceptable")
        else:
            reasons.append("risky move")
        return tuple(reasons)

    @staticmethod
    def _summary(moves: list[MoveCandidate]) -> str:
        if not moves:
            return "No safe moves available"
        if len(moves) == 1:
            return f"Only one safe move: {moves[0].direction.value}"

        best_score = moves[0].score
        worst_score = moves[-1].score
        if best_score > EXCELLENT_SCORE:
            return "Multiple good options available"
        if best_score > GOOD_SCORE:
            return "Some decent moves available"
        if worst_score < RISKY_SCORE:
            return "All moves are risky - choose carefully"
        return "Limited but viable options"

    @staticmethod
    def _priority(move_count: int, best_score: float) -> Priority:
        if move_count == 0:
            return Priority.CRITICAL
        if move_count == 1 or best_score < ACCEPTABLE_SCORE:
            return Priority.HIGH
        if best_score < GOOD_SCORE:
            return Priority.MEDIUM
        return Priority.LOW
