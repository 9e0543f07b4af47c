"""
Danger prediction around the snake's head.

``RiskAnalyzer`` scores each cell the head could move into next, from 0
(safe) to 100 (certain death), and flags narrow corridor cells a few moves
ahead that are likely to trap the snake. Zones are recomputed from scratch
on every call.
"""

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from snakeassist.dtypes import DIRECTION_ORDER, Direction, GridPosition, manhattan_distance
from snakeassist.grid import OccupancyGrid, validate_board_size
from snakeassist.logging_config import logger

MAX_SEVERITY = 100
MIN_SEVERITY = 0

# Escape-route contributions, indexed by number of open neighbours
ESCAPE_ROUTE_DANGER = (100, 60, 30, 0, 0)

WALL_DANGER = 10
BODY_DANGER = 15
MAX_CLOSE_SEGMENTS = 4
BODY_PROXIMITY_DISTANCE = 2

SEVERE_CONFINEMENT_RATIO = 0.1
SEVERE_CONFINEMENT_DANGER = 50
CONFINEMENT_RATIO = 0.3
CONFINEMENT_DANGER = 25

GOAL_DISTANCE_DANGER = 5

TRAP_LABEL = "trap"
TRAP_REASON = "Potential trap ahead"
TRAP_MAX_ESCAPE_ROUTES = 1

# Reason label bands, checked top down
REASON_BANDS = (
    (80, "CRITICAL: Dead end!"),
    (60, "HIGH: Limited escape"),
    (40, "MEDIUM: Risky area"),
    (20, "LOW: Be careful"),
)
DEFAULT_REASON = "Slight risk"


class RiskConfig(BaseModel):
    """Tunable parameters of the risk analysis.

    Attributes
    ----------
    flood_fill_cap : int
        Maximum number of cells the confinement flood fill visits.
    goal_distance_threshold : int
        Manhattan distance to the goal beyond which a cell is slightly riskier.
    trap_scan_min : int
        Nearest distance from the head checked by the corridor-trap scan.
    trap_scan_max : int
        Farthest distance from the head checked by the corridor-trap scan.
    trap_severity : int
        Severity given to corridor-trap zones.
    """

    flood_fill_cap: int = Field(default=100, ge=1)
    goal_distance_threshold: int = Field(default=10, ge=0)
    trap_scan_min: int = Field(default=2, ge=1)
    trap_scan_max: int = Field(default=4, ge=1)
    trap_severity: int = Field(default=40, ge=MIN_SEVERITY, le=MAX_SEVERITY)

    @model_validator(mode="after")
    def validate_trap_range(self) -> "RiskConfig":
        """Ensure the corridor scan range is not empty."""
        if self.trap_scan_min > self.trap_scan_max:
            error_message = (
                f"trap_scan_min ({self.trap_scan_min}) must not exceed "
                f"trap_scan_max ({self.trap_scan_max})."
            )
            logger.error(error_message)
            raise ValueError(error_message)
        return self


@dataclass(frozen=True)
class DangerZone:
    """
    A cell flagged as risky.

    Attributes
    ----------
    position : GridPosition
        The flagged cell.
    severity : int
        Danger in [0, 100].
    direction : Direction | Literal["trap"]
        Move from the head leading into the cell, or ``"trap"`` for cells
        found by the corridor-trap scan.
    reason : str
        Human-readable label for the severity.
    """

    position: GridPosition
    severity: int
    direction: Direction | Literal["trap"]
    reason: str


def danger_reason(severity: int) -> str:
    """Return the human-readable label for a severity."""
    for threshold, reason in REASON_BANDS:
        if severity >= threshold:
            return reason
    return DEFAULT_REASON


class RiskAnalyzer:
    """
    Per-cell danger scoring and trap prediction.

    Parameters
    ----------
    width : int
        Board width in cells.
    height : int
        Board height in cells.
    config : RiskConfig | None
        Thresholds and caps. Defaults are used when omitted.

    Attributes
    ----------
    danger_zones : list[DangerZone]
        Zones found by the most recent ``analyze`` call.
    enabled : bool
        A disabled analyzer reports no zones.
    """

    def __init__(self, width: int, height: int, config: RiskConfig | None = None) -> None:
        validate_board_size(width, height)
        self.width = width
        self.height = height
        self.config = config or RiskConfig()
        self.danger_zones: list[DangerZone] = []
        self.enabled = True

    def enable(self) -> None:
        """Turn danger prediction on."""
        self.enabled = True

    def disable(self) -> None:
        """Turn danger prediction off and forget the current zones."""
        self.enabled = False
        self.danger_zones = []

    def toggle(self) -> bool:
        """Flip danger prediction and return the new state."""
        if self.enabled:
            self.disable()
        else:
            self.enable()
        return self.enabled

    def reset(self) -> None:
        """Forget the zones from the last analysis."""
        self.danger_zones = []

    def resize(self, width: int, height: int) -> None:
        """Update the board dimensions used by later calls."""
        validate_board_size(width, height)
        self.width = width
        self.height = height
        self.danger_zones = []

    def analyze(
        self,
        head: GridPosition,
        body: Sequence[GridPosition],
        goal: GridPosition,
    ) -> list[DangerZone]:
        """
        Score the cells around the head and scan for corridor traps.

        Parameters
        ----------
        head : GridPosition
            Current head position.
        body : Sequence[GridPosition]
            Trailing segments, treated as obstacles.
        goal : GridPosition
            Current food position.

        Returns
        -------
        list[DangerZone]
            Neighbour zones with positive severity (in UP, DOWN, LEFT, RIGHT
            order) followed by corridor-trap zones. Empty when the
            analyzer is disabled or the head is off the board.
        """
        self.danger_zones = []
        if not self.enabled:
            return []

        grid = OccupancyGrid(self.width, self.height, body)
        if not grid.in_bounds(head):
            logger.debug(f"Skipping risk analysis for off-board head {head}")
            return []

        zones: dict[GridPosition, DangerZone] = {}

        for direction, cell in grid.open_neighbors(head):
            severity = self.danger_level(cell, body, goal, grid)
            if severity > 0:
                zones[cell] = DangerZone(
                    position=cell,
                    severity=severity,
                    direction=direction,
                    reason=danger_reason(severity),
                )

        for cell in self._corridor_cells(head, grid):
            if cell not in zones and grid.escape_routes(cell) <= TRAP_MAX_ESCAPE_ROUTES:
                zones[cell] = DangerZone(
                    position=cell,
                    severity=self.config.trap_severity,
                    direction=TRAP_LABEL,
                    reason=TRAP_REASON,
                )

        self.danger_zones = list(zones.values())
        logger.debug(f"Risk analysis at {head}: {len(self.danger_zones)} danger zones")
        return list(self.danger_zones)

    def danger_level(
        self,
        cell: GridPosition,
        body: Sequence[GridPosition],
        goal: GridPosition,
        grid: OccupancyGrid | None = None,
    ) -> int:
        """
        Compute the clamped danger severity of a single cell.

        Returns
        -------
        int
            Severity in [0, 100].
        """
        if grid is None:
            grid = OccupancyGrid(self.width, self.height, body)

        danger = ESCAPE_ROUTE_DANGER[grid.escape_routes(cell)]
        danger += self._wall_proximity(cell) * WALL_DANGER
        danger += self._body_proximity(cell, body) * BODY_DANGER

        free_cells = self.width * self.height - grid.obstacle_count
        if free_cells > 0:
            area_ratio = self.flood_fill_count(cell, grid) / free_cells
            if area_ratio < SEVERE_CONFINEMENT_RATIO:
                danger += SEVERE_CONFINEMENT_DANGER
            elif area_ratio < CONFINEMENT_RATIO:
                danger += CONFINEMENT_DANGER

        if manhattan_distance(cell, goal) > self.config.goal_distance_threshold:
            danger += GOAL_DISTANCE_DANGER

        return max(MIN_SEVERITY, min(MAX_SEVERITY, danger))

    def flood_fill_count(self, start: GridPosition, grid: OccupancyGrid) -> int:
        """Count open cells reachable from ``start``, stopping at the configured cap."""
        if not grid.is_open(start):
            return 0

        cap = self.config.flood_fill_cap
        visited = {grid.key(start)}
        queue = deque([start])
        count = 0

        while queue and count < cap:
            cell = queue.popleft()
            count += 1
            for _, neighbor in grid.open_neighbors(cell):
                key = grid.key(neighbor)
                if key not in visited:
                    visited.add(key)
                    queue.append(neighbor)

        return count

    def safest_direction(
        self,
        head: GridPosition,
        body: Sequence[GridPosition],
    ) -> tuple[Direction, int]:
        """
        Pick the direction whose zone from the last analysis is least severe.

        Directions without a recorded zone count as zero danger. Ties go to
        the first direction in UP, DOWN, LEFT, RIGHT order.

        This is not a legality check. A move into a wall or a body segment
        never gets a zone, so it also counts as zero danger. Callers that need
        a legal move should filter with ``GridPathfinder.find_safe_moves``
        first.

        Returns
        -------
        tuple[Direction, int]
            The safest direction and its severity.
        """
        logger.debug(f"Safest direction requested at {head} with {len(body)} body segments")
        severities = {
            zone.direction: zone.severity
            for zone in self.danger_zones
            if zone.direction != TRAP_LABEL
        }
        safest = min(DIRECTION_ORDER, key=lambda direction: severities.get(direction, 0))
        return safest, severities.get(safest, 0)

    def _wall_proximity(self, cell: GridPosition) -> int:
        x, y = cell
        near_x_edge = x <= 1 or x >= self.width - 2
        near_y_edge = y <= 1 or y >= self.height - 2

        proximity = 0
        proximity += x <= 1
        proximity += x >= self.width - 2
        proximity += y <= 1
        proximity += y >= self.height - 2
        if near_x_edge and near_y_edge:
            proximity += 1
        return proximity

    @staticmethod
    def _body_proximity(cell: GridPosition, body: Sequence[GridPosition]) -> int:
        close_segments = sum(
            1
            for segment in body
            if manhattan_distance(cell, segment) <= BODY_PROXIMITY_DISTANCE
        )
        return min(MAX_CLOSE_SEGMENTS, close_segments)

    def _corridor_cells(self, head: GridPosition, grid: OccupancyGrid) -> list[GridPosition]:
        cells = []
        for distance in range(self.config.trap_scan_min, self.config.trap_scan_max + 1):
            for cell in (
                (head[0] + distance, head[1]),
                (head[0] - distance, head[1]),
                (head[0], head[1] + distance),
                (head[0], head[1] - distance),
            ):
                if grid.in_bounds(cell):
                    cells.append(cell)
        return cells
