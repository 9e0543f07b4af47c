"""
Headless snake board.

``SnakeBoard`` holds the snake's body, the food and the board bounds, and
advances the game one move at a time. It supplies the head, body and food
positions the assistant engines consume every tick and renders the board as
text for terminal output.
"""

from collections.abc import Iterable, Sequence
from enum import Enum

import numpy as np
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text as RichText

from snakeassist.dtypes import Body, Direction, GridPosition, step
from snakeassist.env.theme import (
    DEFAULT_THEME,
    THEME_SYMBOLS,
    DarkColorRichStyleConfig,
    Theme,
)
from snakeassist.errors import ERROR_BODY_DOES_NOT_FIT, ERROR_INVALID_START_POSITION
from snakeassist.grid import OccupancyGrid, validate_board_size
from snakeassist.logging_config import logger
from snakeassist.utils.seeding import get_rng

DEFAULT_BOARD_WIDTH = 20
DEFAULT_BOARD_HEIGHT = 20
DEFAULT_INITIAL_LENGTH = 3
FOOD_SCORE = 10


class StepOutcome(str, Enum):
    """Result of advancing the snake by one move."""

    MOVED = "moved"
    ATE = "ate"
    CRASHED = "crashed"


class SnakeBoard:
    """
    A snake on a bounded board with a single food item.

    The snake starts horizontally with its tail trailing to the left of
    ``start`` and moving right.

    Parameters
    ----------
    width : int
        Board width in cells.
    height : int
        Board height in cells.
    start : GridPosition | None
        Initial head position. Defaults to the board centre.
    initial_length : int
        Number of segments the snake starts with.
    rng : np.random.Generator | None
        Random number generator for food placement.
    theme : Theme
        Symbols used by ``render``.
    rich_style_config : DarkColorRichStyleConfig | None
        Styles used by the rich theme.

    Attributes
    ----------
    body : Body
        Snake segments, head first.
    food : GridPosition | None
        Current food position, None once the snake fills the board.
    direction : Direction
        Direction of the last move.
    score : int
        Points collected in this run.
    alive : bool
        False after the snake has crashed.
    """

    def __init__(  # noqa: PLR0913
        self,
        width: int = DEFAULT_BOARD_WIDTH,
        height: int = DEFAULT_BOARD_HEIGHT,
        start: GridPosition | None = None,
        initial_length: int = DEFAULT_INITIAL_LENGTH,
        rng: np.random.Generator | None = None,
        theme: Theme = DEFAULT_THEME,
        rich_style_config: DarkColorRichStyleConfig | None = None,
    ) -> None:
        validate_board_size(width, height)
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else get_rng()
        self.theme = theme
        self.rich_style_config = rich_style_config or DarkColorRichStyleConfig()

        self.start = start if start is not None else (width // 2, height // 2)
        self.initial_length = initial_length
        self._validate_start()

        self.body: Body = []
        self.food: GridPosition | None = None
        self.direction = Direction.RIGHT
        self.score = 0
        self.alive = True
        self.reset()

    def _validate_start(self) -> None:
        x, y = self.start
        if not (0 <= x < self.width and 0 <= y < self.height):
            error_message = ERROR_INVALID_START_POSITION.format(
                position=self.start,
                width=self.width,
                height=self.height,
            )
            logger.error(error_message)
            raise ValueError(error_message)

        if self.initial_length < 1 or x - (self.initial_length - 1) < 0:
            error_message = ERROR_BODY_DOES_NOT_FIT.format(
                length=self.initial_length,
                position=self.start,
            )
            logger.error(error_message)
            raise ValueError(error_message)

    @property
    def head(self) -> GridPosition:
        """Get the head position."""
        return self.body[0]

    def reset(self) -> None:
        """Put the snake back at its start and place new food."""
        x, y = self.start
        self.body = [(x - offset, y) for offset in range(self.initial_length)]
        self.direction = Direction.RIGHT
        self.score = 0
        self.alive = True
        self.food = self.spawn_food()

    def obstacles(self) -> Body:
        """Return the trailing segments, head excluded."""
        return self.body[1:]

    def spawn_food(self) -> GridPosition | None:
        """Pick a random free cell for the food, or None if the board is full."""
        grid = OccupancyGrid(self.width, self.height, self.body)
        free_cells = np.argwhere(~grid.blocked)
        if len(free_cells) == 0:
            logger.info("No free cell left for food")
            return None

        x, y = free_cells[self.rng.integers(len(free_cells))]
        return (int(x), int(y))

    def step(self, direction: Direction | None = None) -> StepOutcome:
        """
        Advance the snake by one move.

        Parameters
        ----------
        direction : Direction | None
            Requested move. A reversal onto the neck or None keeps the
            current direction.

        Returns
        -------
        StepOutcome
            Whether the snake moved, ate the food or crashed.
        """
        if not self.alive:
            return StepOutcome.CRASHED

        if direction is not None and not (len(self.body) > 1 and direction == self.direction.opposite):
            self.direction = direction

        new_head = step(self.head, self.direction)
        ate = new_head == self.food
        # The tail vacates its cell unless the snake grows
        occupied = self.body if ate else self.body[:-1]

        if not (0 <= new_head[0] < self.width and 0 <= new_head[1] < self.height) or new_head in occupied:
            self.alive = False
            logger.debug(f"Snake crashed moving {self.direction.value} into {new_head}")
            return StepOutcome.CRASHED

        self.body.insert(0, new_head)
        if not ate:
            self.body.pop()
            return StepOutcome.MOVED

        self.score += FOOD_SCORE
        self.food = self.spawn_food()
        logger.debug(f"Food eaten at {new_head}, length: {len(self.body)}, score: {self.score}")
        return StepOutcome.ATE

    def render(
        self,
        path: Sequence[GridPosition] | None = None,
        danger: Iterable[GridPosition] = (),
    ) -> list[str]:
        """
        Render the board as text, top row first.

        Parameters
        ----------
        path : Sequence[GridPosition] | None
            Hinted route to overlay on empty cells.
        danger : Iterable[GridPosition]
            Dangerous cells to overlay on empty cells.

        Returns
        -------
        list[str]
            One string per output line.
        """
        grid = self._render_grid(path or (), danger)
        if self.theme == Theme.RICH:
            return self._render_rich(grid)
        if self.theme == Theme.EMOJI:
            return ["".join(row) for row in grid] + [""]
        return [" ".join(row) for row in grid] + [""]

    def _render_grid(
        self,
        path: Sequence[GridPosition],
        danger: Iterable[GridPosition],
    ) -> list[list[str]]:
        symbols = THEME_SYMBOLS[self.theme]
        grid = [[symbols.empty for _ in range(self.width)] for _ in range(self.height)]

        for x, y in path[1:]:
            grid[y][x] = symbols.hint
        for x, y in danger:
            if 0 <= x < self.width and 0 <= y < self.height:
                grid[y][x] = symbols.danger
        if self.food is not None:
            grid[self.food[1]][self.food[0]] = symbols.food
        for x, y in self.body[1:]:
            grid[y][x] = symbols.body

        head_x, head_y = self.head
        grid[head_y][head_x] = getattr(symbols, self.direction.value)
        return grid

    def _render_rich(self, grid: list[list[str]]) -> list[str]:
        """Render the grid with Rich styling and colors as strings."""
        table_width = (self.width * 4) + 1
        console = Console(
            record=True,
            width=table_width,
            legacy_windows=False,
            force_terminal=True,
        )

        symbols = THEME_SYMBOLS[self.theme]
        styles = self.rich_style_config
        cell_styles = {
            symbols.food: styles.food_style,
            symbols.body: styles.body_style,
            symbols.hint: styles.hint_style,
            symbols.danger: styles.danger_style,
            symbols.up: styles.head_style,
            symbols.down: styles.head_style,
            symbols.left: styles.head_style,
            symbols.right: styles.head_style,
        }

        table = Table(
            show_header=False,
            show_lines=True,
            box=box.SQUARE,
            padding=(0, 0),
            pad_edge=False,
            style=styles.grid_background,
        )
        for _ in range(self.width):
            table.add_column(justify="center", width=3, min_width=3, max_width=3, no_wrap=True)

        for row in grid:
            table.add_row(
                *(
                    RichText(cell, style=cell_styles.get(cell, styles.empty_style), justify="center")
                    for cell in row
                ),
            )

        with console.capture() as capture:
            console.print(table, crop=True)

        output_lines = capture.get().splitlines()
        cleaned_lines = [line.rstrip() for line in output_lines if line.strip()]
        return [*cleaned_lines, ""]
