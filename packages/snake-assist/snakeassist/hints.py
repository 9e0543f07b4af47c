"""Per-tick route hints for the player."""

from collections.abc import Sequence
from dataclasses import dataclass

from snakeassist.dtypes import Direction, GridPosition, Path
from snakeassist.logging_config import logger
from snakeassist.pathfinding import FallbackSuggestions, GridPathfinder


@dataclass(frozen=True)
class HintAdvice:
    """
    What the assistant recommends for the current tick.

    Attributes
    ----------
    path : Path | None
        Shortest route from the head to the food, if one exists.
    next_move : Direction | None
        First move along ``path``, or the best fallback move when there is
        no route.
    fallback : FallbackSuggestions | None
        Ranked moves, only computed when there is no route.
    """

    path: Path | None = None
    next_move: Direction | None = None
    fallback: FallbackSuggestions | None = None


class HintAdvisor:
    """
    Combines route search and fallback ranking into a single hint.

    Parameters
    ----------
    pathfinder : GridPathfinder
        Engine used for both the route and the fallback ranking.

    Attributes
    ----------
    enabled : bool
        A disabled advisor returns empty advice.
    current_path : Path | None
        Route found by the most recent ``update``.
    """

    def __init__(self, pathfinder: GridPathfinder) -> None:
        self.pathfinder = pathfinder
        self.enabled = True
        self.current_path: Path | None = None

    @property
    def has_path_to_goal(self) -> bool:
        """Check whether the last update found a route to the food."""
        return self.current_path is not None and len(self.current_path) > 1

    def toggle(self) -> bool:
        """Flip hints on or off and return the new state."""
        self.enabled = not self.enabled
        if not self.enabled:
            self.current_path = None
        logger.info(f"Hints {'enabled' if self.enabled else 'disabled'}")
        return self.enabled

    def update(
        self,
        head: GridPosition,
        goal: GridPosition,
        body: Sequence[GridPosition],
    ) -> HintAdvice:
        """
        Compute the hint for the current tick.

        Parameters
        ----------
        head : GridPosition
            Current head position.
        goal : GridPosition
            Current food position.
        body : Sequence[GridPosition]
            Trailing segments, treated as obstacles.

        Returns
        -------
        HintAdvice
            The route and its first move, or ranked fallback moves when the
            food cannot be reached.
        """
        if not self.enabled:
            self.current_path = None
            return HintAdvice()

        obstacles = list(body)
        self.current_path = self.pathfinder.find_path(head, goal, obstacles)
        if self.current_path is not None:
            return HintAdvice(
                path=self.current_path,
                next_move=self.pathfinder.next_move_from_path(self.current_path),
            )

        fallback = self.pathfinder.fallback_suggestions(head, goal, obstacles)
        logger.debug(f"No route to food, fallback priority: {fallback.priority.value}")
        return HintAdvice(
            next_move=fallback.moves[0].direction if fallback.moves else None,
            fallback=fallback,
        )
