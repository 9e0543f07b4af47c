"""Run headless snake games steered by the assistant."""

import argparse
import logging
from dataclasses import dataclass

from rich.console import Console
from rich.table import Table

from snakeassist.difficulty import DifficultyController, InMemoryDifficultyStore
from snakeassist.dtypes import Direction
from snakeassist.env import SnakeBoard, StepOutcome, Theme
from snakeassist.hints import HintAdvisor
from snakeassist.logging_config import logger
from snakeassist.pathfinding import GridPathfinder
from snakeassist.risk import DangerZone, RiskAnalyzer
from snakeassist.utils import derive_run_seed, ensure_seed, get_rng
from snakeassist.utils.config_loader import (
    AssistConfig,
    configure_board,
    configure_difficulty,
    configure_move_scoring,
    configure_risk,
    configure_storage,
    create_difficulty_store,
    load_assist_config,
)

DEFAULT_RUNS = 1
DEFAULT_MAX_STEPS = 500


class SimulationClock:
    """Game-time clock in milliseconds, advanced by the simulation loop."""

    def __init__(self) -> None:
        self.now_ms = 0.0

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, milliseconds: float) -> None:
        self.now_ms += milliseconds


@dataclass
class RunResult:
    """Outcome of one simulated run."""

    run: int
    seed: int
    steps: int
    score: int
    length: int
    outcome: StepOutcome
    speed: float
    level: int


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Run headless snake games steered by the assistant.")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "NONE"],
        help="Set the logging level (default: INFO). Use 'NONE' to disable logging.",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=DEFAULT_RUNS,
        help=f"Number of runs to play (default: {DEFAULT_RUNS}).",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        help=f"Maximum moves per run (default: {DEFAULT_MAX_STEPS}).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Base seed for food placement. A random seed is used when omitted.",
    )
    parser.add_argument(
        "--theme",
        type=str,
        choices=[theme.value for theme in Theme],
        help="Board rendering theme (default: taken from the config, else 'ascii').",
    )
    parser.add_argument(
        "--show-frames",
        action="store_true",
        help="Print the board after every move.",
    )
    parser.add_argument(
        "--no-persist",
        action="store_true",
        help="Keep the difficulty state in memory instead of the configured file.",
    )

    return parser.parse_args()


def choose_direction(
    advisor: HintAdvisor,
    risk: RiskAnalyzer,
    board: SnakeBoard,
) -> tuple[Direction | None, list[DangerZone]]:
    """Pick the next move from the hint, falling back to the safest direction."""
    goal = board.food if board.food is not None else board.head
    obstacles = board.obstacles()

    advice = advisor.update(board.head, goal, obstacles)
    zones = risk.analyze(board.head, obstacles, goal)
    if advice.next_move is not None:
        return advice.next_move, zones

    direction, severity = risk.safest_direction(board.head, obstacles)
    logger.debug(f"No hint available, using safest direction {direction.value} ({severity})")
    return direction, zones


def play_run(  # noqa: PLR0913
    run: int,
    seed: int,
    config: AssistConfig,
    controller: DifficultyController,
    clock: SimulationClock,
    max_steps: int,
    theme: Theme,
    *,
    show_frames: bool,
) -> RunResult:
    """Play a single run and feed its events to the difficulty controller."""
    board_config = configure_board(config)
    board = SnakeBoard(
        width=board_config.width,
        height=board_config.height,
        initial_length=board_config.initial_body_length,
        rng=get_rng(seed),
        theme=theme,
    )
    pathfinder = GridPathfinder(board.width, board.height, configure_move_scoring(config))
    advisor = HintAdvisor(pathfinder)
    risk = RiskAnalyzer(board.width, board.height, configure_risk(config))

    controller.start_run()
    outcome = StepOutcome.MOVED
    steps = 0

    while steps < max_steps and board.food is not None:
        direction, zones = choose_direction(advisor, risk, board)
        if show_frames:
            for line in board.render(advisor.current_path, [zone.position for zone in zones]):
                print(line)

        outcome = board.step(direction)
        clock.advance(controller.current_speed)
        steps += 1

        if outcome == StepOutcome.CRASHED:
            break
        if outcome == StepOutcome.ATE:
            controller.on_goal_reached(board.score, len(board.body))

    controller.end_run(board.score)
    logger.info(f"Run {run} finished after {steps} steps: {outcome.value}, score {board.score}")

    return RunResult(
        run=run,
        seed=seed,
        steps=steps,
        score=board.score,
        length=len(board.body),
        outcome=outcome,
        speed=controller.current_speed,
        level=controller.difficulty_level(),
    )


def print_summary(results: list[RunResult], controller: DifficultyController) -> None:
    """Print per-run results and the overall performance statistics."""
    console = Console()

    table = Table(title="Runs")
    for column in ("Run", "Seed", "Steps", "Score", "Length", "Outcome", "Speed (ms)", "Level"):
        table.add_column(column, justify="right")
    for result in results:
        table.add_row(
            str(result.run),
            str(result.seed),
            str(result.steps),
            str(result.score),
            str(result.length),
            result.outcome.value,
            f"{result.speed:.0f}",
            str(result.level),
        )
    console.print(table)

    stats = controller.performance_stats()
    stats_table = Table(title="Performance", show_header=False)
    stats_table.add_column("Metric")
    stats_table.add_column("Value", justify="right")
    stats_table.add_row("Games played", str(stats.games_played))
    stats_table.add_row("Average score", f"{stats.average_score:.1f}")
    stats_table.add_row("Average survival (s)", f"{stats.average_survival_ms / 1000:.1f}")
    stats_table.add_row("Best score", f"{stats.best_score:.0f}")
    stats_table.add_row("Difficulty level", str(stats.difficulty_level))
    stats_table.add_row("Current speed (ms)", f"{stats.current_speed:.0f}")
    console.print(stats_table)


def main() -> None:
    """Run headless snake games steered by the assistant."""
    args = parse_arguments()

    config = load_assist_config(args.config) if args.config else AssistConfig()
    max_steps = args.max_steps or config.max_steps or DEFAULT_MAX_STEPS
    base_seed = ensure_seed(args.seed if args.seed is not None else config.seed)
    theme = Theme(args.theme) if args.theme else configure_board(config).theme

    log_level = args.log_level.upper()
    if log_level == "NONE":
        logger.disabled = True
    else:
        logger.setLevel(log_level)
        for handler in logger.handlers:
            if isinstance(handler, logging.FileHandler):
                handler.setLevel(log_level)

    logger.info("Simulation parameters:")
    logger.info(f"Config file: {args.config}")
    logger.info(f"Runs: {args.runs}")
    logger.info(f"Max steps: {max_steps}")
    logger.info(f"Seed: {base_seed}")

    store = (
        InMemoryDifficultyStore()
        if args.no_persist
        else create_difficulty_store(configure_storage(config))
    )
    clock = SimulationClock()
    controller = DifficultyController(configure_difficulty(config), store, clock=clock)

    results = [
        play_run(
            run=run,
            seed=derive_run_seed(base_seed, run),
            config=config,
            controller=controller,
            clock=clock,
            max_steps=max_steps,
            theme=theme,
            show_frames=args.show_frames,
        )
        for run in range(args.runs)
    ]
    print_summary(results, controller)


if __name__ == "__main__":
    main()
