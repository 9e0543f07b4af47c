"""Themes for rendering the snake board."""

from enum import Enum

from pydantic import BaseModel


class Theme(str, Enum):
    """Board rendering themes."""

    ASCII = "ascii"
    UNICODE = "unicode"
    EMOJI = "emoji"
    RICH = "rich"


DEFAULT_THEME = Theme.ASCII


class ThemeSymbolSet(BaseModel):
    """Symbol set for a specific theme.

    Attributes
    ----------
    food : str
        Symbol representing the food.
    body : str
        Symbol representing a trailing body segment.
    up : str
        Head symbol when moving up.
    down : str
        Head symbol when moving down.
    left : str
        Head symbol when moving left.
    right : str
        Head symbol when moving right.
    empty : str
        Symbol for an empty cell.
    hint : str
        Symbol for a cell on the hinted route.
    danger : str
        Symbol for a cell flagged as dangerous.
    """

    food: str
    body: str
    up: str
    down: str
    left: str
    right: str
    empty: str
    hint: str
    danger: str


class DarkColorRichStyleConfig(BaseModel):
    """Rich styling configuration for the colored on dark background theme.

    Attributes
    ----------
    food_style : str
        Rich style string for the food (e.g., "bold red").
    body_style : str
        Rich style string for body segments.
    head_style : str
        Rich style string for the head.
    empty_style : str
        Rich style string for empty cells.
    hint_style : str
        Rich style string for hinted route cells.
    danger_style : str
        Rich style string for dangerous cells.
    grid_background : str
        Rich style string for grid cell backgrounds.
    """

    food_style: str = "bold red"
    body_style: str = "bold blue"
    head_style: str = "bold green"
    empty_style: str = "dim grey93"
    hint_style: str = "cyan"
    danger_style: str = "bold yellow"
    grid_background: str = "bold grey93"


THEME_SYMBOLS = {
    Theme.ASCII: ThemeSymbolSet(
        food="*",
        body="O",
        up="^",
        down="v",
        left="<",
        right=">",
        empty=".",
        hint="+",
        danger="!",
    ),
    Theme.UNICODE: ThemeSymbolSet(
        food="◆",
        body="●",
        up="↑",
        down="↓",
        left="←",
        right="→",
        empty="·",
        hint="∘",
        danger="⚠",
    ),
    Theme.EMOJI: ThemeSymbolSet(
        food="🍎",
        body="🟩",
        up="🔼",
        down="🔽",
        left="◀️ ",
        right="▶️ ",
        empty="⬜️",
        hint="🔹",
        danger="🟥",
    ),
    Theme.RICH: ThemeSymbolSet(
        food="⬢",
        body="◉",
        up="▲",
        down="▼",
        left="◀",
        right="▶",
        empty="·",
        hint="∘",
        danger="!",
    ),
}
