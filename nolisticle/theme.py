"""Theme system and shared console for the nolisticle CLI."""

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

# Semantic color theme for consistent UI
NOLISTICLE_THEME = Theme(
    {
        # Status
        "success": "green",
        "error": "bold red",
        "warning": "#d4a017",
        "info": "cyan",
        # Labels
        "listicle": "red",
        "other": "green",
        # Report
        "header": "bold",
        "classifier": "yellow",
        "muted": "#808080",
        "better": "green",
        "worse": "red",
        "path": "cyan underline",
        "count": "orange1",
    }
)

# Shared console instance with theme applied
console = Console(theme=NOLISTICLE_THEME)


def format_percent(value: float) -> str:
    """Format a 0-1 rate as a percentage with up to 3 significant digits."""
    return f"{value * 100:.3g}%"


def format_delta(value: float) -> Text:
    """Format a signed rate difference, colored by direction."""
    if value > 0:
        style = "better"
    elif value < 0:
        style = "worse"
    else:
        style = "muted"
    return Text(f"{value * 100:+.3g}%", style=style)
