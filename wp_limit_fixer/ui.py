"""
Nord-themed terminal helpers.

Console output, the pyfiglet banner, prompts and summary tables live here so
the rest of the package only deals with plain values.
"""

import shutil
from typing import List, Tuple

import pyfiglet
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from wp_limit_fixer import APP_NAME, APP_SUBTITLE, VERSION


# ----------------------------------------------------------------
# Nord-Themed Colors
# ----------------------------------------------------------------
class NordColors:
    """
    Nord color palette for consistent UI styling.
    https://www.nordtheme.com/docs/colors-and-palettes
    """

    POLAR_NIGHT_1: str = "#2E3440"
    SNOW_STORM_1: str = "#D8DEE9"
    SNOW_STORM_2: str = "#E5E9F0"
    FROST_1: str = "#8FBCBB"
    FROST_2: str = "#88C0D0"
    FROST_3: str = "#81A1C1"
    FROST_4: str = "#5E81AC"
    RED: str = "#BF616A"
    ORANGE: str = "#D08770"
    YELLOW: str = "#EBCB8B"
    GREEN: str = "#A3BE8C"
    PURPLE: str = "#B48EAD"

    @classmethod
    def get_frost_gradient(cls, steps: int = 4) -> List[str]:
        """Return a list of frost colors for gradients."""
        frosts = [cls.FROST_1, cls.FROST_2, cls.FROST_3, cls.FROST_4]
        return frosts[:steps]


console: Console = Console(highlight=False)


# ----------------------------------------------------------------
# Console Helpers
# ----------------------------------------------------------------
def create_header() -> Panel:
    """
    Create the ASCII banner header using pyfiglet.

    Returns:
        A Rich Panel containing the styled application header
    """
    term_width, _ = shutil.get_terminal_size((80, 24))
    font_to_use = "slant" if term_width >= 60 else "small"
    try:
        fig = pyfiglet.Figlet(font=font_to_use, width=min(term_width - 10, 120))
        ascii_art = fig.renderText(APP_NAME)
    except Exception:
        ascii_art = f"  {APP_NAME}  "

    ascii_lines = [line for line in ascii_art.splitlines() if line.strip()]
    colors = NordColors.get_frost_gradient(4)
    combined_text = Text()
    for i, line in enumerate(ascii_lines):
        combined_text.append(Text(line, style=f"bold {colors[i % len(colors)]}"))
        if i < len(ascii_lines) - 1:
            combined_text.append("\n")

    return Panel(
        combined_text,
        border_style=NordColors.FROST_1,
        padding=(1, 2),
        title=Text(f"v{VERSION}", style=f"bold {NordColors.SNOW_STORM_2}"),
        title_align="right",
        subtitle=Text(APP_SUBTITLE, style=f"bold {NordColors.SNOW_STORM_1}"),
        subtitle_align="center",
        box=box.ROUNDED,
    )


def print_message(
    text: str, style: str = NordColors.FROST_2, prefix: str = "•"
) -> None:
    """
    Print a formatted message with a given prefix and style.

    Args:
        text: The message to print
        style: The color/style to use
        prefix: The character prefix before the message
    """
    console.print(f"[{style}]{prefix} {text}[/{style}]")


def print_info(message: str) -> None:
    """Display an informational message."""
    print_message(message, NordColors.FROST_3, "ℹ")


def print_success(message: str) -> None:
    """Display a success message."""
    print_message(message, NordColors.GREEN, "✓")


def print_warning(message: str) -> None:
    """Display a warning message."""
    print_message(message, NordColors.YELLOW, "⚠")


def print_error(message: str) -> None:
    """Display an error message."""
    print_message(message, NordColors.RED, "✗")


def print_step(message: str) -> None:
    """Print a step description."""
    print_message(message, NordColors.FROST_2, "→")


def print_section(title: str) -> None:
    """Print a section header."""
    console.print()
    console.print(f"[bold {NordColors.FROST_3}]{title}[/]")
    console.print(f"[{NordColors.FROST_3}]{'─' * len(title)}[/]")


def create_settings_table(rows: List[Tuple[str, str, bool]]) -> Table:
    """
    Build the table shown before the confirmation prompt.

    Args:
        rows: (setting, value, critical) triples

    Returns:
        A Rich Table with critical rows marked by an asterisk
    """
    table = Table(
        title="The following values will be applied",
        box=box.ROUNDED,
        title_style=f"bold {NordColors.FROST_2}",
        border_style=NordColors.FROST_3,
    )
    table.add_column("Setting", style=f"bold {NordColors.FROST_2}")
    table.add_column("Value", style=NordColors.SNOW_STORM_1)
    table.add_column("", style=f"bold {NordColors.YELLOW}", width=1)
    for setting, value, critical in rows:
        table.add_row(setting, escape(value), "*" if critical else "")
    return table


# ----------------------------------------------------------------
# Prompts
# ----------------------------------------------------------------
def get_user_input(prompt: str, default: str = "", critical: bool = False) -> str:
    """Get input from the user with a styled prompt; options marked critical get an asterisk."""
    if critical:
        prompt = f"* {prompt}"
    return Prompt.ask(f"[bold {NordColors.PURPLE}]{prompt}[/]", default=default)


def get_user_confirmation(prompt: str, default: bool = False) -> bool:
    """Get a Yes/No confirmation from the user."""
    return Confirm.ask(f"[bold {NordColors.PURPLE}]{prompt}[/]", default=default)
