"""Interactive battle menus for the CLI."""

from typing import Optional

from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from nancymon.core.battle import MenuOption

console = Console()


MENU_OPTIONS = {
    "1": MenuOption.COMFORT,
    "2": MenuOption.ITEMS,
    "3": MenuOption.RUN,
}


def battle_menu() -> MenuOption:
    """Main battle menu."""
    console.print()
    console.print("[1] 💕 Comfort")
    console.print("[2] 🎒 Items")
    console.print("[3] 🏃 Run")

    choice = Prompt.ask("What will you do?", choices=list(MENU_OPTIONS), default="1")
    return MENU_OPTIONS[choice]


def select_index(count: int, prompt: str = "Select") -> Optional[int]:
    """Pick 1..count from a numbered list already on screen.

    Returns the zero-based index, or None for 0 (back) and out-of-range input.
    """
    choice = IntPrompt.ask(prompt, default=1)
    if 1 <= choice <= count:
        return choice - 1
    return None


def wait_for_enter(message: str = "Press Enter to continue") -> None:
    Prompt.ask(f"[dim]{message}[/dim]", default="", show_default=False)
