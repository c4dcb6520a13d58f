"""Main CLI application for Nancymon."""

import logging
import random
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from nancymon import __version__
from nancymon.cli.timing import SweetSpotTimingCheck
from nancymon.cli.ui import menus
from nancymon.cli.ui.displays import (
    display_battle_result,
    display_battle_status,
    display_enemy_table,
    display_events,
    display_item_menu,
    display_item_table,
    display_move_menu,
    display_move_table,
)
from nancymon.core.battle import AwaitedSignal, Battle, BattleResult
from nancymon.data.catalog import ITEMS, MOVES, STRESS_ENEMIES, create_opponent, default_player, get_random_opponent
from nancymon.data.game_state import Inventory, MemoryCollection

# Create main app
app = typer.Typer(
    name="nancymon",
    help="Nancymon - calm your stress with love, one turn at a time",
    no_args_is_help=True,
)

console = Console()


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=debug)],
        force=True,
    )


def play_battle(battle: Battle, timing_check: SweetSpotTimingCheck) -> BattleResult:
    """Drive a battle to the end from terminal input."""
    battle.start()
    while not battle.is_over:
        display_events(battle.drain_events())

        if battle.awaiting == AwaitedSignal.ADVANCE:
            battle.advance()

        elif battle.awaiting == AwaitedSignal.MENU_CHOICE:
            display_battle_status(battle.player, battle.opponent)
            battle.choose(menus.battle_menu())

        elif battle.awaiting == AwaitedSignal.MOVE_SELECTION:
            display_move_menu(battle.player.moves)
            index = menus.select_index(len(battle.player.moves), "Move")
            if index is None:
                battle.cancel()
            else:
                battle.select_move(index)

        elif battle.awaiting == AwaitedSignal.ITEM_SELECTION:
            items = battle.available_items()
            counts = {item.id: battle.inventory.item_count(item.id) for item in items}
            display_item_menu(items, counts)
            index = menus.select_index(len(items), "Item")
            if index is None or not battle.select_item(index):
                battle.cancel()

        elif battle.awaiting == AwaitedSignal.TIMING_RESULT:
            console.print("[bold]Press Enter when the cursor hits the center![/bold]")
            battle.run_timing_check(timing_check)

        elif battle.awaiting == AwaitedSignal.ACKNOWLEDGE:
            menus.wait_for_enter()
            battle.acknowledge()

        else:
            battle.abort()

    display_events(battle.drain_events())
    return battle.result


@app.command("fight")
def fight(
    enemy: Optional[str] = typer.Argument(None, help="Enemy id (random if omitted)"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Seed the battle randomness"),
    debug: bool = typer.Option(False, "--debug", help="Show debug logs"),
) -> None:
    """Fight a stress enemy."""
    _setup_logging(debug)

    if enemy is not None and enemy not in STRESS_ENEMIES:
        console.print(f"[red]Unknown enemy:[/red] {enemy}")
        console.print(f"[dim]Choose one of: {', '.join(STRESS_ENEMIES)}[/dim]")
        raise typer.Exit(1)

    rng = random.Random(seed)
    opponent = create_opponent(enemy) if enemy else get_random_opponent(rng)

    battle = Battle(
        default_player(),
        opponent,
        inventory=Inventory.with_starter_items(),
        collection=MemoryCollection(),
        rng=rng,
    )
    result = play_battle(battle, SweetSpotTimingCheck(console=console))
    display_battle_result(result)


@app.command("enemies")
def list_enemies() -> None:
    """List stress enemies."""
    display_enemy_table(list(STRESS_ENEMIES.values()))


@app.command("moves")
def list_moves() -> None:
    """List comfort moves."""
    display_move_table(list(MOVES.values()))


@app.command("items")
def list_items(
    battle_only: bool = typer.Option(False, "--battle", "-b", help="Only items usable in battle"),
) -> None:
    """List items."""
    items = [item for item in ITEMS.values() if item.usable_in_battle or not battle_only]
    display_item_table(items)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    console.print(Panel(f"Nancymon v{__version__}", box=box.ROUNDED))


def main() -> None:
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
