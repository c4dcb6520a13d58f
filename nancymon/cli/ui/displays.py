"""Rich display components for the CLI."""

from rich import box
from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from nancymon.core.battle import BattleOutcome, BattleResult
from nancymon.core.combatant import Combatant, Opponent, PlayerCombatant
from nancymon.core.events import BattleEvent, BattleEventType, Side
from nancymon.core.moves import Item, Move
from nancymon.core.status import get_definition
from nancymon.data.catalog import MEMORIES
from nancymon.utils.config import BattleConfig, config

console = Console()


# Color mappings
EVENT_STYLES = {
    BattleEventType.NARRATION: "white",
    BattleEventType.HEAL: "green",
    BattleEventType.STATUS_APPLIED: "magenta",
    BattleEventType.STATUS_EXPIRED: "dim",
    BattleEventType.LEVEL_UP: "bold yellow",
    BattleEventType.DROP_FOUND: "bold magenta",
    BattleEventType.ALL_COLLECTED: "bold magenta",
}

CATEGORY_COLORS = {
    "comfort": "magenta",
    "heal": "green",
    "special": "cyan",
    "seed": "yellow",
    "resource": "dim",
}

OUTCOME_DISPLAY = {
    BattleOutcome.VICTORY: ("VICTORY!", "bold green"),
    BattleOutcome.DEFEAT: ("Overwhelmed...", "bold red"),
    BattleOutcome.RUN: ("Got away safely", "yellow"),
    BattleOutcome.ABORTED: ("Battle interrupted", "dim"),
}


def render_bar(current: int, maximum: int, width: int = 20, color: str = "green") -> str:
    """Text gauge like [green]██████░░░░[/green]."""
    filled = round(width * current / maximum) if maximum > 0 else 0
    filled = max(0, min(width, filled))
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * (width - filled)}[/dim]"


def _status_line(combatant: Combatant) -> str:
    if not combatant.active_statuses:
        return ""
    parts = []
    for status in combatant.active_statuses:
        definition = get_definition(status.kind)
        parts.append(f"{definition.emoji} {definition.name} ({status.remaining_turns})")
    return "\n" + "  ".join(parts)


def display_battle_status(player: PlayerCombatant, opponent: Opponent) -> None:
    """Show both combatants side by side."""
    left = f"""[bold]{player.name}[/bold] [dim]Lv.{player.level}[/dim]

Vibe  {render_bar(player.current_resource, player.max_resource, color="magenta")}
      {player.current_resource}/{player.max_resource}
[dim]XP {player.xp}/{player.xp_to_next_level}[/dim]{_status_line(player)}"""

    right = f"""[bold]{opponent.name}[/bold] [dim]Lv.{opponent.level}[/dim]

Stress {render_bar(opponent.current_resource, opponent.max_resource, color="red")}
       {opponent.current_resource}/{opponent.max_resource}{_status_line(opponent)}"""

    console.print(Columns([Panel(left, box=box.ROUNDED), Panel(right, box=box.ROUNDED)]))


def display_event(event: BattleEvent) -> None:
    """Print one battle event."""
    if event.event_type == BattleEventType.BATTLE_ENDED or not event.message:
        return
    if event.event_type == BattleEventType.DAMAGE:
        style = "bold red" if event.target == Side.PLAYER else "bold cyan"
        if event.critical:
            style += " reverse"
    else:
        style = EVENT_STYLES.get(event.event_type, "white")
    console.print(f"[{style}]{event.message}[/{style}]")


def display_events(events: list[BattleEvent]) -> None:
    for event in events:
        display_event(event)


def display_move_menu(moves: list[Move]) -> None:
    """Numbered move list for the comfort menu."""
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("#", style="dim", width=3)
    table.add_column("Move")
    table.add_column("Power", justify="right", width=6)
    for i, move in enumerate(moves, 1):
        color = CATEGORY_COLORS.get(move.category.value, "white")
        table.add_row(str(i), f"{move.emoji} [{color}]{move.name}[/{color}]", str(move.power))
    console.print(table)
    console.print("[dim][0] Back[/dim]")


def display_item_menu(items: list[Item], counts: dict[str, int]) -> None:
    """Numbered item list for the items menu."""
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("#", style="dim", width=3)
    table.add_column("Item")
    table.add_column("Qty", justify="right", width=4)
    for i, item in enumerate(items, 1):
        table.add_row(str(i), f"{item.emoji} {item.name}", f"x{counts.get(item.id, 0)}")
    console.print(table)
    console.print("[dim][0] Back[/dim]")


def display_enemy_table(enemies: list[Opponent]) -> None:
    table = Table(title="Stress Enemies", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Name", min_width=14)
    table.add_column("Lv", justify="right", width=4)
    table.add_column("Stress", justify="right", width=7)
    table.add_column("Attack")
    table.add_column("XP", justify="right", width=4)

    for enemy in enemies:
        table.add_row(
            enemy.id,
            enemy.name,
            str(enemy.level),
            str(enemy.max_resource),
            enemy.attack_name,
            str(enemy.xp_reward),
        )

    console.print(table)


def display_move_table(moves: list[Move]) -> None:
    table = Table(title="Moves", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Move", min_width=14)
    table.add_column("Type", width=8)
    table.add_column("Power", justify="right", width=6)
    table.add_column("Effect")

    for move in moves:
        color = CATEGORY_COLORS.get(move.category.value, "white")
        effects = []
        if move.status_effect:
            chance = f" {move.status_chance:.0%}" if move.status_chance is not None else ""
            effects.append(f"{get_definition(move.status_effect).name}{chance}")
        if move.self_status:
            effects.append(f"self: {get_definition(move.self_status).name}")
        table.add_row(
            move.id,
            f"{move.emoji} {move.name}",
            f"[{color}]{move.category.value}[/{color}]",
            str(move.power),
            ", ".join(effects) or "-",
        )

    console.print(table)


def display_item_table(items: list[Item]) -> None:
    table = Table(title="Items", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Item", min_width=16)
    table.add_column("Type", width=9)
    table.add_column("Value", justify="right", width=6)
    table.add_column("Battle", width=6)

    for item in items:
        color = CATEGORY_COLORS.get(item.category.value, "white")
        table.add_row(
            item.id,
            f"{item.emoji} {item.name}",
            f"[{color}]{item.category.value}[/{color}]",
            str(item.value),
            "[green]yes[/green]" if item.usable_in_battle else "[dim]no[/dim]",
        )

    console.print(table)


def render_timing_bar(position: float, cfg: BattleConfig | None = None, width: int = 41) -> Text:
    """Sweet-spot bar with the cursor at `position` (0 is the center)."""
    cfg = cfg or config
    half = cfg.timing_bar_half_width
    text = Text("[")
    for cell in range(width):
        # Cell center mapped onto [-half, half]
        x = (cell / (width - 1)) * 2 * half - half
        if abs(x - position) <= half / (width - 1):
            text.append("▼", style="bold white")
        elif abs(x) < cfg.timing_perfect_zone:
            text.append("█", style="magenta")
        elif abs(x) < cfg.timing_good_zone:
            text.append("▓", style="cyan")
        else:
            text.append("░", style="dim")
    text.append("]")
    return text


def display_battle_result(result: BattleResult) -> None:
    """Summary panel once the battle is over."""
    label, style = OUTCOME_DISPLAY[result.outcome]
    player = result.player
    content = f"""[{style}]{label}[/{style}]

[dim]{player.name}:[/dim] Lv.{player.level}
[dim]Vibe:[/dim] {player.current_resource}/{player.max_resource}
[dim]XP:[/dim] {player.xp}/{player.xp_to_next_level}"""

    if result.level_up:
        content += f"\n[bold yellow]LEVEL UP! Now level {result.level_up.new_level}![/bold yellow]"

    if result.drop_id:
        memory = MEMORIES.get(result.drop_id)
        if memory:
            content += f"\n\n{memory.emoji} [bold]{memory.name}[/bold]\n[italic]{memory.description}[/italic]"

    if result.all_collected:
        content += "\n\n[bold magenta]Every memory has been found![/bold magenta]"

    console.print(Panel(content, title="Battle Over", box=box.DOUBLE))
