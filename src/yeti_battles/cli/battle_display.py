"""Battle-specific display helpers for the developer CLI."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from yeti_battles.mechanics.class_advantage import CLASS_OPPOSITION, AdvantageCheck
from yeti_battles.mechanics.power_curve import CurveStats
from yeti_battles.models.encounter import OpposingClass, ResolutionOutcome

console = Console()

_CLASS_COLORS = {
    "Siphon": "green",
    "Assailant": "red",
    "Anchor": "yellow",
    "Scrambler": "bright_black",
}


class BattleDisplay:
    def __init__(self, target: Console | None = None) -> None:
        self.console = target or console

    def show_outcomes(self, outcomes: list[ResolutionOutcome]) -> None:
        table = Table(title="Battles", box=box.ROUNDED)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Class")
        table.add_column("Yeti power", justify="right")
        table.add_column("Your power", justify="right")
        table.add_column("Result")
        table.add_column("Reward / loss")

        for i, o in enumerate(outcomes, 1):
            color = _CLASS_COLORS.get(o.opposing_class.value, "white")
            if o.player_won:
                result = "[bold green]WIN[/bold green]"
                if o.reward_multiplier > 1:
                    result += f" [cyan]x{o.reward_multiplier}[/cyan]"
                change = f"+{o.snowball_reward:,} snowballs"
            else:
                result = "[bold red]LOSS[/bold red]"
                change = o.penalty.description if o.penalty else ""
            table.add_row(
                str(i),
                f"[{color}]{o.opposing_class.value}[/{color}]",
                f"{o.opponent_power:,}",
                f"{o.player_power:,}",
                result,
                change,
            )
        self.console.print(table)

    def show_summary(self, summary: dict, snowballs: int, belt_level: int) -> None:
        lines = [
            f"[bold]Battles:[/bold] {summary.get('battles', 0)}  "
            f"[green]Wins:[/green] {summary.get('wins', 0)}  "
            f"[red]Losses:[/red] {summary.get('losses', 0)}",
            f"[bold]Snowballs:[/bold] {snowballs:,}",
            f"[bold]Ability Belt Level:[/bold] {belt_level}",
        ]
        for cls, stats in sorted(summary.get("by_class", {}).items()):
            lines.append(f"  {cls}: {stats['wins']}W / {stats['losses']}L")
        self.console.print(Panel("\n".join(lines), title="Ledger", border_style="cyan"))

    def show_curve(self, stats: CurveStats) -> None:
        table = Table(title=f"Power curve ({stats.samples:,} samples)", box=box.SIMPLE)
        table.add_column("Range")
        table.add_column("Count", justify="right")
        table.add_column("")
        peak = max(stats.histogram) or 1
        for i, count in enumerate(stats.histogram):
            lo, hi = stats.bin_edges[i], stats.bin_edges[i + 1]
            bar = "█" * int(30 * count / peak)
            table.add_row(f"{lo:.2f} - {hi:.2f}", str(count), f"[cyan]{bar}[/cyan]")
        self.console.print(table)
        self.console.print(
            f"min [bold]{stats.minimum:.3f}[/bold]  max [bold]{stats.maximum:.3f}[/bold]  "
            f"mean [bold]{stats.mean:.3f}[/bold]"
        )

    def show_scenarios(self, player_power: int, rows: list[tuple[str, float, int, bool]]) -> None:
        table = Table(title=f"Scenarios at {player_power:,} snowballs", box=box.ROUNDED)
        table.add_column("Scenario")
        table.add_column("Ratio", justify="right")
        table.add_column("Yeti power", justify="right")
        table.add_column("Result")
        for name, ratio, power, wins in rows:
            result = "[green]WINS[/green]" if wins else "[red]LOSES[/red]"
            table.add_row(name, f"{ratio:.0%}", f"{power:,}", result)
        self.console.print(table)

    def show_advantages(self, report: dict[OpposingClass, AdvantageCheck]) -> None:
        table = Table(title="Class advantages", box=box.ROUNDED)
        table.add_column("Evil yeti")
        table.add_column("Counter")
        table.add_column("Advantage")
        table.add_column("Reward")
        table.add_column("Source", style="dim")
        for cls, check in report.items():
            if check.has_advantage:
                adv = "[green]yes[/green]"
                reward = "x3" if check.upgrades_to_triple else "x2"
            else:
                adv = "[red]no[/red]"
                reward = "power check"
            table.add_row(cls.value, CLASS_OPPOSITION[cls].value, adv, reward, check.advantage_source)
        self.console.print(table)
