"""Typer CLI application."""
from __future__ import annotations

import logging
from typing import Optional

import typer

app = typer.Typer(
    name="yeti-battles",
    help="Developer tools for the evil yeti battle engine",
    no_args_is_help=True,
)

# (name, fraction of player power) used by the scenarios preview
SCENARIOS = [
    ("Easy Win", 0.3),
    ("Close Win", 0.95),
    ("Close Loss", 1.05),
    ("Big Loss", 1.5),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show engine debug logs"),
) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@app.command()
def simulate(
    travels: int = typer.Option(20, "--travels", "-t", min=1, help="Number of travels to simulate"),
    snowballs: int = typer.Option(10_000, "--snowballs", help="Starting snowballs"),
    assistants: int = typer.Option(10, "--assistants", help="Starting assistants"),
    buff: Optional[str] = typer.Option(None, "--buff", help="Yeti buff class (e.g. Harvester)"),
    location_buff: Optional[str] = typer.Option(None, "--location-buff", help="Location buff class"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    save: Optional[str] = typer.Option(None, "--save", "-s", help="Persist battle state under this game id"),
) -> None:
    """Run a batch of battles against a simulated player."""
    from yeti_battles.app import BattleApp
    from yeti_battles.cli.battle_display import BattleDisplay
    from yeti_battles.engine.player import InMemoryPlayer

    battle_app = BattleApp(config_path=config, seed=seed)
    player = InMemoryPlayer(
        snowballs=snowballs,
        snowflakes=5,
        icicles=5,
        assistants={"helper": assistants} if assistants else {},
    )
    player.set_buffs(buff, location_buff)
    battle_app.new_session(player)
    if save and battle_app.load_session(save):
        typer.echo(f"Loaded battle state for '{save}'")

    report = battle_app.simulate(travels)

    display = BattleDisplay()
    display.show_outcomes(report.outcomes)
    display.show_summary(report.summary, report.final_snowballs, report.ability_belt_level)
    if save:
        battle_app.save_session(save)
        typer.echo(f"Saved battle state for '{save}'")


@app.command()
def curve(
    samples: int = typer.Option(1000, "--samples", "-n", min=1, help="Number of draws"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
) -> None:
    """Show the opponent power distribution for the configured curve."""
    import random

    from yeti_battles.cli.battle_display import BattleDisplay
    from yeti_battles.config import load_config
    from yeti_battles.mechanics.power_curve import distribution_stats

    c = load_config(config).power_curve
    stats = distribution_stats(
        samples, c.center, c.minimum, c.maximum, c.std_dev, rng=random.Random(seed)
    )
    BattleDisplay().show_curve(stats)


@app.command()
def scenarios(
    snowballs: int = typer.Option(100_000, "--snowballs", help="Player power"),
) -> None:
    """Preview win/loss at fixed yeti power ratios (no class advantage)."""
    from yeti_battles.cli.battle_display import BattleDisplay
    from yeti_battles.mechanics.power_curve import power_from_fraction

    rows = []
    for name, ratio in SCENARIOS:
        power = power_from_fraction(ratio, snowballs)
        rows.append((name, ratio, power, snowballs >= power))
    BattleDisplay().show_scenarios(snowballs, rows)


@app.command()
def advantages(
    buff: Optional[str] = typer.Option(None, "--buff", help="Yeti buff class"),
    location_buff: Optional[str] = typer.Option(None, "--location-buff", help="Location buff class"),
) -> None:
    """Show which evil yeti classes the given buffs counter."""
    from yeti_battles.cli.battle_display import BattleDisplay
    from yeti_battles.mechanics.class_advantage import advantage_report
    from yeti_battles.models.encounter import PlayerBuffs

    buffs = PlayerBuffs(
        primary_class=buff,
        secondary_class=location_buff,
        stacked=buff is not None and buff == location_buff,
    )
    BattleDisplay().show_advantages(advantage_report(buffs))


if __name__ == "__main__":
    app()
