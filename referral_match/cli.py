"""
Referral matching command line interface.

Runs the matching engine over scenario files and shows the resolved
matching configuration.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="referral-match",
    help="Referral-to-opening matching engine CLI",
    add_completion=False,
)
console = Console()


QUALITY_STYLES = {
    "excellent": "green",
    "good": "blue",
    "fair": "yellow",
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    """Configure logging before any command runs."""
    import os

    from referral_match.utils.config import reload_settings
    from referral_match.utils.logger import setup_logging

    if verbose:
        os.environ["LOG_LEVEL"] = "DEBUG"
        reload_settings()
    setup_logging()


@app.command()
def version():
    """Show application version."""
    from referral_match import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def config(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="JSON file with config overrides"),
):
    """Show the resolved matching configuration."""
    from referral_match.core.matching import resolve_config

    overrides = None
    if file is not None:
        try:
            overrides = json.loads(file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            console.print(f"[red]Error reading config file: {e}[/red]")
            raise typer.Exit(1)

    resolved = resolve_config(overrides)

    for section, values in resolved.to_dict().items():
        table = Table(title=section.capitalize())
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        for key, value in values.items():
            table.add_row(key, str(value))
        console.print(table)

    issues = resolved.validation_issues()
    if issues:
        console.print("[yellow]Configuration issues:[/yellow]")
        for issue in issues:
            console.print(f"  [yellow]-[/yellow] {issue}")
    else:
        console.print("[green]Configuration is valid[/green]")


@app.command()
def match(
    scenario: Path = typer.Argument(..., help="Scenario JSON file"),
    top: Optional[int] = typer.Option(None, "--top", "-n", help="Show at most N results"),
    show_breakdown: bool = typer.Option(False, "--show-breakdown", "-b", help="Show per-factor scores"),
):
    """Match a scenario's referral against its openings."""
    from referral_match.core.matching import get_matching_engine
    from referral_match.data import ScenarioLoadError, load_scenario
    from referral_match.utils.constants import FACTOR_KEYS

    try:
        data = load_scenario(scenario)
    except ScenarioLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    engine = get_matching_engine()
    run = engine.match(
        data.referral,
        data.openings,
        data.organizations,
        data.sites,
        data.licenses,
        data.capability_profiles,
        config=data.config,
    )

    results = run.results[:top] if top is not None else run.results
    if not results:
        console.print("[yellow]No openings matched the referral.[/yellow]")
    else:
        table = Table(title=f"Matches for {data.referral.client_name or data.referral.id or 'referral'}")
        table.add_column("#", style="dim")
        table.add_column("Opening", style="cyan")
        table.add_column("Provider")
        table.add_column("County")
        table.add_column("Score", justify="right")
        table.add_column("Quality")
        if show_breakdown:
            for key in FACTOR_KEYS:
                table.add_column(key, justify="right")
        table.add_column("Explanation")
        table.add_column("Risk flags", style="red")

        for rank, result in enumerate(results, 1):
            style = QUALITY_STYLES.get(result.quality, "white")
            row = [
                str(rank),
                result.opening.title or result.opening_id or "-",
                result.organization.legal_name if result.organization else "-",
                result.site.county if result.site and result.site.county else "-",
                str(result.score),
                f"[{style}]{result.quality}[/{style}]",
            ]
            if show_breakdown:
                row.extend(f"{v:.1f}" for v in result.score_breakdown.as_dict().values())
            row.append(result.match_explanation)
            row.append(", ".join(result.risk_flags))
            table.add_row(*row)

        console.print(table)

    meta = run.meta
    console.print(
        f"Searched [cyan]{meta.openings_searched}[/cyan] openings: "
        f"[green]{meta.matches_found}[/green] matched, "
        f"{meta.ineligible_openings} ineligible, "
        f"{meta.excluded_by_constraints} excluded by constraints, "
        f"{meta.below_minimum_score} below minimum score"
    )
    console.print(
        f"Top score [bold]{meta.top_match_score}[/bold], "
        f"average {meta.avg_match_score}, {meta.latency_ms} ms"
    )


@app.command()
def flags(
    scenario: Path = typer.Argument(..., help="Scenario JSON file"),
):
    """Show the risk flags for a scenario's referral."""
    from referral_match.core.matching import identify_risk_flags
    from referral_match.data import ScenarioLoadError, load_scenario

    try:
        data = load_scenario(scenario)
    except ScenarioLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    risk_flags = identify_risk_flags(data.referral)
    if not risk_flags:
        console.print("[green]No risk flags[/green]")
        return

    for flag in risk_flags:
        console.print(f"  [red]![/red] {flag}")


if __name__ == "__main__":
    app()
