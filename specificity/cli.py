"""
cli.py - Rich Command Line Interface for Specificity

Inspect what the object factory produces without writing a test first.

Usage:
    specificity --help
    specificity sample int --count 5
    specificity sample datetime --seed 1234
    specificity sample myapp.models:Order -n 3
    specificity distributions
    specificity describe positive_normal --runs 5000
    specificity types
    specificity version
"""

from __future__ import annotations

import importlib
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

import numpy as np
import scipy.stats
import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .distributions import DISTRIBUTIONS
from .factory import DEFAULT_SEED, ObjectFactory
from .registry import default_registry
from .types import ObjectFactoryError, describe_type

# Initialize Typer app and Rich console
app = typer.Typer(
    name="specificity",
    help="🎲 Specificity: pseudo-random test objects",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


# =============================================================================
# TYPE LOOKUP
# =============================================================================

BUILTIN_TYPES = {
    "int": int,
    "float": float,
    "bool": bool,
    "str": str,
    "bytes": bytes,
    "decimal": Decimal,
    "datetime": datetime,
    "date": date,
    "time": time,
    "timedelta": timedelta,
    "uuid": uuid.UUID,
    "float32": np.float32,
    "float64": np.float64,
    "int8": np.int8,
    "int16": np.int16,
    "int32": np.int32,
    "int64": np.int64,
    "uint8": np.uint8,
    "uint16": np.uint16,
    "uint32": np.uint32,
    "uint64": np.uint64,
}


def resolve_type(name: str) -> Any:
    """Map a builtin type name or an importable ``module:Class`` path to a type."""
    if name.lower() in BUILTIN_TYPES:
        return BUILTIN_TYPES[name.lower()]

    if ":" not in name:
        known = ", ".join(sorted(BUILTIN_TYPES))
        console.print(f"[red]Error:[/red] Unknown type '{name}'. Use one of {known} or module:Class")
        raise typer.Exit(1)

    module_name, _, attribute_path = name.partition(":")
    try:
        target: Any = importlib.import_module(module_name)
        for attribute in attribute_path.split("."):
            target = getattr(target, attribute)
    except (ImportError, AttributeError) as exc:
        console.print(f"[red]Error:[/red] Cannot import {name}: {exc}")
        raise typer.Exit(1)

    return target


# =============================================================================
# COMMANDS
# =============================================================================

@app.command()
def sample(
    type_name: str = typer.Argument(..., help="Type name (int, str, datetime, ...) or module:Class"),
    count: int = typer.Option(10, "--count", "-n", help="Number of values to generate"),
    seed: int = typer.Option(DEFAULT_SEED, "--seed", "-s", help="Factory seed"),
):
    """
    Generate values of a type with a fresh factory.

    Example:
        specificity sample int -n 5
        specificity sample myapp.models:Order --seed 42
    """
    type_ = resolve_type(type_name)
    factory = ObjectFactory(seed=seed)

    table = Table(
        title=f"{describe_type(type_)} (seed={seed:#x})",
        box=box.ROUNDED,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", justify="right")
    table.add_column("Value", style="bold")

    try:
        for index in range(count):
            table.add_row(str(index), repr(factory.any(type_)))
    except ObjectFactoryError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    console.print(table)


@app.command()
def distributions():
    """List the registered distributions."""
    table = Table(title="Distributions", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Type", style="dim")
    table.add_column("Description")

    for name in DISTRIBUTIONS.list_distributions():
        info = DISTRIBUTIONS.get_info(name)
        table.add_row(info["name"], info["type"], info["description"])

    console.print(table)


@app.command()
def describe(
    name: str = typer.Argument(..., help="Distribution name"),
    runs: int = typer.Option(1000, "--runs", "-n", help="Number of draws"),
    seed: int = typer.Option(DEFAULT_SEED, "--seed", "-s", help="Random seed"),
):
    """
    Draw from a distribution and summarize the shape of the draws.

    Example:
        specificity describe inverted_normal --runs 5000
    """
    try:
        distribution = DISTRIBUTIONS.get(name)
    except KeyError as exc:
        console.print(f"[red]Error:[/red] {exc.args[0]}")
        raise typer.Exit(1)

    if runs < 2:
        console.print("[red]Error:[/red] --runs must be at least 2")
        raise typer.Exit(1)

    rng = np.random.default_rng(seed)
    draws = np.array([distribution.sample(rng) for _ in range(runs)])
    stats = scipy.stats.describe(draws)

    table = Table(title=f"{name} ({runs} draws)", box=box.ROUNDED, show_header=False, title_style="bold cyan")
    table.add_column("Statistic", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Below 0.15", f"{np.mean(draws < 0.15):.1%}")
    table.add_row("Above 0.85", f"{np.mean(draws > 0.85):.1%}")
    table.add_row("Min / Max", f"{stats.minmax[0]:.4f} / {stats.minmax[1]:.4f}")
    table.add_row("Mean", f"{stats.mean:.4f}")
    table.add_row("Variance", f"{stats.variance:.4f}")
    table.add_row("Skewness", f"{stats.skewness:.4f}")
    table.add_row("Kurtosis", f"{stats.kurtosis:.4f}")

    console.print(table)


@app.command()
def types():
    """List the types and customizations in the default registry."""
    registry = default_registry()

    table = Table(title="Registered Types", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Type", style="bold")
    for type_ in registry.types():
        table.add_row(describe_type(type_))
    console.print(table)

    console.print("\n[bold]Customizations[/bold] (consulted first to last):")
    for customization in registry.customizations:
        console.print(f"  • {customization!r}")


@app.command()
def version():
    """Show version information."""
    from specificity import __version__

    console.print(Panel(
        f"[bold cyan]Specificity[/bold cyan] v{__version__}\n\n"
        "Pseudo-random, repeatable test objects for Python unit tests.",
        border_style="cyan"
    ))


# =============================================================================
# ENTRY POINT
# =============================================================================

def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
