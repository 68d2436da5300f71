# display.py
# All terminal output for the conversion engine.
#
# This module owns presentation entirely. The engine never formats strings;
# it calls named functions here. Swap this file to change the entire UI.
#
# Colour language:
#   cyan: plan / routing events
#   yellow: ledger gate checks
#   green: success / confirmed
#   red: failures, skips, halts
#   magenta: outcome internals (draw / tier / result)

import os

from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from resource_forge.models import ApplicationRecord, OutcomeTier

load_dotenv()

console = Console(quiet=os.getenv("FORGE_QUIET", "") == "1")

_TIER_COLOURS = {
    OutcomeTier.FAILURE: "red",
    OutcomeTier.PARTIAL: "yellow",
    OutcomeTier.NORMAL: "green",
    OutcomeTier.BONUS: "bold green",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _label(tag: str, color: str) -> Text:
    t = Text()
    t.append(f" {tag} ", style=f"bold white on {color}")
    return t


def _pairs(mapping: dict[str, int]) -> str:
    if not mapping:
        return "—"
    return ", ".join(f"{name}: {qty}" for name, qty in mapping.items())


def _tier(tier: OutcomeTier | None) -> str:
    if tier is None:
        return "[dim]no match[/dim]"
    colour = _TIER_COLOURS[tier]
    return f"[{colour}]{tier.value.upper()}[/{colour}]"


def set_quiet(quiet: bool) -> None:
    console.quiet = quiet


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------


def banner(seed: int | None, policy: str) -> None:
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Resource Forge[/bold cyan]\n"
            "[dim]Staged formula execution against a shared resource ledger[/dim]\n\n"
            f"[dim]Seed   :[/dim] [white]{seed if seed is not None else 'entropy'}[/white]\n"
            f"[dim]Policy :[/dim] [white]{policy}[/white]",
            border_style="cyan",
            padding=(1, 4),
        )
    )


# ---------------------------------------------------------------------------
# Plan display
# ---------------------------------------------------------------------------


def plan_table(formulas: list, step: int | None = None, completed: tuple[bool, ...] = ()) -> None:
    console.print()
    table = Table(
        box=box.SIMPLE_HEAVY,
        border_style="cyan",
        show_header=True,
        header_style="bold cyan",
        padding=(0, 1),
    )
    table.add_column("Slot", justify="center", width=5)
    table.add_column("Inputs", style="white")
    table.add_column("Outputs", style="white")
    table.add_column("Result", style="magenta")
    table.add_column("Lvl", justify="center", width=4)
    table.add_column("State", justify="center", width=8)

    for index, formula in enumerate(formulas):
        if index < len(completed) and completed[index]:
            state = "[green]done[/green]"
        elif step is not None and index == step:
            state = "[bold cyan]next[/bold cyan]"
        else:
            state = "[dim]pending[/dim]"
        table.add_row(
            str(index),
            _pairs(formula.inputs()),
            _pairs(formula.outputs()),
            _pairs(dict(zip(formula.output_resources, formula.result))),
            str(formula.proficiency),
            state,
        )

    console.print(
        Panel(
            table,
            title=_label("PLAN", "cyan"),
            subtitle=f"[dim]{len(formulas)} formula(s)[/dim]",
            border_style="cyan",
            padding=(0, 1),
        )
    )


def ledger_table(resources: dict[str, int], title: str = "LEDGER") -> None:
    console.print()
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold yellow", padding=(0, 1))
    table.add_column("Resource", style="white")
    table.add_column("Quantity", justify="right", style="yellow")

    for name, quantity in resources.items():
        table.add_row(name, str(quantity))

    console.print(Panel(table, title=_label(title, "yellow"), border_style="yellow", padding=(0, 1)))


# ---------------------------------------------------------------------------
# Step execution
# ---------------------------------------------------------------------------


def step_applied(record: ApplicationRecord, total: int) -> None:
    console.print(
        f"[bold cyan]  STEP [{record.slot + 1}/{total}][/bold cyan]"
        f"  [magenta]draw[/magenta] {record.draw:.2f}"
        f"  [magenta]tier[/magenta] {_tier(record.tier)}"
        f"  [magenta]result[/magenta] {record.result}"
        f"  [dim]lvl {record.proficiency}[/dim]"
    )


def batch_start(total: int) -> None:
    console.print()
    console.print(Rule(f"[yellow]LEDGER-GATED PASS — {total} slot(s)[/yellow]", style="yellow"))


def slot_gated(slot: int, record: ApplicationRecord) -> None:
    console.print(
        f"  [bold green]✓ slot {slot}[/bold green]"
        f"  [magenta]tier[/magenta] {_tier(record.tier)}"
        f"  [magenta]result[/magenta] {record.result}"
    )


def step_skipped(slot: int, missing: dict[str, int]) -> None:
    console.print(f"  [red]↷ slot {slot} skipped[/red]  [dim]short: {_pairs(missing)}[/dim]")


# ---------------------------------------------------------------------------
# Final result
# ---------------------------------------------------------------------------


def halt(reason: str) -> None:
    console.print()
    console.print(
        Panel(
            f"[bold white]{reason}[/bold white]",
            title=_label("HALT", "red"),
            border_style="red",
            padding=(0, 2),
        )
    )
    console.print()
