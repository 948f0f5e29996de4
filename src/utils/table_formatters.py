#!/usr/bin/env python3
"""
Rich table formatters for clashtui one-shot commands.
Renders proxy groups, rules and version info as colorful tables.
"""

from typing import List

from rich.console import Console
from rich.table import Table
from rich import box
from rich.markup import escape

from src.clash_tui.models import ProxyGroup, Rule

console = Console()


def _render(*renderables) -> str:
    with console.capture() as capture:
        for renderable in renderables:
            console.print(renderable)
    return capture.get()


def format_proxies_rich(groups: List[ProxyGroup]) -> str:
    """Every group with its active member and the members it can switch to."""
    table = Table(
        title="[bold magenta]Proxy Groups[/bold magenta]",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Group", style="yellow", no_wrap=True)
    table.add_column("Type", style="cyan")
    table.add_column("Current", style="green")
    table.add_column("Available", style="white")

    for group in groups:
        table.add_row(
            escape(group.name),
            escape(group.kind),
            escape(group.now or "N/A"),
            escape(", ".join(group.members)) or "-",
        )

    return _render(table)


def format_rules_rich(rules: List[Rule]) -> str:
    table = Table(
        title=f"[bold blue]Rules ({len(rules)})[/bold blue]",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("#", style="dim", justify="right")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Payload", style="white")
    table.add_column("Proxy", style="yellow")

    for index, rule in enumerate(rules, start=1):
        table.add_row(str(index), escape(f"[{rule.kind}]"), escape(rule.payload), escape(f"→ {rule.proxy}"))

    return _render(table)


def format_groups_rich(groups: List[ProxyGroup]) -> str:
    """Compact `[type] name → current` listing."""
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold cyan")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Current", style="green")

    for group in groups:
        table.add_row(escape(f"[{group.kind}]"), escape(group.name), escape(f"→ {group.now or 'N/A'}"))

    return _render(table)


def format_version_rich(version: str) -> str:
    return _render(f"[bold]Clash version:[/bold] [green]{escape(version)}[/green]")

