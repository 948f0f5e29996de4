#!/usr/bin/env python3
"""
ClashTUI - terminal dashboard for Clash-compatible proxy daemons
Interactive session plus one-shot listing commands
"""

import sys
import os
import click

# Add src directory to Python path for imports
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from config.settings import settings
from src.clash_client.client import ClashClient
from src.clash_client.exceptions import ClashError
from src.clash_tui.app import run_tui
from src.clash_tui.models import ProxyGroup, ProxyInfo, Rule
from src.utils.logger import get_logger
from src.utils.table_formatters import (
    format_proxies_rich,
    format_rules_rich,
    format_groups_rich,
    format_version_rich,
)

__version__ = "0.1.5"

logger = get_logger(__name__)


def load_groups(client):
    """Selectable groups from GET /proxies, sorted by name."""
    proxies = client.get_proxies()
    infos = [
        ProxyInfo.from_dict(name, data)
        for name, data in proxies.items()
        if isinstance(data, dict)
    ]
    return sorted(
        (ProxyGroup.from_info(info) for info in infos if info.is_group),
        key=lambda group: group.name,
    )


@click.group(invoke_without_command=True)
@click.option('--controller', '-c', help='Controller address, e.g. 127.0.0.1:9090')
@click.option('--secret', '-s', help='Controller secret (bearer token)')
@click.option('--config', type=click.Path(dir_okay=False), help='Configuration file path')
@click.version_option(__version__, prog_name='clashtui')
@click.pass_context
def cli(ctx, controller, secret, config):
    """Terminal dashboard for a Clash-compatible proxy daemon."""
    ctx.ensure_object(dict)

    if config:
        settings.reload(config)

    try:
        ctx.obj['client'] = ClashClient(controller=controller, secret=secret)
    except ClashError as e:
        click.echo(f"Error initializing client: {e}", err=True)
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        ctx.invoke(tui)


@cli.command()
@click.pass_context
def proxies(ctx):
    """List proxy groups with current and available members."""
    try:
        click.echo(format_proxies_rich(load_groups(ctx.obj['client'])))
    except ClashError as e:
        click.echo(f"Error: {e}", err=True)


@cli.command()
@click.pass_context
def rules(ctx):
    """List routing rules in daemon order."""
    try:
        rule_list = [Rule.from_dict(item) for item in ctx.obj['client'].get_rules()]
        click.echo(format_rules_rich(rule_list))
    except ClashError as e:
        click.echo(f"Error: {e}", err=True)


@cli.command()
@click.pass_context
def groups(ctx):
    """List proxy groups with their active member."""
    try:
        click.echo(format_groups_rich(load_groups(ctx.obj['client'])))
    except ClashError as e:
        click.echo(f"Error: {e}", err=True)


@cli.command()
@click.pass_context
def version(ctx):
    """Show the daemon version."""
    try:
        click.echo(format_version_rich(ctx.obj['client'].get_version()))
    except ClashError as e:
        click.echo(f"Error: {e}", err=True)


@cli.command()
@click.pass_context
def tui(ctx):
    """Start the interactive dashboard."""
    try:
        run_tui(ctx.obj['client'])
    except KeyboardInterrupt:
        pass
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        logger.exception("Dashboard failed")
        sys.exit(1)


def main():
    """Console script entry point."""
    cli(obj={})


if __name__ == '__main__':
    main()
