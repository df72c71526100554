"""
History views for gitsemver: version tags, a terminal-sized one-line log,
and a branch topology summary.
"""

import json
from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table
from rich import box

from ..cli_utils import add_common_options, handle_errors
from ..config import load_config
from ..domain.sync import TagParameters
from ..infra.git_client import GitClient
from ..services.version_service import VersionService

console = Console()

NARROW_COLUMNS = 70


def build_log_args(width: int, count: int, params: Optional[TagParameters] = None,
                   hash_width: int = 9, color: bool = False) -> List[str]:
    """
    `git log` arguments for a one-line log that fits `width` columns.

    Only `params.branch` is used; None logs HEAD.

    Raises:
        click.UsageError: the terminal is too narrow for even the compact layout
    """
    if width < NARROW_COLUMNS:
        time_width = tag_width = who_width = 6
    else:
        time_width, tag_width, who_width = 12, 13, 28
    subject_width = width - hash_width - time_width - tag_width - who_width - 3
    if subject_width < 1:
        raise click.UsageError(f"Can't fit the log into {width} columns")

    pretty = (
        f"%>({hash_width},trunc)%h "
        f"%C(auto,blue)%>({time_width},trunc)%ad "
        f"%C(auto,reset)%<({subject_width},trunc)%s "
        f"%C(auto,red)%>({tag_width},trunc)%D "
        f"%C(auto,white)%>({who_width},trunc)%an"
    )
    args = ['--color=always'] if color else []
    if params and params.branch:
        args.append(params.branch)
    args += [f'--pretty={pretty}', '--date=relative', f'-{count}']
    return args


def build_branchlog_args(params: TagParameters) -> List[str]:
    """`git log` arguments for the branch merge history."""
    args = ['--graph', '--oneline']
    if not params.with_commits:
        args.append('--simplify-by-decoration')
    if params.all_branches:
        args.append('--all')
    elif params.branch:
        args.append(params.branch)
    return args


@click.command('tags')
@click.argument('count', type=int, default=10, required=False)
@add_common_options('path', 'json')
@handle_errors
def tags_cmd(count, location, json_output):
    """List the newest COUNT version tags with their annotation."""
    tags = VersionService().tag_list(location, count)

    if json_output:
        for tag in tags:
            print(json.dumps({'name': tag.name, 'message': tag.message}))
        return

    if not tags:
        console.print("[yellow]No tags found[/yellow]")
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold magenta")
    table.add_column("Tag", style="cyan", no_wrap=True)
    table.add_column("Message")
    for tag in tags:
        table.add_row(tag.name, tag.message)
    console.print(table)


@click.command('log')
@click.argument('count', type=int, required=False)
@click.option('--branch', '-b', help='Branch to show instead of HEAD')
@add_common_options('path')
@handle_errors
def log_cmd(count, branch, location):
    """Concise colored log, clipped to the terminal width.

    COUNT defaults to log.default_count, or the terminal height when unset.
    """
    log_config = load_config().get('log', {})
    width, height = console.size
    count = count or log_config.get('default_count') or max(height - 2, 1)

    args = build_log_args(width - 2, count, TagParameters(branch=branch),
                          hash_width=log_config.get('hash_width', 9),
                          color=console.is_terminal)
    click.echo(GitClient().log(location, args))


@click.command('branchlog')
@click.option('--branch', '-b', help='Branch to summarize')
@click.option('--all', '-a', 'all_branches', is_flag=True, help='Summarize all branches')
@click.option('--with-commits', '-c', is_flag=True, help='Show every commit, not just decorated ones')
@add_common_options('path')
@handle_errors
def branchlog_cmd(branch, all_branches, with_commits, location):
    """Branch merge history as a graph."""
    params = TagParameters(branch=branch, all_branches=all_branches, with_commits=with_commits)
    args = build_branchlog_args(params)
    click.echo(GitClient().log(location, args))
