"""
Skip-worktree commands: tell git to ignore upstream and local changes to a
file (handy for machine-local config that is tracked upstream).
"""

import click

from ..cli_utils import add_common_options, handle_errors
from ..infra.git_client import GitClient


@click.command('skip')
@click.argument('file')
@add_common_options('path')
@handle_errors
def skip_cmd(file, location):
    """Start ignoring upstream and local changes to FILE."""
    GitClient().skip_worktree(location, file, skip=True)


@click.command('noskip')
@click.argument('file')
@add_common_options('path')
@handle_errors
def noskip_cmd(file, location):
    """Stop ignoring upstream and local changes to FILE."""
    GitClient().skip_worktree(location, file, skip=False)


@click.command('skiplist')
@add_common_options('path')
@handle_errors
def skiplist_cmd(location):
    """List files git is currently told to skip."""
    for file in GitClient().skiplist(location):
        click.echo(file)
