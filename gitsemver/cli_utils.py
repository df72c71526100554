"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps

from rich.console import Console

from .exit_codes import INTERRUPTED, CommandError

err_console = Console(stderr=True)


def handle_errors(func):
    """
    Decorator that provides standard error behavior:
    - CommandError: message on stderr, exit with its exit code
    - KeyboardInterrupt: exit with INTERRUPTED
    - Click exceptions pass through with their own exit code
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            err_console.print("[yellow]Interrupted by user[/yellow]")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            err_console.print(f"[red]Error:[/red] {e}", highlight=False)
            sys.exit(e.exit_code)

    return wrapper


# Standard options that many commands share
common_options = {
    'path': click.option('-C', '--path', 'location', default='.', show_default=True,
                         type=click.Path(exists=True, file_okay=False),
                         help='Repository to operate on'),
    'json': click.option('--json', 'json_output', is_flag=True,
                         help='Output as JSON'),
    'project_type': click.option('-t', '--type', 'project_type', default=None,
                                 help='Manifest type: node, python or rust '
                                      '(default: manifest.type from config)'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('path', 'json')
        def my_command(location, json_output):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            func = common_options[name](func)
        return func
    return decorator
