"""
Sync commands for gitsemver.

`gsv sync` publishes whatever is in the working tree as the next semantic
version: stash, pull --rebase, pop, stamp, commit, tag, push.
"""

import json
import sys

import click
from rich.console import Console

from ..cli_utils import add_common_options, handle_errors
from ..config import load_config
from ..domain.sync import TagParameters
from ..exit_codes import GENERAL_ERROR, SYNC_OK, CommandError
from ..infra.git_client import GitClient, run_shell
from ..services.sync_service import SyncService
from ..version_manager import make_stamp_callback

console = Console()


def _run_sync(location, params, stamp, publish, json_output, project_type=None):
    config = load_config()
    git = GitClient()

    stamp_callback = None
    if stamp:
        manifest_config = config.get('manifest', {})
        stamp_callback = make_stamp_callback(
            location,
            project_type or manifest_config.get('type', 'node'),
            manifest_config.get('post_stamp_command') or None
        )

    publish_command = config.get('publish', {}).get('command')
    if publish and not publish_command:
        raise click.UsageError("--publish needs publish.command in the configuration")

    # Publishing only makes sense when this sync carried local work
    had_local_changes = publish and git.has_local_changes(location)

    service = SyncService(config=config, git_client=git)
    code = service.run(location, params, stamp_callback)
    result = service.last_result

    if json_output:
        print(json.dumps(result.to_dict()))
    elif result.tagged_version:
        console.print(f"[green]Tagged {result.tagged_version}[/green]")

    if code != SYNC_OK:
        sys.exit(GENERAL_ERROR)

    if had_local_changes:
        _, returncode = run_shell(publish_command, cwd=location)
        if returncode != 0:
            raise CommandError(f"Publish command failed with exit code {returncode}")


@click.command('sync')
@click.option('--major', '-j', is_flag=True, help='Tag a new major version')
@click.option('--minor', '-n', is_flag=True, help='Tag a new minor version')
@click.option('--pull-only', '-p', is_flag=True, help='Only integrate remote changes')
@click.option('--notag', is_flag=True, help='Commit and push without tagging')
@click.option('--stamp', is_flag=True, help='Stamp the version into the package manifest')
@click.option('--publish', is_flag=True, help='Run publish.command after a sync with local changes')
@add_common_options('path', 'project_type', 'json')
@click.argument('message', nargs=-1)
@handle_errors
def sync_cmd(major, minor, pull_only, notag, stamp, publish, location,
             project_type, json_output, message):
    """Commit, tag and push the working tree as the next version.

    MESSAGE words are joined into the commit and tag message. Patch is
    the default bump; quote words containing shell characters.

    Examples:

    \b
        gsv sync fix off-by-one in paging
        gsv sync --minor add CSV export
        gsv sync --stamp --publish release notes
        gsv sync -p
    """
    if major and minor:
        raise click.UsageError("--major and --minor are mutually exclusive")

    params = TagParameters.from_flags(major=major, minor=minor, words=message,
                                      pull_only=pull_only)
    if notag:
        params = params.without_tag()

    _run_sync(location, params, stamp, publish, json_output, project_type)


@click.command('sync-notag')
@add_common_options('path', 'json')
@click.argument('message', nargs=-1)
@handle_errors
def sync_notag_cmd(location, json_output, message):
    """Commit and push without a version tag.

    Bad form perhaps, but up to you; consider `gsv sync` instead.
    """
    params = TagParameters.from_flags(words=message).without_tag()
    _run_sync(location, params, stamp=False, publish=False, json_output=json_output)
