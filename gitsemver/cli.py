#!/usr/bin/env python3

import click

from gitsemver.commands.sync import sync_cmd, sync_notag_cmd
from gitsemver.commands.version import (
    version_cmd,
    next_cmd,
    adjusted_version_cmd,
    update_version_cmd,
)
from gitsemver.commands.log import tags_cmd, log_cmd, branchlog_cmd
from gitsemver.commands.skip import skip_cmd, noskip_cmd, skiplist_cmd


@click.group()
@click.version_option(package_name='gitsemver')
def cli():
    """gsv - Automatic semantic-version tagging for git repositories.

    Tag every push with a semantic version. Use --major for breaking
    changes and --minor for new features; everything else is a patch.

    \b
    The flow behind `gsv sync`:
        stash, pull --rebase, pop, stamp, commit, tag, push
    """
    pass


# Sync
cli.add_command(sync_cmd)
cli.add_command(sync_notag_cmd)

# Versions and manifests
cli.add_command(version_cmd)
cli.add_command(next_cmd)
cli.add_command(adjusted_version_cmd)
cli.add_command(update_version_cmd)

# History views
cli.add_command(tags_cmd)
cli.add_command(log_cmd)
cli.add_command(branchlog_cmd)

# Skip-worktree
cli.add_command(skip_cmd)
cli.add_command(noskip_cmd)
cli.add_command(skiplist_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
