"""
Version query commands for gitsemver.

Print the current `git describe` version, the next version for a bump
kind, or the manifest-adjusted version, and stamp a version into the
manifest by hand.
"""

import click

from ..cli_utils import add_common_options, handle_errors
from ..config import load_config
from ..domain.version import UNKNOWN
from ..exit_codes import VersionError
from ..services.version_service import VersionService
from ..version_manager import get_adjusted_version, write_manifest_version


def _project_type(project_type):
    return project_type or load_config().get('manifest', {}).get('type', 'node')


@click.command('version')
@click.option('--clean', is_flag=True, help='Strip to MAJOR.MINOR.PATCH')
@add_common_options('path')
@handle_errors
def version_cmd(clean, location):
    """Show the current version from `git describe`.

    Creates the initial version tag when the repository has none.
    """
    service = VersionService()
    version = service.clean_version(location) if clean else service.current_version(location)
    if version is UNKNOWN:
        raise VersionError("No semantic version could be determined")
    click.echo(version)


@click.command('next')
@click.argument('kind', type=click.Choice(['major', 'minor', 'patch', 'build']),
                default='patch', required=False)
@add_common_options('path')
@handle_errors
def next_cmd(kind, location):
    """Show what the next KIND version would be (default: patch)."""
    service = VersionService()
    if kind == 'build':
        version = service.next_build(location)
    else:
        version = service.next_version(location, kind)
    if version is UNKNOWN:
        raise VersionError(f"Can't determine 'next' {kind} version of current tag")
    click.echo(str(version))


@click.command('adjusted-version')
@click.argument('version')
@add_common_options('path', 'project_type')
@handle_errors
def adjusted_version_cmd(version, location, project_type):
    """Show VERSION bumped past the manifest version if needed.

    Prints VERSION unchanged when the manifest declares something older,
    otherwise the manifest version with its patch bumped.
    """
    click.echo(get_adjusted_version(location, version, _project_type(project_type)))


@click.command('update-version')
@click.argument('version')
@add_common_options('path', 'project_type')
@handle_errors
def update_version_cmd(version, location, project_type):
    """Stamp VERSION into the package manifest."""
    project_type = _project_type(project_type)
    click.echo(f"Stamping version [{version}] into {project_type} manifest...", err=True)
    for path in write_manifest_version(location, project_type, version):
        click.echo(f"  updated {path}", err=True)
