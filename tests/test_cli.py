"""
Tests for the gsv command line.

Services are patched out; these tests check option parsing, exit codes
and output.
"""

import json
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from gitsemver.cli import cli
from gitsemver.commands.log import build_branchlog_args, build_log_args
from gitsemver.config import get_default_config
from gitsemver.domain import (
    BumpKind, SemanticVersion, SyncResult, SyncState, TagParameters, UNKNOWN,
)
from gitsemver.exit_codes import GENERAL_ERROR, MANIFEST_ERROR, VERSION_ERROR
from gitsemver.infra.git_client import GitTag


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sync_mocks():
    """Patch everything `gsv sync` touches outside the command module."""
    with patch('gitsemver.commands.sync.load_config') as mock_config, \
         patch('gitsemver.commands.sync.GitClient') as mock_git_cls, \
         patch('gitsemver.commands.sync.SyncService') as mock_service_cls, \
         patch('gitsemver.commands.sync.run_shell') as mock_shell:
        mock_config.return_value = get_default_config()
        service = mock_service_cls.return_value
        service.run.return_value = 0
        service.last_result = SyncResult(".", SyncState.NOOP)
        mock_shell.return_value = ("", 0)
        yield {
            'config': mock_config.return_value,
            'git': mock_git_cls.return_value,
            'service': service,
            'shell': mock_shell,
        }


def run_params(service):
    return service.run.call_args[0][1]


class TestCliGroup:

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        for name in ('sync', 'sync-notag', 'version', 'next', 'adjusted-version',
                     'update-version', 'tags', 'log', 'branchlog', 'skip', 'noskip',
                     'skiplist'):
            assert name in result.output


class TestSyncCommand:

    def test_default_patch(self, runner, sync_mocks):
        result = runner.invoke(cli, ['sync', 'fix', 'the', 'thing'])

        assert result.exit_code == 0
        params = run_params(sync_mocks['service'])
        assert params.bump is BumpKind.PATCH
        assert params.comment == "fix the thing"
        assert not params.notag

    def test_minor(self, runner, sync_mocks):
        result = runner.invoke(cli, ['sync', '--minor', 'add', 'export'])

        assert result.exit_code == 0
        assert run_params(sync_mocks['service']).bump is BumpKind.MINOR

    def test_short_flags(self, runner, sync_mocks):
        result = runner.invoke(cli, ['sync', '-j', '-p'])

        assert result.exit_code == 0
        params = run_params(sync_mocks['service'])
        assert params.bump is BumpKind.MAJOR
        assert params.pull_only

    def test_major_and_minor_rejected(self, runner, sync_mocks):
        result = runner.invoke(cli, ['sync', '--major', '--minor', 'msg'])

        assert result.exit_code == 2
        sync_mocks['service'].run.assert_not_called()

    def test_notag(self, runner, sync_mocks):
        result = runner.invoke(cli, ['sync', '--notag', 'wip'])

        assert result.exit_code == 0
        assert run_params(sync_mocks['service']).notag

    def test_sync_notag_command(self, runner, sync_mocks):
        result = runner.invoke(cli, ['sync-notag', 'wip'])

        assert result.exit_code == 0
        params = run_params(sync_mocks['service'])
        assert params.notag
        assert params.comment == "wip"

    def test_failure_exit_code(self, runner, sync_mocks):
        sync_mocks['service'].run.return_value = -1
        sync_mocks['service'].last_result = SyncResult(".", SyncState.FAILED, error="boom")

        result = runner.invoke(cli, ['sync', 'msg'])

        assert result.exit_code == GENERAL_ERROR

    def test_reports_tag(self, runner, sync_mocks):
        sync_mocks['service'].last_result = SyncResult(".", SyncState.PUSHED, tagged_version="1.0.1")

        result = runner.invoke(cli, ['sync', 'msg'])

        assert "Tagged 1.0.1" in result.output

    def test_json_output(self, runner, sync_mocks):
        sync_mocks['service'].last_result = SyncResult(
            ".", SyncState.PUSHED, tagged_version="1.0.1", steps=['commit', 'tag', 'push']
        )

        result = runner.invoke(cli, ['sync', '--json', 'msg'])

        data = json.loads(result.output.strip().splitlines()[-1])
        assert data['state'] == 'pushed'
        assert data['tagged_version'] == '1.0.1'

    def test_no_callback_without_stamp(self, runner, sync_mocks):
        runner.invoke(cli, ['sync', 'msg'])
        assert sync_mocks['service'].run.call_args[0][2] is None

    @patch('gitsemver.commands.sync.make_stamp_callback')
    def test_stamp_uses_type_option(self, mock_make, runner, sync_mocks):
        result = runner.invoke(cli, ['sync', '--stamp', '-t', 'python', 'msg'])

        assert result.exit_code == 0
        mock_make.assert_called_once_with('.', 'python', None)
        assert sync_mocks['service'].run.call_args[0][2] is mock_make.return_value

    @patch('gitsemver.commands.sync.make_stamp_callback')
    def test_stamp_uses_config(self, mock_make, runner, sync_mocks):
        sync_mocks['config']['manifest'] = {'type': 'rust', 'post_stamp_command': 'cargo check'}

        runner.invoke(cli, ['sync', '--stamp', 'msg'])

        mock_make.assert_called_once_with('.', 'rust', 'cargo check')

    def test_publish_requires_command(self, runner, sync_mocks):
        result = runner.invoke(cli, ['sync', '--publish', 'msg'])

        assert result.exit_code == 2
        sync_mocks['service'].run.assert_not_called()

    def test_publish_after_local_changes(self, runner, sync_mocks):
        sync_mocks['config']['publish']['command'] = 'npm publish'
        sync_mocks['git'].has_local_changes.return_value = True

        result = runner.invoke(cli, ['sync', '--publish', 'msg'])

        assert result.exit_code == 0
        sync_mocks['shell'].assert_called_once_with('npm publish', cwd='.')

    def test_publish_skipped_without_local_changes(self, runner, sync_mocks):
        sync_mocks['config']['publish']['command'] = 'npm publish'
        sync_mocks['git'].has_local_changes.return_value = False

        runner.invoke(cli, ['sync', '--publish', 'msg'])

        sync_mocks['shell'].assert_not_called()

    def test_publish_failure(self, runner, sync_mocks):
        sync_mocks['config']['publish']['command'] = 'npm publish'
        sync_mocks['git'].has_local_changes.return_value = True
        sync_mocks['shell'].return_value = ("", 1)

        result = runner.invoke(cli, ['sync', '--publish', 'msg'])

        assert result.exit_code == GENERAL_ERROR

    def test_publish_skipped_when_sync_fails(self, runner, sync_mocks):
        sync_mocks['config']['publish']['command'] = 'npm publish'
        sync_mocks['git'].has_local_changes.return_value = True
        sync_mocks['service'].run.return_value = -1

        runner.invoke(cli, ['sync', '--publish', 'msg'])

        sync_mocks['shell'].assert_not_called()


class TestVersionCommands:

    @patch('gitsemver.commands.version.VersionService')
    def test_version(self, mock_service_cls, runner):
        mock_service_cls.return_value.current_version.return_value = "1.2.3-4-gabcdef"

        result = runner.invoke(cli, ['version'])

        assert result.exit_code == 0
        assert result.output.strip() == "1.2.3-4-gabcdef"

    @patch('gitsemver.commands.version.VersionService')
    def test_version_clean(self, mock_service_cls, runner):
        mock_service_cls.return_value.clean_version.return_value = "1.2.3"

        result = runner.invoke(cli, ['version', '--clean'])

        assert result.output.strip() == "1.2.3"

    @patch('gitsemver.commands.version.VersionService')
    def test_version_unknown(self, mock_service_cls, runner):
        mock_service_cls.return_value.current_version.return_value = UNKNOWN

        result = runner.invoke(cli, ['version'])

        assert result.exit_code == VERSION_ERROR

    @patch('gitsemver.commands.version.VersionService')
    def test_next_defaults_to_patch(self, mock_service_cls, runner):
        service = mock_service_cls.return_value
        service.next_version.return_value = SemanticVersion(1, 2, 4)

        result = runner.invoke(cli, ['next'])

        assert result.output.strip() == "1.2.4"
        service.next_version.assert_called_once_with('.', 'patch')

    @patch('gitsemver.commands.version.VersionService')
    def test_next_build(self, mock_service_cls, runner):
        mock_service_cls.return_value.next_build.return_value = SemanticVersion(1, 2, 3, distance=5)

        result = runner.invoke(cli, ['next', 'build'])

        assert result.output.strip() == "1.2.3-5"

    def test_next_rejects_unknown_kind(self, runner):
        result = runner.invoke(cli, ['next', 'huge'])
        assert result.exit_code == 2

    def test_adjusted_version(self, runner):
        with runner.isolated_filesystem():
            with open('package.json', 'w') as f:
                f.write('{"version": "2.0.0"}')

            result = runner.invoke(cli, ['adjusted-version', '-t', 'node', '1.2.4'])

        assert result.exit_code == 0
        assert result.output.strip() == "2.0.1"

    def test_adjusted_version_without_manifest(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ['adjusted-version', '-t', 'node', '1.2.4'])

        assert result.exit_code == MANIFEST_ERROR

    def test_update_version(self, runner):
        with runner.isolated_filesystem():
            with open('package.json', 'w') as f:
                f.write('{\n  "version": "1.0.0"\n}\n')

            result = runner.invoke(cli, ['update-version', '-t', 'node', '1.0.1'])

            assert result.exit_code == 0
            with open('package.json') as f:
                assert f.read() == '{\n  "version": "1.0.1"\n}\n'


class TestHistoryCommands:

    @patch('gitsemver.commands.log.VersionService')
    def test_tags_json(self, mock_service_cls, runner):
        mock_service_cls.return_value.tag_list.return_value = [
            GitTag("1.1.0", "add export"),
            GitTag("1.0.0", "first"),
        ]

        result = runner.invoke(cli, ['tags', '--json', '5'])

        lines = [json.loads(line) for line in result.output.strip().splitlines()]
        assert lines[0] == {'name': '1.1.0', 'message': 'add export'}
        mock_service_cls.return_value.tag_list.assert_called_once_with('.', 5)

    @patch('gitsemver.commands.log.VersionService')
    def test_tags_default_count(self, mock_service_cls, runner):
        mock_service_cls.return_value.tag_list.return_value = []

        result = runner.invoke(cli, ['tags'])

        assert result.exit_code == 0
        mock_service_cls.return_value.tag_list.assert_called_once_with('.', 10)

    @patch('gitsemver.commands.log.load_config')
    @patch('gitsemver.commands.log.GitClient')
    def test_log_count(self, mock_git_cls, mock_config, runner):
        mock_config.return_value = get_default_config()
        mock_git_cls.return_value.log.return_value = "abc123 fix"

        result = runner.invoke(cli, ['log', '5'])

        assert result.exit_code == 0
        args = mock_git_cls.return_value.log.call_args[0][1]
        assert '-5' in args
        assert '--date=relative' in args

    @patch('gitsemver.commands.log.GitClient')
    def test_branchlog_all(self, mock_git_cls, runner):
        mock_git_cls.return_value.log.return_value = ""

        runner.invoke(cli, ['branchlog', '--all'])

        args = mock_git_cls.return_value.log.call_args[0][1]
        assert args == ['--graph', '--oneline', '--simplify-by-decoration', '--all']

    @patch('gitsemver.commands.log.GitClient')
    def test_branchlog_branch_with_commits(self, mock_git_cls, runner):
        mock_git_cls.return_value.log.return_value = ""

        runner.invoke(cli, ['branchlog', '-b', 'feature', '--with-commits'])

        args = mock_git_cls.return_value.log.call_args[0][1]
        assert args == ['--graph', '--oneline', 'feature']

    @patch('gitsemver.commands.log.load_config')
    @patch('gitsemver.commands.log.GitClient')
    def test_log_branch(self, mock_git_cls, mock_config, runner):
        mock_config.return_value = get_default_config()
        mock_git_cls.return_value.log.return_value = ""

        result = runner.invoke(cli, ['log', '-b', 'develop', '3'])

        assert result.exit_code == 0
        args = mock_git_cls.return_value.log.call_args[0][1]
        assert 'develop' in args
        assert args.index('develop') < args.index('-3')

    @patch('gitsemver.commands.skip.GitClient')
    def test_skip_and_noskip(self, mock_git_cls, runner):
        runner.invoke(cli, ['skip', 'local.cfg'])
        runner.invoke(cli, ['noskip', 'local.cfg'])

        git = mock_git_cls.return_value
        git.skip_worktree.assert_any_call('.', 'local.cfg', skip=True)
        git.skip_worktree.assert_any_call('.', 'local.cfg', skip=False)

    @patch('gitsemver.commands.skip.GitClient')
    def test_skiplist(self, mock_git_cls, runner):
        mock_git_cls.return_value.skiplist.return_value = ['local.cfg', 'secrets.env']

        result = runner.invoke(cli, ['skiplist'])

        assert result.output.splitlines() == ['local.cfg', 'secrets.env']


class TestLogArgs:

    def test_wide_layout(self):
        args = build_log_args(100, 20)
        pretty = next(a for a in args if a.startswith('--pretty='))
        assert '%<(35,trunc)%s' in pretty
        assert '%>(28,trunc)%an' in pretty
        assert args[-1] == '-20'

    def test_narrow_layout(self):
        pretty = next(a for a in build_log_args(60, 5) if a.startswith('--pretty='))
        assert '%<(30,trunc)%s' in pretty
        assert '%>(6,trunc)%an' in pretty

    def test_branch_and_color(self):
        args = build_log_args(100, 5, TagParameters(branch='develop'), color=True)
        assert args[:2] == ['--color=always', 'develop']

    def test_too_narrow(self):
        with pytest.raises(click.UsageError):
            build_log_args(20, 5)

    def test_branchlog_args(self):
        assert build_branchlog_args(TagParameters()) == ['--graph', '--oneline', '--simplify-by-decoration']
        assert build_branchlog_args(TagParameters(branch='main', with_commits=True)) == \
            ['--graph', '--oneline', 'main']
        assert build_branchlog_args(TagParameters(branch='main', all_branches=True))[-1] == '--all'

    def test_no_params_logs_head(self):
        args = build_log_args(100, 5)
        assert args[0].startswith('--pretty=')
