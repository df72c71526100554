"""
Manifest version management for different package types.

Reads and rewrites the version declared in:
- Node.js (semver): package.json
- Python: pyproject.toml, setup.py, __version__
- Rust (semver): Cargo.toml

Writes replace only the version literal; every other byte of the file is
preserved. Also hosts the reconciler that keeps a stamped version from
regressing below a hand-edited manifest version.
"""

import re
import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import toml

from .domain.sync import StampCallback
from .domain.version import SemanticVersion, UNKNOWN
from .exit_codes import CommandError, ManifestError, VersionError
from .infra.git_client import run_shell

logger = logging.getLogger(__name__)


def _read_text(path: Path) -> str:
    # Bytes in, bytes out: keeps line endings untouched
    return path.read_bytes().decode('utf-8')


def _write_text(path: Path, text: str) -> None:
    path.write_bytes(text.encode('utf-8'))


def _replace_in_section(text: str, header: str, old: str, new: str) -> str:
    """Replace `version = "old"` inside the TOML table `[header]` only."""
    match = re.search(rf'^\[{re.escape(header)}\][ \t]*$', text, re.MULTILINE)
    if not match:
        return text
    start = match.end()
    next_table = re.search(r'^\[', text[start:], re.MULTILINE)
    end = start + next_table.start() if next_table else len(text)

    section = re.sub(
        rf'(^[ \t]*version[ \t]*=[ \t]*["\']){re.escape(old)}(["\'])',
        lambda m: f"{m.group(1)}{new}{m.group(2)}",
        text[start:end],
        count=1,
        flags=re.MULTILINE
    )
    return text[:start] + section + text[end:]


class NodeVersionManager:
    """Manage Node.js package versions."""

    @staticmethod
    def manifest_files(repo: Path) -> List[Path]:
        package_json = repo / "package.json"
        return [package_json] if package_json.exists() else []

    @staticmethod
    def extract(path: Path, text: str) -> Optional[str]:
        data = json.loads(text)
        version = data.get('version') if isinstance(data, dict) else None
        return version if isinstance(version, str) else None

    @staticmethod
    def substitute(path: Path, text: str, old: str, new: str) -> str:
        # Nested objects may carry their own "version"; only the top-level one changes
        expected = dict(json.loads(text), version=new)
        for match in re.finditer(rf'"version"\s*:\s*"({re.escape(old)})"', text):
            candidate = text[:match.start(1)] + new + text[match.end(1):]
            if json.loads(candidate) == expected:
                return candidate
        return text


class PythonVersionManager:
    """Manage Python package versions."""

    @staticmethod
    def manifest_files(repo: Path) -> List[Path]:
        files = [p for p in (repo / "pyproject.toml", repo / "setup.py") if p.exists()]
        files.extend(sorted(repo.glob("*/__init__.py")))
        return files

    @staticmethod
    def extract(path: Path, text: str) -> Optional[str]:
        if path.name == "pyproject.toml":
            data = toml.loads(text)
            if 'version' in data.get('project', {}):
                return data['project']['version']
            return data.get('tool', {}).get('poetry', {}).get('version')

        if path.name == "setup.py":
            match = re.search(r'\bversion\s*=\s*["\']([^"\']+)["\']', text)
        else:
            match = re.search(r'\b__version__\s*=\s*["\']([^"\']+)["\']', text)
        return match.group(1) if match else None

    @staticmethod
    def substitute(path: Path, text: str, old: str, new: str) -> str:
        if path.name == "pyproject.toml":
            updated = _replace_in_section(text, "project", old, new)
            if updated == text:
                updated = _replace_in_section(text, "tool.poetry", old, new)
            return updated

        key = r'\bversion' if path.name == "setup.py" else r'\b__version__'
        return re.sub(
            rf'({key}\s*=\s*["\']){re.escape(old)}(["\'])',
            lambda m: f"{m.group(1)}{new}{m.group(2)}",
            text,
            count=1
        )


class RustVersionManager:
    """Manage Rust crate versions."""

    @staticmethod
    def manifest_files(repo: Path) -> List[Path]:
        cargo_toml = repo / "Cargo.toml"
        return [cargo_toml] if cargo_toml.exists() else []

    @staticmethod
    def extract(path: Path, text: str) -> Optional[str]:
        return toml.loads(text).get('package', {}).get('version')

    @staticmethod
    def substitute(path: Path, text: str, old: str, new: str) -> str:
        return _replace_in_section(text, "package", old, new)


# Version manager registry
VERSION_MANAGERS = {
    'node': NodeVersionManager,
    'python': PythonVersionManager,
    'rust': RustVersionManager,
}


def _manager(project_type: str):
    manager = VERSION_MANAGERS.get(project_type)
    if manager is None:
        raise ManifestError(
            f"Unsupported project type '{project_type}' "
            f"(expected one of: {', '.join(VERSION_MANAGERS)})"
        )
    return manager


def read_manifest_version(repo_path: str, project_type: str = 'node') -> str:
    """
    Read the declared version of the project at `repo_path`.

    Args:
        repo_path: Path to repository
        project_type: Key into VERSION_MANAGERS

    Returns:
        The version string exactly as declared

    Raises:
        ManifestError: no manifest, unreadable manifest, or no parsable version
    """
    manager = _manager(project_type)
    files = manager.manifest_files(Path(repo_path).expanduser())
    if not files:
        raise ManifestError(f"No {project_type} manifest found in {repo_path}")

    for path in files:
        try:
            version = manager.extract(path, _read_text(path))
        except (OSError, ValueError) as e:
            raise ManifestError(f"{path.name} could not be read: {e}", filename=str(path)) from e
        if version:
            break
    else:
        raise ManifestError(f"{files[0].name} has no version field", filename=str(files[0]))

    if SemanticVersion.parse(version) is UNKNOWN:
        raise ManifestError(
            f"{path.name} declares version '{version}', which is not MAJOR.MINOR.PATCH",
            filename=str(path)
        )
    return version


def write_manifest_version(repo_path: str, project_type: str, new_version: str) -> List[Path]:
    """
    Overwrite the version literal in every manifest file that declares one.

    Returns:
        Files actually rewritten (empty when they already carried new_version)

    Raises:
        ManifestError: no file declares a version, or a file cannot be updated
    """
    manager = _manager(project_type)
    written = []
    found = False

    for path in manager.manifest_files(Path(repo_path).expanduser()):
        try:
            text = _read_text(path)
            old = manager.extract(path, text)
            if not old:
                continue
            found = True
            new_text = manager.substitute(path, text, old, new_version)
            if manager.extract(path, new_text) != new_version:
                raise ManifestError(
                    f"{path.name}: could not rewrite version '{old}' to '{new_version}'",
                    filename=str(path)
                )
            if new_text != text:
                _write_text(path, new_text)
                written.append(path)
        except (OSError, ValueError) as e:
            raise ManifestError(f"{path.name} could not be updated: {e}", filename=str(path)) from e

    if not found:
        raise ManifestError(f"No {project_type} manifest with a version field in {repo_path}")
    return written


def reconcile_version(candidate: Union[str, SemanticVersion], manifest_version: str) -> str:
    """
    Pick the version that is safe to stamp.

    If the manifest already declares the candidate or something newer (a
    manual bump), the manifest's patch is bumped instead, so the stamped
    version never goes backwards. Otherwise the candidate is returned as is.

    Examples:
        reconcile_version("1.2.4", "1.2.3") -> "1.2.4"
        reconcile_version("1.2.4", "1.2.4") -> "1.2.5"
        reconcile_version("1.2.4", "3.0.0") -> "3.0.1"

    Raises:
        VersionError: candidate is not a version
        ManifestError: manifest_version is missing or not a version
    """
    proposed = SemanticVersion.parse(str(candidate))
    if proposed is UNKNOWN:
        raise VersionError(f"Cannot reconcile '{candidate}': not a semantic version")

    declared = SemanticVersion.parse(manifest_version)
    if declared is UNKNOWN:
        raise ManifestError(f"Manifest version '{manifest_version}' is not a semantic version")

    if declared.triple >= proposed.triple:
        return str(declared.bump_patch())
    return str(candidate)


def get_adjusted_version(repo_path: str, candidate: str, project_type: str = 'node') -> str:
    """Reconcile `candidate` against the version the project's manifest declares."""
    return reconcile_version(candidate, read_manifest_version(repo_path, project_type))


def make_stamp_callback(
    repo_path: str,
    project_type: str = 'node',
    post_stamp_command: Optional[str] = None
) -> StampCallback:
    """
    Build a sync stamp callback that writes the version into the manifest.

    The callback reconciles the proposed version against the manifest,
    writes the result, runs `post_stamp_command` (e.g. "npm update") if
    given, and returns the version that should be tagged.
    """
    def stamp(err: Optional[Exception], version: str) -> str:
        if err:
            raise err

        adjusted = get_adjusted_version(repo_path, version, project_type)
        if adjusted != version:
            logger.info(f"Manifest is already at or past {version}, using {adjusted}")

        logger.info(f"Stamping version [{adjusted}] into {project_type} manifest...")
        write_manifest_version(repo_path, project_type, adjusted)

        if post_stamp_command:
            _, returncode = run_shell(post_stamp_command, cwd=repo_path)
            if returncode != 0:
                raise CommandError(
                    f"Post-stamp command '{post_stamp_command}' failed with exit code {returncode}"
                )
        return adjusted

    return stamp
