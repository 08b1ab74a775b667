"""
Dotenv support for Firebase credentials and learntrack overrides.

The Firestore remote is usually configured through a handful of variables
that developers keep in a ``.env`` file rather than their shell profile:

- ``FIREBASE_PROJECT_ID``: Firebase project to connect to
- ``FIRESTORE_EMULATOR_HOST``: ``host:port`` of a local emulator
- ``GOOGLE_APPLICATION_CREDENTIALS``: service account key file
- ``LEARNTRACK_*``: config overrides (see learntrack.core.config.loader)

Two kinds of file are read. A per-user file in the XDG config directory
holds credentials shared by every checkout; ``.env`` and ``.env.local`` in
the working directory hold per-project settings and win over the user
file. Variables already exported in the shell are never replaced.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

PROJECT_ENV_FILES = (".env", ".env.local")


def default_user_env_path() -> Path:
    """Return the per-user dotenv file, honouring XDG_CONFIG_HOME."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "learntrack" / ".env"


def default_project_env_paths(project_dir: Path) -> list[Path]:
    """Return the project dotenv files in increasing precedence."""
    return [project_dir / name for name in PROJECT_ENV_FILES]


def read_env_file(path: Path) -> dict[str, str]:
    """
    Parse one dotenv file.

    Missing files yield an empty mapping. Keys declared without a value
    (a bare ``FIRESTORE_EMULATOR_HOST`` line) are skipped.
    """
    if not path.is_file():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> set[str]:
    """
    Export dotenv values into ``os.environ``.

    Files are merged in order (user files first, then project files), so a
    later file overrides an earlier one. The merged result is then applied
    only to names the shell has not already set.

    Args:
        project_dir: Directory holding the project files (defaults to cwd)
        user_env_paths: Override for the per-user file list
        project_env_paths: Override for the project file list

    Returns:
        Names of the variables exported from files
    """
    if user_env_paths is None:
        user_env_paths = [default_user_env_path()]
    if project_env_paths is None:
        project_env_paths = default_project_env_paths(project_dir or Path.cwd())

    merged: dict[str, str] = {}
    for path in [*user_env_paths, *project_env_paths]:
        values = read_env_file(Path(path))
        if values:
            logger.debug("Read %d variable(s) from %s", len(values), path)
        merged.update(values)

    exported = {name for name in merged if name not in os.environ}
    for name in exported:
        os.environ[name] = merged[name]
    return exported
