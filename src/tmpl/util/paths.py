"""Path utilities.

CONTRACT
- Inputs: environment mapping, paths
- Outputs:
  - resolve_home() returns the user's home directory from the environment
  - store_path() returns <home>/.templates (never creates it)
  - ensure_dir() creates directory tree
  - is_within() tells whether a path lives under another
- Invariants:
  - POSIX: HOME
  - Windows: HOMEDRIVE + HOMEPATH, falling back to USERPROFILE
- Failure:
  - resolve_home raises HomeNotFoundError when no variable is set
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

STORE_DIRNAME = ".templates"


class HomeNotFoundError(RuntimeError):
    pass


def _is_windows() -> bool:
    return os.name == "nt"


def resolve_home(environ: Mapping[str, str], *, windows: bool | None = None) -> Path:
    if windows is None:
        windows = _is_windows()

    if windows:
        drive = environ.get("HOMEDRIVE", "")
        home_path = environ.get("HOMEPATH", "")
        if drive and home_path:
            return Path(drive + home_path)
        if profile := environ.get("USERPROFILE"):
            return Path(profile)
        raise HomeNotFoundError(
            "Cannot determine home directory: set HOMEDRIVE/HOMEPATH or USERPROFILE."
        )

    if home := environ.get("HOME"):
        return Path(home)
    raise HomeNotFoundError("Cannot determine home directory: HOME is not set.")


def store_path(environ: Mapping[str, str], *, windows: bool | None = None) -> Path:
    return resolve_home(environ, windows=windows) / STORE_DIRNAME


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def is_within(path: Path, parent: Path) -> bool:
    try:
        path.resolve(strict=False).relative_to(parent.resolve(strict=False))
    except ValueError:
        return False
    return True


if __name__ == "__main__":
    import sys

    try:
        print(store_path(os.environ))
    except HomeNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
