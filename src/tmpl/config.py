from __future__ import annotations

"""Runtime settings.

CONTRACT
- Inputs: process environment mapping, CLI flags
- Outputs (required):
  - Settings(store_dir)
- Invariants:
  - TMPL_STORE (non-empty) overrides the store directory outright
  - Otherwise store_dir is <home>/.templates
  - Resolved once per invocation; nothing is cached at module level
- Failure:
  - Raises HomeNotFoundError when neither TMPL_STORE nor a home variable is set
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .util.paths import store_path

STORE_ENV_VAR = "TMPL_STORE"


@dataclass(frozen=True)
class Settings:
    store_dir: Path


def load_settings(
    environ: Mapping[str, str],
    *,
    windows: bool | None = None,
) -> Settings:
    override = environ.get(STORE_ENV_VAR)
    if override:
        store_dir = Path(override)
    else:
        store_dir = store_path(environ, windows=windows)
    return Settings(store_dir=store_dir)
