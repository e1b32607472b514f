"""tmpl package.

Simple API for scripts:

    from pathlib import Path
    import tmpl

    store = tmpl.open_store()
    store.save("webapp", Path("./skeleton"), ["web", "api"])
    store.make("webapp", Path("./new-project"))
"""

import os
from typing import Optional

__version__ = "0.1.0"

from .config import Settings, load_settings  # noqa: E402
from .meta import read_tags, write_tags  # noqa: E402
from .store import Outcome, OutcomeKind, StoreError, TemplateStore  # noqa: E402
from .util.tags import parse_tags  # noqa: E402


def open_store(settings: Optional[Settings] = None) -> TemplateStore:
    """Return the TemplateStore for the current environment.

    Args:
        settings: Pre-resolved settings (resolved from os.environ if omitted)

    Raises:
        HomeNotFoundError: if no home directory can be determined
    """
    if settings is None:
        settings = load_settings(os.environ)
    return TemplateStore(settings.store_dir)


__all__ = [
    "Outcome",
    "OutcomeKind",
    "Settings",
    "StoreError",
    "TemplateStore",
    "load_settings",
    "open_store",
    "parse_tags",
    "read_tags",
    "write_tags",
]
