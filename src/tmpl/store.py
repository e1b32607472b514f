"""Template store.

CONTRACT
- Inputs: store directory (threaded in from Settings), template names, paths, tags
- Outputs (required):
  - save/make/delete/add_tags/remove_tags return an Outcome
  - list_templates returns TemplateEntry objects in directory iteration order
- Invariants:
  - save never overwrites an existing template
  - make never writes into an existing destination
  - Tags are de-duplicated and checked before anything is written
  - make skips the `.meta` sidecar at the template root only; nested `.meta`
    files are payload and are copied
  - Targets are claimed with one exclusive mkdir before any copying
  - The store directory is created lazily by save
  - delete unlinks a symlinked template instead of following it
- Failure:
  - Precondition violations come back as Outcome values, never exceptions
  - OSError during mutation is re-raised as StoreError; partially copied
    trees are left in place
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from loguru import logger

from .meta import META_FILENAME, read_tags, write_tags
from .schemas import TemplateEntry
from .util.names import is_valid_template_name, validate_template_name
from .util.paths import ensure_dir, is_within
from .util.tags import is_valid_tag, unique


class StoreError(RuntimeError):
    pass


class OutcomeKind(str, Enum):
    SAVED = "saved"
    CREATED = "created"
    DELETED = "deleted"
    TAGS_UPDATED = "tags_updated"
    NAME_EXISTS = "name_exists"
    NOT_FOUND = "not_found"
    DEST_EXISTS = "dest_exists"
    STORE_MISSING = "store_missing"
    SOURCE_MISSING = "source_missing"
    SOURCE_CONTAINS_STORE = "source_contains_store"
    INVALID_TAGS = "invalid_tags"


def _invalid_tags(tags) -> tuple[str, ...]:
    return tuple(t for t in tags if not is_valid_tag(t))


_SUCCESS = {
    OutcomeKind.SAVED,
    OutcomeKind.CREATED,
    OutcomeKind.DELETED,
    OutcomeKind.TAGS_UPDATED,
}


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    name: str
    path: Path | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.kind in _SUCCESS


@dataclass(frozen=True)
class TemplateStore:
    root: Path

    def exists(self) -> bool:
        return self.root.is_dir()

    def template_path(self, name: str) -> Path:
        return self.root / validate_template_name(name)

    def tags(self, name: str) -> list[str]:
        return read_tags(self.template_path(name))

    def save(self, name: str, source: Path, tags: Sequence[str]) -> Outcome:
        target = self.template_path(name)
        tags = unique(tags)
        if bad := _invalid_tags(tags):
            return Outcome(OutcomeKind.INVALID_TAGS, name, target, bad)
        if target.exists():
            return Outcome(OutcomeKind.NAME_EXISTS, name, target)
        if not source.is_dir():
            return Outcome(OutcomeKind.SOURCE_MISSING, name, source)
        if is_within(self.root, source):
            return Outcome(OutcomeKind.SOURCE_CONTAINS_STORE, name, source)

        try:
            ensure_dir(self.root)
            target.mkdir()
        except FileExistsError:
            return Outcome(OutcomeKind.NAME_EXISTS, name, target)
        except OSError as exc:
            raise StoreError(f"Cannot create template directory {target}: {exc}") from exc

        logger.debug(f"Copying {source} -> {target}")
        try:
            shutil.copytree(source, target, dirs_exist_ok=True)
            if tags:
                write_tags(target, tags)
        except OSError as exc:
            raise StoreError(f"Failed to save template {name!r}: {exc}") from exc

        logger.info(f"Saved template {name} from {source}")
        return Outcome(OutcomeKind.SAVED, name, target, tuple(tags))

    def make(self, name: str, destination: Path, cwd: Path | None = None) -> Outcome:
        if not self.exists():
            return Outcome(OutcomeKind.STORE_MISSING, name, self.root)
        template = self.template_path(name)
        if not template.is_dir():
            return Outcome(OutcomeKind.NOT_FOUND, name, template)
        if not destination.is_absolute():
            destination = (cwd or Path.cwd()) / destination
        if destination.exists() or destination.is_symlink():
            return Outcome(OutcomeKind.DEST_EXISTS, name, destination)

        try:
            destination.mkdir(parents=True)
        except FileExistsError:
            return Outcome(OutcomeKind.DEST_EXISTS, name, destination)
        except OSError as exc:
            raise StoreError(f"Cannot create destination {destination}: {exc}") from exc

        root_dir = os.fspath(template)

        def _skip_sidecar(directory: str, names: list[str]) -> set[str]:
            # copytree hands the root back exactly as it was passed in.
            if directory == root_dir and META_FILENAME in names:
                return {META_FILENAME}
            return set()

        logger.debug(f"Copying {template} -> {destination}")
        try:
            shutil.copytree(template, destination, ignore=_skip_sidecar, dirs_exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Failed to create project from {name!r}: {exc}") from exc

        logger.info(f"Created {destination} from template {name}")
        return Outcome(OutcomeKind.CREATED, name, destination)

    def list_templates(self, filter_tags: Sequence[str] = ()) -> list[TemplateEntry]:
        if not self.exists():
            return []
        wanted = list(filter_tags)
        entries: list[TemplateEntry] = []
        with os.scandir(self.root) as it:
            for entry in it:
                if not entry.is_dir() or not is_valid_template_name(entry.name):
                    continue
                item = TemplateEntry(
                    name=entry.name,
                    path=entry.path,
                    tags=read_tags(Path(entry.path)),
                )
                if item.matches(wanted):
                    entries.append(item)
        return entries

    def delete(self, name: str) -> Outcome:
        template = self.template_path(name)
        if not template.is_dir():
            return Outcome(OutcomeKind.NOT_FOUND, name, template)
        try:
            if template.is_symlink():
                template.unlink()
            else:
                shutil.rmtree(template)
        except OSError as exc:
            raise StoreError(f"Failed to delete template {name!r}: {exc}") from exc
        logger.info(f"Deleted template {name}")
        return Outcome(OutcomeKind.DELETED, name, template)

    def add_tags(self, name: str, tags: Sequence[str]) -> Outcome:
        return self._update_tags(name, tags, remove=False)

    def remove_tags(self, name: str, tags: Sequence[str]) -> Outcome:
        return self._update_tags(name, tags, remove=True)

    def _update_tags(self, name: str, tags: Sequence[str], *, remove: bool) -> Outcome:
        template = self.template_path(name)
        if not template.is_dir():
            return Outcome(OutcomeKind.NOT_FOUND, name, template)
        if not remove and (bad := _invalid_tags(tags)):
            return Outcome(OutcomeKind.INVALID_TAGS, name, template, bad)
        try:
            current = read_tags(template)
            if remove:
                dropped = set(tags)
                updated = unique(t for t in current if t not in dropped)
            else:
                updated = unique([*current, *tags])
            write_tags(template, updated)
        except OSError as exc:
            raise StoreError(f"Failed to update tags for {name!r}: {exc}") from exc
        logger.debug(f"Tags for {name}: {current} -> {updated}")
        return Outcome(OutcomeKind.TAGS_UPDATED, name, template, tuple(updated))
