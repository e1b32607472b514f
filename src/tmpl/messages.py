"""User-visible text and exit codes.

CONTRACT
- Inputs: Outcome / TemplateEntry values from the store
- Outputs (required):
  - render() -> fixed message for an Outcome
  - exit_code() -> process exit code for an Outcome
  - entry_line() -> `- <name>` or `- <name> [Tags: a, b]`
- Invariants:
  - Success outcomes exit 0, precondition failures exit EXIT_FAILURE
- Failure:
  - None (pure formatting)
"""

from __future__ import annotations

from .schemas import TemplateEntry
from .store import Outcome, OutcomeKind
from .util.tags import format_tags

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

HELP_TEXT = """\
Usage:
  save   \t\ttmpl save <template_name> <directory_to_save> [--tags <t1,t2>]
  make   \t\ttmpl make <template_name> <new_directory_name>
  list   \t\ttmpl list [--tags <t1,t2>] [--json]
  delete \t\ttmpl delete <template_name>
  tag    \t\ttmpl tag (add|remove) <template_name> <t1,t2>
  help   \t\ttmpl help
  version\t\ttmpl version"""

_TEMPLATES = {
    OutcomeKind.SAVED: "Template saved successfully!",
    OutcomeKind.CREATED: "Template created successfully!",
    OutcomeKind.DELETED: "Template deleted successfully!",
    OutcomeKind.NAME_EXISTS: "Template with that name already exists!",
    OutcomeKind.NOT_FOUND: "Template doesn't exist!",
    OutcomeKind.DEST_EXISTS: "Folder already exists with the name: {path}",
    OutcomeKind.STORE_MISSING: "No templates found in: {path}",
    OutcomeKind.SOURCE_MISSING: "Source directory doesn't exist: {path}",
    OutcomeKind.SOURCE_CONTAINS_STORE: "Refusing to save {path}: it contains the template store",
    OutcomeKind.INVALID_TAGS: "Invalid tags: {tags}",
}


def render(outcome: Outcome) -> str:
    if outcome.kind is OutcomeKind.TAGS_UPDATED:
        tags = format_tags(outcome.tags) or "(none)"
        return f"Tags updated for {outcome.name}: {tags}"
    return _TEMPLATES[outcome.kind].format(
        name=outcome.name, path=outcome.path, tags=format_tags(outcome.tags)
    )


def exit_code(outcome: Outcome) -> int:
    return EXIT_OK if outcome.ok else EXIT_FAILURE


def entry_line(entry: TemplateEntry) -> str:
    if entry.tags:
        return f"- {entry.name} [Tags: {format_tags(entry.tags)}]"
    return f"- {entry.name}"


def list_header(store_dir: object) -> str:
    return f"Available templates in {store_dir}"


def no_templates(store_dir: object) -> str:
    return f"No templates found in {store_dir}"


def no_matches(filter_tags: list[str]) -> str:
    return f"No templates found with tags: {format_tags(filter_tags)}"
