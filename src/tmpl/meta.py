"""Tag sidecar codec.

CONTRACT
- Inputs: template root directory, tag list
- Outputs (required):
  - read_tags() -> list of tags recorded in <template>/.meta
  - write_tags() -> canonical `Tags:t1,t2,...,tn\n` line, or no sidecar at all
- Invariants:
  - Only lines starting with `Tags:` (case-sensitive) carry tags; others are ignored
  - Several `Tags:` lines are concatenated in file order
  - A missing sidecar and an empty sidecar both read as []
  - An empty tag list is written by removing the sidecar
- Failure:
  - OSError on I/O problems; write_tags raises ValueError on tokens that
    cannot round-trip (empty, containing whitespace or commas)
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .util.tags import is_valid_tag, split_tags

META_FILENAME = ".meta"
TAGS_PREFIX = "Tags:"


def meta_path(template_path: Path) -> Path:
    return template_path / META_FILENAME


def read_tags(template_path: Path) -> list[str]:
    path = meta_path(template_path)
    if not path.is_file():
        return []
    tags: list[str] = []
    with path.open("r", encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.rstrip("\r\n")
            if line.startswith(TAGS_PREFIX):
                tags.extend(split_tags(line[len(TAGS_PREFIX):]))
    return tags


def _check_token(tag: str) -> str:
    if not is_valid_tag(tag):
        raise ValueError(f"Invalid tag: {tag!r}")
    return tag


def write_tags(template_path: Path, tags: Sequence[str]) -> None:
    path = meta_path(template_path)
    if not tags:
        path.unlink(missing_ok=True)
        return
    line = TAGS_PREFIX + ",".join(_check_token(t) for t in tags)
    with path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(line + "\n")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Show the tags recorded for a template directory")
    parser.add_argument("template", help="Path to a template directory")
    args = parser.parse_args()

    print(", ".join(read_tags(Path(args.template))))
