"""Tag tokenizing.

CONTRACT
- Inputs: comma-separated text
- Outputs:
  - split_tags() returns tokens in order (duplicates kept)
  - parse_tags() returns tokens in order, first occurrence wins
  - is_valid_tag() tells whether a token survives a write/read cycle
- Invariants:
  - Every whitespace character inside a token is removed
  - Empty tokens are discarded
"""

from __future__ import annotations

from collections.abc import Iterable


def clean_token(token: str) -> str:
    return "".join(token.split())


def is_valid_tag(tag: str) -> bool:
    return bool(tag) and "," not in tag and not any(ch.isspace() for ch in tag)


def split_tags(text: str) -> list[str]:
    tokens = (clean_token(t) for t in text.split(","))
    return [t for t in tokens if t]


def unique(tags: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for t in tags:
        if t not in seen:
            seen.add(t)
            out.append(t)
    return out


def parse_tags(csv: str | None) -> list[str]:
    if not csv:
        return []
    return unique(split_tags(csv))


def format_tags(tags: Iterable[str]) -> str:
    return ", ".join(tags)
