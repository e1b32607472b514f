from __future__ import annotations

"""Template name validation.

CONTRACT
- Inputs: template name string
- Outputs:
  - validate_template_name() returns the name unchanged when valid
  - is_valid_template_name() boolean form, used when scanning the store
- Invariants:
  - A valid name is a single path component: non-empty, not `.` or `..`,
    no `/`, `\\` or NUL
- Failure:
  - Raises InvalidTemplateName (a ValueError)
"""

_FORBIDDEN_CHARS = ("/", "\\", "\x00")


class InvalidTemplateName(ValueError):
    pass


def is_valid_template_name(name: str) -> bool:
    if not name or name in (".", ".."):
        return False
    return not any(ch in name for ch in _FORBIDDEN_CHARS)


def validate_template_name(name: str) -> str:
    if not is_valid_template_name(name):
        raise InvalidTemplateName(f"Invalid template name: {name!r}")
    return name
