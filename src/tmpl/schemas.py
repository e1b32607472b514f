from __future__ import annotations

"""Result schemas.

CONTRACT
- Inputs: Pydantic models
- Outputs:
  - TemplateEntry: one stored template as reported by `list`
- Invariants:
  - tags keep sidecar order
"""

from pydantic import BaseModel, Field


class TemplateEntry(BaseModel):
    name: str
    path: str
    tags: list[str] = Field(default_factory=list)

    def matches(self, wanted: list[str]) -> bool:
        """Any-of match; an empty filter matches everything."""
        if not wanted:
            return True
        return any(t in self.tags for t in wanted)
