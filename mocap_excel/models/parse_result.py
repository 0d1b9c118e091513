from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .series import NeededMetrics, Role

"""Two-variant result for needed-metrics extraction.

Extraction never raises past the public boundary; callers branch on ``ok``.
"""

__all__ = [
    "NeededParseFailure",
    "NeededParseResult",
    "NeededParseSuccess",
]


@dataclass(frozen=True)
class NeededParseSuccess:
    pitcher: NeededMetrics
    hitter: NeededMetrics
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True

    def for_role(self, role: Role) -> NeededMetrics:
        return self.pitcher if role is Role.PITCHER else self.hitter

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "pitcher": self.pitcher.to_dict(),
            "hitter": self.hitter.to_dict(),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class NeededParseFailure:
    why: str
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {"ok": False, "why": self.why, "warnings": list(self.warnings)}


NeededParseResult = Union[NeededParseSuccess, NeededParseFailure]
