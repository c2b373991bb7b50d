from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Sentinel for the synthetic title entry, before any offset/sort fixup.
TITLE_SENTINEL_MS = -1
TITLE_LEAD_MS = 1000


class TitleMode(str, Enum):
    INJECT = "inject"  # title entry at index 0
    SEPARATE = "separate"  # title rendered apart from the timed list


@dataclass(frozen=True, slots=True)
class TimedLine:
    timestamp_ms: int
    text: str


@dataclass(frozen=True, slots=True)
class Timeline:
    lines: tuple[TimedLine, ...] = ()
    has_title: bool = False
    offset_ms: int = 0
    # not hashed: dicts are unhashable
    tags: dict[str, str] = field(default_factory=dict, hash=False)

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def title_line(self) -> TimedLine | None:
        return self.lines[0] if self.has_title and self.lines else None

    @property
    def real_lines(self) -> tuple[TimedLine, ...]:
        return self.lines[1:] if self.has_title else self.lines

    @property
    def is_synced(self) -> bool:
        return bool(self.real_lines)

    @property
    def timestamps(self) -> list[int]:
        return [ln.timestamp_ms for ln in self.lines]
