"""Pomodoro segments and the cyclic segment sequence."""

from dataclasses import dataclass
from typing import Literal

SegmentKind = Literal["work", "short_break", "long_break"]

SEGMENT_LABELS: dict[str, str] = {
    "work": "Work",
    "short_break": "Short break",
    "long_break": "Long break",
}


@dataclass(frozen=True)
class Segment:
    """One timed phase of a session."""

    kind: SegmentKind
    duration: int  # seconds

    @classmethod
    def from_minutes(cls, kind: SegmentKind, minutes: int) -> "Segment":
        return cls(kind=kind, duration=minutes * 60)

    @property
    def label(self) -> str:
        return SEGMENT_LABELS[self.kind]

    def __str__(self) -> str:
        return self.label


class SegmentSequence:
    """Infinite, periodic ordering of segments.

    One period is ``work, short, work, short, ..., work, long``: the break
    after the last work segment is replaced by the long break, so a period
    holds ``2 * pomos_per_cycle`` segments. Index ``i`` maps to
    ``cycle[i % period]``.

    Parameters are assumed to be validated already (see ``kit_cli.config``).
    """

    def __init__(
        self,
        work: int,
        short_break: int,
        long_break: int,
        pomos_per_cycle: int,
    ):
        self.work = work
        self.short_break = short_break
        self.long_break = long_break
        self.pomos_per_cycle = pomos_per_cycle

        cycle: list[Segment] = []
        for i in range(pomos_per_cycle):
            if i:
                cycle.append(Segment.from_minutes("short_break", short_break))
            cycle.append(Segment.from_minutes("work", work))
        cycle.append(Segment.from_minutes("long_break", long_break))
        self.cycle: tuple[Segment, ...] = tuple(cycle)

    @property
    def period(self) -> int:
        return len(self.cycle)

    def __getitem__(self, index: int) -> Segment:
        if index < 0:
            raise IndexError(f"segment index must be non-negative, got {index}")
        return self.cycle[index % self.period]

    def window(self, start: int, count: int) -> list[Segment]:
        """Materialize ``count`` segments starting at ``start``, wrapping the period."""
        return [self[i] for i in range(start, start + count)]

    def __repr__(self) -> str:
        return (
            f"SegmentSequence(work={self.work}, short_break={self.short_break}, "
            f"long_break={self.long_break}, pomos_per_cycle={self.pomos_per_cycle})"
        )
