from __future__ import annotations

from typing import Iterable, List

from ..domain.models import PositionedSegment, Segment


def layout(segments: Iterable[Segment]) -> List[PositionedSegment]:
    """Assign each timed segment of one day to a lane so that overlaps never share one.

    Greedy first-fit over segments sorted by start minute: a segment joins the
    first lane whose last segment ended at or before it starts, otherwise it
    opens a new lane. Every result carries the day's total lane count so all
    columns render with the same width.
    """

    ordered = sorted(segments, key=lambda segment: segment.start_minutes)
    lane_ends: List[int] = []
    placed: List[tuple[Segment, int]] = []

    for segment in ordered:
        for index, last_end in enumerate(lane_ends):
            if last_end <= segment.start_minutes:
                lane_ends[index] = segment.end_minutes
                placed.append((segment, index))
                break
        else:
            lane_ends.append(segment.end_minutes)
            placed.append((segment, len(lane_ends) - 1))

    lane_count = len(lane_ends)
    return [PositionedSegment(segment=segment, lane=lane, lane_count=lane_count) for segment, lane in placed]


def max_concurrency(segments: Iterable[Segment]) -> int:
    """Largest number of segments overlapping at one minute."""

    boundaries: List[tuple[int, int]] = []
    for segment in segments:
        boundaries.append((segment.start_minutes, 1))
        boundaries.append((segment.end_minutes, -1))
    # Ends sort before starts at the same minute: touching segments do not overlap.
    boundaries.sort()
    current = peak = 0
    for _, delta in boundaries:
        current += delta
        peak = max(peak, current)
    return peak
