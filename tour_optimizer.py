"""
tour_optimizer.py - Order cut shapes to keep laser travel moves short.

Greedy nearest neighbour over shape entry points: starting near the
lower-left corner of the drawing, always cut next the shape whose begin
is closest to where the previous cut ended. O(N^2) with vectorized NumPy
distance evaluation, which is fast enough for single drawings.
"""

import math

import numpy as np
from tqdm import tqdm

from segment_store import Position


class Shape:
    """One unit of the cut order: an SVG element and its entry/exit points.

    Shapes without a begin position (rectangles, text, ...) have no
    natural entry point and are not moved by the distance heuristic.
    """

    def __init__(self, element, begin=None, end=None, chain=None):
        self.element = element
        self.begin = Position(*begin) if begin is not None else None
        if end is not None:
            self.end = Position(*end)
        else:
            self.end = self.begin
        self.chain = chain

    @classmethod
    def from_chain(cls, element, chain):
        return cls(element, begin=chain[0].begin, end=chain[-1].end, chain=chain)

    def __repr__(self):
        tag = getattr(self.element, 'tag', self.element)
        return f"Shape({tag!r}, begin={self.begin}, end={self.end})"


def _select_nearest(begins, remaining, point):
    """Index into `remaining` of the begin closest to `point`.

    Exact distance ties go to the smaller begin y; further ties keep the
    earliest candidate.
    """
    candidates = begins[remaining]
    diff = candidates - point
    dists_sq = np.sum(diff * diff, axis=1)
    tied = np.flatnonzero(dists_sq == dists_sq.min())
    if len(tied) == 1:
        return int(tied[0])
    return int(tied[np.argmin(candidates[tied, 1])])


def order_shapes(shapes, show_progress=True):
    """Return `shapes` in cutting order.

    Shapes without a begin come first in their original order, followed
    by the nearest neighbour tour over all other shapes.

    Args:
        shapes: Sequence of Shape objects
        show_progress: Whether to show a progress bar for large drawings

    Returns:
        New list containing every shape exactly once
    """
    ordered = [s for s in shapes if s.begin is None]
    pending = [s for s in shapes if s.begin is not None]
    n = len(pending)
    if n == 0:
        return ordered

    begins = np.array([s.begin for s in pending], dtype=np.float64)
    ends = np.array([s.end for s in pending], dtype=np.float64)

    # Start from the lower-left corner of all entry points
    current_point = begins.min(axis=0)
    remaining = list(range(n))

    pbar = None
    if show_progress and n > 500:
        pbar = tqdm(total=n, desc="Ordering shapes", unit="shape")

    while remaining:
        pick = _select_nearest(begins, remaining, current_point)
        idx = remaining.pop(pick)
        ordered.append(pending[idx])
        current_point = ends[idx]
        if pbar:
            pbar.update(1)

    if pbar:
        pbar.close()
    return ordered


def calculate_travel_distance(shapes, origin=(0.0, 0.0)):
    """Total idle travel when cutting `shapes` in the given order.

    Travel starts at `origin`, goes to the first begin and then from each
    shape's end to the next shape's begin. Shapes without a begin are
    skipped.
    """
    total = 0.0
    x, y = origin
    for shape in shapes:
        if shape.begin is None:
            continue
        total += math.hypot(shape.begin.x - x, shape.begin.y - y)
        x, y = shape.end
    return total
