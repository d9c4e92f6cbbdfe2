"""
segment_store.py - Canonical, deduplicated storage of undirected cut segments.

Flattened CAD drawings emit the edge shared by two adjoining faces twice,
often in opposite directions. Every segment is therefore stored in a
canonical orientation (begin <= end, comparing x then y) and exact
duplicates are dropped on insertion. Coordinates are rounded by the
parser, so exact equality is enough to detect duplicates.
"""

from collections import defaultdict, namedtuple

import numpy as np

LINE = 'L'
ARC = 'A'

Position = namedtuple('Position', ['x', 'y'])

Segment = namedtuple(
    'Segment',
    ['kind', 'begin', 'end', 'rx', 'ry', 'angle', 'large_arc', 'sweep'],
    defaults=(None, None, None, None, None),
)


def flip_sweep(sweep):
    """Return the sweep flag for the same arc traversed the other way."""
    return '0' if sweep == '1' else '1'


def reverse_segment(segment):
    """Return `segment` traversed from its end to its begin.

    Radii, rotation and the large-arc flag describe the same arc in both
    directions; only the sweep flag depends on the direction.
    """
    if segment.kind == ARC:
        return segment._replace(begin=segment.end, end=segment.begin, sweep=flip_sweep(segment.sweep))
    return segment._replace(begin=segment.end, end=segment.begin)


def normalize_segment(segment):
    """Return `segment` in canonical orientation (begin <= end)."""
    if segment.begin > segment.end:
        return reverse_segment(segment)
    return segment


class SegmentStore:
    """Pool of unique segments indexed by their endpoints.

    Segments are addressed by an integer id. Lookups by begin or end
    position return candidates in insertion order.
    """

    def __init__(self):
        self._segments = {}
        self._keys = set()
        self._by_begin = defaultdict(dict)
        self._by_end = defaultdict(dict)
        self._next_id = 0
        self.duplicates = 0
        self.degenerate = 0

    def __len__(self):
        return len(self._segments)

    def __iter__(self):
        return iter(list(self._segments.values()))

    def insert_line(self, start, end):
        return self.add(Segment(LINE, Position(*start), Position(*end)))

    def insert_arc(self, start, end, rx, ry, angle, large_arc, sweep):
        return self.add(Segment(ARC, Position(*start), Position(*end), rx, ry, angle, large_arc, sweep))

    def add(self, segment):
        """Store `segment` in canonical orientation.

        Returns:
            True if stored, False if it was zero-length or a duplicate
        """
        segment = normalize_segment(segment)
        if segment.begin == segment.end:
            self.degenerate += 1
            return False

        key = (segment.begin, segment.end)
        if key in self._keys:
            self.duplicates += 1
            return False

        seg_id = self._next_id
        self._next_id += 1
        self._segments[seg_id] = segment
        self._keys.add(key)
        self._by_begin[segment.begin][seg_id] = None
        self._by_end[segment.end][seg_id] = None
        return True

    def find_by_begin(self, position):
        """Return the id of a stored segment starting at `position`, or None."""
        return next(iter(self._by_begin.get(position, ())), None)

    def find_by_end(self, position):
        """Return the id of a stored segment ending at `position`, or None."""
        return next(iter(self._by_end.get(position, ())), None)

    def remove(self, seg_id):
        """Remove a segment from the pool and return it."""
        segment = self._segments.pop(seg_id)
        self._keys.discard((segment.begin, segment.end))
        self._drop_index(self._by_begin, segment.begin, seg_id)
        self._drop_index(self._by_end, segment.end, seg_id)
        return segment

    @staticmethod
    def _drop_index(index, position, seg_id):
        bucket = index[position]
        del bucket[seg_id]
        if not bucket:
            del index[position]

    def begins(self):
        """Return (ids, begins) with begins as an (n, 2) float64 array."""
        ids = list(self._segments)
        begins = np.array([self._segments[i].begin for i in ids], dtype=np.float64).reshape(-1, 2)
        return ids, begins
