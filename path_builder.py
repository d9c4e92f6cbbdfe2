"""
path_builder.py - Rejoin deduplicated segments into continuous cut paths.

Chains are grown from a seed segment in both directions until no stored
segment touches either free end. A segment recorded in the opposite
direction is reversed before it is attached, so every chain can be
cut in one continuous pass.
"""

from collections import deque

import numpy as np
from tqdm import tqdm

from segment_store import reverse_segment


def pop_seed_segment(store):
    """Remove and return the segment starting closest to the lower-left corner.

    The corner is the component-wise minimum of all remaining begin
    positions. On equal distances the earliest stored segment wins.
    """
    ids, begins = store.begins()
    corner = begins.min(axis=0)
    diff = begins - corner
    dists_sq = np.sum(diff * diff, axis=1)
    return store.remove(ids[int(np.argmin(dists_sq))])


def take_after(store, position):
    """Remove and return a segment that can follow `position`, oriented to start there."""
    seg_id = store.find_by_begin(position)
    if seg_id is not None:
        return store.remove(seg_id)
    seg_id = store.find_by_end(position)
    if seg_id is not None:
        return reverse_segment(store.remove(seg_id))
    return None


def take_before(store, position):
    """Remove and return a segment that can precede `position`, oriented to end there."""
    seg_id = store.find_by_end(position)
    if seg_id is not None:
        return store.remove(seg_id)
    seg_id = store.find_by_begin(position)
    if seg_id is not None:
        return reverse_segment(store.remove(seg_id))
    return None


def grow_chain(store, seed):
    """Extend a chain from `seed` at both ends until nothing more attaches.

    Returns:
        List of segments where each segment ends where the next begins
    """
    chain = deque([seed])
    while True:
        count = len(chain)

        segment = take_after(store, chain[-1].end)
        while segment is not None:
            chain.append(segment)
            segment = take_after(store, segment.end)

        segment = take_before(store, chain[0].begin)
        while segment is not None:
            chain.appendleft(segment)
            segment = take_before(store, segment.begin)

        if len(chain) == count:
            return list(chain)


def build_chains(store, show_progress=True):
    """Drain `store` into maximal connected chains.

    Args:
        store: SegmentStore, emptied by this call
        show_progress: Whether to show a progress bar for large drawings

    Returns:
        List of chains in the order they were built
    """
    n = len(store)
    pbar = None
    if show_progress and n > 500:
        pbar = tqdm(total=n, desc="Joining segments", unit="seg")

    chains = []
    while len(store) > 0:
        chain = grow_chain(store, pop_seed_segment(store))
        chains.append(chain)
        if pbar:
            pbar.update(len(chain))

    if pbar:
        pbar.close()
    return chains
