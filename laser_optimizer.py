#!/usr/bin/env python3
"""
SVG Optimizer for Laser Cutting

Converts a flattened SVG drawing (as exported by CAD programs) into a
version that cuts faster and cleaner:

- Duplicate edges are removed, so no edge is cut twice. Flattened
  drawings repeat the edge shared by two adjoining faces.
- Edge fragments are joined back into the longest possible continuous
  paths, so the laser does not stop and restart at every vertex.
- All shapes are ordered with a greedy nearest-neighbor tour to keep the
  idle travel between cuts short.

The optimized drawing is written next to the input file
(drawing.svg -> drawingnew.svg) unless --output is given.

Usage:
    python laser_optimizer.py drawing.svg
    python laser_optimizer.py drawing.svg --output cut.svg --group layer1
"""

import argparse
import sys
import time

from svgpathtools import parse_path as svg_parse_path

from optimizer_config import DEFAULT_CONFIG_PATH, load_optimizer_config, resolve_config
from path_builder import build_chains
from path_parser import parse_path
from path_serializer import serialize_chain
from segment_store import SegmentStore
from svg_document import (
    collect_shapes,
    default_output_path,
    find_group,
    load_document,
    make_path_element,
    replace_children,
    write_document,
)
from tour_optimizer import Shape, calculate_travel_distance, order_shapes

BANNER = "SVG optimizer for laser cutting.\n"


def calculate_cut_length(chains, precision=4):
    """Total length of all chains, arcs included."""
    return sum(svg_parse_path(serialize_chain(chain, precision)).length() for chain in chains)


def optimize_paths(path_data_list, primitives=(), precision=4, show_progress=False):
    """Deduplicate, join and order raw path data without any SVG document.

    Args:
        path_data_list: Iterable of path data strings
        primitives: Shapes for non-path elements, kept as they are
        precision: Rounding precision for coordinates
        show_progress: Whether to show progress bars

    Returns:
        Ordered list of Shapes; joined paths have `element` set to their
        serialized path data and `chain` set to their segments
    """
    store = SegmentStore()
    for d in path_data_list:
        parse_path(d, store, precision)

    shapes = list(primitives)
    for chain in build_chains(store, show_progress=show_progress):
        shapes.append(Shape.from_chain(serialize_chain(chain, precision), chain))
    return order_shapes(shapes, show_progress=show_progress)


def optimize_document(svg_file, output_file=None, config=None, group_id=None, verbose=True):
    """Optimize an SVG drawing for laser cutting and write the result.

    Nothing is written unless every step succeeds.

    Args:
        svg_file: Input SVG file path
        output_file: Output SVG file path (default: input name + suffix)
        config: Settings dictionary (default: built-in defaults)
        group_id: id of the group holding the drawing (default: first group)
        verbose: Whether to print progress messages

    Returns:
        Dictionary of statistics about the conversion
    """
    config = resolve_config(file_config=config)
    precision = config["precision"]
    show_progress = config["show_progress"] and verbose
    if output_file is None:
        output_file = default_output_path(svg_file, config["output_suffix"])

    def log(message):
        if verbose:
            print(message)

    start_time = time.time()

    log(f"Reading {svg_file}...")
    tree = load_document(svg_file)
    group = find_group(tree, group_id)

    log("Splitting paths into segments...")
    store = SegmentStore()
    shapes, path_count, offered = collect_shapes(group, store, precision)
    stats = {
        'total_elements': len(shapes) + path_count,
        'path_elements': path_count,
        'segments_parsed': offered,
        'segments_unique': len(store),
        'duplicates_removed': store.duplicates,
        'degenerate_removed': store.degenerate,
    }
    log(f"Found {path_count} paths with {offered} segments, "
        f"{store.duplicates} duplicates and {store.degenerate} zero-length segments removed")

    log(f"Joining {len(store)} segments...")
    chains = build_chains(store, show_progress=show_progress)
    for chain in chains:
        shapes.append(Shape.from_chain(make_path_element(chain, config), chain))
    stats['chains'] = len(chains)
    stats['shapes'] = len(shapes)
    stats['cut_length'] = calculate_cut_length(chains, precision)
    log(f"Joined into {len(chains)} continuous paths")

    log(f"Ordering {len(shapes)} shapes...")
    stats['travel_before'] = calculate_travel_distance(shapes)
    ordered = order_shapes(shapes, show_progress=show_progress)
    stats['travel_after'] = calculate_travel_distance(ordered)
    log(f"Travel distance: {stats['travel_before']:.2f} -> {stats['travel_after']:.2f}")

    replace_children(group, ordered)
    log(f"Writing {output_file}...")
    write_document(tree, output_file)

    stats['output_file'] = output_file
    stats['elapsed'] = time.time() - start_time
    return stats


def build_parser():
    parser = argparse.ArgumentParser(
        description='Optimize a flattened SVG drawing for laser cutting')
    parser.add_argument('svg_file', nargs='?', help='Input SVG file')
    parser.add_argument('--output', '-o',
                        help='Output SVG file (default: input file name with "new" appended)')
    parser.add_argument('--group', help='id of the group holding the drawing (default: first group)')
    parser.add_argument('--config', default=DEFAULT_CONFIG_PATH,
                        help=f'Defaults file (default: {DEFAULT_CONFIG_PATH})')
    parser.add_argument('--precision', type=int, help='Coordinate rounding digits (default: 4)')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only print errors')
    parser.add_argument('--no-progress', action='store_true', help='Disable progress bars')
    parser.add_argument('--no-wait', action='store_true',
                        help='Do not wait for Enter after an error')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    print(BANNER)
    if not args.svg_file:
        parser.print_usage()
        return 0

    try:
        config = resolve_config(args, load_optimizer_config(args.config))
        stats = optimize_document(
            args.svg_file,
            args.output,
            config=config,
            group_id=args.group,
            verbose=not args.quiet,
        )
    except Exception as e:
        print(f"Error: {e}")
        if not args.no_wait and sys.stdin is not None and sys.stdin.isatty():
            input("Press Enter to exit...")
        return 1

    if not args.quiet:
        print(f"\n{'='*50}")
        print("OPTIMIZATION COMPLETE")
        print(f"{'='*50}")
        print(f"Input: {args.svg_file}")
        print(f"Output: {stats['output_file']}")
        print(f"Segments: {stats['segments_parsed']} parsed, {stats['segments_unique']} unique")
        print(f"Paths: {stats['path_elements']} -> {stats['chains']}")
        print(f"Cut length: {stats['cut_length']:.2f}")
        print(f"Travel distance: {stats['travel_before']:.2f} -> {stats['travel_after']:.2f}")
        print(f"Total time: {stats['elapsed']:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
