"""Render joined segment chains back into SVG path data."""

from segment_store import ARC


def format_number(value, precision=4):
    """Format a coordinate as plain decimal text ('1', '-0.5', '12.3456')."""
    text = f"{value:.{precision}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text == '-0':
        return '0'
    return text


def format_position(position, precision=4):
    return f"{format_number(position.x, precision)} {format_number(position.y, precision)}"


def serialize_segment(segment, precision=4):
    end = format_position(segment.end, precision)
    if segment.kind == ARC:
        return f"A {segment.rx} {segment.ry} {segment.angle} {segment.large_arc} {segment.sweep} {end}"
    return f"L {end}"


def serialize_chain(chain, precision=4):
    """Path data for a chain: one move to its begin, then one command per segment."""
    if not chain:
        return ''
    parts = [f"M {format_position(chain[0].begin, precision)}"]
    parts.extend(serialize_segment(segment, precision) for segment in chain)
    return ' '.join(parts)
