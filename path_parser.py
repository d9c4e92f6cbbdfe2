"""
path_parser.py - Parse SVG path data into deduplicated cut segments.

Only the absolute commands emitted by flattened CAD exports are
interpreted: M (move), L (line), A (elliptical arc) and Z (close).
Any other command letter is skipped without touching the current
position, so exotic commands in otherwise usable drawings do not abort
the conversion.
"""

import re
from collections import namedtuple

from segment_store import Position

DEFAULT_PRECISION = 4

# Tokens are separated by whitespace or commas. A token is a command only
# when it is a single letter; anything else must parse as a number.
_SEPARATOR_RE = re.compile(r"[\s,]+")
_COMMAND_RE = re.compile(r"[A-Za-z]")

MoveTo = namedtuple('MoveTo', ['point'])
LineTo = namedtuple('LineTo', ['point'])
ArcTo = namedtuple('ArcTo', ['rx', 'ry', 'angle', 'large_arc', 'sweep', 'point'])
ClosePath = namedtuple('ClosePath', [])
Unsupported = namedtuple('Unsupported', ['letter'])

# Number of parameters consumed by each recognized command
COMMAND_ARITY = {
    'M': 2,
    'L': 2,
    'A': 7,
    'Z': 0,
}


class ParseError(ValueError):
    """Raised when path data contains a token that is not a decimal number."""


def parse_number(text, precision=DEFAULT_PRECISION):
    """Parse a base-10 decimal token and round it to `precision` digits.

    Args:
        text: Numeric token as found in the path data
        precision: Number of fractional digits to keep (default: 4)

    Returns:
        Rounded float value

    Raises:
        ParseError: If the token is not a plain decimal number
    """
    # float() alone would also accept "nan", "inf" and underscores
    if not re.fullmatch(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", text or ''):
        raise ParseError(f"Invalid number in path data: {text!r}")
    return round(float(text), precision)


def parse_position(x_text, y_text, precision=DEFAULT_PRECISION):
    return Position(parse_number(x_text, precision), parse_number(y_text, precision))


def tokenize_path(d):
    """Split path data into command letters and parameter tokens."""
    return [token for token in _SEPARATOR_RE.split(d or '') if token]


def iter_commands(d, precision=DEFAULT_PRECISION):
    """Yield one tagged command tuple per command letter in `d`.

    Parameters of unsupported commands are skipped unread. Recognized
    commands with too few parameters raise ParseError; surplus parameters
    are ignored.
    """
    tokens = tokenize_path(d)
    i = 0
    n = len(tokens)
    while i < n:
        letter = tokens[i]
        i += 1
        params = []
        while i < n and not _COMMAND_RE.fullmatch(tokens[i]):
            params.append(tokens[i])
            i += 1

        if not _COMMAND_RE.fullmatch(letter):
            # Numbers before the first command letter belong to no command
            for token in [letter] + params:
                parse_number(token, precision)
            continue

        arity = COMMAND_ARITY.get(letter)
        if arity is None:
            yield Unsupported(letter)
            continue
        if len(params) < arity:
            raise ParseError(
                f"Command {letter} expects {arity} parameters, got {len(params)}: {' '.join(params)!r}"
            )

        if letter == 'M':
            yield MoveTo(parse_position(params[0], params[1], precision))
        elif letter == 'L':
            yield LineTo(parse_position(params[0], params[1], precision))
        elif letter == 'A':
            rx, ry, angle, large_arc, sweep = params[:5]
            # Shape parameters are carried as text; only validate them as numbers
            for token in (rx, ry, angle, large_arc, sweep):
                parse_number(token, precision)
            yield ArcTo(rx, ry, angle, large_arc, sweep, parse_position(params[5], params[6], precision))
        else:
            yield ClosePath()


def parse_path(d, store, precision=DEFAULT_PRECISION):
    """Feed the segments described by path data `d` into `store`.

    The current position and the subpath start are shared by all commands
    of one string. Z is turned into an ordinary line back to the subpath
    start, since the laser does not distinguish a closing edge from any
    other edge.

    Args:
        d: Path data string
        store: SegmentStore receiving the segments
        precision: Rounding precision for coordinates

    Returns:
        Number of segments offered to the store (before deduplication)
    """
    current = None
    start = None
    emitted = 0

    for command in iter_commands(d, precision):
        if isinstance(command, MoveTo):
            current = command.point
            start = command.point
        elif isinstance(command, LineTo):
            if current is not None:
                store.insert_line(current, command.point)
                emitted += 1
            current = command.point
        elif isinstance(command, ArcTo):
            if current is not None:
                store.insert_arc(current, command.point, command.rx, command.ry,
                                 command.angle, command.large_arc, command.sweep)
                emitted += 1
            current = command.point
        elif isinstance(command, ClosePath):
            if current is not None and start is not None:
                store.insert_line(current, start)
                emitted += 1
            current = start
        # Unsupported: intentionally ignored

    return emitted
