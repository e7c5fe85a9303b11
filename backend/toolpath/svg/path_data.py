"""Path data (`d` attribute) → canonical segments, via svgpathtools.

The `d` string is tokenized here first (https://www.w3.org/TR/SVG/paths.html#PathDataBNF):
arc flags may be packed against the next number ("A5 5 0 011 10 10"), which
svgpathtools does not accept, so the tokens are re-joined with separators before
parsing. svgpathtools then resolves relative commands and H/V/S/T shorthands
into absolute Line/CubicBezier/QuadraticBezier/Arc segments.

Output follows the commands one for one: every moveto gives a MoveTo and every
closepath gives a ClosePath at the position it was written, whether or not the
subpath already returns to its start. Arc radii, rotation and flags are taken
from the source; svgpathtools scales radii that are too small to reach the end
point, and that scaling is left to the consumer. Zero-radius arcs become lines.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from svgpathtools import Arc, CubicBezier, Line, Path, QuadraticBezier, parse_path

from toolpath.engine.errors import PathDataError
from toolpath.engine.segments import (
    ArcTo,
    ClosePath,
    CubicTo,
    LineTo,
    MoveTo,
    QuadraticTo,
    Segment,
    SegmentSequence,
)

logger = logging.getLogger(__name__)

_COMMAND_RE = re.compile(r"[MmZzLlHhVvCcSsQqTtAa]")
_NUMBER_RE = re.compile(r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")
_FLAG_RE = re.compile(r"[01]")
_SEPARATOR_RE = re.compile(r"[\s,]*")

# numbers per repetition of each command
_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}

# argument positions of large-arc-flag and sweep-flag within an arc group
_ARC_FLAG_FIELDS = (3, 4)

Command = tuple[str, list[str]]


def _skip_separators(d: str, pos: int) -> int:
    return _SEPARATOR_RE.match(d, pos).end()


def tokenize_path_data(d: str) -> list[Command]:
    """Split ``d`` into (command, argument tokens) groups. Malformed data raises PathDataError."""
    commands: list[Command] = []
    pos = _skip_separators(d, 0)
    while pos < len(d):
        m = _COMMAND_RE.match(d, pos)
        if m is None:
            raise PathDataError(f"could not parse path data: {d!r} (unexpected {d[pos]!r} at offset {pos})")
        command = m.group()
        pos = m.end()
        args: list[str] = []
        while True:
            pos = _skip_separators(d, pos)
            if pos >= len(d) or _COMMAND_RE.match(d, pos):
                break
            is_flag = command in "Aa" and len(args) % 7 in _ARC_FLAG_FIELDS
            token = (_FLAG_RE if is_flag else _NUMBER_RE).match(d, pos)
            if token is None:
                raise PathDataError(f"could not parse path data: {d!r} (bad argument at offset {pos})")
            args.append(token.group())
            pos = token.end()
        arity = _ARITY[command.upper()]
        if (arity == 0 and args) or (arity and (not args or len(args) % arity)):
            raise PathDataError(f"could not parse path data: {d!r} (wrong argument count for {command})")
        commands.append((command, args))
    if commands and commands[0][0] not in "Mm":
        raise PathDataError(f"path data must start with a moveto: {d!r}")
    return commands


def _parse(commands: list[Command]) -> Path:
    normalized = " ".join(" ".join([command, *args]) for command, args in commands)
    try:
        return parse_path(normalized)
    except (ValueError, IndexError, TypeError, AssertionError, ArithmeticError) as e:
        raise PathDataError(f"could not parse path data: {normalized!r}") from e


def _convert(seg, args: list[str]) -> Segment:
    end = seg.end
    x, y = float(end.real), float(end.imag)
    if isinstance(seg, Line):
        return LineTo(x, y)
    if isinstance(seg, CubicBezier):
        c1, c2 = seg.control1, seg.control2
        return CubicTo(float(c1.real), float(c1.imag), float(c2.real), float(c2.imag), x, y)
    if isinstance(seg, QuadraticBezier):
        c = seg.control
        return QuadraticTo(float(c.real), float(c.imag), x, y)
    if isinstance(seg, Arc):
        rx, ry, rotation, large_arc, sweep = args[:5]
        return ArcTo(
            rx=float(rx),
            ry=float(ry),
            x_axis_rotation=float(rotation),
            large_arc=large_arc == "1",
            sweep=sweep == "1",
            x=x,
            y=y,
        )
    raise PathDataError(f"unsupported path segment {type(seg).__name__}")


def _next_segment(segments: Iterator, commands: list[Command]):
    seg = next(segments, None)
    if seg is None:
        raise PathDataError(f"path data ended early: {commands!r}")
    return seg


def parse_path_data(d: str) -> SegmentSequence:
    """Parse ``d`` into absolute canonical segments. Malformed data raises PathDataError."""
    commands = tokenize_path_data(d)
    if not commands:
        return ()
    segments = iter(_parse(commands))

    out: list[Segment] = []
    current = start = 0j
    for command, args in commands:
        upper = command.upper()
        if upper == "Z":
            # svgpathtools only draws the closing line when it has length
            if current != start:
                _next_segment(segments, commands)
            out.append(ClosePath())
            current = start
            continue
        arity = _ARITY[upper]
        for i in range(0, len(args), arity):
            group = args[i : i + arity]
            if upper == "M" and i == 0:
                offset = float(group[0]) + float(group[1]) * 1j
                current = offset if command == "M" else current + offset
                start = current
                out.append(MoveTo(current.real, current.imag))
                continue
            # moveto repetitions are implicit linetos
            seg = _next_segment(segments, commands)
            out.append(_convert(seg, group))
            current = seg.end
    return tuple(out)
