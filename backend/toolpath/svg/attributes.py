"""Attribute micro-syntax tokenizers: viewBox, preserveAspectRatio, transform lists,
point lists and lengths.

viewBox, preserveAspectRatio and transform are strict: a present but malformed
value raises AttributeSyntaxError. Point lists follow the SVG error rule and
keep everything up to the first bad token. Lengths raise a plain ValueError so
callers can degrade to "absent".
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from toolpath.engine import affine
from toolpath.engine.errors import AttributeSyntaxError

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_SEPARATOR_RE = re.compile(r"\s*,?\s*")
_TRANSFORM_FN_RE = re.compile(r"\s*([A-Za-z]+)\s*\(([^()]*)\)\s*(,?)")
_LENGTH_RE = re.compile(
    r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)(px|in|cm|mm|pt|pc|em|ex|%)?\s*"
)


def _scan_numbers(text: str, strict: bool = True) -> list[float] | None:
    """Comma/whitespace separated numbers. None on a bad token when strict."""
    text = text.strip()
    numbers: list[float] = []
    pos = 0
    while pos < len(text):
        m = _NUMBER_RE.match(text, pos)
        if m is None:
            return None if strict else numbers
        numbers.append(float(m.group()))
        sep = _SEPARATOR_RE.match(text, m.end())
        pos = sep.end()
        if "," in sep.group() and pos == len(text):
            # trailing comma
            return None if strict else numbers
    return numbers


# ── viewBox ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ViewBox:
    min_x: float
    min_y: float
    width: float
    height: float


def parse_view_box(value: str) -> ViewBox:
    numbers = _scan_numbers(value)
    if numbers is None or len(numbers) != 4:
        raise AttributeSyntaxError("viewBox", value, "expected four numbers")
    return ViewBox(*numbers)


# ── preserveAspectRatio ───────────────────────────────────────────────────


class Align(str, enum.Enum):
    NONE = "none"
    X_MIN_Y_MIN = "xMinYMin"
    X_MID_Y_MIN = "xMidYMin"
    X_MAX_Y_MIN = "xMaxYMin"
    X_MIN_Y_MID = "xMinYMid"
    X_MID_Y_MID = "xMidYMid"
    X_MAX_Y_MID = "xMaxYMid"
    X_MIN_Y_MAX = "xMinYMax"
    X_MID_Y_MAX = "xMidYMax"
    X_MAX_Y_MAX = "xMaxYMax"

    @property
    def x(self) -> str | None:
        """"min", "mid", "max" or None for Align.NONE."""
        if self is Align.NONE:
            return None
        return self.value[1:4].lower()

    @property
    def y(self) -> str | None:
        if self is Align.NONE:
            return None
        return self.value[5:8].lower()


@dataclass(frozen=True)
class AspectRatio:
    align: Align = Align.X_MID_Y_MID
    slice: bool = False
    defer: bool = False


def parse_aspect_ratio(value: str) -> AspectRatio:
    tokens = value.split()
    defer = False
    if tokens and tokens[0] == "defer":
        defer = True
        tokens = tokens[1:]
    if not tokens or len(tokens) > 2:
        raise AttributeSyntaxError("preserveAspectRatio", value)
    try:
        align = Align(tokens[0])
    except ValueError:
        raise AttributeSyntaxError("preserveAspectRatio", value, f"unknown alignment {tokens[0]!r}") from None
    slice_ = False
    if len(tokens) == 2:
        if tokens[1] not in ("meet", "slice"):
            raise AttributeSyntaxError("preserveAspectRatio", value, f"unknown fit {tokens[1]!r}")
        slice_ = tokens[1] == "slice"
    return AspectRatio(align=align, slice=slice_, defer=defer)


# ── transform lists ───────────────────────────────────────────────────────

# name -> allowed argument counts
_TRANSFORM_ARITY: dict[str, tuple[int, ...]] = {
    "matrix": (6,),
    "translate": (1, 2),
    "scale": (1, 2),
    "rotate": (1, 3),
    "skewX": (1,),
    "skewY": (1,),
}


@dataclass(frozen=True)
class TransformFunction:
    name: str
    args: tuple[float, ...]

    def to_matrix(self) -> affine.Matrix:
        a = self.args
        if self.name == "matrix":
            return affine.from_coefficients(*a)
        if self.name == "translate":
            return affine.translation(a[0], a[1] if len(a) > 1 else 0.0)
        if self.name == "scale":
            return affine.scaling(a[0], a[1] if len(a) > 1 else a[0])
        if self.name == "rotate":
            if len(a) == 3:
                return affine.rotation(a[0], a[1], a[2])
            return affine.rotation(a[0])
        if self.name == "skewX":
            return affine.skew_x(a[0])
        return affine.skew_y(a[0])


def parse_transform_list(value: str) -> list[TransformFunction]:
    """Tokenize a transform attribute into its functions, in source order."""
    functions: list[TransformFunction] = []
    pos = 0
    trailing_comma = False
    while pos < len(value):
        if not value[pos:].strip():
            break
        m = _TRANSFORM_FN_RE.match(value, pos)
        if m is None:
            raise AttributeSyntaxError("transform", value, f"unexpected input at offset {pos}")
        name, raw_args, comma = m.groups()
        arity = _TRANSFORM_ARITY.get(name)
        if arity is None:
            raise AttributeSyntaxError("transform", value, f"unknown function {name!r}")
        args = _scan_numbers(raw_args)
        if args is None or len(args) not in arity:
            raise AttributeSyntaxError("transform", value, f"bad arguments to {name}")
        functions.append(TransformFunction(name, tuple(args)))
        trailing_comma = bool(comma)
        pos = m.end()
    if trailing_comma:
        raise AttributeSyntaxError("transform", value, "trailing comma")
    return functions


# ── points ────────────────────────────────────────────────────────────────


def parse_points(value: str) -> list[tuple[float, float]]:
    """Coordinate pairs up to the first bad token; an unpaired trailing number is dropped."""
    numbers = _scan_numbers(value, strict=False) or []
    return [(numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2)]


# ── lengths ───────────────────────────────────────────────────────────────


class LengthUnit(str, enum.Enum):
    NONE = ""
    PX = "px"
    IN = "in"
    CM = "cm"
    MM = "mm"
    PT = "pt"
    PC = "pc"
    EM = "em"
    EX = "ex"
    PERCENT = "%"


@dataclass(frozen=True)
class Length:
    number: float
    unit: LengthUnit = LengthUnit.NONE


def parse_length(value: str) -> Length:
    m = _LENGTH_RE.fullmatch(value)
    if m is None:
        raise ValueError(f"invalid length: {value!r}")
    return Length(float(m.group(1)), LengthUnit(m.group(2) or ""))
