"""Regex-based parser for shape Bounds strings.

A bounds string looks like `{{x, y}, {width, height}}` with non-negative
decimal numbers. Origin is returned untouched; size is rounded up so a crop
never clips the shape. Fractional values are allowed but warned about.
"""

import math
import re

from canvas_slicer.core.log import Log
from canvas_slicer.core.types import Rectangle, StructureError

_NUMBER = r'\s*(\d+(?:\.\d*)?|\.\d+)\s*'
_PAIR = r'\{' + _NUMBER + ',' + _NUMBER + r'\}'
_BOUNDS_RE = re.compile(r'^\s*\{\s*' + _PAIR + r'\s*,\s*' + _PAIR + r'\s*\}\s*$')


def _where(ident) -> str:
    return '' if ident is None else f' (ID {ident})'


def parse_bounds(bounds: str | None, name: str, log: Log, ident=None) -> Rectangle:
    """Parse the bounds of shape `name` into a Rectangle. `ident` only decorates errors."""
    if bounds is None or bounds == '':
        raise StructureError(f'Shape {name!r} has no Bounds{_where(ident)}')
    # Plist arrays / dicts and JSON numbers reach here too
    m = _BOUNDS_RE.match(bounds) if isinstance(bounds, str) else None
    if not m:
        raise StructureError(f'Shape {name!r} has unparseable Bounds: {bounds!r}{_where(ident)}')
    x, y, width, height = (float(g) for g in m.groups())

    if not (x.is_integer() and y.is_integer()):
        log.warn(f'{name!r} is at non-integer position ({x:g}, {y:g}); the export may be blurry')

    if not (width.is_integer() and height.is_integer()):
        rounded_w, rounded_h = math.ceil(width), math.ceil(height)
        log.warn(
            f'{name!r} has non-integer size {width:g}x{height:g}; exporting as {rounded_w}x{rounded_h}'
        )
        width, height = float(rounded_w), float(rounded_h)

    return Rectangle(x=x, y=y, width=width, height=height)
