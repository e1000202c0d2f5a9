"""Document loading and canvas selection.

Accepts either an already-converted tree saved as JSON, or the diagram
application's property-list container (XML or binary plist, gzipped or not).
Only the keys the slicer needs are interpreted; everything else is ignored.
"""

import gzip
import json
import plistlib
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from canvas_slicer.core.types import TITLE_KEY, Canvas, StructureError

CANVASES_KEY = 'Sheets'
CURRENT_KEY = 'CurrentSheet'
WINDOW_KEY = 'WindowInfo'

_GZIP_MAGIC = b'\x1f\x8b'


def load_document(path: str | Path) -> dict[str, Any]:
    """Read a document file into a dict tree."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise StructureError(f'Cannot read document {path}: {e}') from e

    try:
        if path.suffix.lower() == '.json':
            tree = json.loads(raw.decode('utf-8'))
        else:
            if raw.startswith(_GZIP_MAGIC):
                raw = gzip.decompress(raw)
            tree = plistlib.loads(raw)
    except (ValueError, OSError, EOFError, ExpatError) as e:
        raise StructureError(f'Cannot parse document {path}: {e}') from e

    if not isinstance(tree, dict):
        raise StructureError(f'Document {path} does not contain a dictionary at its root')
    return tree


def _current_index(document: dict[str, Any]) -> Any:
    if CURRENT_KEY in document:
        return document[CURRENT_KEY]
    window = document.get(WINDOW_KEY)
    return window.get(CURRENT_KEY, 0) if isinstance(window, dict) else 0


def _canvases(document: dict[str, Any]) -> list[Any]:
    canvases = document.get(CANVASES_KEY) or []
    if not isinstance(canvases, list):
        raise StructureError(f'{CANVASES_KEY} must be a list, got {type(canvases).__name__}')
    return canvases


def canvas_titles(document: dict[str, Any]) -> list[str]:
    return [str(c.get(TITLE_KEY, '')) for c in _canvases(document) if isinstance(c, dict)]


def select_canvas(document: dict[str, Any], title: str | None = None) -> Canvas:
    """Pick a canvas by title, or the document's current one."""
    canvases = _canvases(document)
    if not canvases:
        raise StructureError('Document has no canvases')

    if title is not None:
        for data in canvases:
            if isinstance(data, dict) and data.get(TITLE_KEY) == title:
                return Canvas.from_dict(data)
        raise StructureError(f'Canvas {title!r} not found. Available: {", ".join(canvas_titles(document))}')

    index = _current_index(document)
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(canvases):
        raise StructureError(f'Current canvas index {index!r} is invalid ({len(canvases)} canvases)')
    return Canvas.from_dict(canvases[index])
