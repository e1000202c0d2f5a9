"""Crop backends by name.

Each module in canvas_slicer/croppers/ defines one `cropper` object.
A new backend is added by writing the module and listing it in CROPPERS.
"""

from canvas_slicer.core.types import Cropper, PreconditionError
from canvas_slicer.croppers import magick, pillow

CROPPERS: dict[str, Cropper] = {backend.name: backend for backend in (pillow.cropper, magick.cropper)}

DEFAULT = pillow.cropper.name


def get(name: str) -> Cropper:
    """Get a crop backend by name."""
    if name not in CROPPERS:
        raise PreconditionError(f'Unknown cropper: {name}. Available: {", ".join(sorted(CROPPERS))}')
    return CROPPERS[name]


def all_croppers() -> dict[str, Cropper]:
    """Return every known crop backend."""
    return dict(CROPPERS)
