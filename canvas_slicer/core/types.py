"""Shared types for canvas-slicer: GraphicNode, Canvas, Rectangle, CropPlan, Cropper, errors."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Keys of the converted document tree
NAME_KEY = 'Name'
BOUNDS_KEY = 'Bounds'
ID_KEY = 'ID'
CHILD_KEYS = ('Graphics', 'GraphicsList')
TITLE_KEY = 'SheetTitle'
# Canvas root collections, in precedence order
CANVAS_KEYS = ('ExportShapes', 'GraphicsList')


class SlicerError(Exception):
    """Base class for every fatal condition that aborts a run."""


class StructureError(SlicerError):
    """The document is missing something a slice needs (bounds, canvas)."""


class DuplicateNameError(SlicerError):
    """Two or more shapes share a name."""

    def __init__(self, names: list[str], ids: dict[str, list[Any]] | None = None):
        self.names = names
        self.ids = ids or {}
        parts = []
        for name in names:
            known = [str(i) for i in self.ids.get(name, []) if i is not None]
            parts.append(f'{name} (IDs {", ".join(known)})' if known else name)
        super().__init__(f'Duplicate shape names: {", ".join(parts)}')


class PreconditionError(SlicerError):
    """The environment is not fit to start slicing."""


class CropError(SlicerError):
    """The crop operation failed for one shape."""

    def __init__(self, shape_name: str, reason: str):
        self.shape_name = shape_name
        super().__init__(f'Failed to export {shape_name!r}: {reason}')


@dataclass
class GraphicNode:
    """One node of a canvas's graphic tree. Groups and plain shapes look the same."""

    name: str | None = None
    bounds: str | None = None
    ident: Any = None  # diagnostics only
    children: list[GraphicNode] = field(default_factory=list)

    @classmethod
    def _record(cls, data: Any) -> GraphicNode:
        if not isinstance(data, dict):
            raise StructureError(f'Graphic entry must be a dictionary, got {type(data).__name__}')
        name = data.get(NAME_KEY)
        return cls(
            name=None if name is None else str(name),
            bounds=data.get(BOUNDS_KEY),
            ident=data.get(ID_KEY),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphicNode:
        """Build the node and all its descendants without recursion."""
        root = cls._record(data)
        stack = [(data, root)]
        while stack:
            raw, node = stack.pop()
            for key in CHILD_KEYS:
                for child_data in _graphics_list(raw, key):
                    child = cls._record(child_data)
                    node.children.append(child)
                    stack.append((child_data, child))
        return root


def _graphics_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise StructureError(f'{key} must be a list, got {type(value).__name__}')
    return value


@dataclass
class Canvas:
    """One sheet of the document."""

    title: str
    graphics: list[GraphicNode] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Canvas:
        if not isinstance(data, dict):
            raise StructureError(f'Canvas entry must be a dictionary, got {type(data).__name__}')
        graphics: list[Any] = []
        for key in CANVAS_KEYS:
            graphics = _graphics_list(data, key)
            if graphics:
                break
        return cls(
            title=str(data.get(TITLE_KEY) or 'Canvas'),
            graphics=[GraphicNode.from_dict(g) for g in graphics],
        )


@dataclass(frozen=True)
class Rectangle:
    """Shape geometry in canvas units. Size is already rounded up."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class CropPlan:
    """Integer pixel rectangle and destination for one slice."""

    name: str
    x: int
    y: int
    width: int
    height: int
    path: Path

    @property
    def geometry(self) -> str:
        return f'{self.width}x{self.height}+{self.x}+{self.y}'

    @property
    def box(self) -> tuple[int, int, int, int]:
        """(left, upper, right, lower) as PIL expects it."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


class Cropper:
    """A self-registering crop backend.

    Usage in a cropper module:

        cropper = Cropper(name='pillow', help='Crop in-process with Pillow')

        @cropper.run
        def run(source, plan, settings):
            ...
    """

    def __init__(self, name: str, help: str = '', requires: list[str] | None = None):
        self.name = name
        self.help = help
        # Alternative executables; any one of them on PATH is enough
        self.requires = requires or []
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def tool(self, override: str | None = None) -> str | None:
        """Resolve the executable this backend will run, or None if not found.

        An explicit override wins over the PATH lookup of `requires`.
        Backends with no requirements always resolve to None.
        """
        if not self.requires:
            return None
        for candidate in [override] if override else self.requires:
            found = shutil.which(candidate)
            if found:
                return found
        return None

    def check(self, override: str | None = None) -> None:
        """Raise PreconditionError if the backend's external tool is missing."""
        if self.requires and self.tool(override) is None:
            wanted = override or ' or '.join(self.requires)
            raise PreconditionError(f'Cropper {self.name} needs {wanted} (not found)')

    def execute(self, source: Path, plan: CropPlan, settings: Any = None) -> None:
        """Execute the backend's run function."""
        if self._run_fn is None:
            raise RuntimeError(f'Cropper {self.name} has no run function')
        self._run_fn(source, plan, settings)
