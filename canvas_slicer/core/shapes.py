"""Collect the named shapes of a canvas and check their names are unique."""

from collections import Counter

from canvas_slicer.core.types import Canvas, DuplicateNameError, GraphicNode


def walk_named_shapes(canvas: Canvas) -> list[GraphicNode]:
    """Return every node under the canvas that carries a name, at any depth.

    Unnamed nodes are containers: they are walked, not returned.
    """
    named = []
    stack = list(canvas.graphics)
    while stack:
        node = stack.pop()
        if node.name is not None:
            named.append(node)
        stack.extend(node.children)
    return named


def find_duplicates(shapes: list[GraphicNode]) -> list[str]:
    """Names used by more than one shape, each listed once, sorted."""
    counts = Counter(s.name for s in shapes)
    return sorted(name for name, n in counts.items() if n > 1)


def validate_shapes(shapes: list[GraphicNode]) -> list[GraphicNode]:
    """Fail on duplicate names; otherwise return the shapes sorted by name."""
    duplicates = find_duplicates(shapes)
    if duplicates:
        ids: dict[str, list] = {name: [] for name in duplicates}
        for shape in shapes:
            if shape.name in ids:
                ids[shape.name].append(shape.ident)
        raise DuplicateNameError(duplicates, ids)
    return sorted(shapes, key=lambda s: s.name)
