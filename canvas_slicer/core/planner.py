"""Turn a shape's Rectangle into an integer pixel crop at the run's scale."""

from pathlib import Path

from canvas_slicer.core.types import CropPlan, Rectangle


def output_path(output_dir: Path, name: str) -> Path:
    # Name is used verbatim as the file stem
    return Path(output_dir) / f'{name}.png'


def plan_crop(name: str, rect: Rectangle, scale: int, output_dir: Path) -> CropPlan:
    """Scale every component, then truncate toward zero."""
    return CropPlan(
        name=name,
        x=int(rect.x * scale),
        y=int(rect.y * scale),
        width=int(rect.width * scale),
        height=int(rect.height * scale),
        path=output_path(output_dir, name),
    )
