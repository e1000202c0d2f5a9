"""Slice one canvas into one PNG per named shape.

Everything that can be checked up front is checked before the first file
is written: output path, source image, crop backend, bounds of every shape,
and uniqueness of shape names. Shapes are then cropped one at a time in
name order. The first crop failure stops the run; slices already written
stay where they are.
"""

import subprocess
from pathlib import Path

from PIL import Image

from canvas_slicer.core.bounds import parse_bounds
from canvas_slicer.core.env import Settings
from canvas_slicer.core.log import Log
from canvas_slicer.core.planner import plan_crop
from canvas_slicer.core.report import SliceReport
from canvas_slicer.core.shapes import validate_shapes, walk_named_shapes
from canvas_slicer.core.types import (
    Canvas,
    CropError,
    Cropper,
    CropPlan,
    GraphicNode,
    PreconditionError,
    Rectangle,
)


def check_output_dir(output_dir: Path) -> None:
    if output_dir.exists() and not output_dir.is_dir():
        raise PreconditionError(f'Output path {output_dir} exists and is not a directory')


def read_image_size(source: Path) -> tuple[int, int]:
    if not source.is_file():
        raise PreconditionError(f'Source image not found: {source}')
    try:
        with Image.open(source) as image:
            return image.size
    except OSError as e:
        raise PreconditionError(f'Cannot read source image {source}: {e}') from e


def collect_shapes(canvas: Canvas, log: Log) -> list[tuple[GraphicNode, Rectangle]]:
    """Named shapes of the canvas, validated, sorted, with parsed bounds."""
    shapes = validate_shapes(walk_named_shapes(canvas))
    return [(shape, parse_bounds(shape.bounds, shape.name, log, shape.ident)) for shape in shapes]


def _describe(e: Exception) -> str:
    if isinstance(e, subprocess.CalledProcessError):
        detail = (e.stderr or '').strip()
        return f'exit status {e.returncode}' + (f': {detail}' if detail else '')
    return str(e)


def crop_one(cropper: Cropper, source: Path, plan: CropPlan, settings: Settings | None) -> None:
    try:
        cropper.execute(source, plan, settings)
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        raise CropError(plan.name, _describe(e)) from e


def slice_canvas(
    canvas: Canvas,
    source: str | Path,
    output_dir: str | Path,
    scale: int,
    cropper: Cropper,
    log: Log,
    settings: Settings | None = None,
) -> SliceReport:
    """Write <output_dir>/<name>.png for every named shape on the canvas."""
    source = Path(source)
    output_dir = Path(output_dir)

    if isinstance(scale, bool) or not isinstance(scale, int) or scale < 1:
        raise PreconditionError(f'Scale must be a positive integer, got {scale!r}')
    check_output_dir(output_dir)
    image_width, image_height = read_image_size(source)
    cropper.check(getattr(settings, 'magick', None))

    shapes = collect_shapes(canvas, log)

    output_dir.mkdir(parents=True, exist_ok=True)
    report = SliceReport(
        canvas_title=canvas.title,
        image_path=str(source),
        image_width=image_width,
        image_height=image_height,
        scale=scale,
        output_dir=str(output_dir),
        cropper=cropper.name,
    )

    for shape, rect in shapes:
        log.info(f'Exporting {shape.name}')
        plan = plan_crop(shape.name, rect, scale, output_dir)
        if plan.x + plan.width > image_width or plan.y + plan.height > image_height:
            log.warn(f'{shape.name!r} ({plan.geometry}) extends beyond the source image ({image_width}x{image_height})')
        crop_one(cropper, source, plan, settings)
        report.slices.append(plan)

    report.warnings = list(log.warnings)
    return report
