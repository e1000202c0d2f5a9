"""Crop with the ImageMagick command-line tool.

Runs `magick <src> -crop WxH+X+Y +repage <dst>`. `+repage` drops the
virtual canvas offset ImageMagick would otherwise keep in the PNG, so
slices can later be combined (for example into an animation) without
being shifted.

Uses `magick` (ImageMagick 7) when on PATH, otherwise `convert`
(ImageMagick 6). Set CANVAS_SLICER_MAGICK or --magick to force a binary.

Example:
    canvas-slicer diagram.graffle canvas.png --cropper magick
"""

import subprocess

from canvas_slicer.core.types import Cropper, CropPlan

cropper = Cropper(
    name='magick',
    help='Crop with ImageMagick (magick or convert on PATH).',
    requires=['magick', 'convert'],
)


@cropper.run
def run(source, plan: CropPlan, settings) -> None:
    tool = cropper.tool(getattr(settings, 'magick', None))
    if tool is None:
        raise FileNotFoundError('ImageMagick not found')
    subprocess.run(
        [tool, str(source), '-crop', plan.geometry, '+repage', str(plan.path)],
        capture_output=True,
        text=True,
        check=True,
    )
