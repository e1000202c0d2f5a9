"""Crop in-process with Pillow. The default backend.

Opens the source image, crops to the plan's box and saves a PNG at the
plan's path, replacing any existing file. The cropped image is a new
image, so no offset or canvas-origin metadata survives the crop.
Needs no external tools.

Example:
    canvas-slicer diagram.graffle canvas.png --cropper pillow
"""

from PIL import Image

from canvas_slicer.core.types import Cropper, CropPlan

cropper = Cropper(
    name='pillow',
    help='Crop in-process with Pillow (no external tools).',
)


@cropper.run
def run(source, plan: CropPlan, settings) -> None:
    with Image.open(source) as image:
        image.crop(plan.box).save(plan.path, format='PNG')
