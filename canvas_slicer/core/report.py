"""Report builder: text and JSON summaries of a slicing run."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from canvas_slicer.core.types import CropPlan


@dataclass
class SliceReport:
    """What one run produced."""

    document_path: str = ''
    canvas_title: str = ''
    image_path: str = ''
    image_width: int = 0
    image_height: int = 0
    scale: int = 1
    output_dir: str = ''
    cropper: str = ''
    slices: list[CropPlan] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def format_text(report: SliceReport) -> str:
    """Format report as human-readable text."""
    dim = f'{report.image_width}×{report.image_height}'
    lines = [
        f'canvas-slicer: {report.document_path}, canvas {report.canvas_title!r}',
        f'  source: {report.image_path} ({dim}) at scale {report.scale} via {report.cropper}',
        '',
    ]
    width = max((len(p.name) for p in report.slices), default=0)
    for plan in report.slices:
        lines.append(f'  {plan.name:<{width}}  {plan.geometry:<16} {plan.path}')
    if report.slices:
        lines.append('')

    lines.append(f'{len(report.slices)} slice(s) written to {report.output_dir}')
    if report.warnings:
        lines.append(f'{len(report.warnings)} warning(s)')
    return '\n'.join(lines)


def format_json(report: SliceReport) -> str:
    """Format report as JSON."""
    obj: dict[str, Any] = {
        'document': report.document_path,
        'canvas': report.canvas_title,
        'image': report.image_path,
        'dimensions': {'width': report.image_width, 'height': report.image_height},
        'scale': report.scale,
        'cropper': report.cropper,
        'output_dir': report.output_dir,
    }
    obj['slices'] = [
        {
            'name': plan.name,
            'x': plan.x,
            'y': plan.y,
            'width': plan.width,
            'height': plan.height,
            'file': str(Path(plan.path)),
        }
        for plan in report.slices
    ]
    obj['warnings'] = list(report.warnings)
    return json.dumps(obj, indent=2)
