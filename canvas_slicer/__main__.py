"""canvas-slicer: Export every named shape of a diagram canvas as its own PNG.

Usage: canvas-slicer <document> <image> [options]

<document> is the diagram (JSON tree, or plist / gzipped plist container).
<image> is the whole canvas already rendered at the requested --scale.
Each shape that has a Name is cropped out of <image> and written to
<output-dir>/<Name>.png. The output directory defaults to the canvas title.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, canvas-slicer looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import sys

from canvas_slicer import registry
from canvas_slicer.core.document import load_document, select_canvas
from canvas_slicer.core.env import Settings, load_env, settings_from_env
from canvas_slicer.core.log import Log
from canvas_slicer.core.report import format_json, format_text
from canvas_slicer.core.types import SlicerError
from canvas_slicer.slicer import slice_canvas


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'not an integer: {value!r}') from None
    if n < 1:
        raise argparse.ArgumentTypeError(f'must be at least 1: {n}')
    return n


def _build_parser() -> argparse.ArgumentParser:
    epilog = (
        'Examples:\n'
        '  canvas-slicer icons.graffle icons@2x.png --scale 2\n'
        '  canvas-slicer icons.graffle icons.png --canvas Toolbar -o build/toolbar\n'
        '  canvas-slicer icons.json icons.png --cropper magick --json\n'
        '  canvas-slicer --list-croppers\n'
        '\n'
        'Defaults from env vars (set in .env or environment):\n'
        '  CANVAS_SLICER_SCALE       scale factor (default 1)\n'
        '  CANVAS_SLICER_CROPPER     crop backend (default pillow)\n'
        '  CANVAS_SLICER_MAGICK      ImageMagick binary for the magick backend\n'
        '  CANVAS_SLICER_TIMESTAMPS  1 to timestamp log lines\n'
    )
    parser = argparse.ArgumentParser(
        prog='canvas-slicer',
        description='Export every named shape of a diagram canvas as its own PNG.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument('document', nargs='?', help='Diagram document (.json, plist or gzipped plist)')
    parser.add_argument('image', nargs='?', help='Whole canvas rendered at --scale (PNG)')
    parser.add_argument('-o', '--output-dir', help='Directory for slices (default: canvas title)')
    parser.add_argument('-c', '--canvas', help='Canvas title to slice (default: the current canvas)')
    parser.add_argument('-s', '--scale', type=_positive_int, default=None, metavar='N', help='Scale factor')
    parser.add_argument('-b', '--cropper', default=None, help='Crop backend (see --list-croppers)')
    parser.add_argument('--magick', default=None, metavar='PATH', help='ImageMagick binary for the magick backend')
    parser.add_argument('-t', '--timestamps', action='store_true', help='Prefix log lines with a timestamp')
    parser.add_argument('-j', '--json', action='store_true', help='Output JSON report instead of text')
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    parser.add_argument('--list-croppers', action='store_true', help='List crop backends and exit')
    return parser


def _print_croppers() -> None:
    print('Available croppers:\n')
    for name, backend in sorted(registry.all_croppers().items()):
        marker = '*' if name == registry.DEFAULT else ' '
        print(f' {marker}{name:<10} {backend.help}')


def _merge_settings(args: argparse.Namespace, settings: Settings) -> Settings:
    """Command-line flags win over environment defaults."""
    return Settings(
        scale=args.scale if args.scale is not None else settings.scale,
        cropper=args.cropper or settings.cropper,
        magick=args.magick or settings.magick,
        timestamps=args.timestamps or settings.timestamps,
    )


def run(args: argparse.Namespace) -> int:
    env_path = load_env(env_file=args.env_file)
    if env_path:
        print(f'canvas-slicer: loaded {env_path}', file=sys.stderr)

    settings = _merge_settings(args, settings_from_env())
    # Keep stdout clean for the JSON report
    log = Log(out=sys.stderr if args.json else sys.stdout, timestamps=settings.timestamps)

    cropper = registry.get(settings.cropper)
    document = load_document(args.document)
    canvas = select_canvas(document, title=args.canvas)
    output_dir = args.output_dir or canvas.title

    report = slice_canvas(canvas, args.image, output_dir, settings.scale, cropper, log, settings)
    report.document_path = args.document

    if args.json:
        print(format_json(report))
    else:
        print(format_text(report))
    return 0


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    if args.list_croppers:
        _print_croppers()
        return

    if not args.document or not args.image:
        parser.print_help()
        sys.exit(1)

    try:
        sys.exit(run(args))
    except SlicerError as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
