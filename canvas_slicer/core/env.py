"""Environment and .env configuration for canvas-slicer.

Load order (first wins):
  1. Existing OS environment variables (never overwritten).
  2. .env file at --env-file path (if explicitly provided).
  3. .env file found walking up from cwd, stopping at the .git boundary.

Recognised variables (all optional, command-line flags override them):
  CANVAS_SLICER_SCALE        integer scale factor, default 1
  CANVAS_SLICER_CROPPER      crop backend name, default 'pillow'
  CANVAS_SLICER_MAGICK       explicit ImageMagick binary for the magick backend
  CANVAS_SLICER_TIMESTAMPS   1/true/yes/on to timestamp log lines
"""

import os
from dataclasses import dataclass
from pathlib import Path

from canvas_slicer.core.types import PreconditionError

ENV_PREFIX = 'CANVAS_SLICER_'
_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off', ''}


@dataclass
class Settings:
    scale: int = 1
    cropper: str = 'pillow'
    magick: str | None = None
    timestamps: bool = False


def find_dotenv(start: Path) -> Path | None:
    """Nearest .env at or above start, not crossing a .git (dir or worktree file)."""
    start = start.resolve()
    for directory in [start, *start.parents]:
        candidate = directory / '.env'
        if candidate.is_file():
            return candidate
        if (directory / '.git').exists():
            break
    return None


def parse_dotenv(path: Path) -> dict[str, str]:
    """KEY=value lines; quotes around values are dropped, # lines skipped."""
    values: dict[str, str] = {}
    for raw in path.read_text(encoding='utf-8').splitlines():
        line = raw.strip()
        if line.startswith('#') or '=' not in line:
            continue
        key, _, value = line.partition('=')
        key = key.strip()
        if key:
            values[key] = value.strip().strip('"').strip("'")
    return values


def load_env(env_file: str | None = None) -> Path | None:
    """Copy .env values into os.environ where not already set.

    Returns the file used, or None when there was none.
    """
    path = Path(env_file) if env_file else find_dotenv(Path.cwd())
    if path is None or not path.is_file():
        return None
    for key, value in parse_dotenv(path).items():
        os.environ.setdefault(key, value)
    return path


def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise PreconditionError(f'{name} must be an integer, got {raw!r}') from None
    if value < 1:
        raise PreconditionError(f'{name} must be at least 1, got {value}')
    return value


def _flag(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise PreconditionError(f'{name} must be a boolean, got {raw!r}')


def settings_from_env(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from CANVAS_SLICER_* variables."""
    env = os.environ if environ is None else environ
    settings = Settings()

    scale = env.get(ENV_PREFIX + 'SCALE')
    if scale is not None:
        settings.scale = _positive_int(ENV_PREFIX + 'SCALE', scale)

    cropper = env.get(ENV_PREFIX + 'CROPPER', '').strip()
    if cropper:
        settings.cropper = cropper

    magick = env.get(ENV_PREFIX + 'MAGICK', '').strip()
    if magick:
        settings.magick = magick

    timestamps = env.get(ENV_PREFIX + 'TIMESTAMPS')
    if timestamps is not None:
        settings.timestamps = _flag(ENV_PREFIX + 'TIMESTAMPS', timestamps)
    return settings
