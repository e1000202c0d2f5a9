"""Run log: where progress and warnings go, and whether they carry timestamps.

A Log is created once per run (by the CLI or a test) and handed to every
component that reports something. There is no module-level logging state.
"""

import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import TextIO


@dataclass
class Log:
    out: TextIO = field(default_factory=lambda: sys.stdout)
    err: TextIO = field(default_factory=lambda: sys.stderr)
    timestamps: bool = False
    warnings: list[str] = field(default_factory=list)

    def _stamp(self, message: str) -> str:
        if not self.timestamps:
            return message
        return f'{datetime.now():%Y-%m-%d %H:%M:%S} {message}'

    def info(self, message: str) -> None:
        """Progress on the primary stream."""
        print(self._stamp(message), file=self.out)

    def warn(self, message: str) -> None:
        """Non-fatal advisory on the diagnostic stream. Kept for the report."""
        self.warnings.append(message)
        print(self._stamp(f'warning: {message}'), file=self.err)
