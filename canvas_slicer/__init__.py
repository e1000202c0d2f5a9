"""canvas-slicer: export every named shape of a diagram canvas as its own PNG."""

__version__ = '0.1.0'
