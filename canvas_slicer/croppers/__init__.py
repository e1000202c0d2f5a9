"""Crop backends. Each module defines a `cropper`; canvas_slicer.registry lists them."""
