"""canvas_slicer.core: Foundation layer.

Contains the document types, bounds parser, shape walker, crop planner,
settings and report builder. This module has NO dependencies on
canvas_slicer.croppers or canvas_slicer.registry.
Only the stdlib is allowed here.
"""
