"""boxscan: box dimensions from two detected planar faces."""

__version__ = "0.1.0"
