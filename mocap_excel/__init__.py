"""Motion-capture workbook extraction for the swing/pitch visualizer."""

__version__ = "0.3.0"
