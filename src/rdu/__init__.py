"""rdu: recursive disk usage, in the manner of du."""

__version__ = "0.1.0"
