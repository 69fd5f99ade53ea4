"""studyhours — track cumulative study hours per subject."""

__version__ = "0.1.0"
