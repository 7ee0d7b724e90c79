"""Live player auction: award engine, snapshot persistence and roster exports."""

__version__ = "0.1.0"
