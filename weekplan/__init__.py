"""weekplan - weekly training-plan scheduling core."""

__version__ = "0.3.0"
