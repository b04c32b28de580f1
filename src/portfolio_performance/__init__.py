"""Portfolio position and performance engine."""

__version__ = "0.1.0"
