"""Grid-based ecosystem simulation: grass, trees, deer and fire."""

__version__ = "0.1.0"
