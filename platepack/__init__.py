"""Build plate packing for layer-based manufacturing."""

__version__ = "0.1.0"
