"""Flower shop catalog API with a read-through Redis cache."""

__version__ = "1.0.0"
