"""Crackd Rewind: windowed analytics digest over captions, engagement and communities."""

__version__ = "0.1.0"
