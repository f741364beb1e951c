"""
Error types raised by the top-hat transform.
"""
from __future__ import annotations


class TopHatError(ValueError):
    """Base class for invalid images and parameters."""


class InvalidInput(TopHatError):
    """Image is empty, not 2D, or could not be decoded."""


class InvalidParameter(TopHatError):
    """Radius, worker count or a CLI flag is out of range."""
