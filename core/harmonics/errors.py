"""
core/harmonics/errors.py — Error types raised by the harmonic engine.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when generation or analysis parameters are invalid.

    Covers an unknown tuning mode, missing or too-short custom ratios, and
    out-of-range depth, breadth, threshold or denominator limits. Raised at
    the call that detects the problem and never recovered inside the engine.

    A ValueError subclass; the API layer maps it to HTTP 422.
    """
