"""
Error types raised by the world generation pipeline.

Configuration errors are raised before any tile is created. Invariant
violations mean the pipeline itself is inconsistent and are never
recovered from.
"""


class WorldGenerationError(Exception):
    """Base class for all world generation failures."""


class ConfigurationError(WorldGenerationError, ValueError):
    """Raised when a generation request cannot be satisfied as configured."""


class InvariantViolation(WorldGenerationError, RuntimeError):
    """Raised when internal pipeline state breaks a structural invariant."""
