"""
Error types raised by the geometry core.

Both derive from ValueError so callers that already guard against bad input
with `except ValueError` keep working.
"""


class MalformedCurveError(ValueError):
    """Impulse/arc-step input that cannot describe a curve (empty, mismatched, negative)."""


class UnsatisfiableTelescopeError(ValueError):
    """A resolved shell list that cannot be built, e.g. a shell with non-positive radius."""
