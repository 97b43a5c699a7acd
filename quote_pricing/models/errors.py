"""
Error taxonomy for the pricing engine.

Errors surface synchronously to the immediate caller. The engine never
falls back to a default price, and the orchestrator re-raises lower-level
errors unchanged.

They derive from Exception rather than ValueError: pydantic only wraps
ValueError/AssertionError raised inside validators, so a configuration
fault detected while a table is being built reaches the caller as-is.
"""

from __future__ import annotations


class PricingError(Exception):
    """Base class for every error raised by the pricing engine."""

    kind = "pricing_error"


class InvalidInputError(PricingError):
    """Non-positive quantity, term or price, or an empty usage series."""

    kind = "invalid_input"


class ConfigurationError(PricingError):
    """Missing ladder, term or environment entry, or a malformed table."""

    kind = "configuration_error"


class ArithmeticDegenerateError(PricingError):
    """A ratio whose denominator is zero, e.g. break-even with no recurring cost."""

    kind = "arithmetic_degenerate"
