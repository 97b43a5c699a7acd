"""Environment Resolver: price multiplier per deployment environment."""

from __future__ import annotations

from quote_pricing.models.errors import ConfigurationError
from quote_pricing.models.schemas import EnvironmentFactors


def resolve_factor(table: EnvironmentFactors, environment: str) -> float:
    """Look up the multiplier for `environment`. Unknown tags are a configuration fault."""
    try:
        return table.factors[environment]
    except KeyError:
        known = ", ".join(sorted(table.factors))
        raise ConfigurationError(
            f"No environment factor configured for '{environment}' (known: {known})"
        ) from None
