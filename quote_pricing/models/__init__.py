from .enums import CommitmentAnchor, LadderMode, PricingModelKind
from .errors import (
    ArithmeticDegenerateError,
    ConfigurationError,
    InvalidInputError,
    PricingError,
)

__all__ = [
    "CommitmentAnchor",
    "LadderMode",
    "PricingModelKind",
    "ArithmeticDegenerateError",
    "ConfigurationError",
    "InvalidInputError",
    "PricingError",
]
