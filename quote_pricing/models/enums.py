from enum import Enum

class LadderMode(str, Enum):
    STEPPED = "stepped"
    SMOOTH = "smooth"

class PricingModelKind(str, Enum):
    PAY_PER_USE = "pay_per_use"
    FIXED_COMMITMENT = "fixed_commitment"

class CommitmentAnchor(str, Enum):
    PEAK = "peak"
    AVERAGE = "average"
    P90 = "p90"
    P95 = "p95"
    CUSTOM = "custom"  # any percentile of the raw series
