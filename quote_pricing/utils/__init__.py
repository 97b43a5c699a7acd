from .logger import setup_logging
from .hashing import model_digest, sha256_hash
from .rounding import round2, round4

__all__ = ["setup_logging", "model_digest", "sha256_hash", "round2", "round4"]
