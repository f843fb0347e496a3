"""Token signing, issuance and verification."""

from .engine import TokenEngine, ValidationCallback
from .signer import (
    ALGORITHM_HS256,
    ALGORITHM_HS384,
    ALGORITHM_HS512,
    DEFAULT_REGISTRY,
    HMAC_ALGORITHMS,
    AlgorithmRegistry,
    Signer,
)
from .types import IssuedToken, VerificationResult

__all__ = [
    "TokenEngine",
    "ValidationCallback",
    "AlgorithmRegistry",
    "Signer",
    "DEFAULT_REGISTRY",
    "HMAC_ALGORITHMS",
    "ALGORITHM_HS256",
    "ALGORITHM_HS384",
    "ALGORITHM_HS512",
    "IssuedToken",
    "VerificationResult",
]
