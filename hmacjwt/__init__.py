"""hmacjwt package.

Compact HMAC-signed JSON Web Tokens: canonical encoding, issuance and a
fixed-order verification engine, plus helpers to pull tokens out of request
headers.
"""

from .claims import Header, Payload
from .config import JWTConfig
from .errors import (
    CarrierMissingError,
    CustomValidationError,
    MalformedInputError,
    MalformedStructureError,
    NotActiveOrInvalidError,
    PrefixMismatchError,
    Reason,
    SignatureMismatchError,
    TokenError,
    UnsupportedAlgorithmError,
)
from .guard import AccessDenied, AuthFailure, AuthInternalError, JWTGuard
from .receiver import TokenReceiver
from .token import (
    ALGORITHM_HS256,
    DEFAULT_REGISTRY,
    AlgorithmRegistry,
    IssuedToken,
    Signer,
    TokenEngine,
    VerificationResult,
)

__all__ = [
    "Header",
    "Payload",
    "JWTConfig",
    "TokenEngine",
    "TokenReceiver",
    "JWTGuard",
    "Signer",
    "AlgorithmRegistry",
    "DEFAULT_REGISTRY",
    "ALGORITHM_HS256",
    "IssuedToken",
    "VerificationResult",
    "Reason",
    "TokenError",
    "MalformedStructureError",
    "MalformedInputError",
    "UnsupportedAlgorithmError",
    "NotActiveOrInvalidError",
    "CustomValidationError",
    "SignatureMismatchError",
    "CarrierMissingError",
    "PrefixMismatchError",
    "AuthFailure",
    "AccessDenied",
    "AuthInternalError",
]
