"""Exception hierarchy for token handling.

Every exception carries a :class:`Reason` so callers that prefer result
objects can fold it into a :class:`~hmacjwt.token.types.VerificationResult`.
"""

from __future__ import annotations

from enum import Enum


class Reason(str, Enum):
    """Outcome of a verification or extraction step."""

    OK = "ok"
    MALFORMED_STRUCTURE = "malformed_structure"
    MALFORMED_INPUT = "malformed_input"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    NOT_ACTIVE_OR_INVALID = "not_active_or_invalid"
    CUSTOM_VALIDATION_FAILED = "custom_validation_failed"
    SIGNATURE_MISMATCH = "signature_mismatch"
    CARRIER_MISSING = "carrier_missing"
    PREFIX_MISMATCH = "prefix_mismatch"


class TokenError(Exception):
    """Base class for every token-level failure."""

    reason: Reason = Reason.MALFORMED_INPUT


class MalformedStructureError(TokenError):
    """Wrong segment count, empty segment or oversized token."""

    reason = Reason.MALFORMED_STRUCTURE


class MalformedInputError(TokenError):
    """Segment is not base64url or does not hold a valid JSON object."""

    reason = Reason.MALFORMED_INPUT


class UnsupportedAlgorithmError(TokenError):
    """Algorithm alias is absent from the registry."""

    reason = Reason.UNSUPPORTED_ALGORITHM


class NotActiveOrInvalidError(TokenError):
    """Temporal window or payload predicate rejected the token."""

    reason = Reason.NOT_ACTIVE_OR_INVALID


class CustomValidationError(TokenError):
    """Caller-supplied validation hook rejected the token."""

    reason = Reason.CUSTOM_VALIDATION_FAILED


class SignatureMismatchError(TokenError):
    reason = Reason.SIGNATURE_MISMATCH


class CarrierMissingError(TokenError):
    reason = Reason.CARRIER_MISSING


class PrefixMismatchError(TokenError):
    reason = Reason.PREFIX_MISMATCH
