"""Token issuance and verification."""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Callable, Mapping, Optional, Tuple, Type, Union
from uuid import uuid4

from .. import codec
from ..claims import Header, Payload
from ..errors import (
    CustomValidationError,
    MalformedStructureError,
    NotActiveOrInvalidError,
    Reason,
    SignatureMismatchError,
    TokenError,
)
from ..utils.time import unix_now
from .signer import ALGORITHM_HS256, DEFAULT_REGISTRY, AlgorithmRegistry, Signer
from .types import IssuedToken, VerificationResult

logger = logging.getLogger(__name__)

MAX_TOKEN_LENGTH = 16384
DEFAULT_TTL = 60

ValidationCallback = Callable[[Header, Payload], Optional[bool]]


class TokenEngine:
    """Issue and verify compact HMAC-signed tokens.

    Verification runs in a fixed order: split, decode, temporal and payload
    predicate, caller hook, signature. The secret only takes part in the last
    step.
    """

    def __init__(
        self,
        secret: Union[str, bytes],
        *,
        default_ttl: int = DEFAULT_TTL,
        registry: AlgorithmRegistry = DEFAULT_REGISTRY,
        header_cls: Type[Header] = Header,
        payload_cls: Type[Payload] = Payload,
        clock: Callable[[], int] = unix_now,
        max_token_length: int = MAX_TOKEN_LENGTH,
    ) -> None:
        self._signer = Signer(secret, registry=registry)
        self.registry = registry
        self.default_ttl = default_ttl
        self.header_cls = header_cls
        self.payload_cls = payload_cls
        self.max_token_length = max_token_length
        self._clock = clock

    def issue(
        self,
        ttl: Optional[int] = None,
        algorithm: str = ALGORITHM_HS256,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Return a freshly signed token string.

        ``extra`` claims are merged over the generated ``iat``, ``exp`` and
        ``jti``. A reserved claim given as ``None`` is ignored, so it never removes
        a generated claim.

        Raises:
            UnsupportedAlgorithmError: ``algorithm`` is not registered.
            TypeError: a reserved claim in ``extra`` has the wrong type.
            ValueError: a claim is not JSON-representable (NaN, infinity).
        """
        return self.issue_token(ttl, algorithm, extra).token

    def issue_token(
        self,
        ttl: Optional[int] = None,
        algorithm: str = ALGORITHM_HS256,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> IssuedToken:
        """Build header and payload, sign them and return all three."""
        self.registry.resolve(algorithm)
        header = self.header_cls(alg=algorithm)
        payload = self._build_payload(self.default_ttl if ttl is None else ttl, extra)

        unsigned = f"{codec.encode(header)}.{codec.encode(payload)}"
        token = f"{unsigned}.{self._signer.sign(unsigned, header.alg)}"
        logger.debug("Issued token jti=%s alg=%s exp=%s", payload.jti, header.alg, payload.exp)
        return IssuedToken(token=token, header=header, payload=payload)

    def authenticate(self, token: str, callback: Optional[ValidationCallback] = None) -> Tuple[Header, Payload]:
        """Verify ``token`` and return its decoded header and payload.

        ``callback`` runs after the temporal check and before the signature
        comparison. It rejects the token by raising or by returning ``False``.

        Raises:
            TokenError: the subclass names the step that failed.
        """
        header_segment, payload_segment, signature = self._split(token)

        header = codec.decode(header_segment, self.header_cls)
        self.registry.resolve(header.alg)
        payload = codec.decode(payload_segment, self.payload_cls)

        if not (payload.is_active(self._clock()) and payload.is_valid()):
            raise NotActiveOrInvalidError("Token is expired, not active yet or invalid")

        if callback is not None:
            self._run_callback(callback, header, payload)

        if not self._signer.verify(f"{header_segment}.{payload_segment}", signature, header.alg):
            raise SignatureMismatchError("Token signature mismatch")
        return header, payload

    def verify(self, token: str, callback: Optional[ValidationCallback] = None) -> VerificationResult:
        """Like :meth:`authenticate` but reports the outcome as a result object."""
        try:
            header, payload = self.authenticate(token, callback)
        except TokenError as exc:
            return VerificationResult(False, exc.reason)
        return VerificationResult(True, Reason.OK, header=header, payload=payload)

    def _split(self, token: str) -> Tuple[str, str, str]:
        if not isinstance(token, str) or not token.isascii():
            raise MalformedStructureError("Token must be an ASCII string")
        if len(token) > self.max_token_length:
            raise MalformedStructureError("Token exceeds maximum length")
        parts = token.split(".")
        if len(parts) != 3 or not all(parts):
            raise MalformedStructureError("Token must have three non-empty segments")
        return parts[0], parts[1], parts[2]

    def _build_payload(self, ttl: int, extra: Optional[Mapping[str, Any]]) -> Payload:
        issued_at = self._clock()
        claims = {
            "iat": issued_at,
            "exp": issued_at + ttl,
            "jti": uuid4().hex,
        }
        reserved = {f.name for f in fields(self.payload_cls)} - {"extra"}
        for name, value in (extra or {}).items():
            if value is None and name in reserved:
                continue
            claims[name] = value
        return self.payload_cls.from_dict(claims)

    @staticmethod
    def _run_callback(callback: ValidationCallback, header: Header, payload: Payload) -> None:
        try:
            outcome = callback(header, payload)
        except CustomValidationError:
            raise
        except Exception as exc:
            raise CustomValidationError("Custom validation failed") from exc
        if outcome is False:
            raise CustomValidationError("Custom validation failed")
