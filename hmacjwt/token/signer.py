"""HMAC signing over a closed algorithm registry."""

from __future__ import annotations

import hashlib
import hmac
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Union

from ..codec import b64url_encode
from ..errors import UnsupportedAlgorithmError

HashConstructor = Callable[..., Any]

ALGORITHM_HS256 = "HS256"
ALGORITHM_HS384 = "HS384"
ALGORITHM_HS512 = "HS512"

# Every alias a registry may ever contain. Nothing outside this table can be
# registered, so a header can never select an arbitrary digest.
HMAC_ALGORITHMS: Mapping[str, HashConstructor] = MappingProxyType(
    {
        ALGORITHM_HS256: hashlib.sha256,
        ALGORITHM_HS384: hashlib.sha384,
        ALGORITHM_HS512: hashlib.sha512,
    }
)


class AlgorithmRegistry:
    """Immutable alias -> hash primitive mapping chosen from :data:`HMAC_ALGORITHMS`."""

    def __init__(self, aliases: Iterable[str] = (ALGORITHM_HS256,)) -> None:
        selected: Dict[str, HashConstructor] = {}
        for alias in aliases:
            if alias not in HMAC_ALGORITHMS:
                raise UnsupportedAlgorithmError(f"Unknown or unsupported hash algorithm: '{alias}'")
            selected[alias] = HMAC_ALGORITHMS[alias]
        if not selected:
            raise ValueError("AlgorithmRegistry needs at least one algorithm")
        self._algorithms: Mapping[str, HashConstructor] = MappingProxyType(selected)

    def resolve(self, alias: str) -> HashConstructor:
        """Return the hash constructor for ``alias`` or raise :class:`UnsupportedAlgorithmError`."""
        try:
            return self._algorithms[alias]
        except (KeyError, TypeError):
            raise UnsupportedAlgorithmError(f"Unknown or unsupported hash algorithm: '{alias}'") from None

    def __contains__(self, alias: object) -> bool:
        return alias in self._algorithms

    def aliases(self) -> tuple[str, ...]:
        return tuple(self._algorithms)

    def __repr__(self) -> str:
        return f"AlgorithmRegistry({list(self._algorithms)!r})"


DEFAULT_REGISTRY = AlgorithmRegistry()


class Signer:
    """Compute and compare HMAC signatures for unsigned tokens."""

    def __init__(self, secret: Union[str, bytes], *, registry: AlgorithmRegistry = DEFAULT_REGISTRY) -> None:
        key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
        if not key:
            raise ValueError("Signing secret must not be empty")
        self._secret = key
        self.registry = registry

    def hash(self, data: str, algorithm: str) -> bytes:
        digestmod = self.registry.resolve(algorithm)
        return hmac.new(self._secret, data.encode("utf-8"), digestmod).digest()

    def sign(self, unsigned_token: str, algorithm: str) -> str:
        """Return the base64url signature of ``unsigned_token``."""
        return b64url_encode(self.hash(unsigned_token, algorithm))

    def verify(self, unsigned_token: str, signature: str, algorithm: str) -> bool:
        """Compare ``signature`` against a fresh one in constant time.

        Comparison is on the encoded text, so a non-canonical encoding of the
        right digest does not verify.
        """
        expected = self.sign(unsigned_token, algorithm)
        return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))

    def __repr__(self) -> str:
        return f"Signer(registry={self.registry!r})"
