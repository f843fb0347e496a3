"""Header and payload claim models.

Reserved names map to typed dataclass fields; every other key found in a
decoded segment is kept, in order, as an extension claim reachable through
:meth:`get` and :attr:`extra`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

from .codec import canonical_json
from .utils.time import unix_now

H = TypeVar("H", bound="Header")
P = TypeVar("P", bound="Payload")


def _check_str(name: str, value: Any, *, optional: bool = True) -> None:
    if value is None and optional:
        return
    if not isinstance(value, str):
        raise TypeError(f"Claim '{name}' must be a string")


def _check_int(name: str, value: Any) -> None:
    if value is None:
        return
    # bool is an int subclass but never a timestamp
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Claim '{name}' must be an integer Unix timestamp")


def _split(cls: type, data: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    reserved = {f.name for f in fields(cls)} - {"extra"}
    known: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}
    for key, value in data.items():
        if key in reserved:
            if value is None:
                raise TypeError(f"Claim '{key}' must not be null")
            known[key] = value
        else:
            extra[key] = value
    return known, extra


class _ClaimSet:
    """Accessors shared by :class:`Header` and :class:`Payload`."""

    extra: Mapping[str, Any]

    def _reserved_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(self) if f.name != "extra")  # type: ignore[arg-type]

    def get(self, name: str, default: Any = None) -> Any:
        """Return a reserved or extension claim, or ``default`` when absent."""
        if name in self._reserved_names():
            value = getattr(self, name)
            return default if value is None else value
        return self.extra.get(name, default)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def to_dict(self) -> Dict[str, Any]:
        """Return every present field, reserved first, then extensions."""
        data = {name: getattr(self, name) for name in self._reserved_names() if getattr(self, name) is not None}
        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data

    def _claims_hash(self) -> int:
        return hash((type(self).__name__, canonical_json(self.to_dict())))


@dataclass(frozen=True)
class Header(_ClaimSet):
    """JOSE header: signing algorithm, media type and extension fields."""

    alg: str = "HS256"
    typ: str = "JWT"
    cty: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_str("alg", self.alg, optional=False)
        if not self.alg:
            raise ValueError("Field 'alg' is mandatory")
        _check_str("typ", self.typ, optional=False)
        _check_str("cty", self.cty)
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    def __hash__(self) -> int:
        return self._claims_hash()

    @classmethod
    def from_dict(cls: Type[H], data: Mapping[str, Any]) -> H:
        if "alg" not in data:
            raise ValueError("Field 'alg' is mandatory")
        known, extra = _split(cls, data)
        return cls(**known, extra=extra)


@dataclass(frozen=True)
class Payload(_ClaimSet):
    """Registered claims plus arbitrary issuer-supplied claims.

    Subclass and override :meth:`is_valid` for domain checks such as audience
    matching, then hand the subclass to the engine as ``payload_cls``.
    """

    iss: Optional[str] = None
    sub: Optional[str] = None
    aud: Optional[str] = None
    exp: Optional[int] = None
    nbf: Optional[int] = None
    iat: Optional[int] = None
    jti: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("iss", "sub", "aud", "jti"):
            _check_str(name, getattr(self, name))
        for name in ("exp", "nbf", "iat"):
            _check_int(name, getattr(self, name))
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    def __hash__(self) -> int:
        return self._claims_hash()

    @classmethod
    def from_dict(cls: Type[P], data: Mapping[str, Any]) -> P:
        known, extra = _split(cls, data)
        return cls(**known, extra=extra)

    def is_active(self, now: Optional[int] = None) -> bool:
        """Return whether ``now`` falls inside the ``nbf``/``iat``..``exp`` window."""
        if now is None:
            now = unix_now()
        return (
            (self.exp is None or now < self.exp)
            and (self.nbf is None or self.nbf <= now)
            and (self.iat is None or self.iat <= now)
        )

    def is_valid(self) -> bool:
        return True
