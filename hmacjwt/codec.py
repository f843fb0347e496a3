"""Canonical JSON + base64url encoding of token segments."""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any, Mapping, Protocol, Type, TypeVar, Union

from .errors import MalformedInputError

MAX_SEGMENT_LENGTH = 8192

_B64URL_RE = re.compile(r"[A-Za-z0-9_-]*")

T = TypeVar("T")


class Encodable(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


def canonical_json(value: Any) -> str:
    """Return stable compact JSON with sorted keys.

    Raises ``ValueError`` for NaN and infinite floats, which JSON cannot express.
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-JSON numeric literal: {name}")


def b64url_encode(data: bytes) -> str:
    """Base64url-encode ``data`` without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str) -> bytes:
    """Decode an unpadded base64url segment.

    Raises :class:`MalformedInputError` for characters outside the base64url
    alphabet and for lengths no encoder could produce.
    """
    if len(segment) > MAX_SEGMENT_LENGTH:
        raise MalformedInputError("segment exceeds maximum length")
    if not _B64URL_RE.fullmatch(segment) or len(segment) % 4 == 1:
        raise MalformedInputError("segment is not valid base64url")
    padded = segment + "=" * (-len(segment) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, ValueError) as exc:
        raise MalformedInputError("segment is not valid base64url") from exc


def encode(struct: Union[Encodable, Mapping[str, Any]]) -> str:
    """Serialize a claim structure to a canonical base64url segment."""
    data = dict(struct) if isinstance(struct, Mapping) else struct.to_dict()
    return b64url_encode(canonical_json(data).encode("utf-8"))


def decode(segment: str, shape: Type[T]) -> T:
    """Decode a base64url segment into an instance of ``shape``.

    ``shape`` must expose a ``from_dict`` classmethod. Type errors it raises
    for badly typed claims are reported as :class:`MalformedInputError`.
    """
    raw = b64url_decode(segment)
    try:
        data = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise MalformedInputError("segment does not hold valid JSON") from exc
    if not isinstance(data, dict):
        raise MalformedInputError("segment does not hold a JSON object")
    try:
        return shape.from_dict(data)  # type: ignore[attr-defined]
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(str(exc)) from exc
