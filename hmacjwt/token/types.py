"""Token datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..errors import Reason

if TYPE_CHECKING:
    from ..claims import Header, Payload


@dataclass(frozen=True)
class IssuedToken:
    token: str
    header: "Header"
    payload: "Payload"

    @property
    def token_id(self) -> Optional[str]:
        return self.payload.jti


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    reason: Reason
    header: Optional["Header"] = None
    payload: Optional["Payload"] = None
