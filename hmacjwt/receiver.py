"""Pull a raw token out of a transport carrier such as an HTTP header."""

from __future__ import annotations

from typing import Mapping, Optional

from .errors import CarrierMissingError, PrefixMismatchError


class TokenReceiver:
    """Strip the configured prefix from a carrier value.

    With ``prefix="Bearer"`` the carrier ``"Bearer abc.def.ghi"`` yields
    ``"abc.def.ghi"``. An empty prefix returns the carrier value unchanged.
    """

    def __init__(self, prefix: str = "Bearer", header_name: str = "Authorization") -> None:
        self.prefix = prefix
        self.header_name = header_name

    def get_token(self, headers: Mapping[str, str]) -> str:
        """Look up :attr:`header_name` (case-insensitively) and extract the token."""
        return self.extract(self._lookup(headers))

    def extract(self, value: Optional[str]) -> str:
        if not value:
            raise CarrierMissingError(f"JWT header '{self.header_name}' not found in request")
        if not self.prefix:
            return value
        marker = f"{self.prefix} "
        if not value.startswith(marker):
            raise PrefixMismatchError(f"JWT token is invalid: prefix '{self.prefix}' not found")
        return value[len(marker):]

    def _lookup(self, headers: Mapping[str, str]) -> Optional[str]:
        value = headers.get(self.header_name)
        if value is not None:
            return value
        wanted = self.header_name.lower()
        for name, candidate in headers.items():
            if name.lower() == wanted:
                return candidate
        return None
