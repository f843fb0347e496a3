"""Configuration surface and factory bindings."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Union

from .guard import JWTGuard
from .receiver import TokenReceiver
from .token.engine import DEFAULT_TTL, TokenEngine


@dataclass(frozen=True)
class JWTConfig:
    """Settings shared by the engine, the receiver and the guard."""

    secret: Union[str, bytes]
    ttl: int = DEFAULT_TTL
    prefix: str = "Bearer"
    header: str = "Authorization"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "JWTConfig":
        """Read ``JWT_KEY``, ``JWT_TTL``, ``JWT_HEADER_PREFIX`` and ``JWT_HEADER_NAME``.

        Keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "secret": env.get("JWT_KEY"),
            "ttl": int(env.get("JWT_TTL", DEFAULT_TTL)),
            "prefix": env.get("JWT_HEADER_PREFIX", "Bearer"),
            "header": env.get("JWT_HEADER_NAME", "Authorization"),
        }
        values.update(overrides)
        if not values["secret"]:
            raise ValueError("JWT secret is not configured; set JWT_KEY")
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "JWTConfig":
        return replace(self, **overrides)

    def build_engine(self, **kwargs: Any) -> TokenEngine:
        return TokenEngine(self.secret, default_ttl=self.ttl, **kwargs)

    def build_receiver(self) -> TokenReceiver:
        return TokenReceiver(prefix=self.prefix, header_name=self.header)

    def build_guard(self, **kwargs: Any) -> JWTGuard:
        return JWTGuard(self.build_engine(), self.build_receiver(), **kwargs)
