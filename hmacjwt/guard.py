"""Request guard translating verification outcomes into transport denials."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from .claims import Payload
from .errors import TokenError
from .receiver import TokenReceiver
from .token.engine import TokenEngine, ValidationCallback

logger = logging.getLogger(__name__)


class AuthFailure(Exception):
    """Base for guard failures; carries the status code to answer with."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)


class AccessDenied(AuthFailure):
    status_code = 403
    message = "Access denied"


class AuthInternalError(AuthFailure):
    status_code = 500
    message = "Internal server error"


class JWTGuard:
    """Authenticate a request's headers against a :class:`TokenEngine`.

    Every token failure becomes :class:`AccessDenied` with one fixed message;
    anything else becomes :class:`AuthInternalError`. The underlying exception
    is chained as ``__cause__`` for server-side diagnostics.
    """

    def __init__(
        self,
        engine: TokenEngine,
        receiver: Optional[TokenReceiver] = None,
        *,
        callback: Optional[ValidationCallback] = None,
    ) -> None:
        self.engine = engine
        self.receiver = receiver or TokenReceiver()
        self.callback = callback

    def authenticate(self, headers: Mapping[str, str]) -> Payload:
        try:
            token = self.receiver.get_token(headers)
            _, payload = self.engine.authenticate(token, self.callback)
        except TokenError as exc:
            logger.debug("Request denied: %s", exc.reason.value)
            raise AccessDenied() from exc
        except Exception as exc:
            logger.exception("Token verification failed unexpectedly")
            raise AuthInternalError() from exc
        return payload

    def __call__(self, headers: Mapping[str, str]) -> Payload:
        return self.authenticate(headers)
