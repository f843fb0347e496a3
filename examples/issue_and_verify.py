"""Issue a token and check it the way a request handler would."""

from __future__ import annotations

import logging

from hmacjwt import AccessDenied, JWTConfig, JWTGuard, Payload


class BillingPayload(Payload):
    def is_valid(self) -> bool:
        return self.aud == "billing"


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    config = JWTConfig.from_env({"JWT_KEY": "example-secret", "JWT_TTL": "120"})
    engine = config.build_engine(payload_cls=BillingPayload)
    guard = JWTGuard(engine, config.build_receiver())

    token = engine.issue(extra={"sub": "user-42", "aud": "billing", "role": "admin"})
    print("token:", token)

    payload = guard({"Authorization": f"Bearer {token}"})
    print("accepted:", payload.to_dict())

    try:
        guard({"Authorization": token})
    except AccessDenied as exc:
        print("denied:", exc.status_code, exc)

    print("verify:", engine.verify(token + "x").reason.value)


if __name__ == "__main__":
    main()
