import pytest

from hmacjwt import codec
from hmacjwt.claims import Header, Payload
from hmacjwt.errors import (
    CustomValidationError,
    MalformedInputError,
    MalformedStructureError,
    NotActiveOrInvalidError,
    Reason,
    SignatureMismatchError,
    UnsupportedAlgorithmError,
)
from hmacjwt.token import AlgorithmRegistry, Signer, TokenEngine

NOW = 1_700_000_000
SECRET = "unit-secret"


def _engine(**kwargs) -> TokenEngine:
    kwargs.setdefault("clock", lambda: NOW)
    return TokenEngine(SECRET, **kwargs)


def _forge(header: dict, payload: dict, secret: str = SECRET, sign_as: str = "HS256") -> str:
    unsigned = f"{codec.encode(header)}.{codec.encode(payload)}"
    registry = AlgorithmRegistry(["HS256", "HS384", "HS512"])
    return f"{unsigned}.{Signer(secret, registry=registry).sign(unsigned, sign_as)}"


def test_issue_and_verify_round_trip() -> None:
    engine = _engine()
    issued = engine.issue_token(ttl=120, extra={"sub": "user-1", "role": "admin"})

    result = engine.verify(issued.token)
    assert result.valid is True
    assert result.reason == Reason.OK
    assert result.header == Header(alg="HS256")
    assert result.payload is not None
    assert result.payload.sub == "user-1"
    assert result.payload.get("role") == "admin"
    assert result.payload.iat == NOW
    assert result.payload.exp == NOW + 120
    assert result.payload.jti == issued.token_id


def test_issue_uses_default_ttl_and_unique_jti() -> None:
    engine = _engine(default_ttl=300)
    first = engine.issue_token()
    second = engine.issue_token()
    assert first.payload.exp == NOW + 300
    assert first.payload.jti != second.payload.jti
    assert len(engine.issue().split(".")) == 3


def test_round_trip_with_only_optional_fields_absent() -> None:
    token = _forge({"alg": "HS256"}, {})
    header, payload = _engine().authenticate(token)
    assert header.typ == "JWT"
    assert payload.to_dict() == {}


def test_issue_rejects_unsupported_algorithm() -> None:
    engine = _engine()
    for alias in ("none", "HS512", "RS256"):
        with pytest.raises(UnsupportedAlgorithmError):
            engine.issue(algorithm=alias)


def test_verify_rejects_unregistered_header_algorithm() -> None:
    engine = _engine()
    none_token = f"{codec.encode({'alg': 'none'})}.{codec.encode({'sub': 'x'})}.c2ln"
    assert engine.verify(none_token).reason == Reason.UNSUPPORTED_ALGORITHM

    hs512 = _forge({"alg": "HS512"}, {"exp": NOW - 10}, sign_as="HS512")
    with pytest.raises(UnsupportedAlgorithmError):
        engine.authenticate(hs512)


def test_registry_can_enable_more_algorithms() -> None:
    engine = _engine(registry=AlgorithmRegistry(["HS256", "HS512"]))
    token = engine.issue(algorithm="HS512")
    assert engine.verify(token).valid is True


@pytest.mark.parametrize(
    "token",
    ["", "abc", "abc.def", "a.b.c.d", "a.b.c.d.e", ".def.ghi", "abc..ghi", "abc.def."],
)
def test_structural_rejection(token: str) -> None:
    with pytest.raises(MalformedStructureError):
        _engine().authenticate(token)


def test_oversized_and_non_ascii_tokens_rejected() -> None:
    engine = _engine(max_token_length=64)
    assert engine.verify("a" * 30 + "." + "b" * 30 + "." + "c" * 30).reason == Reason.MALFORMED_STRUCTURE
    assert engine.verify("a.é.c").reason == Reason.MALFORMED_STRUCTURE


def test_undecodable_segments_rejected() -> None:
    engine = _engine()
    good_header = codec.encode({"alg": "HS256"})
    with pytest.raises(MalformedInputError):
        engine.authenticate(f"{good_header}.!!!!.sig")
    with pytest.raises(MalformedInputError):
        engine.authenticate(f"{codec.b64url_encode(b'nope')}.{codec.encode({})}.sig")


def test_expiry_boundary() -> None:
    engine = _engine()
    assert engine.verify(_forge({"alg": "HS256"}, {"exp": NOW - 1})).reason == Reason.NOT_ACTIVE_OR_INVALID
    assert engine.verify(_forge({"alg": "HS256"}, {"exp": NOW + 1})).valid is True
    assert engine.verify(_forge({"alg": "HS256"}, {"sub": "no-exp"})).valid is True


def test_not_before_boundary() -> None:
    engine = _engine()
    assert engine.verify(_forge({"alg": "HS256"}, {"nbf": NOW + 1000})).reason == Reason.NOT_ACTIVE_OR_INVALID
    assert engine.verify(_forge({"alg": "HS256"}, {"nbf": NOW})).valid is True
    assert engine.verify(_forge({"alg": "HS256"}, {"nbf": NOW - 1})).valid is True


def test_future_issued_at_rejected() -> None:
    result = _engine().verify(_forge({"alg": "HS256"}, {"iat": NOW + 60}))
    assert result.reason == Reason.NOT_ACTIVE_OR_INVALID


def test_payload_predicate_failure_looks_like_expiry() -> None:
    class AudiencePayload(Payload):
        def is_valid(self) -> bool:
            return self.aud == "billing"

    engine = _engine(payload_cls=AudiencePayload)
    wrong_aud = engine.verify(_forge({"alg": "HS256"}, {"aud": "search"}))
    expired = engine.verify(_forge({"alg": "HS256"}, {"aud": "billing", "exp": NOW - 1}))
    assert wrong_aud.reason == expired.reason == Reason.NOT_ACTIVE_OR_INVALID
    assert engine.verify(_forge({"alg": "HS256"}, {"aud": "billing"})).valid is True


def test_callback_runs_before_signature_check() -> None:
    engine = _engine()
    seen = []

    def record(header: Header, payload: Payload) -> None:
        seen.append((header.alg, payload.sub))

    token = _forge({"alg": "HS256"}, {"sub": "u1"}, secret="wrong-secret")
    with pytest.raises(SignatureMismatchError):
        engine.authenticate(token, record)
    assert seen == [("HS256", "u1")]


def test_callback_failures_become_custom_validation_errors() -> None:
    engine = _engine()
    token = engine.issue(extra={"sub": "u1"})

    def deny(header: Header, payload: Payload) -> None:
        raise PermissionError("user is banned")

    with pytest.raises(CustomValidationError) as excinfo:
        engine.authenticate(token, deny)
    assert isinstance(excinfo.value.__cause__, PermissionError)

    assert engine.verify(token, lambda h, p: False).reason == Reason.CUSTOM_VALIDATION_FAILED
    assert engine.verify(token, lambda h, p: None).valid is True


def test_wrong_secret_is_signature_mismatch() -> None:
    token = TokenEngine("other-secret", clock=lambda: NOW).issue()
    assert _engine().verify(token).reason == Reason.SIGNATURE_MISMATCH


def test_single_byte_tampering_never_accepted() -> None:
    engine = _engine()
    token = engine.issue(extra={"sub": "user-1", "role": "reader"})
    alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
    for i, char in enumerate(token):
        if char == ".":
            continue
        replacement = alphabet[(alphabet.index(char) + 1) % len(alphabet)]
        tampered = token[:i] + replacement + token[i + 1:]
        result = engine.verify(tampered)
        assert result.valid is False, f"tampered position {i} accepted"
        assert result.reason != Reason.OK
        assert result.payload is None


def test_rejection_carries_no_claims() -> None:
    result = _engine().verify(_forge({"alg": "HS256"}, {"sub": "u1", "exp": NOW - 1}))
    assert result.valid is False
    assert result.header is None and result.payload is None


def test_issue_rejects_non_finite_claims() -> None:
    with pytest.raises(ValueError):
        _engine().issue(extra={"score": float("nan")})


def test_issue_ignores_null_reserved_claims() -> None:
    issued = _engine().issue_token(ttl=30, extra={"aud": None, "exp": None, "note": None})
    assert issued.payload.aud is None
    assert issued.payload.exp == NOW + 30
    assert issued.payload.extra == {"note": None}
    assert _engine().verify(issued.token).valid is True


def test_issue_rejects_wrongly_typed_reserved_claims() -> None:
    with pytest.raises(TypeError):
        _engine().issue(extra={"exp": "tomorrow"})


def test_round_trip_with_every_reserved_claim_and_header_extensions() -> None:
    claims = {
        "iss": "auth.example",
        "sub": "user-1",
        "aud": "billing",
        "exp": NOW + 60,
        "nbf": NOW - 5,
        "iat": NOW - 10,
        "jti": "3f1c9a",
        "role": "admin",
        "scopes": ["read", "write"],
    }
    token = _forge({"alg": "HS256", "typ": "JWT", "cty": "JWT", "kid": "k1"}, claims)

    result = _engine().verify(token)
    assert result.valid is True
    assert result.header == Header(alg="HS256", cty="JWT", extra={"kid": "k1"})
    assert result.payload is not None
    assert result.payload.to_dict() == claims
    assert hash(result) == hash(_engine().verify(token))


def test_issued_token_carries_every_reserved_claim() -> None:
    engine = _engine()
    issued = engine.issue_token(
        ttl=60,
        extra={"iss": "auth.example", "sub": "user-1", "aud": "billing", "nbf": NOW, "team": "ops"},
    )
    result = engine.verify(issued.token)
    assert result.valid is True
    assert result.payload == issued.payload
    assert set(result.payload.to_dict()) == {"iss", "sub", "aud", "exp", "nbf", "iat", "jti", "team"}
