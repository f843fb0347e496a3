import pytest

from hmacjwt.errors import CarrierMissingError, PrefixMismatchError
from hmacjwt.receiver import TokenReceiver


def test_bearer_prefix_is_stripped() -> None:
    assert TokenReceiver().extract("Bearer abc.def.ghi") == "abc.def.ghi"


def test_only_one_prefix_occurrence_is_stripped() -> None:
    assert TokenReceiver().extract("Bearer Bearer abc") == "Bearer abc"


def test_missing_prefix_is_rejected() -> None:
    receiver = TokenReceiver(prefix="Bearer")
    with pytest.raises(PrefixMismatchError):
        receiver.extract("abc.def.ghi")
    with pytest.raises(PrefixMismatchError):
        receiver.extract("Bearerabc.def.ghi")
    with pytest.raises(PrefixMismatchError):
        receiver.extract("Basic abc.def.ghi")


def test_empty_prefix_returns_value_verbatim() -> None:
    assert TokenReceiver(prefix="").extract("abc.def.ghi") == "abc.def.ghi"
    assert TokenReceiver(prefix="").extract("Bearer abc.def.ghi") == "Bearer abc.def.ghi"


def test_missing_carrier() -> None:
    receiver = TokenReceiver()
    with pytest.raises(CarrierMissingError):
        receiver.extract(None)
    with pytest.raises(CarrierMissingError):
        receiver.extract("")
    with pytest.raises(CarrierMissingError):
        receiver.get_token({"Content-Type": "application/json"})


def test_header_lookup_is_case_insensitive() -> None:
    receiver = TokenReceiver(prefix="Token", header_name="X-Auth")
    assert receiver.get_token({"x-auth": "Token abc.def.ghi"}) == "abc.def.ghi"
    assert receiver.get_token({"X-Auth": "Token t.u.v"}) == "t.u.v"
