import pytest

from fula.bigint import decode_big_int, encode_big_int


def test_encode_large_value():
    assert encode_big_int(12345678901234567890123) == "12345678901234567890123"


def test_encode_negative_value():
    assert encode_big_int(-42) == "-42"


@pytest.mark.parametrize("value", [0, 1, -1, 10**30, -(10**40) + 7])
def test_round_trip(value):
    assert decode_big_int(encode_big_int(value)) == value


def test_decode_null_gives_none():
    assert decode_big_int("null") is None


def test_decode_accepts_bytes():
    assert decode_big_int(b"987654321987654321") == 987654321987654321


def test_decode_accepts_plus_sign():
    assert decode_big_int("+7") == 7


@pytest.mark.parametrize("text", ["abc", "1.5", '"12"', "", "1e3", "true", "1_000"])
def test_decode_rejects_invalid(text):
    with pytest.raises(ValueError, match="not a valid big integer"):
        decode_big_int(text)


def test_decode_error_names_input():
    with pytest.raises(ValueError) as info:
        decode_big_int("abc")
    assert str(info.value) == "not a valid big integer: abc"


@pytest.mark.parametrize("value", [True, 1.0, "5", None])
def test_encode_rejects_non_integers(value):
    with pytest.raises(TypeError):
        encode_big_int(value)