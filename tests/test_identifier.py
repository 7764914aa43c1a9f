# tests/test_identifier.py
import pytest

from preference_center.api.identifier import (
    EMPTY_ID_MESSAGE,
    INVALID_FORMAT_MESSAGE,
    InvalidIdentifierError,
    decode_customer_id,
    encode_customer_id,
)


@pytest.mark.parametrize(
    "encoded, expected",
    [
        ("Y3VzdG9tZXIx", "customer1"),
        ("MQ==", "1"),
        ("MQ", "1"),  # padding is optional
        ("dXNlckBleGFtcGxlLmNvbQ==", "user@example.com"),
        ("w6lsw6huZQ==", "élène"),
    ],
)
def test_decode_valid_identifiers(encoded, expected):
    assert decode_customer_id(encoded) == expected


@pytest.mark.parametrize(
    "encoded", ["not-base64!", "abc def", "a_b", "abc===", "ab=c", "%2F", "abc\n", "Y3VzdG9tZXIx\n"]
)
def test_decode_rejects_non_base64_alphabet(encoded):
    with pytest.raises(InvalidIdentifierError) as exc_info:
        decode_customer_id(encoded)
    assert str(exc_info.value) == INVALID_FORMAT_MESSAGE


@pytest.mark.parametrize("encoded", ["", "=", "==", "a"])
def test_decode_rejects_empty_result(encoded):
    with pytest.raises(InvalidIdentifierError) as exc_info:
        decode_customer_id(encoded)
    assert str(exc_info.value) == EMPTY_ID_MESSAGE


def test_decode_does_not_restrict_decoded_characters():
    # base64 of "a/b c\n"
    assert decode_customer_id("YS9iIGMK") == "a/b c\n"


def test_invalid_utf8_is_replaced_not_rejected():
    # 0xff is never valid UTF-8
    assert decode_customer_id("/w==") == "\ufffd"


def test_encode_matches_standard_base64():
    assert encode_customer_id("customer1") == "Y3VzdG9tZXIx"
    assert decode_customer_id(encode_customer_id("cust/omer+42")) == "cust/omer+42"
