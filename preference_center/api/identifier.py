# preference_center/api/identifier.py
"""
Customer identifiers travel in preference links as a standard base64 path
segment. Decoding is lenient about padding, matching what browsers and most
mail tooling produce, but the alphabet is checked up front.
"""

import base64
import binascii
import re

BASE64_PATTERN = re.compile(r"[A-Za-z0-9+/]*={0,2}")

INVALID_FORMAT_MESSAGE = "Invalid base64 format"
EMPTY_ID_MESSAGE = "Invalid ID (empty after decoding)"


class InvalidIdentifierError(ValueError):
    """Raised when an encoded customer identifier cannot be used."""


def decode_customer_id(encoded: str) -> str:
    if not BASE64_PATTERN.fullmatch(encoded):
        raise InvalidIdentifierError(INVALID_FORMAT_MESSAGE)

    data = encoded.rstrip("=")
    # A single trailing character carries fewer than 8 bits and decodes to nothing
    if len(data) % 4 == 1:
        data = data[:-1]
    data += "=" * (-len(data) % 4)

    try:
        raw = base64.b64decode(data)
    except binascii.Error as e:
        raise InvalidIdentifierError(INVALID_FORMAT_MESSAGE) from e

    customer_id = raw.decode("utf-8", errors="replace")
    if not customer_id:
        raise InvalidIdentifierError(EMPTY_ID_MESSAGE)
    return customer_id


def encode_customer_id(customer_id: str) -> str:
    return base64.b64encode(customer_id.encode("utf-8")).decode("ascii")
