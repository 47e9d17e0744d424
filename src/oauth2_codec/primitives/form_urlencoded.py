"""Form URL Encoded codec for OAuth 2.0 request bodies and redirect parameters.

Implements the ``application/x-www-form-urlencoded`` format used by token
endpoint requests (RFC 6749 Appendix B) with RFC 3986 percent-escaping.

Escaping follows RFC 3986 Section 3.4: every reserved character is encoded
except "?" and "/", so a value that is itself a URL (a ``redirect_uri``)
stays readable.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import quote, unquote_to_bytes

from oauth2_codec.models.errors import MalformedEncodingError

# General delimiters ":#[]@" and sub-delimiters "!$&'()*+,;=" are escaped.
# "?" and "/" are allowed in the query component.
_QUERY_SAFE = "/?"

_INVALID_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def escape(value: str) -> str:
    """Percent-escape a query string key or value.

    Args:
        value: The string to escape

    Returns:
        The escaped string. Spaces become ``%20``, never ``+``.
    """
    return quote(value, safe=_QUERY_SAFE)


def unescape(value: str) -> str:
    """Reverse :func:`escape`.

    Raises:
        MalformedEncodingError: If the value holds a broken percent escape or
            the escaped octets are not UTF-8
    """
    if _INVALID_PERCENT_ESCAPE.search(value):
        raise MalformedEncodingError(f"Invalid percent escape in {value!r}")

    try:
        return unquote_to_bytes(value).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedEncodingError(
            f"Percent-encoded octets are not UTF-8: {value!r}"
        ) from e


def encode(parameters: Mapping[str, str]) -> bytes:
    """Encode a mapping into form URL encoded bytes.

    Pairs are emitted in the mapping's iteration order.
    """
    return "&".join(
        f"{escape(key)}={escape(value)}" for key, value in parameters.items()
    ).encode("utf-8")


def decode(data: bytes | str) -> dict[str, str]:
    """Decode form URL encoded data into a mapping.

    Every component must hold exactly one "=". Any malformed component
    fails the whole decode.

    Raises:
        MalformedEncodingError: If the data cannot be decoded
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedEncodingError("Form data is not valid UTF-8") from e
    else:
        text = data

    if not text:
        return {}

    parameters: dict[str, str] = {}
    for component in text.split("&"):
        pair = component.split("=")
        if len(pair) != 2:
            raise MalformedEncodingError(
                f"Expected exactly one '=' in component {component!r}"
            )
        name, value = pair
        parameters[unescape(name)] = unescape(value)

    return parameters


@dataclass(frozen=True)
class FormURLEncoded:
    """Form URL encoded data for an HTTP body or a URL query."""

    parameters: dict[str, str] = field(default_factory=dict)

    def to_bytes(self) -> bytes:
        return encode(self.parameters)

    def to_query(self) -> str:
        return self.to_bytes().decode("ascii")

    @classmethod
    def from_bytes(cls, data: bytes | str) -> FormURLEncoded:
        """Parse form data into a FormURLEncoded value.

        Raises:
            MalformedEncodingError: If the data cannot be decoded
        """
        return cls(parameters=decode(data))
