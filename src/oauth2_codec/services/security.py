"""State parameter helpers for redirect-based OAuth 2.0 flows.

The state parameter ties an authorization redirect to the request that
started it (RFC 6749 Section 10.12).
"""

from __future__ import annotations

import secrets
import string

from oauth2_codec.models.errors import StateValidationError

# RFC 3986 unreserved characters; never escaped in a query
_STATE_ALPHABET = string.ascii_letters + string.digits + "-._~"


def generate_state(length: int = 32) -> str:
    """Return a random, unguessable value for the ``state`` request parameter.

    Args:
        length: Number of characters in the value

    Returns:
        A string that can be placed in a query without escaping
    """
    if length < 1:
        raise ValueError("state length must be positive")
    return "".join(secrets.choice(_STATE_ALPHABET) for _ in range(length))


def validate_state(expected: str, actual: str | None) -> None:
    """Check that a redirect echoes the state its request was sent with.

    Args:
        expected: The ``state`` placed in the authorization request
        actual: The ``state`` read back from the redirect, or None when the
            redirect carried none

    Raises:
        StateValidationError: If ``actual`` is None or differs from
            ``expected``
    """
    if actual is None:
        raise StateValidationError("Redirect is missing the expected state")
    if not secrets.compare_digest(expected.encode("utf-8"), actual.encode("utf-8")):
        raise StateValidationError("Redirect state mismatch")
