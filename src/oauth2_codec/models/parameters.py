"""Parameter names for OAuth 2.0 requests and responses.

Each grant declares the closed set of parameters it may send. Requests
build their parameter sets through :func:`build_parameter_set`, so a key
that is not declared for the grant cannot reach the wire.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class AuthorizationRequestParameter(str, Enum):
    """Query parameters of an authorization request (RFC 6749 4.1.1, 4.2.1)."""

    RESPONSE_TYPE = "response_type"
    CLIENT_ID = "client_id"
    REDIRECT_URI = "redirect_uri"
    SCOPE = "scope"
    STATE = "state"


class ClientCredentialsParameter(str, Enum):
    """Body parameters of a client credentials token request (RFC 6749 4.4.2)."""

    GRANT_TYPE = "grant_type"
    SCOPE = "scope"
    CLIENT_ID = "client_id"
    CLIENT_SECRET = "client_secret"


class PasswordParameter(str, Enum):
    """Body parameters of a password token request (RFC 6749 4.3.2)."""

    GRANT_TYPE = "grant_type"
    SCOPE = "scope"
    CLIENT_ID = "client_id"
    CLIENT_SECRET = "client_secret"
    USERNAME = "username"
    PASSWORD = "password"


class AuthorizationCodeTokenParameter(str, Enum):
    """Body parameters of an authorization code exchange (RFC 6749 4.1.3)."""

    GRANT_TYPE = "grant_type"
    CODE = "code"
    REDIRECT_URI = "redirect_uri"
    CLIENT_ID = "client_id"
    CLIENT_SECRET = "client_secret"


class RefreshTokenParameter(str, Enum):
    """Body parameters of a refresh token request (RFC 6749 Section 6)."""

    GRANT_TYPE = "grant_type"
    REFRESH_TOKEN = "refresh_token"
    SCOPE = "scope"
    CLIENT_ID = "client_id"
    CLIENT_SECRET = "client_secret"


class AccessTokenResponseParameter(str, Enum):
    """Keys of an access token response (RFC 6749 5.1, 4.2.2)."""

    ACCESS_TOKEN = "access_token"
    TOKEN_TYPE = "token_type"
    EXPIRES_IN = "expires_in"
    REFRESH_TOKEN = "refresh_token"
    SCOPE = "scope"
    STATE = "state"


class AuthorizationResponseParameter(str, Enum):
    """Query parameters of an authorization code redirect (RFC 6749 4.1.2)."""

    CODE = "code"
    STATE = "state"


class ErrorResponseParameter(str, Enum):
    """Keys of an error response (RFC 6749 4.1.2.1, 5.2)."""

    ERROR = "error"
    ERROR_DESCRIPTION = "error_description"
    ERROR_URI = "error_uri"
    STATE = "state"


def build_parameter_set(
    parameter_type: type[Enum], values: Mapping[Enum, str | None]
) -> dict[str, str]:
    """Build the wire parameters for one request.

    Args:
        parameter_type: The parameter enumeration declared by the grant
        values: Parameter values keyed by enumeration member; ``None`` values
            are omitted

    Returns:
        Mapping of wire parameter names to values, in the order given

    Raises:
        TypeError: If a key is not a member of ``parameter_type``
    """
    parameters: dict[str, str] = {}
    for name, value in values.items():
        if not isinstance(name, parameter_type):
            raise TypeError(
                f"{name!r} is not a {parameter_type.__name__} member"
            )
        if value is None:
            continue
        parameters[name.value] = value
    return parameters
