"""Grant identifiers and client credentials shared by all requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class GrantType(str, Enum):
    """Values of the ``grant_type`` token request parameter."""

    AUTHORIZATION_CODE = "authorization_code"
    PASSWORD = "password"
    CLIENT_CREDENTIALS = "client_credentials"
    REFRESH_TOKEN = "refresh_token"


class ResponseType(str, Enum):
    """Values of the ``response_type`` authorization request parameter."""

    CODE = "code"  # Authorization Code Grant (RFC 6749 Section 4.1.1)
    TOKEN = "token"  # Implicit Grant (RFC 6749 Section 4.2.1)


@dataclass(frozen=True)
class ClientCredentials:
    """Client identifier and secret issued at registration."""

    client_id: str
    client_secret: str = field(repr=False)
