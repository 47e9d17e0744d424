"""OAuth 2.0 error codes (RFC 6749 Sections 4.1.2.1, 4.2.2.1 and 5.2).

Both enumerations are closed. A code the server sends that is not listed
here makes the response unparseable rather than mapping to a catch-all.
"""

from __future__ import annotations

from enum import Enum


class AuthorizationErrorCode(str, Enum):
    """Error codes returned in an authorization redirect."""

    INVALID_REQUEST = "invalid_request"
    """The request is missing a required parameter, includes an invalid
    parameter value, includes a parameter more than once, or is otherwise
    malformed."""

    UNAUTHORIZED_CLIENT = "unauthorized_client"
    """The client is not authorized to request an authorization code (or
    token) using this method."""

    ACCESS_DENIED = "access_denied"
    """The resource owner or authorization server denied the request."""

    UNSUPPORTED_RESPONSE_TYPE = "unsupported_response_type"
    """The authorization server does not support this response type."""

    INVALID_SCOPE = "invalid_scope"
    """The requested scope is invalid, unknown, or malformed."""

    SERVER_ERROR = "server_error"
    """Stands in for a 500, which cannot be sent through a redirect."""

    TEMPORARILY_UNAVAILABLE = "temporarily_unavailable"
    """Stands in for a 503, which cannot be sent through a redirect."""


class AccessTokenErrorCode(str, Enum):
    """Error codes returned by the token endpoint."""

    INVALID_REQUEST = "invalid_request"
    """Missing or repeated parameter, multiple credentials, or an otherwise
    malformed request."""

    INVALID_CLIENT = "invalid_client"
    """Client authentication failed."""

    INVALID_GRANT = "invalid_grant"
    """The grant or refresh token is invalid, expired, revoked, does not
    match the redirection URI, or was issued to another client."""

    UNAUTHORIZED_CLIENT = "unauthorized_client"
    """The client is not authorized to use this grant type."""

    UNSUPPORTED_GRANT_TYPE = "unsupported_grant_type"
    """The grant type is not supported by the authorization server."""

    INVALID_SCOPE = "invalid_scope"
    """The requested scope is invalid, unknown, malformed, or exceeds the
    scope granted by the resource owner."""
