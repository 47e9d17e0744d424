"""Exception hierarchy for the OAuth 2.0 codec.

Separates caller misconfiguration, undecodable server responses and
well-formed OAuth 2.0 error responses so each can be handled on its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from oauth2_codec.models.responses import ErrorResponse


class OAuth2Error(Exception):
    """Base exception for all OAuth 2.0 codec errors."""

    pass


class ConfigurationError(OAuth2Error):
    """Raised when a request is built from invalid client configuration."""

    pass


class InvalidEndpointError(ConfigurationError):
    """Raised when a request endpoint is not a usable http(s) URL."""

    def __init__(self, endpoint: str, reason: str):
        super().__init__(f"Invalid endpoint URL {endpoint!r}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class MalformedEncodingError(OAuth2Error):
    """Raised when form URL encoded data cannot be decoded."""

    pass


class ResponseRejectedError(OAuth2Error):
    """Raised when a response matches neither the success nor the error shape.

    This is not an OAuth 2.0 error reported by the server: the server sent
    something the grant does not define (wrong status code, missing required
    field, undecodable body, unknown error code).
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(OAuth2Error):
    """An OAuth 2.0 error response, raised on request.

    Parsers return error responses as values. Callers that prefer exceptions
    convert them with ``ErrorResponse.to_exception()``.
    """

    def __init__(self, error_response: ErrorResponse):
        message = f"OAuth 2.0 error: {error_response.code.value}"
        if error_response.error_description:
            message += f" ({error_response.error_description})"
        if error_response.error_uri:
            message += f" See: {error_response.error_uri}"
        super().__init__(message)
        self.error_response = error_response


class StateValidationError(OAuth2Error):
    """Raised when a redirect does not echo the request's ``state``.

    If the redirect was an authorization error, the parsed error is kept in
    ``error_response`` so its code is not lost.
    """

    def __init__(self, message: str, error_response: ErrorResponse | None = None):
        super().__init__(message)
        self.error_response = error_response


class TransportError(OAuth2Error):
    """Raised by the client adapter when the HTTP exchange itself fails."""

    pass
