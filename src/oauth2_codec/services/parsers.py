"""Response discrimination for OAuth 2.0 grants.

Each parser combines the success and the error shape of one grant:

1. a response matching the success shape is returned as the success value;
2. otherwise a response matching the error shape is returned as the error
   value (an OAuth 2.0 error is expected protocol output, not an exception);
3. anything else raises ``ResponseRejectedError``.

Parsers never retry and never perform I/O.
"""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx

from oauth2_codec.models.errors import ResponseRejectedError, StateValidationError
from oauth2_codec.models.requests import (
    AccessTokenRequest,
    AuthorizationCodeRequest,
    ImplicitRequest,
    Request,
)
from oauth2_codec.models.responses import (
    AccessTokenErrorResponse,
    AccessTokenResponse,
    AuthorizationCodeResponse,
    AuthorizationErrorResponse,
    ErrorResponse,
    ImplicitAccessTokenResponse,
    OAuth2Response,
)
from oauth2_codec.services.security import validate_state

logger = logging.getLogger(__name__)

AuthorizationResultT = TypeVar(
    "AuthorizationResultT",
    AuthorizationCodeResponse,
    ImplicitAccessTokenResponse,
    AuthorizationErrorResponse,
)


def _log_error_response(error: ErrorResponse) -> None:
    logger.warning(
        f"OAuth 2.0 error response: {error.code.value} - "
        f"{error.error_description or 'No description provided'}"
    )


def _reject(what: str, status_code: int | None = None) -> ResponseRejectedError:
    if status_code is None:
        message = f"Unexpected {what}"
    else:
        message = f"Unexpected {what} (HTTP {status_code})"
    logger.warning(message)
    return ResponseRejectedError(message, status_code=status_code)


def _check_state(expected_state: str | None, actual_state: str | None) -> None:
    if expected_state is not None:
        validate_state(expected_state, actual_state)


def _finish_authorization(
    result: AuthorizationResultT, expected_state: str | None
) -> AuthorizationResultT:
    try:
        _check_state(expected_state, result.state)
    except StateValidationError as e:
        if isinstance(result, AuthorizationErrorResponse):
            raise StateValidationError(str(e), error_response=result) from e
        raise

    if isinstance(result, AuthorizationErrorResponse):
        _log_error_response(result)
    else:
        logger.debug(f"Parsed {type(result).__name__}")
    return result


def parse_access_token_response(
    response: httpx.Response,
) -> AccessTokenResponse | AccessTokenErrorResponse:
    """Parse a token endpoint response (RFC 6749 Section 5).

    Used by the client credentials, password, authorization code exchange
    and refresh token requests.

    Args:
        response: HTTP response from the token endpoint

    Returns:
        AccessTokenResponse for a 200 with ``access_token`` and
        ``token_type``, AccessTokenErrorResponse for a 400 with a known
        ``error`` code

    Raises:
        ResponseRejectedError: If the response matches neither shape
    """
    success = AccessTokenResponse.from_http_response(response)
    if success is not None:
        logger.debug(f"Parsed {success.token_type} access token response")
        return success

    error = AccessTokenErrorResponse.from_http_response(response)
    if error is not None:
        _log_error_response(error)
        return error

    raise _reject("token endpoint response", response.status_code)


def parse_authorization_response(
    response: httpx.Response, expected_state: str | None = None
) -> AuthorizationCodeResponse | AuthorizationErrorResponse:
    """Parse the authorization server's redirect for the authorization code grant.

    Args:
        response: The unfollowed redirect response from the authorization
            endpoint
        expected_state: State sent in the authorization request, if any

    Raises:
        ResponseRejectedError: If the redirect matches neither shape
        StateValidationError: If ``expected_state`` is given and the
            redirect does not echo it
    """
    result: AuthorizationCodeResponse | AuthorizationErrorResponse | None
    result = AuthorizationCodeResponse.from_http_response(response)
    if result is None:
        result = AuthorizationErrorResponse.from_http_response(response)
    if result is None:
        raise _reject("authorization response", response.status_code)

    return _finish_authorization(result, expected_state)


def parse_authorization_redirect(
    redirect_uri: str, expected_state: str | None = None
) -> AuthorizationCodeResponse | AuthorizationErrorResponse:
    """Parse the callback URL the user-agent was redirected to.

    For callers that only see the final URL (a local callback server, an
    embedded browser) rather than the redirect response itself.

    Raises:
        ResponseRejectedError: If the query matches neither shape
        StateValidationError: If ``expected_state`` is given and the
            redirect does not echo it
    """
    result: AuthorizationCodeResponse | AuthorizationErrorResponse | None
    result = AuthorizationCodeResponse.from_redirect_uri(redirect_uri)
    if result is None:
        result = AuthorizationErrorResponse.from_redirect_uri(redirect_uri)
    if result is None:
        raise _reject("authorization redirect")

    return _finish_authorization(result, expected_state)


def parse_implicit_response(
    response: httpx.Response, expected_state: str | None = None
) -> ImplicitAccessTokenResponse | AuthorizationErrorResponse:
    """Parse the authorization server's redirect for the implicit grant.

    Both the token and the error arrive in the fragment of the redirect URI.

    Raises:
        ResponseRejectedError: If the redirect matches neither shape
        StateValidationError: If ``expected_state`` is given and the
            redirect does not echo it
    """
    result: ImplicitAccessTokenResponse | AuthorizationErrorResponse | None
    result = ImplicitAccessTokenResponse.from_http_response(response)
    if result is None:
        result = AuthorizationErrorResponse.from_http_response(
            response, fragment=True
        )
    if result is None:
        raise _reject("implicit grant response", response.status_code)

    return _finish_authorization(result, expected_state)


def parse_implicit_redirect(
    redirect_uri: str, expected_state: str | None = None
) -> ImplicitAccessTokenResponse | AuthorizationErrorResponse:
    """Parse the callback URL of an implicit grant redirect.

    Raises:
        ResponseRejectedError: If the fragment matches neither shape
        StateValidationError: If ``expected_state`` is given and the
            redirect does not echo it
    """
    result: ImplicitAccessTokenResponse | AuthorizationErrorResponse | None
    result = ImplicitAccessTokenResponse.from_redirect_uri(redirect_uri)
    if result is None:
        result = AuthorizationErrorResponse.from_redirect_uri(
            redirect_uri, fragment=True
        )
    if result is None:
        raise _reject("implicit grant redirect")

    return _finish_authorization(result, expected_state)


def parse_response(request: Request, response: httpx.Response) -> OAuth2Response:
    """Parse the response to ``request`` with the parser of its grant.

    Authorization requests validate the echoed state against the state
    they were built with.

    Raises:
        ResponseRejectedError: If the response matches neither shape
        StateValidationError: If the redirect does not echo the request state
        TypeError: If ``request`` is not a known request type
    """
    if isinstance(request, AuthorizationCodeRequest):
        return parse_authorization_response(response, expected_state=request.state)
    if isinstance(request, ImplicitRequest):
        return parse_implicit_response(response, expected_state=request.state)
    if isinstance(request, AccessTokenRequest):
        return parse_access_token_response(response)
    raise TypeError(f"Unsupported request type: {type(request).__name__}")
