"""Typed OAuth 2.0 responses decoded from raw HTTP responses.

Each model decodes exactly one response shape. ``from_http_response``
returns ``None`` when the response does not have that shape (wrong status,
undecodable body, missing required field, unknown error code); it never
fills in a default for a required field.

Token endpoint responses are JSON bodies (RFC 6749 Section 5). Authorization
responses arrive in the ``Location`` of a redirect: the query component for
the authorization code grant, the fragment for the implicit grant.
"""

from __future__ import annotations

import json
import logging
from typing import Any, ClassVar, TypeVar
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from oauth2_codec.models.error_codes import AccessTokenErrorCode, AuthorizationErrorCode
from oauth2_codec.models.errors import MalformedEncodingError, ProtocolError
from oauth2_codec.models.parameters import (
    AccessTokenResponseParameter,
    ErrorResponseParameter,
)
from oauth2_codec.primitives.form_urlencoded import decode

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound="OAuth2Response")


class OAuth2Response(BaseModel):
    """Base class for decoded OAuth 2.0 responses. Immutable once built."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def _from_parameters(
        cls: type[ResponseT], parameters: dict[str, Any] | None
    ) -> ResponseT | None:
        if parameters is None:
            return None
        try:
            return cls.model_validate(parameters)
        except ValidationError as e:
            logger.debug(
                f"Payload does not match {cls.__name__}: {e.error_count()} error(s)"
            )
            return None


def json_object(response: httpx.Response) -> dict[str, Any] | None:
    """Decode a response body as a UTF-8 JSON object.

    Returns:
        The decoded object, or None if the body is not UTF-8, not JSON, or
        not a JSON object
    """
    try:
        data = json.loads(response.content.decode("utf-8"))
    except ValueError:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        return None
    if not isinstance(data, dict):
        return None
    return data


def redirect_location(response: httpx.Response) -> str | None:
    """Return the ``Location`` of a redirect response, or None."""
    if not response.is_redirect:
        return None
    return response.headers["Location"]


def redirect_parameters(uri: str, *, fragment: bool = False) -> dict[str, str] | None:
    """Decode the query (or fragment) parameters of a redirect URI.

    Returns:
        The decoded parameters, or None if they are not valid form data
    """
    parts = urlsplit(uri)
    component = parts.fragment if fragment else parts.query
    try:
        return decode(component)
    except MalformedEncodingError as e:
        logger.debug(f"Malformed redirect parameters: {e}")
        return None


def lifetime_seconds(value: Any) -> Any:
    """Refuse a JSON boolean where a lifetime in seconds is expected.

    ``bool`` is an ``int`` subclass, so lax validation would read ``true``
    as a one second lifetime. Numeric strings still pass on to ``int``.
    """
    if isinstance(value, bool):
        raise ValueError("expires_in must be an integer, not a boolean")
    return value


class AccessTokenResponse(OAuth2Response):
    """Successful token endpoint response (RFC 6749 Section 5.1).

    Used by every grant that talks to the token endpoint. ``refresh_token``
    is only ever present when the server issued one.
    """

    status_code: ClassVar[int] = httpx.codes.OK

    access_token: str = Field(repr=False)
    token_type: str
    expires: int | None = Field(
        default=None, alias=AccessTokenResponseParameter.EXPIRES_IN.value
    )
    """Lifetime of the access token in seconds."""
    refresh_token: str | None = Field(default=None, repr=False)
    scope: str | None = None

    @field_validator("expires", mode="before")
    @classmethod
    def check_expires(cls, value: Any) -> Any:
        return lifetime_seconds(value)

    @property
    def is_refreshable(self) -> bool:
        return self.refresh_token is not None

    def get_authorization_header(self) -> str:
        """Authorization header value for a protected resource request."""
        return f"{self.token_type} {self.access_token}"

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> AccessTokenResponse | None:
        if response.status_code != cls.status_code:
            return None
        return cls._from_parameters(json_object(response))


class ImplicitAccessTokenResponse(OAuth2Response):
    """Implicit grant access token response (RFC 6749 Section 4.2.2).

    Delivered in the fragment of the redirect URI. The authorization server
    must not issue a refresh token here.
    """

    status_code: ClassVar[int] = httpx.codes.FOUND

    access_token: str = Field(repr=False)
    token_type: str
    expires: int | None = Field(
        default=None, alias=AccessTokenResponseParameter.EXPIRES_IN.value
    )
    scope: str | None = None
    state: str | None = None

    @field_validator("expires", mode="before")
    @classmethod
    def check_expires(cls, value: Any) -> Any:
        return lifetime_seconds(value)

    @classmethod
    def from_redirect_uri(cls, uri: str) -> ImplicitAccessTokenResponse | None:
        return cls._from_parameters(redirect_parameters(uri, fragment=True))

    @classmethod
    def from_http_response(
        cls, response: httpx.Response
    ) -> ImplicitAccessTokenResponse | None:
        if response.status_code != cls.status_code:
            return None
        location = redirect_location(response)
        if location is None:
            return None
        return cls.from_redirect_uri(location)


class AuthorizationCodeResponse(OAuth2Response):
    """Authorization code redirect (RFC 6749 Section 4.1.2).

    For example::

        HTTP/1.1 302 Found
        Location: https://client.example.com/cb?code=SplxlOBeZQQYbYS6WxSbIA&state=xyz
    """

    status_code: ClassVar[int] = httpx.codes.FOUND

    code: str = Field(repr=False)
    state: str | None = None

    @classmethod
    def from_redirect_uri(cls, uri: str) -> AuthorizationCodeResponse | None:
        return cls._from_parameters(redirect_parameters(uri))

    @classmethod
    def from_http_response(
        cls, response: httpx.Response
    ) -> AuthorizationCodeResponse | None:
        if response.status_code != cls.status_code:
            return None
        location = redirect_location(response)
        if location is None:
            return None
        return cls.from_redirect_uri(location)


class ErrorResponse(OAuth2Response):
    """Common shape of OAuth 2.0 error responses.

    Subclasses declare ``code`` with their own closed error-code enumeration.
    """

    error_description: str | None = None
    """Human-readable text for the client developer."""
    error_uri: str | None = None
    """A web page with information about the error."""

    def to_exception(self) -> ProtocolError:
        return ProtocolError(self)


class AccessTokenErrorResponse(ErrorResponse):
    """Token endpoint error response (RFC 6749 Section 5.2).

    For example::

        HTTP/1.1 400 Bad Request
        Content-Type: application/json;charset=UTF-8

        {"error": "invalid_request"}
    """

    status_code: ClassVar[int] = httpx.codes.BAD_REQUEST

    code: AccessTokenErrorCode = Field(alias=ErrorResponseParameter.ERROR.value)

    @classmethod
    def from_http_response(
        cls, response: httpx.Response
    ) -> AccessTokenErrorResponse | None:
        if response.status_code != cls.status_code:
            return None
        return cls._from_parameters(json_object(response))


class AuthorizationErrorResponse(ErrorResponse):
    """Authorization error redirect (RFC 6749 Sections 4.1.2.1 and 4.2.2.1).

    Carried in the query of the redirect URI for the authorization code
    grant, in the fragment for the implicit grant.
    """

    code: AuthorizationErrorCode = Field(alias=ErrorResponseParameter.ERROR.value)
    state: str | None = None

    @classmethod
    def from_redirect_uri(
        cls, uri: str, *, fragment: bool = False
    ) -> AuthorizationErrorResponse | None:
        return cls._from_parameters(redirect_parameters(uri, fragment=fragment))

    @classmethod
    def from_http_response(
        cls, response: httpx.Response, *, fragment: bool = False
    ) -> AuthorizationErrorResponse | None:
        location = redirect_location(response)
        if location is None:
            return None
        return cls.from_redirect_uri(location, fragment=fragment)
