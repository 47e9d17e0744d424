"""OAuth 2.0 grant requests and their HTTP encodings.

Each request is an immutable value that knows how to turn itself into an
``httpx.Request``:

- Authorization requests (authorization code and implicit grants) become a
  GET of the authorization endpoint with the parameters in the query.
- Access token requests (client credentials, password, authorization code
  exchange, refresh) become a POST to the token endpoint with a form URL
  encoded body (RFC 6749 Section 4.1.3 and Appendix B).

An endpoint that is not a usable URL is a configuration bug and raises
``InvalidEndpointError`` when the request is built.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar
from urllib.parse import urlsplit, urlunsplit

import httpx

from oauth2_codec.models.errors import ConfigurationError, InvalidEndpointError
from oauth2_codec.models.grants import ClientCredentials, GrantType, ResponseType
from oauth2_codec.models.parameters import (
    AuthorizationCodeTokenParameter,
    AuthorizationRequestParameter,
    ClientCredentialsParameter,
    PasswordParameter,
    RefreshTokenParameter,
    build_parameter_set,
)
from oauth2_codec.primitives.form_urlencoded import FormURLEncoded

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def parse_endpoint(endpoint: str) -> httpx.URL:
    """Validate an endpoint URL.

    Args:
        endpoint: Absolute http(s) URL of an OAuth 2.0 endpoint

    Returns:
        The parsed URL

    Raises:
        InvalidEndpointError: If the URL cannot be parsed, is not http(s),
            has no host, or carries a fragment (RFC 6749 Section 3.1)
    """
    try:
        url = httpx.URL(endpoint)
    except httpx.InvalidURL as e:
        raise InvalidEndpointError(endpoint, str(e)) from e

    if url.scheme not in ("http", "https"):
        raise InvalidEndpointError(endpoint, "scheme must be http or https")
    if not url.host:
        raise InvalidEndpointError(endpoint, "missing host")
    if url.fragment:
        raise InvalidEndpointError(endpoint, "endpoint must not include a fragment")

    return url


def client_authentication(
    credentials: ClientCredentials | None,
) -> tuple[str | None, str | None]:
    """Client authentication parameters for the request body (RFC 6749 2.3.1)."""
    if credentials is None:
        return None, None
    return credentials.client_id, credentials.client_secret


class Request(ABC):
    """An OAuth 2.0 request that can be encoded as an HTTP request."""

    @abstractmethod
    def to_http_request(self) -> httpx.Request:
        """Encode the request for the HTTP transport."""
        ...


class AuthorizationRequest(Request):
    """Authorization endpoint request (RFC 6749 Sections 4.1.1 and 4.2.1).

    The client directs the resource owner's user-agent to the returned URL.
    Subclasses fix the ``response_type``.
    """

    response_type: ClassVar[ResponseType]

    authorization_endpoint: str
    client_id: str
    redirect_uri: str | None
    scope: str | None
    state: str | None

    def parameters(self) -> dict[str, str]:
        return build_parameter_set(
            AuthorizationRequestParameter,
            {
                AuthorizationRequestParameter.RESPONSE_TYPE: self.response_type.value,
                AuthorizationRequestParameter.CLIENT_ID: self.client_id,
                AuthorizationRequestParameter.REDIRECT_URI: self.redirect_uri,
                AuthorizationRequestParameter.SCOPE: self.scope,
                AuthorizationRequestParameter.STATE: self.state,
            },
        )

    def authorization_url(self) -> str:
        """Build the complete authorization URL.

        Parameters already in the endpoint's query are kept.

        Raises:
            InvalidEndpointError: If the authorization endpoint is invalid
        """
        parse_endpoint(self.authorization_endpoint)

        parts = urlsplit(self.authorization_endpoint)
        query = FormURLEncoded(self.parameters()).to_query()
        if parts.query:
            query = f"{parts.query}&{query}"

        return urlunsplit(parts._replace(query=query))

    def to_http_request(self) -> httpx.Request:
        url = self.authorization_url()
        logger.debug(
            f"Built {self.response_type.value} authorization request for "
            f"client {self.client_id}"
        )
        return httpx.Request("GET", url)


@dataclass(frozen=True)
class AuthorizationCodeRequest(AuthorizationRequest):
    """Authorization Code Grant authorization request (RFC 6749 Section 4.1.1).

    For example::

        GET /authorize?response_type=code&client_id=s6BhdRkqt3&state=xyz
            &redirect_uri=https%3A//client.example.com/cb HTTP/1.1
        Host: server.example.com
    """

    response_type = ResponseType.CODE

    authorization_endpoint: str
    client_id: str
    redirect_uri: str | None = None
    scope: str | None = None
    state: str | None = None


@dataclass(frozen=True)
class ImplicitRequest(AuthorizationRequest):
    """Implicit Grant authorization request (RFC 6749 Section 4.2.1).

    The access token comes back in the fragment of the redirect URI.
    """

    response_type = ResponseType.TOKEN

    authorization_endpoint: str
    client_id: str
    redirect_uri: str | None = None
    scope: str | None = None
    state: str | None = None


class AccessTokenRequest(Request):
    """Token endpoint request sent as a form URL encoded POST."""

    grant_type: ClassVar[GrantType]
    parameter_type: ClassVar[type[Enum]]

    endpoint: str

    @abstractmethod
    def parameter_values(self) -> dict[Enum, str | None]:
        """Parameter values keyed by the grant's parameter enumeration."""
        ...

    def parameters(self) -> dict[str, str]:
        return build_parameter_set(self.parameter_type, self.parameter_values())

    def to_http_request(self) -> httpx.Request:
        url = parse_endpoint(self.endpoint)
        parameters = self.parameters()

        # Parameter names only; values carry secrets
        logger.debug(
            f"Built {self.grant_type.value} token request for {url} "
            f"with parameters: {', '.join(parameters)}"
        )

        return httpx.Request(
            "POST",
            url,
            headers={
                "Content-Type": FORM_CONTENT_TYPE,
                "Accept": "application/json",
            },
            content=FormURLEncoded(parameters).to_bytes(),
        )


@dataclass(frozen=True)
class ClientCredentialsRequest(AccessTokenRequest):
    """Client Credentials Grant token request (RFC 6749 Section 4.4.2)."""

    grant_type = GrantType.CLIENT_CREDENTIALS
    parameter_type = ClientCredentialsParameter

    endpoint: str
    scope: str | None = None
    client_credentials: ClientCredentials | None = None

    def parameter_values(self) -> dict[Enum, str | None]:
        client_id, client_secret = client_authentication(self.client_credentials)
        return {
            ClientCredentialsParameter.GRANT_TYPE: self.grant_type.value,
            ClientCredentialsParameter.SCOPE: self.scope,
            ClientCredentialsParameter.CLIENT_ID: client_id,
            ClientCredentialsParameter.CLIENT_SECRET: client_secret,
        }


@dataclass(frozen=True)
class ResourceOwnerPasswordCredentialsRequest(AccessTokenRequest):
    """Resource Owner Password Credentials Grant token request (RFC 6749 4.3.2)."""

    grant_type = GrantType.PASSWORD
    parameter_type = PasswordParameter

    endpoint: str
    username: str
    password: str = field(repr=False)
    scope: str | None = None
    client_credentials: ClientCredentials | None = None

    def parameter_values(self) -> dict[Enum, str | None]:
        client_id, client_secret = client_authentication(self.client_credentials)
        return {
            PasswordParameter.GRANT_TYPE: self.grant_type.value,
            PasswordParameter.SCOPE: self.scope,
            PasswordParameter.USERNAME: self.username,
            PasswordParameter.PASSWORD: self.password,
            PasswordParameter.CLIENT_ID: client_id,
            PasswordParameter.CLIENT_SECRET: client_secret,
        }


@dataclass(frozen=True)
class AuthorizationCodeAccessTokenRequest(AccessTokenRequest):
    """Authorization code exchange at the token endpoint (RFC 6749 4.1.3).

    Public clients identify themselves with ``client_id`` alone; confidential
    clients pass ``client_credentials`` instead.
    """

    grant_type = GrantType.AUTHORIZATION_CODE
    parameter_type = AuthorizationCodeTokenParameter

    endpoint: str
    code: str = field(repr=False)
    redirect_uri: str | None = None
    client_id: str | None = None
    client_credentials: ClientCredentials | None = None

    def parameter_values(self) -> dict[Enum, str | None]:
        credentials = self.client_credentials
        if (
            credentials is not None
            and self.client_id is not None
            and self.client_id != credentials.client_id
        ):
            raise ConfigurationError(
                "client_id does not match the client_id of client_credentials"
            )

        client_id, client_secret = client_authentication(credentials)
        return {
            AuthorizationCodeTokenParameter.GRANT_TYPE: self.grant_type.value,
            AuthorizationCodeTokenParameter.CODE: self.code,
            AuthorizationCodeTokenParameter.REDIRECT_URI: self.redirect_uri,
            AuthorizationCodeTokenParameter.CLIENT_ID: (
                client_id if credentials else self.client_id
            ),
            AuthorizationCodeTokenParameter.CLIENT_SECRET: client_secret,
        }


@dataclass(frozen=True)
class RefreshTokenRequest(AccessTokenRequest):
    """Refresh token request (RFC 6749 Section 6)."""

    grant_type = GrantType.REFRESH_TOKEN
    parameter_type = RefreshTokenParameter

    endpoint: str
    refresh_token: str = field(repr=False)
    scope: str | None = None
    client_credentials: ClientCredentials | None = None

    def parameter_values(self) -> dict[Enum, str | None]:
        client_id, client_secret = client_authentication(self.client_credentials)
        return {
            RefreshTokenParameter.GRANT_TYPE: self.grant_type.value,
            RefreshTokenParameter.REFRESH_TOKEN: self.refresh_token,
            RefreshTokenParameter.SCOPE: self.scope,
            RefreshTokenParameter.CLIENT_ID: client_id,
            RefreshTokenParameter.CLIENT_SECRET: client_secret,
        }
