"""Asynchronous OAuth 2.0 token endpoint client.

Sends requests built by the codec through an ``httpx.AsyncClient`` and
parses the replies. All encoding and decoding stays in the codec; this
module only moves bytes and adds no retry or caching policy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from oauth2_codec.models.errors import TransportError
from oauth2_codec.models.requests import AccessTokenRequest
from oauth2_codec.models.responses import AccessTokenErrorResponse, AccessTokenResponse
from oauth2_codec.services.parsers import parse_access_token_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OAuth2ClientConfig:
    """Configuration for :class:`OAuth2Client`."""

    timeout: float = 30.0
    """HTTP request timeout in seconds."""

    follow_redirects: bool = False
    """Token endpoints answer directly; a redirect is surfaced, not followed."""

    headers: dict[str, str] = field(default_factory=dict)
    """Extra headers sent with every request, e.g. ``User-Agent``."""


class OAuth2Client:
    """Sends access token requests and parses the token endpoint's replies.

    Handles:
    - Client credentials, password, authorization code and refresh token
      requests (RFC 6749 Sections 4.1.3, 4.3, 4.4 and 6)
    - Success and error responses (RFC 6749 Section 5)

    OAuth 2.0 error responses are returned, not raised.
    """

    def __init__(
        self,
        config: OAuth2ClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize OAuth 2.0 client.

        Args:
            config: Client configuration (defaults apply if not provided)
            http_client: Client to send requests with. When omitted, one is
                created from ``config`` and closed by :meth:`close`.
        """
        self.config = config or OAuth2ClientConfig()
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self.config.timeout,
            follow_redirects=self.config.follow_redirects,
        )

    async def request_token(
        self, token_request: AccessTokenRequest
    ) -> AccessTokenResponse | AccessTokenErrorResponse:
        """Send an access token request and parse the response.

        Args:
            token_request: Any token endpoint request

        Returns:
            The access token, or the OAuth 2.0 error the server reported

        Raises:
            InvalidEndpointError: If the request's endpoint is invalid
            TransportError: If the HTTP exchange fails
            ResponseRejectedError: If the server's reply is neither a token
                nor an OAuth 2.0 error
        """
        http_request = token_request.to_http_request()
        # Requests built outside the client don't pick up its default headers
        for name, value in self.config.headers.items():
            http_request.headers.setdefault(name, value)

        logger.debug(
            f"Requesting {token_request.grant_type.value} token from "
            f"{http_request.url}"
        )

        try:
            response = await self._http_client.send(http_request)
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error during token request: {e}") from e

        result = parse_access_token_response(response)
        if isinstance(result, AccessTokenResponse):
            logger.info(f"{token_request.grant_type.value} token request successful")
        return result

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> OAuth2Client:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
