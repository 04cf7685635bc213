"""API client for a store's theme admin API."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .asset import Asset
from .config import Configuration
from .exceptions import (
    ThemeKitAPIError,
    ThemeKitAuthenticationError,
    ThemeKitConfigError,
    ThemeKitInvalidResponseError,
    ThemeKitNetworkError,
    ThemeKitNotFoundError,
    ThemeKitPermissionError,
    ThemeKitRateLimitError,
    ThemeKitRequestError,
)
from .models import RequestVerb, ResponseType, Theme, ThemeResponse
from .utils import ACCESS_TOKEN_HEADER, ASSET_FIELDS, ASSET_KEY_PARAM, user_agent

logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, tuple[type[ThemeKitAPIError], str]] = {
    401: (ThemeKitAuthenticationError, "Invalid access token or unauthorized access"),
    403: (ThemeKitPermissionError, "Access forbidden - check your permissions"),
    404: (ThemeKitNotFoundError, "Resource not found"),
    429: (ThemeKitRateLimitError, "Rate limit exceeded - please try again later"),
}


class ThemeClient:
    """Client for the asset and theme endpoints of the admin API.

    Every request is attempted exactly once. The configured timeout applies
    to all requests issued by this client.
    """

    def __init__(
        self,
        config: Configuration,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Store configuration
            transport: Optional httpx transport (used by tests)

        Raises:
            ThemeKitConfigError: If the configuration or proxy URL is invalid
        """
        config.validate()
        self.config = config
        self.proxy = self._parse_proxy(config.proxy)
        self._transport = transport
        self._client: httpx.Client | None = None

    @staticmethod
    def _parse_proxy(proxy: str | None) -> httpx.Proxy | None:
        if not proxy:
            return None
        try:
            parsed = httpx.Proxy(url=proxy)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            raise ThemeKitConfigError(f"Invalid proxy URL {proxy!r}: {e}") from e
        if not parsed.url.host:
            raise ThemeKitConfigError(f"Invalid proxy URL {proxy!r}: missing host")
        return parsed

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            kwargs: dict[str, Any] = {
                "headers": {
                    ACCESS_TOKEN_HEADER: self.config.access_token,
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "User-Agent": user_agent(),
                },
                "timeout": httpx.Timeout(self.config.timeout),
                "verify": not self.config.insecure,
            }
            if self._transport is not None:
                kwargs["transport"] = self._transport
            elif self.proxy is not None:
                kwargs["proxy"] = self.proxy
            self._client = httpx.Client(**kwargs)
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> "ThemeClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # =========================
    # URLs
    # =========================

    @property
    def store_url(self) -> str:
        domain = self.config.domain.rstrip("/")
        if "://" in domain:
            return domain
        return f"https://{domain}"

    def admin_url(self) -> str:
        """Base admin URL, scoped to the configured theme unless it is live."""
        if self.config.is_live:
            return f"{self.store_url}/admin"
        return f"{self.store_url}/admin/themes/{self.config.theme_id}"

    def asset_path(self) -> str:
        return f"{self.admin_url()}/assets.json"

    def themes_path(self) -> str:
        return f"{self.store_url}/admin/themes.json"

    def theme_path(self, theme_id: int) -> str:
        return f"{self.store_url}/admin/themes/{theme_id}.json"

    # =========================
    # Request plumbing
    # =========================

    def new_request(
        self,
        verb: RequestVerb,
        url: str,
        body: Any = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Request:
        """Build an authenticated request.

        Args:
            verb: Request verb
            url: Absolute target URL
            body: Optional JSON-serializable body
            params: Optional query parameters

        Raises:
            ThemeKitRequestError: If the URL is malformed
        """
        try:
            target = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as e:
            raise ThemeKitRequestError(f"Invalid URL {url!r}: {e}") from e
        if target.scheme not in ("http", "https") or not target.host:
            raise ThemeKitRequestError(f"Invalid URL {url!r}")

        content = None
        if body is not None:
            content = json.dumps(body).encode("utf-8")
        return self._get_client().build_request(
            verb.method, target, params=params, content=content
        )

    def send_request(
        self, response_type: ResponseType, verb: RequestVerb, request: httpx.Request
    ) -> ThemeResponse:
        """Send a request once and decode the JSON answer.

        Raises:
            ThemeKitNetworkError: On timeouts and connection failures
            ThemeKitAPIError: On non-success status codes
            ThemeKitInvalidResponseError: If the body is not JSON
        """
        logger.debug(f"{request.method} {request.url}")
        try:
            response = self._get_client().send(request)
        except httpx.TimeoutException as e:
            raise ThemeKitNetworkError(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            raise ThemeKitNetworkError(f"Network error: {e}") from e

        logger.debug(f"{request.method} {request.url} -> {response.status_code}")
        if not response.is_success:
            self._raise_for_status(response)

        payload: Any = {}
        if response.content:
            try:
                payload = response.json()
            except ValueError as e:
                raise ThemeKitInvalidResponseError(
                    f"Invalid JSON response from {request.url}"
                ) from e
        if not isinstance(payload, dict):
            raise ThemeKitInvalidResponseError(
                f"Unexpected response body from {request.url}"
            )
        return ThemeResponse.from_payload(
            response_type, verb, str(request.url), response.status_code, payload
        )

    def send_json(
        self,
        response_type: ResponseType,
        verb: RequestVerb,
        url: str,
        body: Any,
        params: dict[str, str] | None = None,
    ) -> ThemeResponse:
        request = self.new_request(verb, url, body=body, params=params)
        return self.send_request(response_type, verb, request)

    def _raise_for_status(self, response: httpx.Response) -> None:
        status_code = response.status_code
        body = response.text
        error_class, message = _STATUS_ERRORS.get(
            status_code,
            (ThemeKitAPIError, f"API request failed with status {status_code}"),
        )
        # Try to extract more details from response body
        try:
            details = response.json().get("errors")
        except (ValueError, AttributeError):
            details = None
        if details:
            message = f"{message}: {details}"
        raise error_class(message, status_code=status_code, body=body)

    # =========================
    # Asset Operations
    # =========================

    def asset_query(
        self, verb: RequestVerb, params: dict[str, str] | None = None
    ) -> ThemeResponse:
        """Query assets.

        Args:
            verb: Request verb, normally RETRIEVE
            params: Filter parameters. With ``asset[key]`` a single asset is
                returned, otherwise the full listing.

        Returns:
            Response of type ASSET or ASSET_LIST
        """
        query = {"fields": ASSET_FIELDS}
        query.update(params or {})
        response_type = (
            ResponseType.ASSET if ASSET_KEY_PARAM in query else ResponseType.ASSET_LIST
        )
        request = self.new_request(verb, self.asset_path(), params=query)
        return self.send_request(response_type, verb, request)

    def asset_action(self, verb: RequestVerb, asset: Asset) -> ThemeResponse:
        """Update or delete a single asset.

        Returns:
            Response of type ASSET
        """
        params = None
        if verb is RequestVerb.DELETE:
            params = {ASSET_KEY_PARAM: asset.key}
        return self.send_json(
            ResponseType.ASSET,
            verb,
            self.asset_path(),
            {"asset": asset.to_dict()},
            params=params,
        )

    def asset(self, key: str) -> Asset:
        """Retrieve a single asset by key.

        Raises:
            ThemeKitNotFoundError: If the asset does not exist
        """
        response = self.asset_query(RequestVerb.RETRIEVE, {ASSET_KEY_PARAM: key})
        if response.asset is None:
            raise ThemeKitNotFoundError(f"Asset not found: {key}", status_code=404)
        return response.asset

    def asset_list(self) -> list[Asset]:
        """Retrieve every asset of the theme in one listing query."""
        return self.asset_query(RequestVerb.RETRIEVE).assets

    # =========================
    # Theme Operations
    # =========================

    def new_theme(self, name: str, source: str) -> ThemeResponse:
        """Create an unpublished theme from a source archive URL."""
        theme = Theme(name=name, source=source, role="unpublished")
        body = {"theme": theme.to_dict()}
        return self.send_json(
            ResponseType.THEME, RequestVerb.CREATE, self.themes_path(), body
        )

    def get_theme(self, theme_id: int) -> ThemeResponse:
        request = self.new_request(RequestVerb.RETRIEVE, self.theme_path(theme_id))
        return self.send_request(ResponseType.THEME, RequestVerb.RETRIEVE, request)
