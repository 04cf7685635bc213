"""Unit tests for the theme admin API client."""

import json
from dataclasses import replace

import httpx
import pytest

from pythemekit.api import ThemeClient
from pythemekit.asset import Asset
from pythemekit.config import LIVE
from pythemekit.exceptions import (
    ThemeKitAPIError,
    ThemeKitAuthenticationError,
    ThemeKitConfigError,
    ThemeKitInvalidResponseError,
    ThemeKitNetworkError,
    ThemeKitNotFoundError,
    ThemeKitRequestError,
)
from pythemekit.models import RequestVerb, ResponseType, Theme
from pythemekit.utils import user_agent

MULTI_ASSET = {
    "assets": [
        {
            "key": "assets/hello.txt",
            "value": "Hello World",
            "public_url": "https://cdn.example.com/hello.txt",
            "size": 11,
        },
        {"key": "assets/image.png", "attachment": "iVBORw0KGgo="},
    ]
}
SINGLE_ASSET = {"asset": {"key": "assets/hello.txt", "value": "Hello World"}}
THEME = {
    "theme": {
        "id": 456,
        "name": "timberland",
        "role": "unpublished",
        "previewable": True,
        "processing": False,
    }
}


def make_client(config, handler):
    return ThemeClient(config, transport=httpx.MockTransport(handler))


def json_handler(payload, status_code=200, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


class TestThemeClientInit:
    """Tests for ThemeClient construction."""

    def test_init_keeps_config(self, config):
        client = ThemeClient(config)
        assert client.config == config
        assert client.proxy is None

    def test_missing_domain(self, config):
        with pytest.raises(ThemeKitConfigError, match="domain"):
            ThemeClient(replace(config, domain=""))

    def test_missing_access_token(self, config):
        with pytest.raises(ThemeKitConfigError, match="Access token"):
            ThemeClient(replace(config, access_token=""))

    def test_malformed_proxy_fails_fast(self, config):
        with pytest.raises(ThemeKitConfigError, match="Invalid proxy URL"):
            ThemeClient(replace(config, proxy="://abc!21@"))

    def test_valid_proxy(self, config):
        client = ThemeClient(replace(config, proxy="http://localhost:3000"))
        assert client.proxy is not None
        assert client.proxy.url.host == "localhost"

    def test_timeout_applied_to_client(self, config):
        client = ThemeClient(replace(config, timeout=12.5))
        assert client._get_client().timeout.read == 12.5

    def test_context_manager_closes(self, config):
        with ThemeClient(config) as client:
            http = client._get_client()
        assert http.is_closed


class TestURLs:
    """Tests for admin URL construction."""

    def test_admin_url_numbered_theme(self, config):
        client = ThemeClient(config)
        assert client.admin_url() == "https://test.myshopify.com/admin/themes/123"

    def test_admin_url_live_theme(self, config):
        client = ThemeClient(replace(config, theme_id=LIVE))
        assert client.admin_url() == "https://test.myshopify.com/admin"

    def test_asset_path(self, config):
        client = ThemeClient(config)
        assert client.asset_path() == (
            "https://test.myshopify.com/admin/themes/123/assets.json"
        )

    def test_themes_path(self, config):
        client = ThemeClient(config)
        assert client.themes_path() == "https://test.myshopify.com/admin/themes.json"

    def test_theme_path(self, config):
        client = ThemeClient(config)
        assert client.theme_path(456) == (
            "https://test.myshopify.com/admin/themes/456.json"
        )

    def test_domain_with_scheme_used_verbatim(self, config):
        client = ThemeClient(replace(config, domain="http://localhost:5000/"))
        assert client.admin_url() == "http://localhost:5000/admin/themes/123"


class TestNewRequest:
    """Tests for request building."""

    def test_headers(self, config):
        client = ThemeClient(config)
        request = client.new_request(RequestVerb.UPDATE, "http://localhost:5000")
        assert request.method == "PUT"
        assert request.headers["X-Shopify-Access-Token"] == "sharknado"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"] == user_agent()

    def test_json_body(self, config):
        client = ThemeClient(config)
        request = client.new_request(
            RequestVerb.UPDATE,
            "http://localhost:5000",
            body={"asset": Asset(key="hello.txt", value="hi").to_dict()},
        )
        assert json.loads(request.content) == {
            "asset": {"key": "hello.txt", "value": "hi"}
        }

    @pytest.mark.parametrize("url", ["://#nksd", "not a url", "ftp://example.com/x"])
    def test_malformed_url(self, config, url):
        seen = []
        client = make_client(config, json_handler({}, seen=seen))
        with pytest.raises(ThemeKitRequestError):
            client.new_request(RequestVerb.UPDATE, url)
        assert seen == []


class TestAssetQuery:
    """Tests for asset_query and its wrappers."""

    def test_listing(self, config):
        seen = []
        client = make_client(config, json_handler(MULTI_ASSET, seen=seen))
        response = client.asset_query(RequestVerb.RETRIEVE, {})

        assert response.type is ResponseType.ASSET_LIST
        assert response.assets == [
            Asset(key="assets/hello.txt", value="Hello World"),
            Asset(key="assets/image.png", attachment="iVBORw0KGgo="),
        ]
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/admin/themes/123/assets.json"
        assert dict(request.url.params) == {"fields": "key,attachment,value"}

    def test_single_asset(self, config):
        seen = []
        client = make_client(config, json_handler(SINGLE_ASSET, seen=seen))
        response = client.asset_query(
            RequestVerb.RETRIEVE, {"asset[key]": "assets/hello.txt"}
        )

        assert response.type is ResponseType.ASSET
        assert response.asset.key == "assets/hello.txt"
        assert response.status_code == 200
        assert response.host == "test.myshopify.com"
        assert seen[0].url.params["asset[key]"] == "assets/hello.txt"
        assert seen[0].url.params["fields"] == "key,attachment,value"

    def test_asset_wrapper(self, config):
        client = make_client(config, json_handler(SINGLE_ASSET))
        assert client.asset("assets/hello.txt").value == "Hello World"

    def test_asset_wrapper_without_payload(self, config):
        client = make_client(config, json_handler({}))
        with pytest.raises(ThemeKitNotFoundError):
            client.asset("assets/hello.txt")

    def test_asset_list_wrapper(self, config):
        client = make_client(config, json_handler(MULTI_ASSET))
        assert [a.key for a in client.asset_list()] == [
            "assets/hello.txt",
            "assets/image.png",
        ]

    def test_live_theme_listing_path(self, config):
        seen = []
        client = make_client(
            replace(config, theme_id=LIVE), json_handler(MULTI_ASSET, seen=seen)
        )
        client.asset_list()
        assert seen[0].url.path == "/admin/assets.json"


class TestAssetAction:
    """Tests for asset_action."""

    def test_update(self, config):
        seen = []
        client = make_client(config, json_handler(SINGLE_ASSET, seen=seen))
        response = client.asset_action(
            RequestVerb.UPDATE, Asset(key="assets/hello.txt", value="Hello World")
        )

        assert response.type is ResponseType.ASSET
        assert response.verb is RequestVerb.UPDATE
        assert seen[0].method == "PUT"
        assert json.loads(seen[0].content) == {
            "asset": {"key": "assets/hello.txt", "value": "Hello World"}
        }

    def test_delete(self, config):
        seen = []
        client = make_client(config, json_handler({}, seen=seen))
        response = client.asset_action(RequestVerb.DELETE, Asset(key="assets/old.js"))

        assert response.type is ResponseType.ASSET
        assert response.asset is None
        assert seen[0].method == "DELETE"
        assert seen[0].url.params["asset[key]"] == "assets/old.js"


class TestThemes:
    """Tests for theme creation and retrieval."""

    def test_new_theme(self, config):
        seen = []
        client = make_client(config, json_handler(THEME, seen=seen))
        response = client.new_theme("name", "source")

        assert seen[0].method == "POST"
        assert seen[0].url.path == "/admin/themes.json"
        assert json.loads(seen[0].content) == {
            "theme": {"name": "name", "source": "source", "role": "unpublished"}
        }
        assert response.type is ResponseType.THEME
        assert response.theme.name == "timberland"
        assert response.theme.id == 456

    def test_get_theme(self, config):
        seen = []
        client = make_client(config, json_handler(THEME, seen=seen))
        response = client.get_theme(456)

        assert seen[0].method == "GET"
        assert seen[0].url.path == "/admin/themes/456.json"
        assert response.type is ResponseType.THEME
        assert response.theme == Theme(id=456, name="timberland", role="unpublished")


class TestErrors:
    """Tests for transport failure handling."""

    def test_not_found(self, config):
        client = make_client(config, json_handler({"errors": "Not Found"}, 404))
        with pytest.raises(ThemeKitNotFoundError) as exc_info:
            client.asset("assets/missing.js")
        assert exc_info.value.status_code == 404
        assert "Not Found" in exc_info.value.body

    def test_unauthorized(self, config):
        client = make_client(config, json_handler({}, 401))
        with pytest.raises(ThemeKitAuthenticationError):
            client.asset_list()

    def test_server_error_carries_status_and_body(self, config):
        def handler(request):
            return httpx.Response(500, text="upstream exploded")

        client = make_client(config, handler)
        with pytest.raises(ThemeKitAPIError, match="status 500") as exc_info:
            client.asset_list()
        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "upstream exploded"

    def test_validation_errors_in_message(self, config):
        payload = {"errors": {"asset": ["Liquid syntax error"]}}
        client = make_client(config, json_handler(payload, 422))
        with pytest.raises(ThemeKitAPIError, match="Liquid syntax error") as exc_info:
            client.asset_action(RequestVerb.UPDATE, Asset(key="a.liquid", value="{%"))
        assert exc_info.value.status_code == 422

    def test_connection_refused(self, config):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = make_client(config, handler)
        with pytest.raises(ThemeKitNetworkError, match="Connection refused"):
            client.asset_list()

    def test_timeout(self, config):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(config, handler)
        with pytest.raises(ThemeKitNetworkError, match="timed out"):
            client.asset_list()

    def test_invalid_json(self, config):
        def handler(request):
            return httpx.Response(200, text="<html>login</html>")

        client = make_client(config, handler)
        with pytest.raises(ThemeKitInvalidResponseError):
            client.asset_list()

    @pytest.mark.parametrize(
        "payload",
        [
            {"assets": 5},
            {"assets": "assets/a.js"},
            {"assets": [{"key": "assets/a.js"}, "assets/b.js"]},
            {"assets": [{"key": 7, "value": "x"}]},
            {"assets": [{"key": "assets/a.js", "value": ["x"]}]},
        ],
    )
    def test_malformed_listing(self, config, payload):
        client = make_client(config, json_handler(payload))
        with pytest.raises(ThemeKitInvalidResponseError):
            client.asset_list()

    def test_malformed_single_asset(self, config):
        client = make_client(config, json_handler({"asset": ["assets/a.js"]}))
        with pytest.raises(ThemeKitInvalidResponseError):
            client.asset("assets/a.js")

    def test_malformed_theme(self, config):
        client = make_client(config, json_handler({"theme": {"id": "abc"}}))
        with pytest.raises(ThemeKitInvalidResponseError, match="theme id"):
            client.get_theme(456)
