"""Data models for admin API requests and responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlsplit

from .asset import Asset
from .exceptions import ThemeKitInvalidResponseError


class RequestVerb(Enum):
    """Kinds of requests issued against the admin API."""

    RETRIEVE = "GET"
    UPDATE = "PUT"
    CREATE = "POST"
    DELETE = "DELETE"

    @property
    def method(self) -> str:
        return self.value


class ResponseType(Enum):
    """Discriminant telling which payload field of a response is meaningful."""

    ASSET = "asset"
    ASSET_LIST = "assets"
    THEME = "theme"


@dataclass
class Theme:
    """A theme on the remote store."""

    id: int = 0
    name: str = ""
    source: str = ""
    role: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "source": self.source, "role": self.role}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Theme":
        try:
            theme_id = int(data.get("id") or 0)
        except (TypeError, ValueError) as e:
            raise ThemeKitInvalidResponseError(
                f"Invalid theme id: {data.get('id')!r}"
            ) from e
        return cls(
            id=theme_id,
            name=data.get("name") or "",
            source=data.get("src") or data.get("source") or "",
            role=data.get("role") or "",
        )


@dataclass
class ThemeResponse:
    """Decoded admin API response.

    Exactly one of ``asset``, ``assets`` and ``theme`` is meaningful,
    selected by ``type``.
    """

    type: ResponseType
    verb: RequestVerb
    url: str
    status_code: int
    asset: Optional[Asset] = None
    assets: list[Asset] = field(default_factory=list)
    theme: Optional[Theme] = None
    errors: Any = None
    """Error details from a JSON ``errors`` member, if any"""

    @property
    def host(self) -> str:
        return urlsplit(self.url).netloc

    @property
    def successful(self) -> bool:
        return 200 <= self.status_code < 300 and not self.errors

    @classmethod
    def from_payload(
        cls,
        response_type: ResponseType,
        verb: RequestVerb,
        url: str,
        status_code: int,
        payload: dict[str, Any],
    ) -> "ThemeResponse":
        """Decode the payload member selected by ``response_type``.

        A missing member leaves the field empty.

        Raises:
            ThemeKitInvalidResponseError: If the member has the wrong shape
        """
        response = cls(
            type=response_type, verb=verb, url=url, status_code=status_code
        )
        response.errors = payload.get("errors")
        if response_type is ResponseType.ASSET:
            raw = _member(payload, "asset", dict)
            if raw is not None:
                response.asset = Asset.from_dict(raw)
        elif response_type is ResponseType.ASSET_LIST:
            items = _member(payload, "assets", list) or []
            for item in items:
                if not isinstance(item, dict):
                    raise ThemeKitInvalidResponseError(
                        f"Expected asset object in listing, got {type(item).__name__}"
                    )
            response.assets = [Asset.from_dict(item) for item in items]
        else:
            raw = _member(payload, "theme", dict)
            if raw is not None:
                response.theme = Theme.from_dict(raw)
        return response


def _member(payload: dict[str, Any], name: str, expected: type) -> Any:
    raw = payload.get(name)
    if raw is not None and not isinstance(raw, expected):
        raise ThemeKitInvalidResponseError(
            f"Expected {name!r} to be {expected.__name__}, got {type(raw).__name__}"
        )
    return raw
