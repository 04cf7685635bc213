"""Configuration for talking to a store's theme admin API."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from .exceptions import ThemeKitConfigError
from .utils import DEFAULT_TIMEOUT

LIVE_THEME = "live"


@dataclass(frozen=True)
class LiveTheme:
    """The store's published theme. Requests omit the theme id segment."""

    def __str__(self) -> str:
        return LIVE_THEME


@dataclass(frozen=True)
class NumberedTheme:
    """A theme addressed by its numeric id."""

    id: int

    def __str__(self) -> str:
        return str(self.id)


ThemeID = Union[LiveTheme, NumberedTheme]

LIVE = LiveTheme()


def parse_theme_id(value: str | int | ThemeID | None) -> ThemeID:
    """Parse a theme id from user input.

    Args:
        value: "live", a numeric id (as int or str), or an existing ThemeID

    Returns:
        LIVE or a NumberedTheme

    Raises:
        ThemeKitConfigError: If the value is neither "live" nor a positive integer
    """
    if isinstance(value, (LiveTheme, NumberedTheme)):
        return value
    if value is None:
        raise ThemeKitConfigError("Theme id is required")
    if isinstance(value, int) and not isinstance(value, bool):
        if value <= 0:
            raise ThemeKitConfigError(f"Invalid theme id: {value}")
        return NumberedTheme(value)
    text = str(value).strip()
    if text.lower() == LIVE_THEME:
        return LIVE
    if not text.isdigit() or int(text) <= 0:
        raise ThemeKitConfigError(
            f"Invalid theme id: {value!r} (expected a number or 'live')"
        )
    return NumberedTheme(int(text))


@dataclass(frozen=True)
class Configuration:
    """Immutable settings shared by the client and the sync engine."""

    domain: str
    access_token: str
    theme_id: ThemeID = LIVE
    proxy: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    insecure: bool = False
    """Skip TLS verification. Only meant for tests against local servers."""

    directory: Path = field(default_factory=Path.cwd)
    """Project root that assets are read from and written to."""

    def __post_init__(self) -> None:
        # frozen dataclass, so normalize through object.__setattr__
        object.__setattr__(self, "theme_id", parse_theme_id(self.theme_id))
        object.__setattr__(self, "directory", Path(self.directory))

    @property
    def is_live(self) -> bool:
        return isinstance(self.theme_id, LiveTheme)

    def validate(self) -> None:
        """Check required fields.

        Raises:
            ThemeKitConfigError: If domain or access token is missing, or the
                timeout is not positive
        """
        if not self.domain:
            raise ThemeKitConfigError(
                "Store domain not configured. Please set THEMEKIT_DOMAIN."
            )
        if not self.access_token:
            raise ThemeKitConfigError(
                "Access token not configured. Please set THEMEKIT_PASSWORD."
            )
        if self.timeout <= 0:
            raise ThemeKitConfigError(f"Timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls, **overrides: object) -> "Configuration":
        """Build a configuration from THEMEKIT_* environment variables.

        Keyword overrides win over the environment when they are not None.
        """
        values: dict[str, object] = {
            "domain": os.environ.get("THEMEKIT_DOMAIN", ""),
            "access_token": os.environ.get("THEMEKIT_PASSWORD", ""),
            "theme_id": os.environ.get("THEMEKIT_THEME_ID", LIVE_THEME),
            "proxy": os.environ.get("THEMEKIT_PROXY") or None,
        }
        timeout = os.environ.get("THEMEKIT_TIMEOUT")
        if timeout:
            try:
                values["timeout"] = float(timeout)
            except ValueError as e:
                raise ThemeKitConfigError(f"Invalid timeout: {timeout!r}") from e
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
