"""Exceptions raised by the theme kit client and sync engine."""

from __future__ import annotations


class ThemeKitError(Exception):
    """Base exception for all theme kit errors."""


class ThemeKitConfigError(ThemeKitError):
    """Raised when the configuration is missing or malformed."""


class ThemeKitRequestError(ThemeKitError):
    """Raised when a request cannot be built (e.g. malformed URL)."""


class ThemeKitNetworkError(ThemeKitError):
    """Raised on connection failures, timeouts and TLS errors."""


class ThemeKitInvalidResponseError(ThemeKitError):
    """Raised when the server answers with a body that cannot be decoded."""


class ThemeKitAPIError(ThemeKitError):
    """Raised when the admin API answers with a non-success status."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ThemeKitAuthenticationError(ThemeKitAPIError):
    """Raised on 401 responses."""


class ThemeKitPermissionError(ThemeKitAPIError):
    """Raised on 403 responses."""


class ThemeKitNotFoundError(ThemeKitAPIError):
    """Raised on 404 responses."""


class ThemeKitRateLimitError(ThemeKitAPIError):
    """Raised on 429 responses."""


class AssetError(ThemeKitError):
    """Base exception for loading, decoding and writing assets."""


class AssetIsDirectoryError(AssetError):
    """Raised when a directory is given where a file is expected."""

    def __init__(self) -> None:
        super().__init__("File is a directory")


class AssetDecodeError(AssetError):
    """Raised when an attachment is not valid base64."""


class AssetWriteError(AssetError):
    """Raised when an asset cannot be written to disk."""


class AssetNotInProjectError(AssetError):
    """Raised when a path is outside the recognized project directories."""
