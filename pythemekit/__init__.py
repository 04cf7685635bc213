"""pythemekit - synchronize a local theme project with a store's theme assets."""

from .api import ThemeClient
from .asset import Asset, find_assets, load_asset, read_asset
from .config import LIVE, Configuration, LiveTheme, NumberedTheme, parse_theme_id
from .events import (
    APIEvent,
    BasicEvent,
    EventLog,
    FSEvent,
    ThemeEvent,
    log_event,
    merge_events,
)
from .exceptions import (
    AssetDecodeError,
    AssetError,
    AssetIsDirectoryError,
    AssetNotInProjectError,
    AssetWriteError,
    ThemeKitAPIError,
    ThemeKitAuthenticationError,
    ThemeKitConfigError,
    ThemeKitError,
    ThemeKitInvalidResponseError,
    ThemeKitNetworkError,
    ThemeKitNotFoundError,
    ThemeKitPermissionError,
    ThemeKitRateLimitError,
    ThemeKitRequestError,
)
from .models import RequestVerb, ResponseType, Theme, ThemeResponse
from .paths import PathResolver, is_project_directory, path_in_project, path_to_project
from .sync import SyncEngine
from .utils import VERSION as __version__

__all__ = [
    "ThemeClient",
    "Configuration",
    "LIVE",
    "LiveTheme",
    "NumberedTheme",
    "parse_theme_id",
    "Asset",
    "find_assets",
    "load_asset",
    "read_asset",
    "Theme",
    "ThemeResponse",
    "RequestVerb",
    "ResponseType",
    "PathResolver",
    "is_project_directory",
    "path_in_project",
    "path_to_project",
    "ThemeEvent",
    "BasicEvent",
    "FSEvent",
    "APIEvent",
    "EventLog",
    "log_event",
    "merge_events",
    "SyncEngine",
    "ThemeKitError",
    "ThemeKitAPIError",
    "ThemeKitAuthenticationError",
    "ThemeKitConfigError",
    "ThemeKitInvalidResponseError",
    "ThemeKitNetworkError",
    "ThemeKitNotFoundError",
    "ThemeKitPermissionError",
    "ThemeKitRateLimitError",
    "ThemeKitRequestError",
    "AssetError",
    "AssetDecodeError",
    "AssetIsDirectoryError",
    "AssetNotInProjectError",
    "AssetWriteError",
    "__version__",
]
