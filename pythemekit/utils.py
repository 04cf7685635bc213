"""Shared constants and small helpers."""

import platform

VERSION: str = "0.1.0"

# =============================================================================
# Transport defaults
# =============================================================================

# Request timeout applied to every request of a client (seconds)
DEFAULT_TIMEOUT: float = 30.0

# Header carrying the pre-obtained access token
ACCESS_TOKEN_HEADER: str = "X-Shopify-Access-Token"

# Only these fields are requested for assets
ASSET_FIELDS: str = "key,attachment,value"

# Query parameter selecting a single asset
ASSET_KEY_PARAM: str = "asset[key]"

# =============================================================================
# Sync defaults
# =============================================================================

# Capacity of the producer -> consumer hand-off queue in bulk transfers
DEFAULT_QUEUE_SIZE: int = 20


def user_agent() -> str:
    """Build the identifying User-Agent string.

    Returns:
        String like "python/pythemekit (linux; x86_64; 0.1.0)"
    """
    system = platform.system().lower() or "unknown"
    machine = platform.machine().lower() or "unknown"
    return f"python/pythemekit ({system}; {machine}; {VERSION})"
