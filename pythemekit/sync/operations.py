"""Per-asset remote operations used by the sync engine."""

import logging
import queue
from pathlib import Path
from typing import Optional

from ..api import ThemeClient
from ..asset import Asset
from ..exceptions import ThemeKitError
from ..models import RequestVerb, ThemeResponse

logger = logging.getLogger(__name__)

# Marks the end of the asset hand-off queue
END_OF_ASSETS = None


class SyncOperations:
    """Unified operations for upload/download with a common interface."""

    def __init__(self, client: ThemeClient):
        """Initialize sync operations.

        Args:
            client: Theme admin API client
        """
        self.client = client

    def retrieve(self, key: str) -> Asset:
        """Retrieve a single asset with a targeted query."""
        return self.client.asset(key)

    def update(self, asset: Asset) -> ThemeResponse:
        """Upload a local asset, replacing the remote copy."""
        return self.client.asset_action(RequestVerb.UPDATE, asset)

    def delete(self, key: str) -> ThemeResponse:
        """Delete a remote asset."""
        return self.client.asset_action(RequestVerb.DELETE, Asset(key=key))

    def write(self, asset: Asset, directory: Path) -> Path:
        """Write a remote asset into the local project directory.

        Returns:
            Path where the asset was saved
        """
        return asset.write(directory)

    def produce_listing(
        self,
        assets: "queue.Queue[Optional[Asset]]",
        errors: "queue.Queue[Optional[BaseException]]",
    ) -> None:
        """Run one listing query and feed its assets into ``assets``.

        Listing failures go to ``errors``. Both queues always receive their
        terminator, ``END_OF_ASSETS`` and None respectively.
        """
        try:
            listing = self.client.asset_list()
            logger.debug(f"Listing returned {len(listing)} asset(s)")
            for asset in listing:
                assets.put(asset)
        except ThemeKitError as e:
            errors.put(e)
        finally:
            assets.put(END_OF_ASSETS)
            errors.put(None)
