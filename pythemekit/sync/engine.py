"""Core sync engine driving downloads, uploads and removals."""

from __future__ import annotations

import logging
import queue
import threading
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..api import ThemeClient
from ..asset import Asset, list_asset_keys, load_asset, read_asset
from ..events import (
    APIEvent,
    EventLog,
    FSEvent,
    drain_errors,
    log_event,
    notify,
    notify_error,
)
from ..exceptions import ThemeKitAPIError, ThemeKitError
from ..models import RequestVerb
from ..paths import path_to_project
from ..utils import DEFAULT_QUEUE_SIZE
from .operations import END_OF_ASSETS, SyncOperations

logger = logging.getLogger(__name__)


class SyncEngine:
    """Reconciles a local project directory with a remote theme.

    Every operation runs on background threads and returns a
    :class:`threading.Event` that is set once all items have been
    attempted. Progress and failures are reported to ``event_log``; a
    failing item is reported and skipped, never retried.
    """

    def __init__(
        self,
        client: ThemeClient,
        event_log: EventLog,
        directory: Optional[Path] = None,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ):
        """Initialize sync engine.

        Args:
            client: Theme admin API client
            event_log: Destination for progress and error events
            directory: Project root (defaults to the current working directory)
            queue_size: Capacity of the producer/consumer hand-off queue
        """
        self.client = client
        self.event_log = event_log
        self.directory = directory
        self.queue_size = queue_size
        self.operations = SyncOperations(client)

    @property
    def root(self) -> Path:
        return Path(self.directory) if self.directory is not None else Path.cwd()

    def _key_for(self, filename: str) -> str:
        return path_to_project(self.root, self.root / filename) or Path(filename).as_posix()

    def _start(self, target: Callable[..., None], *args: object, name: str) -> threading.Thread:
        thread = threading.Thread(target=target, args=args, name=name, daemon=True)
        thread.start()
        return thread

    # =========================
    # Download
    # =========================

    def download(self, filenames: Optional[Sequence[str]] = None) -> threading.Event:
        """Download assets into the project directory.

        With filenames, each one is retrieved in order with a targeted query.
        Without, a single listing query fetches the whole theme.

        Returns:
            Event set once every asset has been attempted
        """
        done = threading.Event()
        if filenames:
            self._start(self._download_files, list(filenames), done, name="download")
        else:
            assets: queue.Queue[Optional[Asset]] = queue.Queue(maxsize=self.queue_size)
            errors: queue.Queue[Optional[BaseException]] = queue.Queue()
            self._start(self.operations.produce_listing, assets, errors, name="listing")
            drainer = self._start(drain_errors, errors, self.event_log, name="drain-errors")
            self._start(self._download_all, assets, drainer, done, name="download")
        return done

    def _download_files(self, filenames: list[str], done: threading.Event) -> None:
        try:
            for filename in filenames:
                key = self._key_for(filename)
                try:
                    asset = self.operations.retrieve(key)
                except ThemeKitError as e:
                    notify_error(self.event_log, e, target=key)
                    continue
                self._write_to_disk(asset)
        finally:
            done.set()

    def _download_all(
        self,
        assets: "queue.Queue[Optional[Asset]]",
        drainer: threading.Thread,
        done: threading.Event,
    ) -> None:
        try:
            while True:
                asset = assets.get()
                if asset is END_OF_ASSETS:
                    break
                self._write_to_disk(asset)
            drainer.join()
        finally:
            done.set()

    def _write_to_disk(self, asset: Asset) -> None:
        try:
            path = self.operations.write(asset, self.root)
        except (ThemeKitError, OSError) as e:
            notify_error(self.event_log, e, target=asset.key)
            return
        log_event(FSEvent(target=str(path)), self.event_log)

    # =========================
    # Upload
    # =========================

    def upload(self, filenames: Optional[Sequence[str]] = None) -> threading.Event:
        """Upload local assets to the remote theme.

        With filenames, each one is loaded and uploaded in order. Without,
        every file in the recognized project directories is uploaded.

        Returns:
            Event set once every asset has been attempted
        """
        done = threading.Event()
        if filenames:
            self._start(self._upload_files, list(filenames), done, name="upload")
        else:
            assets: queue.Queue[Optional[Asset]] = queue.Queue(maxsize=self.queue_size)
            errors: queue.Queue[Optional[BaseException]] = queue.Queue()
            self._start(self._produce_local, assets, errors, name="scan-local")
            drainer = self._start(drain_errors, errors, self.event_log, name="drain-errors")
            self._start(self._upload_all, assets, drainer, done, name="upload")
        return done

    def _upload_files(self, filenames: list[str], done: threading.Event) -> None:
        try:
            for filename in filenames:
                try:
                    asset = read_asset(self.root, filename)
                except (ThemeKitError, OSError) as e:
                    notify_error(self.event_log, e, target=filename)
                    continue
                self._upload(asset)
        finally:
            done.set()

    def _produce_local(
        self,
        assets: "queue.Queue[Optional[Asset]]",
        errors: "queue.Queue[Optional[BaseException]]",
    ) -> None:
        try:
            keys = list_asset_keys(self.root)
            logger.debug(f"Found {len(keys)} local asset(s) in {self.root}")
            for key in keys:
                try:
                    assets.put(load_asset(self.root, key))
                except (ThemeKitError, OSError) as e:
                    errors.put(e)
        except (ThemeKitError, OSError) as e:
            errors.put(e)
        finally:
            assets.put(END_OF_ASSETS)
            errors.put(None)

    def _upload_all(
        self,
        assets: "queue.Queue[Optional[Asset]]",
        drainer: threading.Thread,
        done: threading.Event,
    ) -> None:
        try:
            while True:
                asset = assets.get()
                if asset is END_OF_ASSETS:
                    break
                self._upload(asset)
            drainer.join()
        finally:
            done.set()

    def _upload(self, asset: Asset) -> None:
        if not asset.is_valid():
            notify(self.event_log, f"Skipping empty file {asset.key}")
            return
        try:
            response = self.operations.update(asset)
        except ThemeKitAPIError as e:
            log_event(APIEvent.from_error(RequestVerb.UPDATE, asset.key, e), self.event_log)
            return
        except ThemeKitError as e:
            notify_error(self.event_log, e, target=asset.key)
            return
        log_event(APIEvent.from_response(response, asset.key), self.event_log)

    # =========================
    # Remove
    # =========================

    def remove(self, filenames: Sequence[str]) -> threading.Event:
        """Delete the named assets from the remote theme, in order.

        Raises:
            ValueError: If no filenames are given
        """
        if not filenames:
            raise ValueError("At least one filename is required for remove")
        done = threading.Event()
        self._start(self._remove_files, list(filenames), done, name="remove")
        return done

    def _remove_files(self, filenames: list[str], done: threading.Event) -> None:
        try:
            for filename in filenames:
                key = self._key_for(filename)
                try:
                    response = self.operations.delete(key)
                except ThemeKitAPIError as e:
                    log_event(APIEvent.from_error(RequestVerb.DELETE, key, e), self.event_log)
                    continue
                except ThemeKitError as e:
                    notify_error(self.event_log, e, target=key)
                    continue
                log_event(APIEvent.from_response(response, key), self.event_log)
        finally:
            done.set()
