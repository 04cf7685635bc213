"""Theme assets: loading from disk, validation, and writing back.

An asset is either text (``value``) or binary content base64-encoded into
``attachment``. At most one of the two is populated.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import (
    AssetDecodeError,
    AssetIsDirectoryError,
    AssetNotInProjectError,
    AssetWriteError,
    ThemeKitInvalidResponseError,
)
from .paths import ASSET_LOCATIONS, path_to_project

logger = logging.getLogger(__name__)


@dataclass
class Asset:
    """A single theme file addressed by its root-relative key."""

    key: str = ""
    """Forward-slash path relative to the project root"""

    value: str = ""
    """Text content"""

    attachment: str = ""
    """Base64-encoded binary content"""

    def is_valid(self) -> bool:
        """An asset is valid when it carries any content."""
        return bool(self.value) or bool(self.attachment)

    def to_dict(self) -> dict[str, str]:
        """Serialize to the key/value/attachment payload the API expects."""
        payload = {"key": self.key}
        if self.attachment:
            payload["attachment"] = self.attachment
        else:
            payload["value"] = self.value
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Asset":
        """Create an Asset from an API payload, ignoring extra metadata.

        Raises:
            ThemeKitInvalidResponseError: If key, value or attachment is not a string
        """
        fields = {}
        for name in ("key", "value", "attachment"):
            raw = data.get(name)
            if raw is not None and not isinstance(raw, str):
                raise ThemeKitInvalidResponseError(
                    f"Asset {name} must be a string, got {type(raw).__name__}"
                )
            fields[name] = raw or ""
        return cls(**fields)

    def contents(self) -> bytes:
        """Return the raw bytes of this asset.

        Raises:
            AssetDecodeError: If the attachment is not valid base64
        """
        if self.attachment:
            # Line breaks in wrapped base64 are not data
            encoded = self.attachment.replace("\r", "").replace("\n", "")
            try:
                return base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as e:
                raise AssetDecodeError(
                    f"Could not decode {self.key}. error: {e}"
                ) from e
        return self.value.encode("utf-8")

    def write(self, outdir: str | Path) -> Path:
        """Write this asset to ``outdir/<key>``.

        Missing parent directories are created with the permission bits of
        ``outdir``. Content is decoded before the target file is touched.

        Args:
            outdir: Existing destination directory

        Returns:
            Path of the written file

        Raises:
            AssetDecodeError: If the attachment cannot be decoded
            AssetWriteError: If ``outdir`` is missing, the key points outside
                of it, or the write fails
        """
        outdir = Path(outdir)
        try:
            mode = stat.S_IMODE(outdir.stat().st_mode)
        except OSError as e:
            raise AssetWriteError(f"Could not write {self.key}: {e}") from e

        target = Path(os.path.normpath(outdir / self.key))
        if outdir.resolve() not in target.resolve().parents:
            raise AssetWriteError(
                f"Could not write {self.key}: path is outside {outdir}"
            )

        data = self.contents()
        try:
            _make_parents(target.parent, mode)
            with open(target, "wb") as f:
                f.write(data)
        except OSError as e:
            raise AssetWriteError(f"Could not write {self.key}: {e}") from e

        logger.debug(f"Wrote {len(data)} bytes to {target}")
        return target


def _make_parents(directory: Path, mode: int) -> None:
    # os.makedirs ignores mode for intermediate levels, create each one
    missing = []
    while not directory.exists():
        missing.append(directory)
        directory = directory.parent
    for path in reversed(missing):
        path.mkdir(mode=mode)


def is_binary(data: bytes) -> bool:
    """Classify content as binary when it is not NUL-free UTF-8 text."""
    if b"\x00" in data:
        return True
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return False


def load_asset(root: str | Path, filename: str | Path) -> Asset:
    """Load ``root/filename`` into an Asset keyed by ``filename``.

    An empty file loads without error but yields an invalid asset.

    Raises:
        AssetIsDirectoryError: If the target is a directory
        OSError: If the file cannot be read
    """
    path = Path(root) / filename
    if path.is_dir():
        raise AssetIsDirectoryError()

    data = path.read_bytes()
    asset = Asset(key=Path(filename).as_posix())
    if not data:
        return asset
    if is_binary(data):
        asset.attachment = base64.b64encode(data).decode("ascii")
    else:
        asset.value = data.decode("utf-8")
    return asset


def read_asset(root: str | Path, path: str | Path) -> Asset:
    """Load a project file under its canonical asset key.

    Args:
        root: Project root
        path: Path relative to root (or absolute below root)

    Raises:
        AssetNotInProjectError: If the path is outside the recognized directories
        AssetIsDirectoryError: If the path is a directory
        OSError: If the file cannot be read
    """
    full = Path(path) if Path(path).is_absolute() else Path(root) / path
    if full.is_dir():
        raise AssetIsDirectoryError()
    key = path_to_project(root, full)
    if not key:
        raise AssetNotInProjectError(f"{path} is not in a theme directory")
    return load_asset(root, key)


def _walk_files(directory: Path) -> list[Path]:
    files = []
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in sorted(filenames):
            if not name.startswith("."):
                files.append(Path(dirpath) / name)
    return files


def list_asset_keys(root: str | Path, *paths: str | Path) -> list[str]:
    """List the asset keys of project files, in directory-walk order.

    With no paths, every file under each recognized directory is listed.
    A path naming a directory expands to all files below it. Dotfiles are
    skipped.

    Raises:
        FileNotFoundError: If the root or a given path does not exist
        AssetNotInProjectError: If a given file is outside the project
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"No such file or directory: '{root}'")

    candidates: list[Path] = []
    if not paths:
        for location in ASSET_LOCATIONS:
            directory = root / location
            if directory.is_dir():
                candidates.extend(_walk_files(directory))
    else:
        for path in paths:
            full = root / path
            if not full.exists():
                raise FileNotFoundError(f"No such file or directory: '{full}'")
            if full.is_dir():
                candidates.extend(_walk_files(full))
            else:
                candidates.append(full)

    keys: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        key = path_to_project(root, candidate)
        if not key:
            if paths:
                raise AssetNotInProjectError(f"{candidate} is not in a theme directory")
            continue
        # templates/customers is walked on its own and again under templates
        if key not in seen:
            seen.add(key)
            keys.append(key)
    return keys


def find_assets(root: str | Path, *paths: str | Path) -> list[Asset]:
    """Load every asset selected by :func:`list_asset_keys`."""
    return [load_asset(root, key) for key in list_asset_keys(root, *paths)]
