"""
Package fingerprint: MD5 of the installed application package, cached per version.

The fingerprint is auxiliary telemetry. Every failure surfaces as None so the
caller can simply omit the event parameter.
"""

import hashlib
import os
import logging
from pathlib import Path
from typing import Optional

from .kv_store import KeyValueStore
from .package_info import PackageInspector

logger = logging.getLogger(__name__)

PACKAGE_CHECKSUM = "PCKGCHKSUM"
CHECKSUM_LENGTH = 32
READ_CHUNK_SIZE = 1024 * 64


def cache_key(version: Optional[str]) -> str:
    return f"{PACKAGE_CHECKSUM};{version}"


def compute_checksum(path: str) -> Optional[str]:
    """
    Lowercase hex MD5 of a package file or directory.

    Directories are hashed as the sorted sequence of (relative path, bytes)
    for every regular file beneath them, so the digest does not depend on
    filesystem iteration order.

    File names are hashed as their raw filesystem bytes, so names that are not
    valid UTF-8 still contribute.

    Returns:
        32-character hex digest, or None if the path is missing, unreadable
        or rejected by the OS
    """
    root = Path(path)
    md5 = hashlib.md5()

    try:
        if root.is_dir():
            files = sorted(
                (p for p in root.rglob("*") if p.is_file()),
                key=lambda p: os.fsencode(p.relative_to(root).as_posix()),
            )
            for file_path in files:
                md5.update(os.fsencode(file_path.relative_to(root).as_posix()))
                _update_from_file(md5, file_path)
        else:
            _update_from_file(md5, root)
    except (OSError, ValueError) as e:
        logger.debug(f"Could not hash package at {path}: {e}")
        return None

    return md5.hexdigest()


def _update_from_file(digest, file_path: Path) -> None:
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(READ_CHUNK_SIZE), b""):
            digest.update(chunk)


class PackageFingerprintCache:
    """
    Read-through cache of package checksums keyed by package version.

    `lookup` and `store_if_absent` are kept separate so the read/write boundary
    is explicit; `resolve` composes them for the activate flow.

    Known limitation: a reinstall under the same version string keeps the old
    digest, since nothing re-hashes until the version changes.
    """

    def __init__(self, store: KeyValueStore, inspector: PackageInspector):
        self.store = store
        self.inspector = inspector

    def lookup(self, version: Optional[str]) -> Optional[str]:
        """Pure read; returns the cached checksum only if it looks valid"""
        try:
            cached = self.store.get(cache_key(version))
        except Exception as e:
            logger.debug(f"Checksum lookup failed for version {version}: {e}")
            return None

        if cached is not None and len(cached) == CHECKSUM_LENGTH:
            return cached
        return None

    def store_if_absent(self, version: Optional[str], checksum: str) -> None:
        if self.lookup(version) is not None:
            return
        try:
            self.store.put(cache_key(version), checksum)
        except Exception as e:
            logger.debug(f"Checksum write failed for version {version}: {e}")

    def resolve(self, package_name: str) -> Optional[str]:
        """
        Returns the package checksum, computing and caching it on a miss.

        Never raises: unknown package, missing path, unreadable file or an
        unavailable store all yield None.
        """
        try:
            info = self.inspector.get_package_info(package_name)
        except Exception as e:
            logger.debug(f"Package info unavailable for {package_name}: {e}")
            return None

        cached = self.lookup(info.version)
        if cached is not None:
            return cached

        if not info.source_path:
            logger.debug(f"No source path known for {package_name}")
            return None

        try:
            checksum = compute_checksum(info.source_path)
        except Exception as e:
            logger.debug(f"Checksum computation failed for {package_name}: {e}")
            return None
        if checksum is None:
            return None

        self.store_if_absent(info.version, checksum)
        logger.info(f"Computed package checksum for {package_name} {info.version}")
        return checksum
