"""
Package inspection: version lookup and on-disk location of the installed app.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from importlib import metadata
from typing import Dict, Optional

from ...config import Settings

logger = logging.getLogger(__name__)


class PackageNotFoundError(LookupError):
    """Raised when the inspector knows nothing about the requested package"""


@dataclass(frozen=True)
class PackageInfo:
    name: str
    version: Optional[str]
    source_path: Optional[str]


class PackageInspector(ABC):
    """Interface for resolving metadata about an installed package"""

    @abstractmethod
    def get_package_info(self, package_name: str) -> PackageInfo:
        """Raises PackageNotFoundError for unknown packages"""
        pass


class ConfiguredPackageInspector(PackageInspector):
    """
    Resolves packages from an explicit registry.

    The host application is registered from settings; a missing version falls
    back to the installed distribution metadata when one exists.
    """

    def __init__(self, packages: Optional[Dict[str, PackageInfo]] = None):
        self.packages: Dict[str, PackageInfo] = dict(packages or {})

    def register(self, info: PackageInfo) -> None:
        self.packages[info.name] = info

    def get_package_info(self, package_name: str) -> PackageInfo:
        info = self.packages.get(package_name)
        if info is None:
            raise PackageNotFoundError(f"Package '{package_name}' is not registered")
        return info

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfiguredPackageInspector":
        inspector = cls()
        if not settings.package_name:
            return inspector

        version = settings.package_version
        if not version:
            try:
                version = metadata.version(settings.package_name)
            except metadata.PackageNotFoundError:
                logger.debug(f"No distribution metadata for {settings.package_name}")

        inspector.register(PackageInfo(
            name=settings.package_name,
            version=version,
            source_path=settings.package_path,
        ))
        return inspector
