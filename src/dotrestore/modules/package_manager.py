"""Homebrew detection module."""

import shutil
from dataclasses import dataclass
from typing import Optional

from ..utils.logger import get_module_logger


@dataclass
class PackageManager:
    """Package manager information."""
    name: str
    command: str
    path: Optional[str] = None
    install_url: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.path is not None


class PackageManagerDetector:
    """Locate the package manager used for restoring packages."""

    PACKAGE_MANAGERS_INFO = {
        "brew": {
            "command": "brew",
            "install_url": "https://brew.sh/",
        },
    }

    def __init__(self, command: Optional[str] = None):
        self.logger = get_module_logger("package_manager")
        self.command = command or self.PACKAGE_MANAGERS_INFO["brew"]["command"]

    def detect(self) -> PackageManager:
        """Look up the package manager executable on PATH."""
        info = self.PACKAGE_MANAGERS_INFO["brew"]
        path = shutil.which(self.command)

        self.logger.debug(f"Checking package manager 'brew' (command: {self.command}): "
                          f"{path or 'not available'}")

        return PackageManager(
            name="brew",
            command=self.command,
            path=path,
            install_url=info["install_url"],
        )

    def get_remediation_hint(self, pm: PackageManager) -> str:
        """Guidance shown when the package manager is missing."""
        return f"Please install Homebrew first by visiting {pm.install_url}"
