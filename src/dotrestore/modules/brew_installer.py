"""Install Homebrew formulae and casks from plain-text package lists."""

import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from ..utils.logger import get_console, get_module_logger


class PackageKind(Enum):
    """Homebrew installable unit kind."""
    FORMULA = "formula"
    CASK = "cask"

    @classmethod
    def from_flag(cls, is_cask: bool) -> "PackageKind":
        return cls.CASK if is_cask else cls.FORMULA


class InstallStatus(Enum):
    """Outcome of a single install."""
    INSTALLED = "installed"
    ALREADY_INSTALLED = "already_installed"
    FAILED = "failed"


@dataclass
class InstallResult:
    """Result for one package."""
    package: str
    status: InstallStatus
    returncode: Optional[int] = None


@dataclass
class InstallReport:
    """Results for one package list, in file order."""
    packages_file: Path
    kind: PackageKind
    list_missing: bool = False
    results: List[InstallResult] = field(default_factory=list)

    def count(self, status: InstallStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def failed(self) -> List[str]:
        return [r.package for r in self.results if r.status == InstallStatus.FAILED]


def read_package_list(packages_file: Path) -> List[str]:
    """Return trimmed, non-blank lines of a package list.

    Undecodable bytes are replaced rather than aborting the read.

    Raises:
        OSError: if the file cannot be opened or read
    """
    with open(packages_file, 'r', encoding='utf-8', errors='replace') as f:
        return [line.strip() for line in f if line.strip()]


class BrewInstaller:
    """Runs ``brew install`` once per listed package, skipping failures."""

    PROBE_TIMEOUT = 60

    def __init__(self, brew_command: str = "brew", console: Optional[Console] = None):
        self.brew_command = brew_command
        self.console = console or get_console()
        self.logger = get_module_logger("brew_installer")

    def get_install_command(self, package: str, kind: PackageKind) -> List[str]:
        """Build the install argv for a package."""
        cmd = [self.brew_command, "install"]
        if kind == PackageKind.CASK:
            cmd.append("--cask")
        cmd.append(package)
        return cmd

    def get_list_command(self, package: str, kind: PackageKind) -> List[str]:
        """Build the argv that succeeds only if the package is installed."""
        cmd = [self.brew_command, "list"]
        if kind == PackageKind.CASK:
            cmd.append("--cask")
        cmd.append(package)
        return cmd

    def is_installed(self, package: str, kind: PackageKind) -> bool:
        """Check whether Homebrew already has the package."""
        try:
            result = subprocess.run(
                self.get_list_command(package, kind),
                capture_output=True,
                text=True,
                timeout=self.PROBE_TIMEOUT
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            self.logger.debug(f"Install probe for {package} failed: {e}")
            return False
        return result.returncode == 0

    def install_package(self, package: str, kind: PackageKind) -> InstallResult:
        """Install one package, streaming brew's output straight to the terminal."""
        cmd = self.get_install_command(package, kind)
        self.logger.debug(f"Running: {' '.join(cmd)}")

        try:
            # stdout/stderr are inherited so brew's own output stays visible
            completed = subprocess.run(cmd)
        except OSError as e:
            self.logger.error(f"Error installing {package}: {e}")
            return InstallResult(package, InstallStatus.FAILED)

        if completed.returncode == 0:
            self.logger.debug(f"Installed {kind.value}: {package}")
            return InstallResult(package, InstallStatus.INSTALLED, completed.returncode)

        if self.is_installed(package, kind):
            self.logger.warning(f"{package} is already installed; brew install exited with "
                                f"status {completed.returncode}")
            return InstallResult(package, InstallStatus.ALREADY_INSTALLED, completed.returncode)

        self.logger.error(f"Error installing {package} (exit status {completed.returncode})")
        return InstallResult(package, InstallStatus.FAILED, completed.returncode)

    def install_packages(self, packages_file: Path, is_cask: bool) -> InstallReport:
        """Install every package listed in ``packages_file``.

        A missing or unreadable list is a warning, not an error.
        """
        kind = PackageKind.from_flag(is_cask)
        report = InstallReport(packages_file=Path(packages_file), kind=kind)

        try:
            packages = read_package_list(packages_file)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Could not open package list {packages_file}: {e}. Skipping.")
            report.list_missing = True
            return report

        self.console.print(f"\n[bold]--- Installing Homebrew {kind.value}s ---[/bold]")

        for package in packages:
            self.console.print(f"\nInstalling {kind.value}: [cyan]{escape(package)}[/cyan]")
            report.results.append(self.install_package(package, kind))

        self.logger.info(
            f"{kind.value.capitalize()}s: {report.count(InstallStatus.INSTALLED)} installed, "
            f"{report.count(InstallStatus.ALREADY_INSTALLED)} already present, "
            f"{report.count(InstallStatus.FAILED)} failed"
        )
        return report
