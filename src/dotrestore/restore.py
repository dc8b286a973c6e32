"""The restore sequence: Homebrew packages first, then dotfile links."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .config_manager import RestoreConfig, resolve_dir
from .errors import RestoreError
from .modules.brew_installer import BrewInstaller, InstallReport
from .modules.dotfile_linker import DotfileLinker, LinkReport
from .modules.package_manager import PackageManagerDetector
from .utils.logger import get_app_logger, get_console


@dataclass
class RestorePaths:
    """Resolved filesystem locations for one run."""
    home: Path
    dotfiles_dir: Path
    config_dest_dir: Path
    formulae_file: Path
    casks_file: Path

    @property
    def config_source_dir(self) -> Path:
        return self.dotfiles_dir / "config"


@dataclass
class RestoreSummary:
    """Everything a run did."""
    paths: RestorePaths
    brew_available: bool = False
    install_reports: List[InstallReport] = field(default_factory=list)
    link_report: Optional[LinkReport] = None


def get_home_dir() -> Path:
    """Resolve the user's home directory.

    Raises:
        RestoreError: if no home directory can be determined
    """
    try:
        home = Path.home()
    except (KeyError, RuntimeError) as e:
        raise RestoreError(f"Could not get user home directory. {e}") from e
    if not str(home) or str(home) == "~":
        raise RestoreError("Could not get user home directory.")
    return home


def resolve_paths(config: RestoreConfig, home: Optional[Path] = None) -> RestorePaths:
    """Derive the dotfiles, destination and package list paths."""
    home = home or get_home_dir()
    dotfiles_dir = resolve_dir(config.dotfiles_dir, home)
    return RestorePaths(
        home=home,
        dotfiles_dir=dotfiles_dir,
        config_dest_dir=resolve_dir(config.config_dest_dir, home),
        formulae_file=dotfiles_dir / config.formulae_file,
        casks_file=dotfiles_dir / config.casks_file,
    )


def run_restore(paths: RestorePaths, brew_command: str = "brew",
                install_packages: bool = True, link_dotfiles: bool = True,
                console: Optional[Console] = None) -> RestoreSummary:
    """Run the restore steps in order.

    Raises:
        RestoreError: on a fatal linking condition
    """
    logger = get_app_logger()
    console = console or get_console()
    summary = RestoreSummary(paths=paths)

    if install_packages:
        detector = PackageManagerDetector(brew_command)
        pm = detector.detect()
        summary.brew_available = pm.available
        if not pm.available:
            logger.warning(f"Homebrew command '{pm.command}' not found in PATH. "
                           "Skipping all package installations.")
            logger.warning(detector.get_remediation_hint(pm))
        else:
            logger.debug(f"Using Homebrew at {pm.path}")
            installer = BrewInstaller(pm.command, console=console)
            summary.install_reports.append(installer.install_packages(paths.formulae_file, is_cask=False))
            summary.install_reports.append(installer.install_packages(paths.casks_file, is_cask=True))
    else:
        logger.info("Package installation skipped")

    if link_dotfiles:
        linker = DotfileLinker(console=console)
        summary.link_report = linker.link_dotfiles(paths.dotfiles_dir, paths.config_dest_dir)
    else:
        logger.info("Dotfile linking skipped")

    console.print("\n[bold green]--- Restore Script Complete ---[/bold green]")
    return summary
