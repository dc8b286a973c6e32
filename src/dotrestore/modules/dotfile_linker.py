"""Symlink configuration directories from a dotfiles checkout into ~/.config."""

import os
import shutil
import stat
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from ..errors import RestoreError
from ..utils.logger import get_console, get_module_logger


class LinkStatus(Enum):
    """Outcome of linking one config entry."""
    LINKED = "linked"
    REMOVE_FAILED = "remove_failed"
    LINK_FAILED = "link_failed"


@dataclass
class LinkResult:
    """Result for one config entry."""
    name: str
    source: Path
    destination: Path
    status: LinkStatus
    replaced: bool = False
    error: Optional[str] = None


@dataclass
class LinkReport:
    """Results for every config entry, in processing order."""
    source_dir: Path
    destination_dir: Path
    results: List[LinkResult] = field(default_factory=list)

    @property
    def linked(self) -> List[str]:
        return [r.name for r in self.results if r.status == LinkStatus.LINKED]

    @property
    def failed(self) -> List[str]:
        return [r.name for r in self.results if r.status != LinkStatus.LINKED]


def list_config_entries(config_source_dir: Path) -> List[str]:
    """Names of the real (non-symlink) directories directly under ``config_source_dir``.

    Raises:
        OSError: if the directory cannot be listed
    """
    with os.scandir(config_source_dir) as it:
        names = [entry.name for entry in it if entry.is_dir(follow_symlinks=False)]
    return sorted(names)


def remove_existing(path: Path) -> bool:
    """Remove whatever sits at ``path`` without following symlinks.

    Returns:
        True if something was removed, False if nothing was there
    """
    try:
        mode = os.lstat(path).st_mode
    except FileNotFoundError:
        return False

    if stat.S_ISDIR(mode):
        shutil.rmtree(path)
    else:
        os.unlink(path)
    return True


class DotfileLinker:
    """Links every directory of ``<dotfiles>/config`` into the destination root."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or get_console()
        self.logger = get_module_logger("dotfile_linker")

    def link_entry(self, name: str, config_source_dir: Path, config_dest_dir: Path) -> LinkResult:
        """Replace ``config_dest_dir/name`` with a symlink to ``config_source_dir/name``."""
        source_path = config_source_dir / name
        dest_path = config_dest_dir / name
        result = LinkResult(name=name, source=source_path, destination=dest_path,
                            status=LinkStatus.LINKED)

        self.console.print(f"Processing [cyan]{escape(name)}[/cyan]...")

        if os.path.lexists(dest_path):
            self.console.print(f"  - Removing existing target: {escape(str(dest_path))}")
            try:
                remove_existing(dest_path)
            except OSError as e:
                self.logger.warning(f"Failed to remove existing destination {dest_path}: {e}")
                result.status = LinkStatus.REMOVE_FAILED
                result.error = str(e)
                return result
            result.replaced = True

        self.console.print(f"  - Linking {escape(str(source_path))} -> {escape(str(dest_path))}")
        try:
            os.symlink(source_path, dest_path, target_is_directory=True)
        except OSError as e:
            self.logger.error(f"Failed to link {name}: {e}")
            result.status = LinkStatus.LINK_FAILED
            result.error = str(e)
            return result

        self.console.print(f"  - Successfully linked {escape(name)}.")
        return result

    def link_dotfiles(self, dotfiles_dir: Path, config_dest_dir: Path) -> LinkReport:
        """Link each config directory, continuing past per-entry failures.

        Raises:
            RestoreError: if the source tree cannot be read or the destination
                root cannot be created
        """
        config_source_dir = Path(dotfiles_dir) / "config"
        config_dest_dir = Path(config_dest_dir)

        self.console.print("\n[bold]--- Starting Dotfile Symlinking ---[/bold]")
        self.console.print(f"Reading configurations from: {escape(str(config_source_dir))}")

        try:
            names = list_config_entries(config_source_dir)
        except OSError as e:
            raise RestoreError(
                f"Could not read config source directory {config_source_dir}. {e}"
            ) from e

        try:
            config_dest_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as e:
            raise RestoreError(
                f"Could not create destination directory {config_dest_dir}. {e}"
            ) from e

        report = LinkReport(source_dir=config_source_dir, destination_dir=config_dest_dir)
        for name in names:
            report.results.append(self.link_entry(name, config_source_dir, config_dest_dir))

        self.logger.info(f"Linked {len(report.linked)} of {len(report.results)} config directories")
        return report
