#!/usr/bin/env python3
"""
dotrestore - Personal machine restore
Description: Installs Homebrew packages and links dotfiles into ~/.config
"""

import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console

from .config_manager import default_config_dir, load_restore_config
from .errors import RestoreError
from .restore import get_home_dir, resolve_paths, run_restore
from .utils.logger import default_logs_dir, get_console, init_logging


@click.command()
@click.option('--config-dir', '-c', type=click.Path(path_type=Path),
              help='Directory holding restore.yaml and logging.yaml (default: ~/.config/dotrestore)')
@click.option('--dotfiles-dir', '-d', type=click.Path(path_type=Path),
              help='Dotfiles checkout to restore from (default: ~/Workspace/dotfiles)')
@click.option('--skip-packages', is_flag=True, help='Do not install Homebrew packages')
@click.option('--skip-links', is_flag=True, help='Do not link dotfiles')
@click.option('--debug', is_flag=True, help='Enable debug mode')
def main(config_dir: Optional[Path], dotfiles_dir: Optional[Path], skip_packages: bool,
         skip_links: bool, debug: bool):
    """Install Homebrew formulae and casks, then symlink dotfiles into ~/.config."""
    console: Console = get_console()

    try:
        home = get_home_dir()
        if config_dir is None:
            config_dir = default_config_dir(home)
        init_logging(config_dir, debug=debug, console=console, logs_dir=default_logs_dir(home))

        restore_config = load_restore_config(config_dir)
        if dotfiles_dir is not None:
            restore_config.dotfiles_dir = str(dotfiles_dir)

        paths = resolve_paths(restore_config, home=home)
        if debug:
            console.print(f"[dim]Dotfiles directory: {paths.dotfiles_dir}[/dim]")
            console.print(f"[dim]Config destination: {paths.config_dest_dir}[/dim]")

        run_restore(
            paths,
            brew_command=restore_config.brew_command,
            install_packages=not skip_packages,
            link_dotfiles=not skip_links,
            console=console,
        )

    except KeyboardInterrupt:
        console.print("\n[yellow]Restore interrupted by user[/yellow]")
        sys.exit(130)
    except (RestoreError, ValueError, yaml.YAMLError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        if debug:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
