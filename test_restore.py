#!/usr/bin/env python3
"""Integration test script for the restore sequence and CLI."""

import io
import sys
import shutil
import subprocess
import tempfile
from pathlib import Path
from unittest import mock

import yaml
from click.testing import CliRunner
from rich.console import Console

# Add the src directory to the Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

try:
    from dotrestore import main as cli
    from dotrestore import restore
    from dotrestore.config_manager import RestoreConfig
    from dotrestore.errors import RestoreError
    from dotrestore.restore import resolve_paths, run_restore
except ImportError as e:
    print(f"❌ Import error: {e}")
    sys.exit(1)


def create_home():
    """Fake home with ~/Workspace/dotfiles holding two package lists and two configs."""
    home = Path(tempfile.mkdtemp(prefix="restore_test_"))
    dotfiles = home / "Workspace" / "dotfiles"
    for name in ("nvim", "zsh"):
        (dotfiles / "config" / name).mkdir(parents=True)
    (dotfiles / "brew_formulae.txt").write_text("git\n\nwget\n", encoding="utf-8")
    (dotfiles / "brew_casks.txt").write_text("firefox\n", encoding="utf-8")
    return home


def quiet_console():
    return Console(file=io.StringIO(), width=200)


def test_resolve_paths_defaults():
    home = Path("/home/tester")
    paths = resolve_paths(RestoreConfig(), home=home)

    assert paths.dotfiles_dir == home / "Workspace" / "dotfiles"
    assert paths.config_source_dir == home / "Workspace" / "dotfiles" / "config"
    assert paths.config_dest_dir == home / ".config"
    assert paths.formulae_file == home / "Workspace" / "dotfiles" / "brew_formulae.txt"
    assert paths.casks_file == home / "Workspace" / "dotfiles" / "brew_casks.txt"


def test_resolve_paths_keeps_absolute_dirs():
    config = RestoreConfig(dotfiles_dir="/srv/dotfiles", config_dest_dir="/tmp/cfg")
    paths = resolve_paths(config, home=Path("/home/tester"))

    assert paths.dotfiles_dir == Path("/srv/dotfiles")
    assert paths.config_dest_dir == Path("/tmp/cfg")


def test_missing_home_is_fatal():
    with mock.patch.object(restore.Path, "home", side_effect=RuntimeError("no home")):
        try:
            restore.get_home_dir()
        except RestoreError as e:
            assert "home directory" in str(e)
        else:
            raise AssertionError("missing home should be fatal")


def test_formulae_then_casks_then_links():
    home = create_home()
    paths = resolve_paths(RestoreConfig(), home=home)
    try:
        with mock.patch("shutil.which", return_value="/opt/homebrew/bin/brew"), \
                mock.patch("subprocess.run",
                           return_value=subprocess.CompletedProcess([], 0)) as run:
            summary = run_restore(paths, console=quiet_console())

        assert [c.args[0] for c in run.call_args_list] == [
            ["brew", "install", "git"],
            ["brew", "install", "wget"],
            ["brew", "install", "--cask", "firefox"],
        ]
        assert summary.brew_available
        assert len(summary.install_reports) == 2
        assert summary.link_report.linked == ["nvim", "zsh"]
        assert (home / ".config" / "nvim").is_symlink()
    finally:
        shutil.rmtree(home)


def test_missing_brew_skips_installs_but_links():
    home = create_home()
    paths = resolve_paths(RestoreConfig(), home=home)
    try:
        with mock.patch("shutil.which", return_value=None), \
                mock.patch("subprocess.run") as run:
            summary = run_restore(paths, console=quiet_console())

        run.assert_not_called()
        assert not summary.brew_available
        assert summary.install_reports == []
        assert summary.link_report.linked == ["nvim", "zsh"]
    finally:
        shutil.rmtree(home)


def test_cli_reports_fatal_error_with_exit_status():
    home = Path(tempfile.mkdtemp(prefix="restore_test_"))
    config_dir = home / "cfg"
    config_dir.mkdir()
    with open(config_dir / "restore.yaml", "w", encoding="utf-8") as f:
        yaml.dump({"restore": {"dotfiles_dir": str(home / "missing")}}, f)
    try:
        with mock.patch.object(cli, "init_logging"), \
                mock.patch.object(cli, "get_home_dir", return_value=home):
            result = CliRunner().invoke(cli.main, ["-c", str(config_dir), "--skip-packages"])

        assert result.exit_code == 1
    finally:
        shutil.rmtree(home)


def test_cli_dotfiles_override_and_skip_packages():
    home = create_home()
    other = home / "elsewhere"
    (other / "config" / "tmux").mkdir(parents=True)
    try:
        with mock.patch.object(cli, "init_logging"), \
                mock.patch.object(cli, "get_home_dir", return_value=home), \
                mock.patch("subprocess.run") as run:
            result = CliRunner().invoke(
                cli.main, ["-c", str(home / "no-config"), "-d", str(other), "--skip-packages"]
            )

        assert result.exit_code == 0, result.output
        run.assert_not_called()
        assert (home / ".config" / "tmux").is_symlink()
        assert not (home / ".config" / "nvim").exists()
    finally:
        shutil.rmtree(home)


def test_cli_missing_home_exits_with_message():
    with mock.patch.object(cli, "init_logging") as init, \
            mock.patch.object(restore.Path, "home", side_effect=RuntimeError("no home")), \
            mock.patch("subprocess.run") as run:
        result = CliRunner().invoke(cli.main, [])

    assert result.exit_code == 1
    assert "Could not get user home directory" in result.output
    init.assert_not_called()
    run.assert_not_called()


def test_cli_undecodable_package_list_still_links():
    home = create_home()
    dotfiles = home / "Workspace" / "dotfiles"
    (dotfiles / "brew_formulae.txt").write_bytes(b"caf\xe9\n")
    try:
        with mock.patch.object(cli, "init_logging"), \
                mock.patch.object(cli, "get_home_dir", return_value=home), \
                mock.patch("shutil.which", return_value="/opt/homebrew/bin/brew"), \
                mock.patch("subprocess.run",
                           return_value=subprocess.CompletedProcess([], 0)) as run:
            result = CliRunner().invoke(cli.main, ["-c", str(home / "no-config")])

        assert result.exit_code == 0, result.output
        assert [c.args[0] for c in run.call_args_list] == [
            ["brew", "install", "caf\ufffd"],
            ["brew", "install", "--cask", "firefox"],
        ]
        assert (home / ".config" / "nvim").is_symlink()
        assert (home / ".config" / "zsh").is_symlink()
    finally:
        shutil.rmtree(home)


if __name__ == "__main__":
    print("🚀 Testing restore sequence")
    print("=" * 60)
    for name, func in list(globals().items()):
        if name.startswith("test_") and callable(func):
            func()
            print(f"   ✅ {name}")
    print("\n🎉 All restore tests passed")
