"""Tests for :mod:`docsite.toolchain.locator`.

The download step is replaced with a fake that writes a real tarball, so
extraction, the bounded-depth search and installation run for real.
"""

import io
import os
import tarfile
from pathlib import Path

import pytest

from docsite.config import SiteConfig, ToolRelease
from docsite.exceptions import (
    BinaryNotFoundInArchiveError,
    DownloadUnavailableError,
    InstallationIncompleteError,
    ToolNotFoundError,
)
from docsite.toolchain import download, locator


def _write_tarball(dest: Path, members: dict[str, bytes]) -> None:
    with tarfile.open(dest, "w:gz") as tf:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            tf.addfile(info, io.BytesIO(data))


class _FakeDownload:
    """Replacement for ``download.download_archive`` that records its calls."""

    def __init__(self, members: dict[str, bytes]):
        self.members = members
        self.calls = []

    def __call__(self, url, dest, *, retries, transports=download.TRANSPORTS):
        self.calls.append((url, dest, retries))
        _write_tarball(dest, self.members)
        return dest


def _make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def no_system_path(monkeypatch):
    monkeypatch.setattr(locator.shutil, "which", lambda name: None)


def test_find_executable_prefers_local_directory(monkeypatch, tmp_path: Path):
    local = _make_executable(tmp_path / ".bin" / "autocorrect")
    monkeypatch.setattr(locator.shutil, "which", lambda name: "/usr/bin/autocorrect")
    assert locator.find_executable("autocorrect", [tmp_path / ".bin"]) == local


def test_find_executable_skips_non_executable_local_file(monkeypatch, tmp_path: Path):
    (tmp_path / ".bin").mkdir()
    (tmp_path / ".bin" / "autocorrect").write_text("not executable")
    monkeypatch.setattr(locator.shutil, "which", lambda name: "/usr/bin/autocorrect")
    assert locator.find_executable("autocorrect", [tmp_path / ".bin"]) == Path(
        "/usr/bin/autocorrect"
    )


def test_find_executable_without_system_path(no_system_path, tmp_path: Path):
    assert locator.find_executable("autocorrect", [tmp_path]) is None


def test_is_available_false_when_missing(no_system_path, site_config: SiteConfig):
    assert locator.ToolLocator(site_config).is_available("autocorrect") is False


def test_is_available_true_on_system_path(monkeypatch, site_config: SiteConfig):
    monkeypatch.setattr(locator.shutil, "which", lambda name: f"/usr/bin/{name}")
    tools = locator.ToolLocator(site_config)
    assert tools.is_available("autocorrect") is True
    assert tools.resolve("autocorrect") == Path("/usr/bin/autocorrect")


def test_ensure_available_when_installed_does_not_download(
    monkeypatch, no_system_path, site_config: SiteConfig
):
    installed = _make_executable(site_config.bin_dir / "autocorrect")

    def fail_download(*a, **k):
        raise AssertionError("download must not run for an installed tool")

    monkeypatch.setattr(download, "download_archive", fail_download)
    tools = locator.ToolLocator(site_config)
    assert tools.ensure_available("autocorrect") == installed
    assert tools.ensure_available("autocorrect") == installed


def test_ensure_available_installs_nested_binary(
    monkeypatch, no_system_path, site_config: SiteConfig
):
    fake = _FakeDownload({"autocorrect-v2/bin/autocorrect": b"#!/bin/sh\n"})
    monkeypatch.setattr(download, "download_archive", fake)
    tools = locator.ToolLocator(site_config)

    path = tools.ensure_available("autocorrect")

    assert path == site_config.bin_dir / "autocorrect"
    assert os.access(path, os.X_OK)
    assert tools.is_available("autocorrect") is True
    url, dest, retries = fake.calls[0]
    assert url == site_config.linter.url
    assert retries == 3
    # The scratch directory holding the archive is gone afterwards.
    assert not dest.parent.exists()

    # A second call resolves the installed copy without downloading again.
    tools.ensure_available("autocorrect")
    assert len(fake.calls) == 1


def test_ensure_available_cleans_up_when_binary_missing(
    monkeypatch, no_system_path, site_config: SiteConfig
):
    fake = _FakeDownload({"README.md": b"no binary here"})
    monkeypatch.setattr(download, "download_archive", fake)

    with pytest.raises(BinaryNotFoundInArchiveError):
        locator.ToolLocator(site_config).ensure_available("autocorrect")

    assert site_config.bin_dir.is_dir()
    assert not fake.calls[0][1].parent.exists()
    assert not (site_config.bin_dir / "autocorrect").exists()


def test_ensure_available_propagates_download_unavailable(
    monkeypatch, no_system_path, site_config: SiteConfig
):
    monkeypatch.setattr(download.shutil, "which", lambda name: None)
    with pytest.raises(DownloadUnavailableError):
        locator.ToolLocator(site_config).ensure_available("autocorrect")


def test_ensure_available_postcondition_failure(
    monkeypatch, no_system_path, site_config: SiteConfig
):
    monkeypatch.setattr(
        download, "download_archive", _FakeDownload({"autocorrect": b"bin"})
    )
    # Simulate an installer that silently leaves nothing behind.
    monkeypatch.setattr(download, "install_binary", lambda source, dest: dest)

    with pytest.raises(InstallationIncompleteError):
        locator.ToolLocator(site_config).ensure_available("autocorrect")


def test_install_fails_when_tool_directory_is_a_file(
    monkeypatch, no_system_path, site_config: SiteConfig
):
    site_config.bin_dir.write_text("not a directory")
    fake = _FakeDownload({"autocorrect": b"bin"})
    monkeypatch.setattr(download, "download_archive", fake)

    with pytest.raises(InstallationIncompleteError) as excinfo:
        locator.ToolLocator(site_config).ensure_available("autocorrect")

    assert ".bin" in excinfo.value.message
    assert fake.calls == []


def test_install_wraps_filesystem_errors(
    monkeypatch, no_system_path, site_config: SiteConfig
):
    monkeypatch.setattr(
        download, "download_archive", _FakeDownload({"autocorrect": b"bin"})
    )

    def refuse(source, dest):
        raise IsADirectoryError(str(dest))

    monkeypatch.setattr(download, "install_binary", refuse)

    with pytest.raises(InstallationIncompleteError) as excinfo:
        locator.ToolLocator(site_config).ensure_available("autocorrect")
    assert isinstance(excinfo.value.__cause__, IsADirectoryError)


def test_ensure_available_unknown_tool(no_system_path, site_config: SiteConfig):
    with pytest.raises(ToolNotFoundError):
        locator.ToolLocator(site_config).ensure_available("vale")


def test_custom_release_registry(monkeypatch, no_system_path, site_config: SiteConfig):
    release = ToolRelease("vale", "https://example.invalid/vale.tgz", "vale.tgz")
    monkeypatch.setattr(download, "download_archive", _FakeDownload({"vale": b"bin"}))
    tools = locator.ToolLocator(site_config, releases={"vale": release})
    assert tools.ensure_available("vale") == site_config.bin_dir / "vale"
