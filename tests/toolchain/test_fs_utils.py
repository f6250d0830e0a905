"""Unit tests for filesystem helpers in ``docsite.toolchain.fs_utils``."""

from pathlib import Path

import pytest

from docsite.config import SiteConfig
from docsite.toolchain import fs_utils


def test_create_safe_path_denies_project_root(site_config: SiteConfig):
    with pytest.raises(PermissionError, match="project root"):
        fs_utils.create_safe_path(site_config.project_root, site_config)


def test_create_safe_path_denies_outside_project(site_config: SiteConfig, tmp_path_factory):
    outside = tmp_path_factory.mktemp("elsewhere")
    with pytest.raises(PermissionError, match="outside the project"):
        fs_utils.create_safe_path(outside, site_config)


def test_create_safe_path_denies_unlisted_directory(site_config: SiteConfig):
    with pytest.raises(PermissionError, match="whitelist"):
        fs_utils.create_safe_path(site_config.project_root / "docs", site_config)


def test_create_safe_path_allows_whitelisted_children(site_config: SiteConfig):
    target = site_config.site_dir / "assets"
    assert fs_utils.create_safe_path(target, site_config) == target.resolve()


def test_safe_rmtree_removes_tree(site_config: SiteConfig):
    (site_config.cache_dir / "plugin").mkdir(parents=True)
    (site_config.cache_dir / "plugin" / "data.json").write_text("{}")
    assert fs_utils.safe_rmtree(site_config.cache_dir, site_config) is True
    assert not site_config.cache_dir.exists()


def test_safe_rmtree_missing_is_noop(site_config: SiteConfig):
    assert fs_utils.safe_rmtree(site_config.site_dir, site_config) is False


def test_safe_rmtree_removes_plain_file(site_config: SiteConfig):
    site_config.site_dir.write_text("stray file")
    assert fs_utils.safe_rmtree(site_config.site_dir, site_config) is True
    assert not site_config.site_dir.exists()


def test_safe_rmtree_refuses_unlisted(site_config: SiteConfig):
    docs = site_config.project_root / "docs"
    docs.mkdir()
    with pytest.raises(PermissionError):
        fs_utils.safe_rmtree(docs, site_config)
    assert docs.is_dir()
