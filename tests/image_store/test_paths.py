"""Tests for version to path resolution."""

from pathlib import Path

import pytest

from core.errors.exceptions import MissingAssetError, UnknownVersionError
from image_store.catalog import ROOTFS_URL, VersionCatalog
from image_store.paths import asset_url, filename_from_url, resolve_path


@pytest.fixture
def catalog():
    return VersionCatalog(
        {
            "X": {"iso_url": "http://h/a.iso", "rootfs_url": "http://h/pub/x.img"},
            "Y": {"iso_url": "http://h/deep/path/b.iso?token=abc#frag"},
            "NOISO": {"rootfs_url": "http://h/c.img"},
            "NONAME": {"iso_url": "http://h/"},
        }
    )


class TestResolvePath:
    """Tests for resolve_path."""

    def test_joins_data_dir_with_basename(self, catalog):
        assert resolve_path("/data", catalog, "X") == Path("/data/a.iso")

    def test_ignores_query_and_fragment(self, catalog):
        assert resolve_path("/data", catalog, "Y") == Path("/data/b.iso")

    def test_other_asset_key(self, catalog):
        assert resolve_path("/data", catalog, "X", ROOTFS_URL) == Path("/data/x.img")

    def test_is_deterministic(self, catalog):
        assert resolve_path("/data", catalog, "X") == resolve_path("/data", catalog, "X")

    def test_unknown_version(self, catalog):
        with pytest.raises(UnknownVersionError) as exc_info:
            resolve_path("/data", catalog, "9.9")

        assert exc_info.value.version == "9.9"

    def test_missing_iso_url(self, catalog):
        with pytest.raises(MissingAssetError) as exc_info:
            resolve_path("/data", catalog, "NOISO")

        assert exc_info.value.version == "NOISO"
        assert exc_info.value.asset_key == "iso_url"

    def test_url_without_file_name(self, catalog):
        with pytest.raises(MissingAssetError):
            resolve_path("/data", catalog, "NONAME")

    def test_does_not_touch_disk(self, catalog, tmp_path):
        missing_dir = tmp_path / "does-not-exist"

        assert resolve_path(missing_dir, catalog, "X") == missing_dir / "a.iso"
        assert not missing_dir.exists()


class TestHelpers:
    """Tests for URL helpers."""

    def test_asset_url(self, catalog):
        assert asset_url(catalog, "X") == "http://h/a.iso"

    def test_asset_url_missing_key(self, catalog):
        with pytest.raises(MissingAssetError):
            asset_url(catalog, "NOISO")

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://mirror/rhcos/4.8/rhcos-live.iso", "rhcos-live.iso"),
            ("https://mirror/file.img?x=1", "file.img"),
            ("https://mirror/", ""),
        ],
    )
    def test_filename_from_url(self, url, expected):
        assert filename_from_url(url) == expected
