"""Tests for the directory grantor and share surface."""

import os

import pytest

from moodlog.config import ExportConfig
from moodlog.errors import DirectoryAccessError
from moodlog.services.storage_access import ConfiguredDirectoryGrantor, DirectoryShareSurface


class TestConfiguredDirectoryGrantor:
    async def test_grants_and_creates_directory(self, tmp_path) -> None:
        target = tmp_path / "usb" / "moodlog"
        grantor = ConfiguredDirectoryGrantor(ExportConfig(external_dir=str(target)))

        granted = await grantor.request_directory()

        assert granted == str(target)
        assert target.is_dir()

    async def test_unset_directory_is_refused(self) -> None:
        grantor = ConfiguredDirectoryGrantor(ExportConfig())
        with pytest.raises(DirectoryAccessError):
            await grantor.request_directory()

    async def test_path_under_a_file_is_refused(self, tmp_path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        grantor = ConfiguredDirectoryGrantor(ExportConfig(external_dir=str(blocker / "sub")))
        with pytest.raises(DirectoryAccessError):
            await grantor.request_directory()


class TestDirectoryShareSurface:
    async def test_unavailable_without_share_dir(self) -> None:
        assert await DirectoryShareSurface(ExportConfig()).is_available() is False

    async def test_share_copies_file(self, tmp_path) -> None:
        table = tmp_path / "samples.csv"
        table.write_text("id,ts,mood,videoUri,lat,lng\n")
        outbox = tmp_path / "outbox"
        surface = DirectoryShareSurface(ExportConfig(share_dir=str(outbox)))

        shared = await surface.share(str(table))

        assert os.path.dirname(shared) == str(outbox)
        assert (outbox / "samples.csv").read_text() == table.read_text()
        assert table.exists()
