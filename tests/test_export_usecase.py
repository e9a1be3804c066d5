"""Tests for the CSV export and media relocation."""

import os

import pytest

from moodlog.errors import DirectoryAccessError, ExportWriteError, NoDataError
from moodlog.helpers.csv_format import HEADER, parse_table
from moodlog.models.export import CopyFailed
from moodlog.usecases.export_usecase import ExportState, ExportUseCase


@pytest.fixture
def export_usecase(container):
    return container.get_export_usecase()


async def commit_samples(container, moods):
    sample_usecase = container.get_sample_usecase()
    samples = []
    for mood in moods:
        await sample_usecase.begin_capture()
        samples.append(await sample_usecase.commit(mood))
    return samples


def read_lines(path):
    with open(path, encoding="utf-8", newline="") as f:
        return f.read().split("\n")[:-1]


class TestExportTable:
    """Tests for the serialize-only export."""

    async def test_empty_store_aborts(self, export_usecase) -> None:
        with pytest.raises(NoDataError):
            await export_usecase.export_table()
        assert export_usecase.state == ExportState.EMPTY_ABORT

    async def test_writes_and_shares_table(self, container, export_usecase, share_surface) -> None:
        """The table lands in the export directory and goes to the share surface."""
        samples = await commit_samples(container, [3, 5])

        result = await export_usecase.export_table()

        assert result.mode == "table"
        assert result.rows == 2
        assert result.shared is True
        assert share_surface.shared == [result.table_path]
        assert os.path.dirname(result.table_path) == container.config.export.export_dir
        assert os.path.basename(result.table_path).startswith("samples_")
        assert result.table_path.endswith(".csv")

        lines = read_lines(result.table_path)
        assert lines[0] == ",".join(HEADER)
        assert lines[1] == f'{samples[0].id},{samples[0].timestamp},3,"{samples[0].video_ref}",25.033,121.5654'
        assert export_usecase.state == ExportState.DONE

    async def test_share_unavailable_still_succeeds(self, container, export_usecase, share_surface) -> None:
        share_surface.available = False
        await commit_samples(container, [2])

        result = await export_usecase.export_table()

        assert result.shared is False
        assert os.path.isfile(result.table_path)

    async def test_share_error_is_reported(self, container, export_usecase, share_surface) -> None:
        share_surface.error = RuntimeError("share sheet crashed")
        await commit_samples(container, [2])

        with pytest.raises(ExportWriteError):
            await export_usecase.export_table()
        assert export_usecase.state == ExportState.FAILED

    async def test_write_failure(self, container, tmp_path) -> None:
        """An unwritable export location surfaces as ExportWriteError."""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        await commit_samples(container, [4])
        usecase = ExportUseCase(
            container.get_sample_repository(),
            container.media_repository,
            container.get_directory_grantor(),
            container.get_share_surface(),
            str(blocker / "exports")
        )

        with pytest.raises(ExportWriteError):
            await usecase.export_table()


class TestExportWithMedia:
    """Tests for the serialize-and-relocate export."""

    async def test_missing_video_is_skipped(self, container, export_usecase, external_dir) -> None:
        """Three rows with row 2's video gone: full table, two moved videos, no error."""
        samples = await commit_samples(container, [1, 2, 3])
        os.remove(samples[1].video_ref)

        result = await export_usecase.export_with_media()

        assert result.rows == 3
        assert result.relocated == 2
        assert result.skipped == 1
        assert result.is_partial
        assert len(read_lines(result.table_path)) == 4
        assert os.path.dirname(result.table_path) == str(external_dir)

        videos = sorted(name for name in os.listdir(external_dir) if name.endswith(".mp4"))
        assert len(videos) == 2
        assert videos[0] == "sample_" + samples[0].timestamp.replace(":", "-").replace(".", "-") + ".mp4"
        assert not os.path.exists(samples[0].video_ref)
        assert not os.path.exists(samples[2].video_ref)

    async def test_table_round_trips(self, container, export_usecase) -> None:
        """Parsing the exported table gives back the snapshot, missing videos included."""
        samples = await commit_samples(container, [5, 4, 1])
        os.remove(samples[0].video_ref)
        snapshot = container.get_sample_repository().list_all()

        result = await export_usecase.export_with_media()

        with open(result.table_path, encoding="utf-8", newline="") as f:
            assert parse_table(f.read()) == snapshot

    async def test_second_run_skips_relocated_rows(self, container, export_usecase, external_dir) -> None:
        """Running the export again treats already moved videos as missing."""
        await commit_samples(container, [2, 3])
        first = await export_usecase.export_with_media()

        second = await export_usecase.export_with_media()

        assert first.relocated == 2
        assert second.relocated == 0
        assert second.skipped == 2
        assert second.table_path != first.table_path
        assert len([n for n in os.listdir(external_dir) if n.endswith(".csv")]) == 2

    async def test_directory_refused(self, container, directory_grantor) -> None:
        directory_grantor.directory = None
        await commit_samples(container, [3])
        usecase = container.get_export_usecase()

        with pytest.raises(DirectoryAccessError):
            await usecase.export_with_media()

        assert usecase.state == ExportState.FAILED
        assert len(container.get_sample_repository().list_all()) == 1

    async def test_empty_store_aborts_before_asking_for_directory(self, export_usecase, external_dir) -> None:
        with pytest.raises(NoDataError):
            await export_usecase.export_with_media()
        assert not external_dir.exists()

    async def test_copy_failure_keeps_original_and_continues(self, container, export_usecase, monkeypatch) -> None:
        """A row whose copy fails keeps its original; later rows still move."""
        samples = await commit_samples(container, [1, 2])
        media_repo = container.media_repository
        relocate = media_repo.relocate

        def flaky_relocate(video_ref, destination_dir, filename):
            if video_ref == samples[0].video_ref:
                return CopyFailed(source=video_ref, reason="read error")
            return relocate(video_ref, destination_dir, filename)

        monkeypatch.setattr(media_repo, "relocate", flaky_relocate)

        result = await export_usecase.export_with_media()

        assert result.relocated == 1
        assert result.skipped == 1
        assert os.path.isfile(samples[0].video_ref)
        assert not os.path.exists(samples[1].video_ref)

    async def test_relocation_exception_is_contained(self, container, export_usecase, monkeypatch) -> None:
        """An unexpected error from one row does not abort the loop."""
        samples = await commit_samples(container, [1, 2])
        media_repo = container.media_repository
        relocate = media_repo.relocate

        def exploding_relocate(video_ref, destination_dir, filename):
            if video_ref == samples[0].video_ref:
                raise PermissionError("denied")
            return relocate(video_ref, destination_dir, filename)

        monkeypatch.setattr(media_repo, "relocate", exploding_relocate)

        result = await export_usecase.export_with_media()

        assert result.relocated == 1
        assert result.skipped == 1
        assert os.path.isfile(samples[0].video_ref)
