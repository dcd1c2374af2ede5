"""Tests for the per-run workspace and duration probing."""

from unittest.mock import patch

import pytest
from conftest import FakeRunner

from videodigest.exceptions import WorkspaceError
from videodigest.operations.probe import probe_duration
from videodigest.operations.workspace import scoped_workspace, write_input
from videodigest.tools.ffprobe import FFprobeTool


class TestScopedWorkspace:
    """Tests for scoped_workspace."""

    def test_creates_and_removes(self, tmp_path):
        with scoped_workspace(base_dir=tmp_path) as workspace:
            assert workspace.is_dir()
            assert workspace.name.startswith("video-processing-")
            (workspace / "frame_0.png").write_bytes(b"x")

        assert not workspace.exists()

    def test_removed_when_block_raises(self, tmp_path):
        with pytest.raises(RuntimeError):
            with scoped_workspace(base_dir=tmp_path) as workspace:
                (workspace / "input.mp4").write_bytes(b"x")
                raise RuntimeError("boom")

        assert not workspace.exists()

    def test_private_directories(self, tmp_path):
        with scoped_workspace(base_dir=tmp_path) as a, scoped_workspace(base_dir=tmp_path) as b:
            assert a != b

    def test_creation_failure(self, tmp_path):
        with pytest.raises(WorkspaceError):
            with scoped_workspace(base_dir=tmp_path / "missing" / "dir"):
                pass

    def test_cleanup_failure_is_logged(self, tmp_path, caplog):
        with patch(
            "videodigest.operations.workspace.shutil.rmtree",
            side_effect=OSError("busy"),
        ):
            with scoped_workspace(base_dir=tmp_path):
                pass

        assert "Failed to clean up workspace" in caplog.text


class TestWriteInput:
    """Tests for write_input."""

    def test_keeps_extension(self, tmp_path):
        path = write_input(tmp_path, b"data", "Holiday Clip.MOV")
        assert path.parent == tmp_path
        assert path.name.startswith("input_")
        assert path.suffix == ".mov"
        assert path.read_bytes() == b"data"

    def test_default_extension(self, tmp_path):
        path = write_input(tmp_path, b"data", "upload")
        assert path.suffix == ".mp4"

    def test_path_components_not_used(self, tmp_path):
        path = write_input(tmp_path, b"data", "../../etc/evil.mp4")
        assert path.parent == tmp_path


class TestProbeDuration:
    """Tests for probe_duration."""

    def test_probed(self, tmp_path):
        ffprobe = FFprobeTool(runner=FakeRunner(duration_output="33.3\n"), path="ffprobe")
        assert probe_duration(ffprobe, tmp_path / "in.mp4") == 33.3

    def test_fallback_on_failure(self, tmp_path):
        ffprobe = FFprobeTool(runner=FakeRunner(duration_output=None), path="ffprobe")
        assert probe_duration(ffprobe, tmp_path / "in.mp4") == 120.0

    def test_fallback_on_garbage(self, tmp_path):
        ffprobe = FFprobeTool(runner=FakeRunner(duration_output="N/A\n"), path="ffprobe")
        assert probe_duration(ffprobe, tmp_path / "in.mp4", fallback=45.0) == 45.0

    def test_passes_timeout(self, tmp_path):
        runner = FakeRunner()
        ffprobe = FFprobeTool(runner=runner, path="ffprobe")
        probe_duration(ffprobe, tmp_path / "in.mp4", timeout=12)
        assert runner.timeouts == [12]
