"""Shared fixtures for the lumix-ffmpeg tests."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Make the src layout importable without an editable install
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from lumix_ffmpeg.config import settings  # noqa: E402
from lumix_ffmpeg.core.ffmpeg import FFmpegRunner  # noqa: E402


class FakeProcess:
    """Stand-in for subprocess.Popen that replays canned stderr."""

    def __init__(self, command: list[str], stderr_text: str = "", returncode: int = 0, **kwargs: object) -> None:
        self.command = command
        self.kwargs = kwargs
        self.stderr = io.StringIO(stderr_text)
        self.returncode = returncode

    def wait(self) -> int:
        return self.returncode

    def __enter__(self) -> FakeProcess:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.stderr.close()


@pytest.fixture(autouse=True)
def _reset_config_singleton():
    """Keep a config.yaml from the working directory out of the tests."""
    settings._ConfigSingleton._instance = settings.LumixConfig()
    yield
    settings._ConfigSingleton.reset()


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    """Create a dummy input file."""
    test_file = tmp_path / "input.wav"
    test_file.write_bytes(b"dummy audio content" * 100)
    return test_file


@pytest.fixture
def fake_runner() -> Mock:
    """Runner whose ffmpeg run writes the output path (second to last argument)."""
    runner = Mock(spec=FFmpegRunner)

    def fake_run(args: list[str], **_kwargs: object) -> str:
        Path(args[-2]).write_bytes(b"converted")
        return "size=1kB time=00:00:01.00"

    runner.run.side_effect = fake_run
    return runner


@pytest.fixture
def silent_runner() -> Mock:
    """Runner that succeeds without producing any output."""
    runner = Mock(spec=FFmpegRunner)
    runner.run.return_value = ""
    return runner


@pytest.fixture
def popen_factory(monkeypatch: pytest.MonkeyPatch):
    """Patch subprocess.Popen and return the list of processes it created."""
    created: list[FakeProcess] = []
    behaviour: dict[str, object] = {"stderr": "", "returncode": 0}

    def fake_popen(command: list[str], **kwargs: object) -> FakeProcess:
        process = FakeProcess(command, stderr_text=behaviour["stderr"], returncode=behaviour["returncode"], **kwargs)
        created.append(process)
        return process

    monkeypatch.setattr("lumix_ffmpeg.core.ffmpeg.subprocess.Popen", fake_popen)

    def configure(stderr: str = "", returncode: int = 0) -> list[FakeProcess]:
        behaviour["stderr"] = stderr
        behaviour["returncode"] = returncode
        return created

    return configure
