"""
Shared fixtures: fixed capability providers and a stand-in for the ffmpeg process.
"""

import io
from typing import List, Optional

import pytest

from encoder import EncodeSession, StaticCapabilityProvider

ENCODERS_OUTPUT = """Encoders:
 V..... = Video
 A..... = Audio
 S..... = Subtitle
 .F.... = Frame-level multithreading
 ..S... = Slice-level multithreading
 ...X.. = Codec is experimental
 ....B. = Supports draw_horiz_band
 .....D = Supports direct rendering method 1
 ------
 V....D libx264              libx264 H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10 (codec h264)
 V....D h264_nvenc           NVIDIA NVENC H.264 encoder (codec h264)
 V..... h264_qsv             H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10 (Intel Quick Sync Video acceleration) (codec h264)
 V....D hevc_nvenc           NVIDIA NVENC hevc encoder (codec hevc)
 A....D aac                  AAC (Advanced Audio Coding)
"""


@pytest.fixture
def encoders_output() -> str:
    return ENCODERS_OUTPUT


@pytest.fixture
def make_session():
    """Builds a session on top of a fixed capability answer."""
    def _make(*encoders: str, vendor: Optional[str] = None) -> EncodeSession:
        return EncodeSession(StaticCapabilityProvider(encoders, vendor))
    return _make


class RecordingProgress:
    """Progress display double that keeps every percentage it was given."""
    def __init__(self):
        self.updates: List[float] = []
        self.finished = False

    def update(self, percent: float) -> None:
        self.updates.append(percent)

    def finish(self) -> None:
        self.finished = True


@pytest.fixture
def progress():
    """A RecordingProgress plus a factory returning it, in the shape the runner expects."""
    recorder = RecordingProgress()
    recorder.factory = lambda: recorder
    return recorder


class FakeFFmpeg:
    """
    Replaces subprocess.Popen for the progress runner. Each launch pops the
    next entry of `launch_errors` (None means start normally), writes `lines`
    to stdout and exits with `exit_code`.
    """
    def __init__(self):
        self.lines: List[str] = []
        self.exit_code = 0
        self.launch_errors: List[Optional[BaseException]] = []
        self.commands: List[List[str]] = []
        self.processes: List["FakeProcess"] = []
        self.on_output = None

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        if self.launch_errors:
            error = self.launch_errors.pop(0)
            if error is not None:
                raise error
        process = FakeProcess(self, command)
        self.processes.append(process)
        return process


class FakeProcess:
    def __init__(self, owner: FakeFFmpeg, command: List[str]):
        self.owner = owner
        self.command = command
        self.output_path = command[-1]
        self.stdout = io.StringIO("".join(line + "\n" for line in owner.lines))
        self.returncode = None
        self.killed = False
        if owner.on_output:
            owner.on_output(self)

    def poll(self):
        return self.returncode

    def wait(self):
        if self.returncode is None:
            self.returncode = self.owner.exit_code
        return self.returncode

    def kill(self):
        self.killed = True
        self.returncode = -9


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    fake = FakeFFmpeg()
    monkeypatch.setattr("ffmpeg_progress.subprocess.Popen", fake)
    return fake
