#!filepath: ffmpeg_handler.py
import os
import logging
import shutil
import threading
from enum import Enum
from typing import Callable, List, Optional, Tuple

from encoder import (
    EncodeSession, HardwareClass, EncoderConfig, EncodeJob, EncodeResult,
    SupervisorConfig, ProgressReporter, resolve, apply_compression,
)
from encoder.errors import LaunchError, EncodeFailedError, EncodeCancelledError, EncodeTimeoutError
from ffmpeg_progress import FFmpegWithProgress
from progress_display import TqdmProgress

# Arguments every encode ends with. `-progress pipe:1` and `-nostats` are what
# make stdout a clean key=value channel.
TRAILER_ARGS = [
    '-pix_fmt', 'yuv420p',
    '-c:a', 'copy',
    '-movflags', '+faststart',
    '-progress', 'pipe:1',
    '-nostats',
    '-loglevel', 'error',
]

def find_executable(name: str) -> Optional[str]:
    path = shutil.which(name)
    if path:
        logging.debug(f"Found {name} at: {path}")
        return path
    logging.error(f"{name} not found in system PATH.")
    return None

def scale_filter(target) -> List[str]:
    return ['-vf', f"scale={target.width}:{target.height}:flags=lanczos"]

class SupervisorState(Enum):
    IDLE = "idle"
    LAUNCHING = "launching"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

class EncodeSupervisor:
    """
    Runs one encode: resolves the encoder for the session's hardware, launches
    FFmpeg, follows its progress, and if FFmpeg cannot even be started on a GPU
    class, retries exactly once on the CPU.
    """
    def __init__(
        self,
        session: EncodeSession,
        config: Optional[SupervisorConfig] = None,
        progress_factory: Callable[[], ProgressReporter] = TqdmProgress,
    ):
        self.session = session
        self.config = config or SupervisorConfig()
        self.progress_factory = progress_factory
        self.state = SupervisorState.IDLE
        self._runner: Optional[FFmpegWithProgress] = None
        self._lock = threading.Lock()

    def plan(self, job: EncodeJob, hardware: HardwareClass) -> EncoderConfig:
        """The encoder config for `job` on `hardware`, compression included."""
        encoder = resolve(hardware, job.profile, self.session)
        if job.compress:
            encoder = apply_compression(encoder, hardware, job.profile)
        return encoder

    def build_invocation(self, job: EncodeJob, hardware: HardwareClass) -> Tuple[EncoderConfig, List[str]]:
        """Builds the full FFmpeg command. Used for the first attempt and for the CPU retry."""
        encoder = self.plan(job, hardware)
        command = [self.config.ffmpeg_path, '-y', '-i', job.input_path]
        if job.target is not None:
            command.extend(scale_filter(job.target))
        command.extend(encoder.args())
        command.extend(TRAILER_ARGS)
        command.append(job.output_path)
        return encoder, command

    def _launch(self, job: EncodeJob, hardware: HardwareClass) -> Tuple[EncoderConfig, FFmpegWithProgress]:
        encoder, command = self.build_invocation(job, hardware)
        logging.debug(f"Codec: {encoder.codec}")
        logging.debug(f"Params: {list(encoder.params)}")
        logging.debug(f"FFmpeg command: {' '.join(command)}")
        runner = FFmpegWithProgress(
            command, job.duration_seconds, self.progress_factory, self.config.encode_timeout
        )
        runner.start()
        return encoder, runner

    def encode(self, job: EncodeJob) -> EncodeResult:
        """Runs `job` to completion. Raises LaunchError or EncodeFailedError on failure."""
        self.state = SupervisorState.LAUNCHING
        hardware = self.session.classify()
        fell_back = False
        try:
            encoder, runner = self._launch(job, hardware)
        except (OSError, ValueError) as e:
            logging.error(f"Failed to start FFmpeg: {e}")
            if not hardware.is_gpu:
                self.state = SupervisorState.FAILED
                raise LaunchError(f"Failed to start FFmpeg: {e}") from e

            logging.warning("GPU encoding failed, trying CPU fallback...")
            hardware = self.session.set_override('cpu')
            try:
                encoder, runner = self._launch(job, hardware)
            except (OSError, ValueError) as retry_error:
                self.state = SupervisorState.FAILED
                raise LaunchError(f"CPU fallback also failed: {retry_error}") from retry_error
            fell_back = True
            logging.info("Using CPU encoder as fallback")

        with self._lock:
            self._runner = runner
        self.state = SupervisorState.RUNNING
        try:
            returncode = runner.run()
        except BaseException:
            # Interrupted mid-encode (e.g. Ctrl-C): the runner has already killed FFmpeg.
            self.state = SupervisorState.FAILED
            self._discard_partial(job.output_path)
            raise
        finally:
            with self._lock:
                self._runner = None

        if returncode != 0 or runner.cancelled or runner.timed_out:
            self.state = SupervisorState.FAILED
            self._discard_partial(job.output_path)
            if runner.cancelled:
                raise EncodeCancelledError("Encoding was cancelled.", returncode)
            if runner.timed_out:
                raise EncodeTimeoutError(f"Encoding timed out after {self.config.encode_timeout}s.", returncode)
            raise EncodeFailedError(f"Encoding failed: FFmpeg exited with status {returncode}", returncode)

        self.state = SupervisorState.SUCCEEDED
        return EncodeResult(
            output_path=job.output_path,
            hardware=hardware,
            encoder=encoder,
            fell_back=fell_back,
            returncode=returncode,
        )

    def cancel(self) -> bool:
        """Kills the in-flight encode, if any. Returns whether there was one."""
        with self._lock:
            runner = self._runner
        if runner is None:
            return False
        logging.info("Cancellation requested, terminating FFmpeg")
        runner.cancel()
        return True

    def _discard_partial(self, path: str) -> None:
        if os.path.exists(path):
            try:
                os.remove(path)
                logging.debug(f"Removed partial output: {path}")
            except OSError as e:
                logging.warning(f"Could not remove partial output {path}: {e}")
