#!filepath: ffmpeg_progress.py
import logging
import subprocess
import threading
from typing import Callable, List, Optional, Tuple

from encoder.interfaces import ProgressReporter
from progress_display import TqdmProgress

def parse_progress_line(line: str) -> Optional[Tuple[str, str]]:
    """Splits one `key=value` line of `-progress` output. Returns None for anything else."""
    key, sep, value = line.strip().partition('=')
    if not sep or not key:
        return None
    return key.strip(), value.strip()

def progress_percent(out_time_us: float, duration_seconds: float) -> Optional[float]:
    """
    Converts ffmpeg's `out_time_ms` (which is microseconds despite its name) into
    a percentage of the source duration, clamped to 0-100. None when the
    duration is unknown.
    """
    if duration_seconds <= 0:
        return None
    percent = (out_time_us / 1_000_000) / duration_seconds * 100
    return min(max(percent, 0.0), 100.0)

class FFmpegWithProgress:
    """
    Runs one FFmpeg command that was built with `-progress pipe:1` and turns its
    stdout into a percentage progress bar. stderr is left attached to ours.
    """
    def __init__(
        self,
        command: List[str],
        duration_seconds: float = 0.0,
        progress_factory: Callable[[], ProgressReporter] = TqdmProgress,
        timeout: Optional[float] = None,
    ):
        if not command:
            raise ValueError("Command must be provided.")
        self.command = command
        self.duration_seconds = duration_seconds
        self.progress_factory = progress_factory
        self.timeout = timeout
        self.process: Optional[subprocess.Popen] = None
        self.last_percent: Optional[float] = None
        self.cancelled = False
        self.timed_out = False
        self._lock = threading.Lock()
        self._watchdog: Optional[threading.Timer] = None

    def start(self) -> None:
        """Launches FFmpeg. OSError/ValueError propagate: they mean it never started."""
        self.process = subprocess.Popen(
            self.command, stdout=subprocess.PIPE, stderr=None,
            universal_newlines=True, encoding="utf-8", errors="replace",
        )
        if self.timeout:
            self._watchdog = threading.Timer(self.timeout, self._expire)
            self._watchdog.daemon = True
            self._watchdog.start()

    def run(self) -> int:
        """Consumes the progress channel until it closes, then returns the exit code."""
        if self.process is None:
            self.start()

        pbar = None
        if self.duration_seconds > 0:
            pbar = self.progress_factory()
        else:
            logging.info("Encoding video (duration unknown)...")

        try:
            for line in self.process.stdout:
                parsed = parse_progress_line(line)
                if parsed is None or parsed[0] != 'out_time_ms':
                    continue
                try:
                    out_time_us = float(parsed[1])
                except ValueError:
                    continue  # e.g. "N/A" before the first frame
                percent = progress_percent(out_time_us, self.duration_seconds)
                if percent is None or (self.last_percent is not None and percent < self.last_percent):
                    continue
                self.last_percent = percent
                if pbar:
                    pbar.update(percent)
            returncode = self.process.wait()
        finally:
            if self._watchdog:
                self._watchdog.cancel()
            # Still running here means the loop was interrupted; never leave FFmpeg behind.
            if self.process.poll() is None:
                self._kill()
            if pbar:
                pbar.finish()
        return returncode

    def cancel(self) -> None:
        """Stops a running FFmpeg. Safe to call from another thread."""
        with self._lock:
            self.cancelled = True
        self._kill()

    def _expire(self) -> None:
        with self._lock:
            self.timed_out = True
        logging.error(f"FFmpeg did not finish within {self.timeout}s, terminating.")
        self._kill()

    def _kill(self) -> None:
        proc = self.process
        if proc and proc.poll() is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass  # Process already died
