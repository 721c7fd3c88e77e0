#!filepath: media_probe.py
import logging
import os
import subprocess

from encoder import Resolution, SupervisorConfig
from encoder.errors import ProbeError

class MediaProbe:
    """Reads the size and length of an input video with ffprobe."""
    def __init__(self, config: SupervisorConfig):
        self.ffprobe_path = config.ffprobe_path
        self.timeout = config.probe_timeout

    def _run(self, command: list) -> str:
        result = subprocess.run(command, capture_output=True, text=True, check=True, timeout=self.timeout, env=os.environ)
        return result.stdout.strip()

    def resolution(self, path: str) -> Resolution:
        """Width and height of the first video stream."""
        command = [
            self.ffprobe_path, '-v', 'error', '-select_streams', 'v:0',
            '-show_entries', 'stream=width,height', '-of', 'csv=p=0:s=x', path,
        ]
        try:
            output = self._run(command)
            # Some containers repeat the line; the first one is the stream we asked for.
            width, height = output.splitlines()[0].strip().rstrip('x').split('x')[:2]
            return Resolution(int(width), int(height))
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError, ValueError, IndexError) as e:
            raise ProbeError(f"Cannot read video resolution of '{path}': {e}") from e

    def duration(self, path: str) -> float:
        """Length in seconds, or 0.0 when it cannot be determined."""
        command = [
            self.ffprobe_path, '-v', 'error', '-show_entries',
            'format=duration', '-of', 'default=noprint_wrappers=1:nokey=1', path,
        ]
        try:
            return float(self._run(command))
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError, ValueError) as e:
            logging.warning(f"Could not get video duration for progress bar. {e}")
            return 0.0
