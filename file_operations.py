#!filepath: file_operations.py
import os
import logging
from typing import Optional

from encoder import Resolution

VIDEO_EXTENSIONS = ('.mp4', '.mov', '.avi', '.mkv', '.webm', '.flv', '.wmv')

class FileOps:
    """
    Decides where an encode is written. FFmpeg writes into a hidden staging
    file next to the final output, which only replaces the final file once the
    encode has succeeded.
    """
    def output_path(self, input_path: str, target: Optional[Resolution], compress: bool) -> str:
        """
        Derives the output name from the input: the known video extension is
        dropped, '-WxH' is added when scaling and '-compressed' when compressing.
        """
        base_name = input_path
        lowered = input_path.lower()
        for ext in VIDEO_EXTENSIONS:
            if lowered.endswith(ext):
                base_name = input_path[:-len(ext)]
                break

        suffixes = []
        if target is not None:
            suffixes.append(str(target))
        if compress:
            suffixes.append("compressed")

        output = base_name
        if suffixes:
            output += "-" + "-".join(suffixes)
        return output + ".mp4"

    def staging_path(self, final_path: str) -> str:
        directory, name = os.path.split(final_path)
        # Keep the .mp4 extension so ffmpeg still picks the mp4 muxer.
        return os.path.join(directory, f".{name}.part.mp4")

    def promote(self, staging_path: str, final_path: str) -> None:
        """Atomically moves a finished encode into place, replacing any previous output."""
        os.replace(staging_path, final_path)

    def discard(self, path: str) -> None:
        if os.path.exists(path):
            try:
                os.remove(path)
            except OSError as e:
                logging.warning(f"Could not remove leftover file {path}: {e}")
