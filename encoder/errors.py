# encoder/errors.py
from typing import Optional

class EncoderError(Exception):
    """Base exception for all errors in this package."""
    pass

class LaunchError(EncoderError):
    """Raised when the ffmpeg process could not be started, even after CPU fallback."""
    pass

class ProbeError(EncoderError):
    """Raised when the input file cannot be read by ffprobe."""
    pass

class EncodeFailedError(EncoderError):
    """Raised when ffmpeg started but exited with a non-zero status."""
    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode

class EncodeCancelledError(EncodeFailedError):
    """Raised when a running encode was cancelled by the caller."""
    pass

class EncodeTimeoutError(EncodeFailedError):
    """Raised when the watchdog killed an encode that ran past its deadline."""
    pass
