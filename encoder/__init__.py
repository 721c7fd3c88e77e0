# encoder/__init__.py

# Expose the session (hardware classification) for easy importing
from .session import EncodeSession

# Expose key data classes and enums as well.
from .config import HardwareClass, QualityProfile, SupervisorConfig
from .interfaces import EncoderConfig, EncodeJob, EncodeResult, Resolution, CapabilityProvider, ProgressReporter
from .capabilities import FFmpegCapabilityProvider, StaticCapabilityProvider
from .profiles import resolve, auto
from .compression import apply_compression
from .errors import (
    EncoderError, LaunchError, ProbeError,
    EncodeFailedError, EncodeCancelledError, EncodeTimeoutError,
)
