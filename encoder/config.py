# encoder/config.py
import os
from enum import Enum
from dataclasses import dataclass
from typing import Optional

class HardwareClass(Enum):
    """The accelerator family whose encoder will be invoked."""
    NVIDIA, INTEL, AMD, CPU = "nvidia", "intel", "amd", "cpu"

    @property
    def is_gpu(self) -> bool:
        return self is not HardwareClass.CPU

class QualityProfile(Enum):
    """Defines standard names for speed/quality points."""
    LOW, MED, HIGH = "low", "med", "high"

    @classmethod
    def parse(cls, value: Optional[str]) -> "QualityProfile":
        """Maps a user token to a profile. Anything unrecognized is MED."""
        if value == "low":
            return cls.LOW
        if value == "high":
            return cls.HIGH
        return cls.MED

# Encoder names as listed by `ffmpeg -encoders`.
NVENC_ENCODER = "h264_nvenc"
QSV_ENCODER = "h264_qsv"
AMF_ENCODER = "h264_amf"
VAAPI_ENCODER = "h264_vaapi"
SOFTWARE_ENCODER = "libx264"

# Hardware override requests accepted by EncodeSession.set_override().
OVERRIDE_ALIASES = {"nv": "nvidia", "qsv": "intel"}
OVERRIDE_REQUESTS = ("auto", "cpu", "nvidia", "intel", "amd", "gpu", "igpu")

@dataclass
class SupervisorConfig:
    """Centralizes toolchain paths and timeouts to avoid magic numbers."""
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    lspci_path: str = "lspci"
    probe_timeout: float = 15
    encode_timeout: Optional[float] = None  # None waits for ffmpeg indefinitely

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if not self.ffmpeg_path or not self.ffprobe_path:
            raise ValueError("ffmpeg_path and ffprobe_path must be provided.")
        if self.probe_timeout <= 0:
            raise ValueError("probe_timeout must be positive.")
        if self.encode_timeout is not None and self.encode_timeout <= 0:
            raise ValueError("encode_timeout must be positive when set.")

    @classmethod
    def from_env(cls) -> "SupervisorConfig":
        """Builds a config from VR_* environment variables, falling back to defaults."""
        encode_timeout = os.environ.get("VR_ENCODE_TIMEOUT")
        return cls(
            ffmpeg_path=os.environ.get("VR_FFMPEG", "ffmpeg"),
            ffprobe_path=os.environ.get("VR_FFPROBE", "ffprobe"),
            lspci_path=os.environ.get("VR_LSPCI", "lspci"),
            probe_timeout=float(os.environ.get("VR_PROBE_TIMEOUT", 15)),
            encode_timeout=float(encode_timeout) if encode_timeout else None,
        )

class CompressionMapper:
    """Centralizes the quality value used when compression is requested."""
    # Coarser than every base tier of the same profile.
    _TARGET_MAP = {QualityProfile.LOW: '26', QualityProfile.MED: '28', QualityProfile.HIGH: '30'}

    @staticmethod
    def get_target(profile: QualityProfile) -> str:
        return CompressionMapper._TARGET_MAP.get(profile, CompressionMapper._TARGET_MAP[QualityProfile.MED])
