# encoder/interfaces.py
from typing import Protocol, List, Optional, Set, Tuple, NamedTuple
from dataclasses import dataclass

from .config import QualityProfile, HardwareClass

class Resolution(NamedTuple):
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"

@dataclass(frozen=True)
class EncoderConfig:
    """A codec and its ordered flag/value argument tokens."""
    codec: str
    params: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.codec:
            raise ValueError("EncoderConfig.codec must not be empty.")
        # Normalize lists handed in by callers so the config stays immutable.
        object.__setattr__(self, "params", tuple(self.params))

    def args(self) -> List[str]:
        """The `-c:v <codec> <params...>` slice of an ffmpeg command."""
        return ['-c:v', self.codec, *self.params]

class CapabilityProvider(Protocol):
    """Interface for anything that can report what the encoding toolchain supports."""
    def list_encoders(self) -> Set[str]:
        ...

    def query_vendor(self) -> Optional[str]:
        ...

class ProgressReporter(Protocol):
    """Interface for a transient progress display fed with percentages."""
    def update(self, percent: float) -> None:
        ...

    def finish(self) -> None:
        ...

@dataclass
class EncodeJob:
    """Everything needed to build (and rebuild on fallback) one ffmpeg invocation."""
    input_path: str
    output_path: str
    profile: QualityProfile = QualityProfile.MED
    compress: bool = False
    target: Optional[Resolution] = None  # None means no scale filter at all
    duration_seconds: float = 0.0

@dataclass
class EncodeResult:
    output_path: str
    hardware: HardwareClass
    encoder: EncoderConfig
    fell_back: bool
    returncode: int
