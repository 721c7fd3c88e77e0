# encoder/compression.py
from typing import List, Tuple

from .config import HardwareClass, QualityProfile, CompressionMapper
from .interfaces import EncoderConfig

def quality_flags(codec: str, hardware: HardwareClass) -> Tuple[str, ...]:
    """The flag(s) that carry the quality value for a codec family."""
    if hardware == HardwareClass.NVIDIA:
        return ('-cq',)
    if hardware == HardwareClass.INTEL:
        return ('-global_quality',) if 'qsv' in codec else ('-qp',)
    if hardware == HardwareClass.AMD:
        return ('-qp_i', '-qp_p') if 'amf' in codec else ('-qp',)
    return ('-crf',)

def _set_flag(params: List[str], flag: str, value: str, every: bool) -> None:
    found = False
    # Step over flag/value pairs so a value is never mistaken for a flag.
    for i in range(0, len(params) - 1, 2):
        if params[i] == flag:
            params[i + 1] = value
            found = True
            if not every:
                return
    if not found:
        params.extend([flag, value])

def apply_compression(config: EncoderConfig, hardware: HardwareClass, profile: QualityProfile) -> EncoderConfig:
    """
    Returns a copy of `config` with its quality value pushed to the compression
    tier for `profile`. The flag is overwritten in place when present and appended
    otherwise. AMD's paired I/P quantizers rewrite every occurrence; other
    families only the first.
    """
    target = CompressionMapper.get_target(profile)
    params = list(config.params)
    flags = quality_flags(config.codec, hardware)
    every = hardware == HardwareClass.AMD and len(flags) > 1
    for flag in flags:
        _set_flag(params, flag, target, every)
    return EncoderConfig(config.codec, params)
