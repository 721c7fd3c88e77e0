# encoder/profiles/cpu.py
from ..config import QualityProfile, SOFTWARE_ENCODER
from ..interfaces import EncoderConfig

class CpuProfileBuilder:
    _PARAMS = {
        QualityProfile.LOW: ('-preset', 'fast', '-crf', '23', '-tune', 'fastdecode'),
        QualityProfile.MED: ('-preset', 'slow', '-crf', '16', '-tune', 'film'),
        QualityProfile.HIGH: ('-preset', 'veryslow', '-crf', '14', '-tune', 'film', '-x264-params', 'ref=6:bframes=8'),
    }

    def build(self, profile: QualityProfile) -> EncoderConfig:
        return EncoderConfig(SOFTWARE_ENCODER, self._PARAMS.get(profile, self._PARAMS[QualityProfile.MED]))
