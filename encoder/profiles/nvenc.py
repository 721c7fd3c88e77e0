# encoder/profiles/nvenc.py
from ..config import QualityProfile, NVENC_ENCODER
from ..interfaces import EncoderConfig

class NvencProfileBuilder:
    _PARAMS = {
        QualityProfile.LOW: ('-preset', 'p3', '-rc', 'vbr', '-cq', '23', '-b_ref_mode', '0'),
        QualityProfile.MED: ('-preset', 'p5', '-rc', 'vbr', '-cq', '18', '-tune', 'hq', '-b_ref_mode', '1'),
        QualityProfile.HIGH: (
            '-preset', 'p7', '-rc', 'vbr', '-cq', '14', '-tune', 'hq',
            '-multipass', 'fullres', '-b:v', '0', '-b_ref_mode', '2',
        ),
    }

    def build(self, profile: QualityProfile) -> EncoderConfig:
        return EncoderConfig(NVENC_ENCODER, self._PARAMS.get(profile, self._PARAMS[QualityProfile.MED]))
