# encoder/profiles/vaapi.py
from ..config import QualityProfile, VAAPI_ENCODER
from ..interfaces import EncoderConfig

class VaapiProfileBuilder:
    """Generic VAAPI encoder, used by Intel and AMD when their own encoder is missing."""
    _PARAMS = {
        QualityProfile.LOW: ('-compression_level', '1', '-qp', '23', '-quality', 'speed'),
        QualityProfile.MED: ('-compression_level', '3', '-qp', '20', '-quality', 'balanced'),
        QualityProfile.HIGH: ('-compression_level', '7', '-qp', '16', '-quality', 'quality'),
    }

    def build(self, profile: QualityProfile) -> EncoderConfig:
        return EncoderConfig(VAAPI_ENCODER, self._PARAMS.get(profile, self._PARAMS[QualityProfile.MED]))
