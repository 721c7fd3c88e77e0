# encoder/profiles/amf.py
from ..config import QualityProfile, AMF_ENCODER
from ..interfaces import EncoderConfig

class AmfProfileBuilder:
    # AMF takes separate I- and P-frame quantizers; both share one value here.
    _PARAMS = {
        QualityProfile.LOW: ('-usage', 'ultralowlatency', '-quality', 'speed', '-qp_i', '23', '-qp_p', '23'),
        QualityProfile.MED: ('-usage', 'transcoding', '-quality', 'balanced', '-qp_i', '20', '-qp_p', '20'),
        QualityProfile.HIGH: (
            '-usage', 'transcoding', '-quality', 'quality',
            '-qp_i', '16', '-qp_p', '16', '-preanalysis', '1',
        ),
    }

    def build(self, profile: QualityProfile) -> EncoderConfig:
        return EncoderConfig(AMF_ENCODER, self._PARAMS.get(profile, self._PARAMS[QualityProfile.MED]))
