# encoder/profiles/qsv.py
from ..config import QualityProfile, QSV_ENCODER
from ..interfaces import EncoderConfig

class QsvProfileBuilder:
    """Intel Quick Sync. Look-ahead is only worth its cost above the LOW profile."""
    _PARAMS = {
        QualityProfile.LOW: ('-preset', 'fast', '-global_quality', '23', '-look_ahead', '0'),
        QualityProfile.MED: ('-preset', 'medium', '-global_quality', '20', '-look_ahead', '1'),
        QualityProfile.HIGH: ('-preset', 'slow', '-global_quality', '16', '-look_ahead', '1', '-extbrc', '1'),
    }

    def build(self, profile: QualityProfile) -> EncoderConfig:
        return EncoderConfig(QSV_ENCODER, self._PARAMS.get(profile, self._PARAMS[QualityProfile.MED]))
