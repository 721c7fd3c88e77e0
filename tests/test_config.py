import pytest

from encoder import HardwareClass, QualityProfile, SupervisorConfig
from encoder.config import CompressionMapper


@pytest.mark.parametrize("token, expected", [
    ("low", QualityProfile.LOW),
    ("med", QualityProfile.MED),
    ("high", QualityProfile.HIGH),
    ("", QualityProfile.MED),
    ("LOW", QualityProfile.MED),
    ("ultra", QualityProfile.MED),
    (None, QualityProfile.MED),
])
def test_profile_parse(token, expected):
    assert QualityProfile.parse(token) is expected


def test_only_cpu_is_not_gpu():
    assert [h for h in HardwareClass if not h.is_gpu] == [HardwareClass.CPU]


class TestSupervisorConfig:
    def test_defaults(self):
        config = SupervisorConfig()
        assert config.ffmpeg_path == "ffmpeg"
        assert config.ffprobe_path == "ffprobe"
        assert config.encode_timeout is None

    def test_rejects_non_positive_probe_timeout(self):
        with pytest.raises(ValueError):
            SupervisorConfig(probe_timeout=0)

    def test_rejects_non_positive_encode_timeout(self):
        with pytest.raises(ValueError):
            SupervisorConfig(encode_timeout=-1)

    def test_rejects_empty_ffmpeg_path(self):
        with pytest.raises(ValueError):
            SupervisorConfig(ffmpeg_path="")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("VR_FFMPEG", "/opt/ffmpeg/bin/ffmpeg")
        monkeypatch.setenv("VR_ENCODE_TIMEOUT", "600")
        monkeypatch.delenv("VR_FFPROBE", raising=False)
        config = SupervisorConfig.from_env()
        assert config.ffmpeg_path == "/opt/ffmpeg/bin/ffmpeg"
        assert config.ffprobe_path == "ffprobe"
        assert config.encode_timeout == 600.0

    def test_from_env_without_timeout(self, monkeypatch):
        monkeypatch.delenv("VR_ENCODE_TIMEOUT", raising=False)
        assert SupervisorConfig.from_env().encode_timeout is None


def test_compression_targets_get_coarser_with_profile():
    low, med, high = (int(CompressionMapper.get_target(p)) for p in
                      (QualityProfile.LOW, QualityProfile.MED, QualityProfile.HIGH))
    assert low < med < high
