import pytest

from encoder import EncodeSession, HardwareClass


class TestClassify:
    def test_nvidia_beats_intel(self, make_session):
        assert make_session("h264_qsv", "h264_nvenc", "libx264").classify() is HardwareClass.NVIDIA

    def test_order_of_names_does_not_matter(self, make_session):
        assert make_session("h264_nvenc", "h264_qsv").classify() is HardwareClass.NVIDIA

    def test_intel_beats_amd(self, make_session):
        assert make_session("h264_amf", "h264_qsv").classify() is HardwareClass.INTEL

    def test_amd(self, make_session):
        assert make_session("h264_amf", "libx264").classify() is HardwareClass.AMD

    def test_vaapi_with_amd_vendor(self, make_session):
        assert make_session("h264_vaapi", vendor="amd").classify() is HardwareClass.AMD

    def test_vaapi_defaults_to_intel(self, make_session):
        assert make_session("h264_vaapi", vendor=None).classify() is HardwareClass.INTEL

    def test_nothing_means_cpu(self, make_session):
        assert make_session("libx264").classify() is HardwareClass.CPU

    def test_broken_provider_means_cpu(self):
        class Broken:
            def list_encoders(self):
                raise RuntimeError("ffmpeg exploded")

            def query_vendor(self):
                raise RuntimeError("lspci exploded")

        assert EncodeSession(Broken()).classify() is HardwareClass.CPU

    def test_probes_once(self, make_session):
        session = make_session("h264_vaapi", vendor="amd")
        for _ in range(3):
            session.classify()
        assert session.provider.encoder_queries == 1
        assert session.provider.vendor_queries == 1


class TestOverride:
    def test_cpu_round_trip(self, make_session):
        session = make_session("h264_nvenc")
        assert session.set_override("cpu") is HardwareClass.CPU
        assert session.classify() is HardwareClass.CPU
        assert session.classify() is HardwareClass.CPU
        queries = session.provider.encoder_queries

        session.reset_override()
        assert session.override is None
        assert session.classify() is HardwareClass.NVIDIA
        assert session.provider.encoder_queries == queries + 1

    def test_override_skips_probe(self, make_session):
        session = make_session("h264_nvenc")
        session.set_override("cpu")
        session.classify()
        assert session.provider.encoder_queries == 0

    @pytest.mark.parametrize("request_, encoders, vendor, expected", [
        ("nvidia", ["h264_nvenc"], None, HardwareClass.NVIDIA),
        ("nv", ["h264_nvenc"], None, HardwareClass.NVIDIA),
        ("nvidia", ["h264_vaapi"], "amd", HardwareClass.AMD),
        ("nvidia", ["libx264"], None, HardwareClass.CPU),
        ("intel", ["h264_qsv"], None, HardwareClass.INTEL),
        ("qsv", ["h264_vaapi"], None, HardwareClass.INTEL),
        ("intel", ["h264_nvenc"], None, HardwareClass.CPU),
        ("amd", ["h264_amf"], None, HardwareClass.AMD),
        ("amd", ["h264_vaapi"], "intel", HardwareClass.AMD),
        ("amd", [], None, HardwareClass.CPU),
        ("gpu", ["h264_amf", "h264_nvenc"], None, HardwareClass.NVIDIA),
        ("gpu", [], None, HardwareClass.CPU),
        ("igpu", ["h264_nvenc", "h264_qsv"], None, HardwareClass.INTEL),
        ("igpu", ["h264_nvenc", "h264_amf"], None, HardwareClass.AMD),
        ("igpu", ["h264_nvenc", "h264_vaapi"], "amd", HardwareClass.AMD),
        ("igpu", ["h264_nvenc"], None, HardwareClass.CPU),
    ])
    def test_fallback_chain(self, make_session, request_, encoders, vendor, expected):
        session = make_session(*encoders, vendor=vendor)
        assert session.set_override(request_) is expected
        assert session.classify() is expected

    def test_auto_clears_override(self, make_session):
        session = make_session("h264_qsv")
        session.set_override("cpu")
        assert session.set_override("auto") is HardwareClass.INTEL
        assert session.override is None

    def test_unknown_request(self, make_session):
        with pytest.raises(ValueError):
            make_session().set_override("voodoo")


class TestListAvailable:
    def test_everything(self, make_session):
        session = make_session("h264_nvenc", "h264_qsv", "h264_amf", "h264_vaapi", vendor="amd")
        assert session.list_available() == [
            HardwareClass.NVIDIA, HardwareClass.INTEL, HardwareClass.AMD, HardwareClass.CPU,
        ]

    def test_vaapi_vendor_added_once(self, make_session):
        session = make_session("h264_nvenc", "h264_vaapi", vendor="amd")
        assert session.list_available() == [HardwareClass.NVIDIA, HardwareClass.AMD, HardwareClass.CPU]

    def test_cpu_only(self, make_session):
        assert make_session().list_available() == [HardwareClass.CPU]
