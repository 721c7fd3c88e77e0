from encoder.capabilities import (
    FFmpegCapabilityProvider, StaticCapabilityProvider, parse_encoder_list, parse_vendor,
)


def test_parse_encoder_list_reads_table_only(encoders_output):
    encoders = parse_encoder_list(encoders_output)
    assert {"libx264", "h264_nvenc", "h264_qsv", "hevc_nvenc", "aac"} <= encoders
    # Legend lines above the separator are not encoders.
    assert "=" not in encoders


def test_parse_encoder_list_empty():
    assert parse_encoder_list("") == set()


def test_parse_vendor_intel():
    output = "00:02.0 VGA compatible controller: Intel Corporation UHD Graphics 620 (rev 07)\n"
    assert parse_vendor(output) == "intel"


def test_parse_vendor_amd():
    output = (
        "00:14.0 USB controller: Intel Corporation Sunrise Point-LP USB 3.0 xHCI Controller\n"
        "03:00.0 VGA compatible controller: Advanced Micro Devices, Inc. [AMD/ATI] Navi 23\n"
    )
    # Only display controllers count, so the Intel USB controller is ignored.
    assert parse_vendor(output) == "amd"


def test_parse_vendor_unknown():
    assert parse_vendor("01:00.0 VGA compatible controller: Matrox Electronics Systems Ltd.\n") is None


def test_missing_binaries_mean_nothing_detected():
    provider = FFmpegCapabilityProvider("/nonexistent/ffmpeg", "/nonexistent/lspci", timeout=5)
    assert provider.list_encoders() == set()
    assert provider.query_vendor() is None


def test_ffmpeg_provider_parses_command_output(monkeypatch, encoders_output):
    provider = FFmpegCapabilityProvider("ffmpeg")
    monkeypatch.setattr(provider, "run_subprocess", lambda command: encoders_output)
    assert "h264_nvenc" in provider.list_encoders()


def test_static_provider_counts_queries():
    provider = StaticCapabilityProvider(["h264_vaapi"], vendor="amd")
    assert provider.list_encoders() == {"h264_vaapi"}
    assert provider.query_vendor() == "amd"
    assert (provider.encoder_queries, provider.vendor_queries) == (1, 1)
