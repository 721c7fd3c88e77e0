#!filepath: vr.py
# --- Step 1: Standard Library Imports ---
import os
import sys
import argparse
import logging
from typing import List, Optional, Tuple

# --- Step 2: Local Module Imports ---
from encoder import (
    EncodeSession, EncodeJob, HardwareClass, QualityProfile, SupervisorConfig,
    FFmpegCapabilityProvider, EncoderError,
)
from ffmpeg_handler import EncodeSupervisor, find_executable
from file_operations import FileOps
from media_probe import MediaProbe
from scaler import scale

__version__ = "1.1"

PROFILE_TOKENS = ('low', 'med', 'high')
HW_KEYWORDS = ('nvenc', 'qsv', 'amf', 'vaapi')

# What each hardware request is expected to end up as, for the "not available" warning.
EXPECTED_CLASS = {
    'cpu': HardwareClass.CPU,
    'nvidia': HardwareClass.NVIDIA,
    'intel': HardwareClass.INTEL,
    'amd': HardwareClass.AMD,
}

EPILOG = """Profiles (optional, default: med):
  low                 Fast encoding, lower quality
  med                 Balanced encoding
  high                Slow encoding, highest quality

Examples:
  vr video.mp4                     # Re-encode only (no scaling)
  vr -compress video.mp4           # Compress with auto-detected encoder
  vr -ds video.mp4 high            # Downscale with high profile
  vr -cpu -ds video.mp4            # Force CPU encoding
  vr -nvidia -us video.mp4 low     # Force NVIDIA encoding
  vr -intel -compress video.mp4    # Compress using Intel iGPU
  vr -list-gpus                    # Show available GPUs"""

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vr",
        usage="vr [OPTIONS] [-ds|-us] <input-file> [profile]",
        description="Video Resolution (vr) - re-encode, compress and rescale videos with the best available encoder.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog=EPILOG,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("paths", nargs='*', metavar="input-file [profile]", help="Input video, optionally followed by a profile.")

    hw = parser.add_argument_group("hardware")
    hw.add_argument("-cpu", dest="gpu_mode", action="store_const", const="cpu", help="Force CPU encoding")
    hw.add_argument("-nvidia", "-nv", dest="gpu_mode", action="store_const", const="nvidia", help="Force NVIDIA GPU encoding")
    hw.add_argument("-intel", "-qsv", dest="gpu_mode", action="store_const", const="intel", help="Force Intel Quick Sync (iGPU)")
    hw.add_argument("-amd", dest="gpu_mode", action="store_const", const="amd", help="Force AMD GPU encoding")
    hw.add_argument("-gpu", dest="gpu_mode", action="store_const", const="gpu", help="Force any available GPU (auto-detect)")
    hw.add_argument("-igpu", dest="gpu_mode", action="store_const", const="igpu", help="Force integrated GPU (Intel/AMD)")

    scaling = parser.add_argument_group("scale modes (optional)")
    scaling.add_argument("-ds", dest="scale_mode", action="store_const", const="down", help="Downscale video")
    scaling.add_argument("-us", dest="scale_mode", action="store_const", const="up", help="Upscale video")

    parser.add_argument("-compress", action="store_true", help="Compress video (reduce bitrate)")
    parser.add_argument("-list-gpus", dest="list_gpus", action="store_true", help="List available GPU encoders")
    parser.add_argument("-v", "-version", action="version", version=f"Video Resolution (vr) - Version {__version__}", help="Show version information")
    parser.add_argument("-h", "-help", action="help", help="Show this help message")
    parser.set_defaults(gpu_mode="auto", scale_mode=None)
    return parser

def split_positionals(paths: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """The first profile token is the profile, the first other token is the input."""
    input_path, profile = None, None
    for token in paths:
        if token in PROFILE_TOKENS:
            if profile is None:
                profile = token
        elif input_path is None:
            input_path = token
    return input_path, profile

def list_available_gpus(session: EncodeSession, provider: FFmpegCapabilityProvider) -> None:
    print("Available GPU Encoders:")
    print("=======================")
    print(f"Video Resolution v{__version__}\n")
    for hardware in session.list_available():
        print(f"  - {hardware.value.upper()}")

    print("\nEncoders detected:")
    output = provider.run_subprocess([provider.ffmpeg_path, '-hide_banner', '-encoders']) or ""
    for line in output.splitlines():
        if ('264' in line or '265' in line) and any(k in line for k in HW_KEYWORDS):
            print("  " + line.strip())

def warn_if_substituted(request: str, selected: HardwareClass, session: EncodeSession) -> None:
    expected = EXPECTED_CLASS.get(request)
    substituted = selected != expected if expected else not selected.is_gpu
    if not substituted:
        return
    logging.warning(f"{request} encoder not available, falling back to {selected.value.upper()}")
    available = session.list_available()
    if len(available) > 1:
        logging.info("Available encoders: " + ", ".join(h.value for h in available))

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point. Probes the input, picks the encoder and runs one encode.
    Returns the process exit status.
    """
    logging.basicConfig(level=os.environ.get("LOGLEVEL", "INFO"), format='%(asctime)s - [%(levelname)s] - %(message)s', datefmt='%H:%M:%S')

    parser = build_parser()
    args = parser.parse_intermixed_args(argv)
    config = SupervisorConfig.from_env()

    if args.list_gpus:
        ffmpeg_path = find_executable(config.ffmpeg_path)
        if not ffmpeg_path:
            logging.critical("Failed to find FFmpeg in PATH. Please install FFmpeg first.")
            return 1
        provider = FFmpegCapabilityProvider(ffmpeg_path, config.lspci_path, config.probe_timeout)
        list_available_gpus(EncodeSession(provider), provider)
        return 0

    input_path, profile_token = split_positionals(args.paths)
    if input_path is None:
        if not (sys.argv[1:] if argv is None else argv):
            parser.print_help()
            return 0
        print("\nError: Missing input file")
        parser.print_help()
        return 1

    logging.info("Preparing engine...")
    ffmpeg_path = find_executable(config.ffmpeg_path)
    ffprobe_path = find_executable(config.ffprobe_path)
    if not (ffmpeg_path and ffprobe_path):
        logging.critical("Failed to find FFmpeg or ffprobe in PATH. Please install FFmpeg first.")
        return 1
    config.ffmpeg_path, config.ffprobe_path = ffmpeg_path, ffprobe_path
    logging.info("FFmpeg ready")

    if not os.path.isfile(input_path):
        logging.critical(f"File not found: {input_path}")
        return 1

    profile = QualityProfile.parse(profile_token)
    provider = FFmpegCapabilityProvider(config.ffmpeg_path, config.lspci_path, config.probe_timeout)
    session = EncodeSession(provider)

    if args.gpu_mode != "auto":
        logging.info(f"Forcing {args.gpu_mode} encoding...")
        detected = session.set_override(args.gpu_mode)
        warn_if_substituted(args.gpu_mode, detected, session)
    else:
        logging.info("Auto-detecting best encoder...")
        detected = session.classify()

    logging.info("Reading video info...")
    probe = MediaProbe(config)
    try:
        source = probe.resolution(input_path)
    except EncoderError as e:
        logging.critical(f"Cannot read video: {e}")
        return 1
    duration = probe.duration(input_path)
    logging.info(f"Resolution: {source}")
    if duration > 0:
        logging.info(f"Duration: {duration:.0f} sec")

    target = scale(source, args.scale_mode) if args.scale_mode else None
    gpu_name = "CPU (software)" if detected == HardwareClass.CPU else detected.value.upper()
    logging.info(f"{gpu_name} detected")
    if target is None:
        logging.info("Mode: No scaling (re-encode only)")
    else:
        logging.info("Mode: " + {"up": "Upscale", "down": "Downscale"}[args.scale_mode])
    logging.info(f"Profile: {profile.value}")
    if args.compress:
        logging.info("Compression: ON")
    logging.info(f"Target: {target or source}")

    file_ops = FileOps()
    output_path = file_ops.output_path(input_path, target, args.compress)
    if os.path.exists(output_path):
        logging.warning(f"Output file already exists: {output_path}")
        logging.info("It will be overwritten automatically")
    staging_path = file_ops.staging_path(output_path)

    job = EncodeJob(
        input_path=input_path,
        output_path=staging_path,
        profile=profile,
        compress=args.compress,
        target=target,
        duration_seconds=duration,
    )
    supervisor = EncodeSupervisor(session, config)

    logging.info("Encoding started...")
    try:
        result = supervisor.encode(job)
    except EncoderError as e:
        logging.critical(f"❌ {e}")
        file_ops.discard(staging_path)
        return 1
    except KeyboardInterrupt:
        file_ops.discard(staging_path)
        logging.critical("Interrupted.")
        return 130

    file_ops.promote(staging_path, output_path)
    logging.info(f"✅ Saved as {output_path}")

    operation = "Re-encoded"
    if args.compress:
        operation = "Compressed"
    if target is not None:
        operation = {"up": "Upscaled", "down": "Downscaled"}[args.scale_mode]
        if args.compress:
            operation += " and compressed"
    logging.info(f"Operation: {operation}")
    logging.info(f"Original: {source} → Target: {target or source}")
    logging.info(f"Encoder: {result.encoder.codec}")
    if args.compress:
        logging.info("Compression: Applied")

    session.reset_override()
    return 0

if __name__ == "__main__":
    sys.exit(main())
