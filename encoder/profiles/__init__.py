# encoder/profiles/__init__.py
import logging

from ..config import HardwareClass, QualityProfile, QSV_ENCODER, AMF_ENCODER
from ..interfaces import EncoderConfig
from ..session import EncodeSession
from .nvenc import NvencProfileBuilder
from .qsv import QsvProfileBuilder
from .amf import AmfProfileBuilder
from .vaapi import VaapiProfileBuilder
from .cpu import CpuProfileBuilder

def resolve(hardware: HardwareClass, profile: QualityProfile, session: EncodeSession) -> EncoderConfig:
    """
    Maps a hardware class and quality profile to a codec and its arguments.
    Intel and AMD prefer their vendor encoder and drop to VAAPI when the ffmpeg
    build does not ship it. Every combination yields a usable config.
    """
    if hardware == HardwareClass.NVIDIA:
        return NvencProfileBuilder().build(profile)
    if hardware == HardwareClass.INTEL:
        if session.has_encoder(QSV_ENCODER):
            return QsvProfileBuilder().build(profile)
        logging.debug("Quick Sync encoder missing, using VAAPI for Intel.")
        return VaapiProfileBuilder().build(profile)
    if hardware == HardwareClass.AMD:
        if session.has_encoder(AMF_ENCODER):
            return AmfProfileBuilder().build(profile)
        logging.debug("AMF encoder missing, using VAAPI for AMD.")
        return VaapiProfileBuilder().build(profile)
    return CpuProfileBuilder().build(profile)

def auto(session: EncodeSession, profile: QualityProfile) -> EncoderConfig:
    """Resolves the profile against whatever class the session currently classifies as."""
    return resolve(session.classify(), profile, session)
