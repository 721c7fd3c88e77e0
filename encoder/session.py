# encoder/session.py
import logging
import threading
from typing import List, Optional, Set

from .config import (
    HardwareClass, OVERRIDE_ALIASES, OVERRIDE_REQUESTS,
    NVENC_ENCODER, QSV_ENCODER, AMF_ENCODER, VAAPI_ENCODER,
)
from .interfaces import CapabilityProvider

class EncodeSession:
    """
    Owns the hardware state of one run: the capability probe result and the
    optional forced hardware class. Create one per run; never share it between
    concurrent encodes.
    """
    def __init__(self, provider: CapabilityProvider):
        self.provider = provider
        self._lock = threading.Lock()
        self._override: Optional[HardwareClass] = None
        self._encoders: Optional[Set[str]] = None
        self._vendor_probed = False
        self._vendor: Optional[str] = None

    # --- Probing (once per session) ---
    def encoders(self) -> Set[str]:
        with self._lock:
            if self._encoders is None:
                logging.debug("Performing one-time check of available ffmpeg encoders...")
                try:
                    self._encoders = set(self.provider.list_encoders())
                except Exception as e:
                    # A broken provider means nothing was detected.
                    logging.warning(f"Encoder detection failed: {e}")
                    self._encoders = set()
            return set(self._encoders)

    def has_encoder(self, name: str) -> bool:
        return name in self.encoders()

    def _vaapi_class(self) -> HardwareClass:
        """Works out which vendor is behind the generic VAAPI encoder. Intel when unsure."""
        with self._lock:
            if not self._vendor_probed:
                try:
                    self._vendor = self.provider.query_vendor()
                except Exception as e:
                    logging.warning(f"GPU vendor query failed: {e}")
                    self._vendor = None
                self._vendor_probed = True
            vendor = self._vendor
        return HardwareClass.AMD if vendor == 'amd' else HardwareClass.INTEL

    def _detect(self) -> HardwareClass:
        encoders = self.encoders()
        if NVENC_ENCODER in encoders:
            return HardwareClass.NVIDIA
        if QSV_ENCODER in encoders:
            return HardwareClass.INTEL
        if AMF_ENCODER in encoders:
            return HardwareClass.AMD
        if VAAPI_ENCODER in encoders:
            return self._vaapi_class()
        return HardwareClass.CPU

    # --- Public contract ---
    @property
    def override(self) -> Optional[HardwareClass]:
        with self._lock:
            return self._override

    def classify(self) -> HardwareClass:
        """Returns the forced class if one is set, otherwise the best detected class."""
        forced = self.override
        if forced is not None:
            return forced
        return self._detect()

    def set_override(self, request: str) -> HardwareClass:
        """
        Forces a hardware class for the rest of the session. The requested vendor
        degrades to the generic VAAPI encoder and then to CPU when its own encoder
        is missing, so the returned class may differ from the request.
        """
        request = OVERRIDE_ALIASES.get(request, request)
        if request not in OVERRIDE_REQUESTS:
            raise ValueError(f"Unknown hardware request '{request}'. Expected one of {OVERRIDE_REQUESTS}.")

        if request == 'auto':
            self.reset_override()
            return self.classify()

        selected = self._resolve_request(request)
        with self._lock:
            self._override = selected
        logging.debug(f"Hardware override set to {selected.value} (requested {request}).")
        return selected

    def _resolve_request(self, request: str) -> HardwareClass:
        if request == 'cpu':
            return HardwareClass.CPU

        encoders = self.encoders()
        has_vaapi = VAAPI_ENCODER in encoders

        if request == 'nvidia':
            if NVENC_ENCODER in encoders:
                return HardwareClass.NVIDIA
            return self._vaapi_class() if has_vaapi else HardwareClass.CPU
        if request == 'intel':
            if QSV_ENCODER in encoders or has_vaapi:
                return HardwareClass.INTEL
            return HardwareClass.CPU
        if request == 'amd':
            if AMF_ENCODER in encoders or has_vaapi:
                return HardwareClass.AMD
            return HardwareClass.CPU
        if request == 'igpu':
            if QSV_ENCODER in encoders:
                return HardwareClass.INTEL
            if AMF_ENCODER in encoders:
                return HardwareClass.AMD
            return self._vaapi_class() if has_vaapi else HardwareClass.CPU
        # 'gpu': whatever auto-detection would pick.
        return self._detect()

    def reset_override(self) -> None:
        """Clears the forced class and the cached probe, so the next classify() probes again."""
        with self._lock:
            self._override = None
            self._encoders = None
            self._vendor_probed = False
            self._vendor = None

    def list_available(self) -> List[HardwareClass]:
        """Every class with a usable encoder, best first. CPU is always last."""
        encoders = self.encoders()
        available: List[HardwareClass] = []
        if NVENC_ENCODER in encoders:
            available.append(HardwareClass.NVIDIA)
        if QSV_ENCODER in encoders:
            available.append(HardwareClass.INTEL)
        if AMF_ENCODER in encoders:
            available.append(HardwareClass.AMD)
        if VAAPI_ENCODER in encoders:
            vaapi_class = self._vaapi_class()
            if vaapi_class not in available:
                available.append(vaapi_class)
        available.append(HardwareClass.CPU)
        return available
