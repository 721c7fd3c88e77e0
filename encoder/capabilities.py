# encoder/capabilities.py
import logging
import subprocess
from typing import List, Optional, Iterable, Set

from .interfaces import CapabilityProvider

def parse_encoder_list(output: str) -> Set[str]:
    """Extracts encoder names (second column) from `ffmpeg -encoders` output."""
    encoders: Set[str] = set()
    in_table = False
    for line in output.splitlines():
        stripped = line.strip()
        if stripped.startswith('---'):
            in_table = True
            continue
        if not in_table:
            continue
        parts = stripped.split()
        if len(parts) > 1:
            encoders.add(parts[1])
    return encoders

def parse_vendor(lspci_output: str) -> Optional[str]:
    """Picks a GPU vendor out of `lspci` output. Intel wins over AMD."""
    display_lines = [
        line for line in lspci_output.lower().splitlines()
        if 'vga' in line or 'display' in line or '3d controller' in line
    ]
    text = '\n'.join(display_lines)
    if 'intel' in text:
        return 'intel'
    if 'advanced micro devices' in text or 'amd' in text or 'ati ' in text:
        return 'amd'
    return None

class FFmpegCapabilityProvider(CapabilityProvider):
    """Asks the installed ffmpeg build and the PCI bus what hardware encoding is possible."""
    def __init__(self, ffmpeg_path: str = 'ffmpeg', lspci_path: str = 'lspci', timeout: float = 15):
        self.ffmpeg_path = ffmpeg_path
        self.lspci_path = lspci_path
        self.timeout = timeout

    def run_subprocess(self, command: List[str]) -> Optional[str]:
        """Runs a probe command, returning stdout or None on any failure."""
        try:
            kwargs = {'stdout': subprocess.PIPE, 'stderr': subprocess.PIPE, 'text': True, 'encoding': 'utf-8', 'errors': 'replace'}
            result = subprocess.run(command, **kwargs, check=True, timeout=self.timeout)
            return result.stdout
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            logging.debug(f"Probe command '{command[0]}' failed: {e}")
            return None

    def list_encoders(self) -> Set[str]:
        output = self.run_subprocess([self.ffmpeg_path, '-hide_banner', '-encoders'])
        if output is None:
            logging.warning("Could not list ffmpeg encoders; assuming no hardware acceleration.")
            return set()
        encoders = parse_encoder_list(output)
        logging.debug(f"Found supported encoders: {sorted(encoders)}")
        return encoders

    def query_vendor(self) -> Optional[str]:
        output = self.run_subprocess([self.lspci_path])
        if output is None:
            return None
        return parse_vendor(output)

class StaticCapabilityProvider(CapabilityProvider):
    """A fixed capability answer, for tests and for callers that already know the hardware."""
    def __init__(self, encoders: Iterable[str] = (), vendor: Optional[str] = None):
        self.encoders = set(encoders)
        self.vendor = vendor
        self.encoder_queries = 0
        self.vendor_queries = 0

    def list_encoders(self) -> Set[str]:
        self.encoder_queries += 1
        return set(self.encoders)

    def query_vendor(self) -> Optional[str]:
        self.vendor_queries += 1
        return self.vendor
