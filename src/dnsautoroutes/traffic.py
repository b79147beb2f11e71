"""
Live DNS capture with pcapy

Packets are read and handed to the callback one at a time, in arrival order.
"""

import time
import threading
from typing import Callable, Iterator, Optional, Tuple

try:
    import pcapy
    PCAPY_AVAILABLE = True
except ImportError:
    PCAPY_AVAILABLE = False

from .config import CaptureConfig
from .exceptions import CaptureError, DecodeError
from .packet import DNSAnalyzer, DNSMessage
from .utils.logger import get_logger
from .utils.network import get_iface


def default_interface() -> str:
    """First capture device reported by libpcap"""
    if not PCAPY_AVAILABLE:
        raise CaptureError("pcapy is not available")
    try:
        devices = pcapy.findalldevs()
    except pcapy.PcapError as e:
        raise CaptureError(f"Failed to list capture devices: {e}")
    if not devices:
        raise CaptureError("No capture devices found")
    return devices[0]


def resolve_interface(config: CaptureConfig) -> str:
    """Interface to capture on: explicit name, then CIDR match, then first device"""
    if config.interface:
        return config.interface
    if config.cidr:
        iface = get_iface(config.cidr)
        if not iface:
            raise CaptureError(f"Failed to find interface for CIDR {config.cidr}")
        return iface
    return default_interface()


class DNSCapture:
    """Sequential pcap reader for DNS responses"""

    def __init__(self, config: CaptureConfig):
        self.config = config
        self.logger = get_logger(__name__)
        self.interface: Optional[str] = None
        self.pcap_handle = None
        self.analyzer: Optional[DNSAnalyzer] = None

        self.running = threading.Event()
        self.packet_count = 0
        self.dns_packet_count = 0
        self.decode_errors = 0
        self.start_time: Optional[float] = None

    def open(self) -> None:
        """Open the device and install the BPF filter; raises CaptureError"""
        if not PCAPY_AVAILABLE:
            raise CaptureError("pcapy is not available")
        self.interface = resolve_interface(self.config)
        try:
            self.pcap_handle = pcapy.open_live(
                self.interface, self.config.snaplen,
                self.config.promiscuous, self.config.capture_timeout_ms
            )
            self.pcap_handle.setfilter(self.config.bpf_filter)
        except pcapy.PcapError as e:
            raise CaptureError(f"Failed to initialize packet capture on {self.interface}: {e}")
        self.analyzer = DNSAnalyzer(self.pcap_handle.datalink())
        self.logger.info(f"Capture on {self.interface} with filter: {self.config.bpf_filter}")

    def packets(self) -> Iterator[Tuple[float, bytes]]:
        """Yield (timestamp, frame) until stopped or a capture error occurs"""
        if self.pcap_handle is None:
            raise CaptureError("Capture is not open")
        self.running.set()
        self.start_time = time.time()
        while self.running.is_set():
            try:
                header, packet_data = self.pcap_handle.next()
            except pcapy.PcapError as e:
                # open_live timeouts surface as errors on some platforms
                if "timed out" in str(e):
                    continue
                self.logger.error(f"Capture failed: {e}")
                break
            if header is None or not packet_data:
                continue
            self.packet_count += 1
            ts = header.getts()
            yield ts[0] + ts[1] * 1e-6, packet_data
        self.running.clear()

    def messages(self) -> Iterator[DNSMessage]:
        """Decoded DNS messages; malformed packets are logged and skipped"""
        for timestamp, packet_data in self.packets():
            try:
                message = self.analyzer.analyze_packet(timestamp, packet_data)
            except DecodeError as e:
                self.decode_errors += 1
                self.logger.debug(f"Skipping packet: {e}")
                continue
            if message is not None:
                self.dns_packet_count += 1
                yield message

    def run(self, callback: Callable[[DNSMessage], None]) -> None:
        """Blocking loop: hand each decoded message to ``callback``"""
        for message in self.messages():
            callback(message)

    def stop(self) -> None:
        self.running.clear()

    def close(self) -> None:
        self.stop()
        if self.pcap_handle is not None and hasattr(self.pcap_handle, 'close'):
            self.pcap_handle.close()
        self.pcap_handle = None

    def get_stats(self) -> dict:
        duration = time.time() - self.start_time if self.start_time else 0
        return {
            'interface': self.interface,
            'duration': duration,
            'total_packets': self.packet_count,
            'dns_packets': self.dns_packet_count,
            'decode_errors': self.decode_errors,
        }
