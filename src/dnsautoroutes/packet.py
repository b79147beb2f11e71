"""
DNS response decoding with dpkt
"""

import struct
import time
from dataclasses import dataclass, field
from ipaddress import IPv4Address
from typing import Any, Dict, List, Optional, Union

import dpkt

from .exceptions import DecodeError
from .names import DomainName

DNS_TYPE_MAP = {
    1: "A", 2: "NS", 5: "CNAME", 6: "SOA", 12: "PTR", 15: "MX", 16: "TXT", 28: "AAAA"
}
DNS_PORT = 53

# pcap link-layer types
DLT_NULL = 0
DLT_EN10MB = 1
DLT_RAW = 12
DLT_LOOP = 108
DLT_LINUX_SLL = 113

RecordData = Union[IPv4Address, DomainName, None]


@dataclass(frozen=True)
class AnswerRecord:
    """One answer RR: owner name, type mnemonic and typed data"""
    name: DomainName
    rtype: str
    data: RecordData = None

    def __str__(self) -> str:
        return f"{self.name} {self.rtype} {self.data if self.data is not None else '-'}"


@dataclass
class DNSMessage:
    """Decoded DNS message, reduced to what route matching needs"""
    query_id: int
    is_response: bool
    answers: List[AnswerRecord] = field(default_factory=list)
    timestamp: float = field(default_factory=time.time)


def _get_type_name(rtype: int) -> str:
    return DNS_TYPE_MAP.get(rtype, f"TYPE{rtype}")


def _text(value) -> str:
    return value if isinstance(value, str) else value.decode('utf-8', errors='replace')


def _decode_answer(rr: dpkt.dns.DNS.RR) -> Optional[AnswerRecord]:
    try:
        owner = DomainName.from_text(_text(rr.name))
    except ValueError:
        return None
    rtype = _get_type_name(rr.type)
    data: RecordData = None
    if rr.type == dpkt.dns.DNS_A:
        raw = getattr(rr, 'ip', None) or rr.rdata
        if raw and len(raw) == 4:
            data = IPv4Address(bytes(raw))
    elif rr.type == dpkt.dns.DNS_CNAME:
        cname = getattr(rr, 'cname', None)
        if cname:
            try:
                data = DomainName.from_text(_text(cname))
            except ValueError:
                data = None
    return AnswerRecord(name=owner, rtype=rtype, data=data)


def decode_message(payload: bytes, timestamp: Optional[float] = None) -> DNSMessage:
    """Decode a raw DNS message (UDP payload)"""
    if not payload or len(payload) < 12:
        raise DecodeError(f"DNS message too short ({len(payload or b'')} bytes)")
    try:
        dns = dpkt.dns.DNS(bytes(payload))
    except (dpkt.UnpackError, struct.error, IndexError, ValueError) as e:
        raise DecodeError(f"Malformed DNS message: {e!r}")

    answers = []
    for rr in dns.an:
        record = _decode_answer(rr)
        if record is not None:
            answers.append(record)
    return DNSMessage(
        query_id=dns.id,
        is_response=dns.qr == dpkt.dns.DNS_R,
        answers=answers,
        timestamp=timestamp if timestamp is not None else time.time(),
    )


def _link_payload(frame: bytes, datalink: int):
    if datalink == DLT_EN10MB:
        return dpkt.ethernet.Ethernet(frame).data
    if datalink == DLT_LINUX_SLL:
        return dpkt.sll.SLL(frame).data
    if datalink in (DLT_NULL, DLT_LOOP):
        return dpkt.loopback.Loopback(frame).data
    if datalink == DLT_RAW:
        return dpkt.ip.IP(frame)
    raise DecodeError(f"Unsupported datalink type {datalink}")


def extract_dns_payload(frame: bytes, datalink: int = DLT_EN10MB) -> Optional[bytes]:
    """Return the UDP/53 payload of a captured frame, or None for other traffic"""
    try:
        ip = _link_payload(frame, datalink)
    except (dpkt.UnpackError, struct.error) as e:
        raise DecodeError(f"Malformed frame: {e!r}")
    if not isinstance(ip, dpkt.ip.IP):
        return None
    udp = ip.data
    if not isinstance(udp, dpkt.udp.UDP):
        return None
    if udp.sport != DNS_PORT and udp.dport != DNS_PORT:
        return None
    return bytes(udp.data)


class DNSAnalyzer:
    """Frame-to-message decoder that counts what it sees"""

    def __init__(self, datalink: int = DLT_EN10MB):
        self.datalink = datalink
        self.stats = {
            'total_packets': 0,
            'dns_packets': 0,
            'parse_errors': 0,
        }

    def analyze_packet(self, timestamp: float, packet_data: bytes) -> Optional[DNSMessage]:
        """Decode a frame; None for non-DNS traffic, DecodeError for garbage"""
        self.stats['total_packets'] += 1
        try:
            payload = extract_dns_payload(packet_data, self.datalink)
            if payload is None:
                return None
            message = decode_message(payload, timestamp)
        except DecodeError:
            self.stats['parse_errors'] += 1
            raise
        self.stats['dns_packets'] += 1
        return message

    def get_stats(self) -> Dict[str, Any]:
        stats = self.stats.copy()
        if stats['total_packets'] > 0:
            stats['dns_packet_ratio'] = stats['dns_packets'] / stats['total_packets']
            stats['error_ratio'] = stats['parse_errors'] / stats['total_packets']
        return stats
