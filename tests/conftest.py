"""
Shared fixtures: query log paths, recording effectors and a DNS message builder.
"""
import socket
from ipaddress import IPv4Address

import dpkt
import pytest

from dnsautoroutes.exceptions import RouteInstallError, StoreError
from dnsautoroutes.matcher import Matcher, RoutingContext
from dnsautoroutes.names import DomainName
from dnsautoroutes.packet import AnswerRecord, DNSMessage


def encode_name(name: str) -> bytes:
    """Uncompressed wire-format name"""
    labels = [label for label in name.rstrip(".").split(".") if label]
    return b"".join(bytes([len(l)]) + l.encode("ascii") for l in labels) + b"\x00"


def a_rr(owner: str, address: str, ttl: int = 60) -> dpkt.dns.DNS.RR:
    return dpkt.dns.DNS.RR(name=owner, type=dpkt.dns.DNS_A, cls=dpkt.dns.DNS_IN,
                           ttl=ttl, rdata=socket.inet_aton(address))


def cname_rr(owner: str, target: str, ttl: int = 60) -> dpkt.dns.DNS.RR:
    return dpkt.dns.DNS.RR(name=owner, type=dpkt.dns.DNS_CNAME, cls=dpkt.dns.DNS_IN,
                           ttl=ttl, rdata=encode_name(target))


def build_dns(answers, response: bool = True, query_id: int = 0x1234) -> bytes:
    """Pack a DNS message with the given answer RRs"""
    op = 0x8180 if response else 0x0100
    return bytes(dpkt.dns.DNS(id=query_id, op=op, qd=[], an=list(answers), ns=[], ar=[]))


def build_frame(payload: bytes, sport: int = 53, dport: int = 40000) -> bytes:
    """Ethernet/IPv4/UDP frame carrying ``payload``"""
    udp = dpkt.udp.UDP(sport=sport, dport=dport, data=payload)
    udp.ulen = 8 + len(payload)
    ip = dpkt.ip.IP(src=socket.inet_aton("192.0.2.53"), dst=socket.inet_aton("192.0.2.10"),
                    p=dpkt.ip.IP_PROTO_UDP, ttl=64, data=udp)
    ip.len = 20 + udp.ulen
    eth = dpkt.ethernet.Ethernet(src=b"\x02\x00\x00\x00\x00\x01", dst=b"\x02\x00\x00\x00\x00\x02",
                                 type=dpkt.ethernet.ETH_TYPE_IP, data=ip)
    return bytes(eth)


def answer_a(owner: str, address: str) -> AnswerRecord:
    return AnswerRecord(DomainName.from_text(owner), "A", IPv4Address(address))


def answer_cname(owner: str, target: str) -> AnswerRecord:
    return AnswerRecord(DomainName.from_text(owner), "CNAME", DomainName.from_text(target))


def response(*answers: AnswerRecord) -> DNSMessage:
    return DNSMessage(query_id=1, is_response=True, answers=list(answers))


class RouteRecorder:
    """Stands in for the route effector"""

    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    def __call__(self, address):
        self.calls.append(address)
        if self.fail:
            raise RouteInstallError(str(address), "exit 1: File exists")
        return True

    add_route = __call__

    def get_stats(self):
        return {'installed': len(self.calls), 'failed': 0}


class QueryRecorder:
    """Stands in for the query log upsert"""

    def __init__(self, fail: bool = False):
        self.hosts = []
        self.fail = fail

    def __call__(self, host):
        if self.fail:
            raise StoreError("disk I/O error")
        self.hosts.append(str(host))


@pytest.fixture
def routes():
    return RouteRecorder()


@pytest.fixture
def queries():
    return QueryRecorder()


@pytest.fixture
def context():
    return RoutingContext.create("10.0.0.1", ["corp.example.com"])


@pytest.fixture
def matcher(context, routes, queries):
    return Matcher(context, on_route=routes, on_query=queries)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "state" / "query_log.db")
