"""
Tests for dnsautoroutes.names
"""
import pytest

from dnsautoroutes.names import DomainName, ZoneSet


def name(text):
    return DomainName.from_text(text)


@pytest.mark.parametrize("text", ["corp.example.com", "a.b", "example.com.", "WWW.Example.COM"])
def test_zone_of_is_reflexive(text):
    assert name(text).is_zone_of(name(text))


def test_zone_of_matches_subdomains():
    zone = name("corp.example.com")
    assert zone.is_zone_of(name("vpn.corp.example.com"))
    assert zone.is_zone_of(name("a.b.c.corp.example.com"))
    assert zone.is_zone_of(name("corp.example.com"))


def test_zone_of_is_label_exact():
    zone = name("corp.example.com")
    assert not zone.is_zone_of(name("notcorp.example.com"))
    assert not zone.is_zone_of(name("example.com"))
    assert not zone.is_zone_of(name("corp.example.com.evil.net"))


def test_zone_of_ignores_case_and_trailing_dot():
    assert name("Corp.Example.COM.").is_zone_of(name("vpn.CORP.example.com"))


def test_equality_and_hash_are_case_insensitive():
    assert name("Edge.CDN.net") == name("edge.cdn.net.")
    assert len({name("Edge.CDN.net"), name("edge.cdn.net")}) == 1


def test_str_is_canonical():
    assert str(name("VPN.Corp.Example.com.")) == "vpn.corp.example.com"


def test_labels():
    assert name("Vpn.Corp.example.com").labels == ("vpn", "corp", "example", "com")


@pytest.mark.parametrize("text", ["", ".", "  ", "a..b", "x" * 64 + ".com"])
def test_invalid_names_raise_value_error(text):
    with pytest.raises(ValueError):
        DomainName.from_text(text)


def test_immutable():
    n = name("corp.example.com")
    with pytest.raises(AttributeError):
        n._name = None


def test_zone_set_contains():
    zones = ZoneSet(["corp.example.com", "example.internal"])
    assert zones.contains(name("git.example.internal"))
    assert zones.contains(name("corp.example.com"))
    assert not zones.contains(name("example.com"))
    assert len(zones) == 2
    assert str(zones) == "corp.example.com, example.internal"
