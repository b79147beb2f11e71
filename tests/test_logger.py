"""
Tests for logging helpers.
"""
import logging

from dnsautoroutes.utils.logger import normalize_module_name, parse_module_levels, _apply_module_levels


def test_normalize_module_name():
    assert normalize_module_name("match") == "dnsautoroutes.matcher"
    assert normalize_module_name("store") == "dnsautoroutes.store"
    assert normalize_module_name("names.*") == "dnsautoroutes.names"
    assert normalize_module_name("urllib3") == "urllib3"


def test_parse_module_levels():
    assert parse_module_levels("matcher=debug, store=INFO,,bogus") == {
        "matcher": "DEBUG", "store": "INFO"
    }


def test_levels_from_environment(monkeypatch):
    monkeypatch.setenv("DNSAR_LOG_LEVELS", "replay=WARNING,routes=NOPE")
    _apply_module_levels(None)

    assert logging.getLogger("dnsautoroutes.replay").level == logging.WARNING
    logging.getLogger("dnsautoroutes.replay").setLevel(logging.NOTSET)
