"""Configures pytest further."""
import pytest


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip exhaustive prime pair sweeps")
    parser.addoption("--run-extreme",
                     action="store_true",
                     default=False,
                     help="run round-trip sweeps over every prime pair between 64000 and 65536")


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: exhaustive sweep, deselect with --skip-slow")
    config.addinivalue_line("markers", "extreme: very slow sweep, needs --run-extreme")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)
