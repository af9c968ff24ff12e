"""
Shared fixtures for telemetry log tests.
"""

import pytest

from flightlog.services.channels import ChannelPool
from flightlog.utils.sample_data import new_link


# 2023-11-14T22:13:18Z; every byte of the token is below 0xFD so a token fed
# to the frame parser is never mistaken for a start-of-frame marker
START_US = 0x00060A2418000000
STEP_US = 0x100000  # ~1.05 s


@pytest.fixture
def link():
    """MAVLink instance for packing test frames."""
    return new_link()


@pytest.fixture
def pool():
    return ChannelPool(size=2)


@pytest.fixture
def context(pool):
    """Decoder context reserved for the duration of a test."""
    with pool.reserve() as ctx:
        yield ctx
