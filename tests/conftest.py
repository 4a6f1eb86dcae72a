"""
Pytest configuration and fixtures for IP protocol registry tests.
"""

import pytest

from ip_protocol_registry import ProtocolRegistry, get_default_registry


@pytest.fixture
def sample_protocol_csv():
    """Sample protocol numbers dataset for testing."""
    return b"""# Sample protocol numbers, trimmed from the IANA registry
Decimal,Keyword,Protocol,IPv6 Extension Header,Reference
0,HOPOPT,IPv6 Hop-by-Hop Option,Y,[RFC8200]
1,ICMP,Internet Control Message,,[RFC792]
6,TCP,Transmission Control,,[RFC9293]
17,UDP,User Datagram,,[RFC768][Jon_Postel]
# numbers 18-60 omitted
61,,any host internal protocol,,[Internet_Assigned_Numbers_Authority]
148-252,,Unassigned,,[Internet_Assigned_Numbers_Authority]
Reserved,,Reserved for testing,,
255,Reserved,,,[Internet_Assigned_Numbers_Authority]
"""


@pytest.fixture
def replacement_protocol_csv():
    """A second, unrelated dataset used to test overrides."""
    return b"""Decimal,Keyword,Protocol,IPv6 Extension Header,Reference
200,NEWP,New Protocol,,[local]
201-210,,Local Experiments,,[local]
"""


@pytest.fixture
def registry(sample_protocol_csv):
    """A registry whose default dataset is the sample CSV."""
    return ProtocolRegistry(dataset_provider=lambda: sample_protocol_csv)


@pytest.fixture
def sample_csv_file(tmp_path, sample_protocol_csv):
    """Write the sample dataset to a temporary file."""
    path = tmp_path / "protocol-numbers.csv"
    path.write_bytes(sample_protocol_csv)
    return path


@pytest.fixture
def default_registry():
    """The process-wide registry, reset before and after the test."""
    registry = get_default_registry()
    registry.reset()
    yield registry
    registry.reset()
