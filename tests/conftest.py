"""
Shared fixtures: a deterministic fake network for the scanner
"""

import pytest

from fakes import FakePortProbe, FakeProbe, dns_ok, http_ok, tls_ok


@pytest.fixture
def secure_site():
    """Probes for a domain that passes every check"""
    return {
        'port_probe': FakePortProbe(),
        'tls_probe': FakeProbe(tls_ok()),
        'dns_probe': FakeProbe(dns_ok()),
        'http_probe': FakeProbe(http_ok()),
    }
