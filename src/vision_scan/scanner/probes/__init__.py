"""Network probes. Each one returns exactly one ProbeOutcome per call."""

from .port_probe import PortProbe, PORT_CATALOG
from .tls_probe import TLSProbe
from .dns_probe import DNSPolicyProbe
from .http_probe import HTTPAuditProbe

__all__ = ['PortProbe', 'PORT_CATALOG', 'TLSProbe', 'DNSPolicyProbe', 'HTTPAuditProbe']
