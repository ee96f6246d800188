"""Core data types and enums used across the scanner.

These types make our measurement results explicit and consistent.
Every probe produces exactly one ProbeOutcome; the scorer only ever
sees these values, never a raw network exception.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ProbeStatus(Enum):
    """Tag for a probe outcome.

    Success: The probe completed and carries data
    Failure: The probe ran but the network said no (refused, reset, bad handshake, ...)
    Timeout: The probe gave up waiting
    """
    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of a single probe invocation.

    Outcomes are immutable once produced. Use the constructors below
    rather than building one by hand.
    """
    target: str
    probe_type: str  # 'port', 'tls', 'dns', 'http'
    status: ProbeStatus
    data: Any = None
    error: Optional[str] = None
    duration_ms: float = field(default=0.0, compare=False)

    @classmethod
    def success(cls, target: str, probe_type: str, data: Any, duration_ms: float = 0.0) -> 'ProbeOutcome':
        return cls(target, probe_type, ProbeStatus.SUCCESS, data=data, duration_ms=duration_ms)

    @classmethod
    def failure(cls, target: str, probe_type: str, reason: str, duration_ms: float = 0.0) -> 'ProbeOutcome':
        return cls(target, probe_type, ProbeStatus.FAILURE, error=reason, duration_ms=duration_ms)

    @classmethod
    def timeout(cls, target: str, probe_type: str, duration_ms: float = 0.0) -> 'ProbeOutcome':
        return cls(target, probe_type, ProbeStatus.TIMEOUT, error=f"{probe_type} timeout",
                   duration_ms=duration_ms)

    @property
    def ok(self) -> bool:
        return self.status is ProbeStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for logging."""
        return {
            'target': self.target,
            'probe_type': self.probe_type,
            'status': self.status.value,
            'error': self.error,
            'duration_ms': round(self.duration_ms, 2),
        }


class RiskTier(Enum):
    """How bad it is to find a service port open to the internet."""
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class PortService:
    """One entry in the port catalog."""
    port: int
    service_name: str
    risk_tier: RiskTier


@dataclass(frozen=True)
class PortFinding:
    """Reachability of one catalog port for one scan."""
    port: int
    service_name: str
    risk_tier: RiskTier
    is_open: bool


@dataclass(frozen=True)
class CertificateSummary:
    """What we care about in the served certificate."""
    days_remaining: int
    issuer_organization: str

    @property
    def is_valid(self) -> bool:
        return self.days_remaining > 0


@dataclass(frozen=True)
class DNSPolicyState:
    """SPF / DMARC presence and strength for a domain."""
    spf_present: bool = False
    spf_permissive: bool = False
    dmarc_present: bool = False
    dmarc_monitor_only: bool = False


@dataclass(frozen=True)
class HeaderAuditState:
    """Presence of the three response protections we audit."""
    hsts_present: bool = False
    nosniff_present: bool = False
    frame_protected: bool = False

    @classmethod
    def from_headers(cls, headers: Dict[str, str]) -> 'HeaderAuditState':
        """Build the audit state from response headers.

        Header names are matched case-insensitively. Frame protection is
        satisfied by X-Frame-Options or by a CSP frame-ancestors directive.
        """
        lowered = {name.lower(): value for name, value in headers.items()}
        csp = lowered.get('content-security-policy', '')
        return cls(
            hsts_present=bool(lowered.get('strict-transport-security')),
            nosniff_present=bool(lowered.get('x-content-type-options')),
            frame_protected=bool(lowered.get('x-frame-options')) or 'frame-ancestors' in csp.lower(),
        )


@dataclass(frozen=True)
class HTTPAudit:
    """Success payload of the HTTP probe."""
    headers_state: HeaderAuditState
    body: str
    headers: Dict[str, str] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class ScanReport:
    """The only externally visible result of a scan.

    Built once by the scorer and never mutated. A scan that could not start
    (bad domain) raises instead of returning one of these.
    """
    score: int
    issues: Tuple[str, ...] = ()
    passes: Tuple[str, ...] = ()
    cms: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON output."""
        return {
            'score': self.score,
            'issues': list(self.issues),
            'passes': list(self.passes),
            'cms': self.cms,
        }


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)


@dataclass
class ScanConfig:
    """Runtime configuration for the scanner.

    All values can come from .env with sane defaults.
    Nothing here is shared mutable state - each scan only reads it.
    """
    domain: Optional[str] = None

    port_timeout: float = 2.5
    tls_timeout: float = 4.0
    dns_timeout: float = 4.0
    http_timeout: float = 10.0

    user_agent: str = DEFAULT_USER_AGENT
