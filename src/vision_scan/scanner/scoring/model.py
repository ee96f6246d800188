"""Scoring model - deductions from a perfect 100.

Each phase turns its probe outcome into an ordered list of findings:
an issue (with a point deduction) or a pass. The report is a single
fold over those lists, so output order is the phase order and the
catalog order inside each phase - never the order probes finished in.

Rules:
- Probe failures that leave a check untested never cost points,
  except TLS, where "no certificate" is itself the finding
- Score is clamped to [0, 100]
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from vision_scan.util.types import (
    CertificateSummary,
    DNSPolicyState,
    HTTPAudit,
    PortFinding,
    ProbeOutcome,
    RiskTier,
    ScanReport,
)
from vision_scan.scanner.fingerprint import identify

logger = logging.getLogger(__name__)

MAX_SCORE = 100
CERT_WARNING_DAYS = 14


@dataclass(frozen=True)
class Finding:
    """One line of the report: an issue that costs points, or a pass."""
    message: str
    deduction: int = 0
    passed: bool = False

    @classmethod
    def issue(cls, message: str, deduction: int = 0) -> 'Finding':
        return cls(message, deduction, passed=False)

    @classmethod
    def ok(cls, message: str) -> 'Finding':
        return cls(message, 0, passed=True)


@dataclass(frozen=True)
class ScanOutcomes:
    """Everything the probes produced for one scan, ready to score."""
    domain: str
    ports: Tuple[PortFinding, ...]
    tls: ProbeOutcome
    dns: ProbeOutcome
    http: ProbeOutcome


def port_findings(ports: Sequence[PortFinding]) -> List[Finding]:
    findings = []
    for port in ports:
        if not port.is_open:
            continue
        deduction = 20 if port.risk_tier is RiskTier.CRITICAL else 10
        findings.append(Finding.issue(
            f"Port {port.port} ({port.service_name}) is open to the internet ({port.risk_tier.value} Risk)",
            deduction,
        ))

    if not findings:
        services = ", ".join(p.service_name for p in ports)
        findings.append(Finding.ok(f"No risky ports exposed ({services})"))

    return findings


def tls_findings(outcome: ProbeOutcome) -> List[Finding]:
    cert: Optional[CertificateSummary] = outcome.data if outcome.ok else None

    if cert is None:
        return [Finding.issue("SSL Certificate missing or unreachable (Encryption Risk)", 20)]

    if cert.days_remaining == 0:
        # Less than a full day left: already invalid, but not yet expired
        return [Finding.issue("SSL Certificate expires today", 20)]

    if not cert.is_valid:
        return [Finding.issue(
            f"SSL Certificate has expired ({abs(cert.days_remaining)} days ago)", 20
        )]

    if cert.days_remaining <= CERT_WARNING_DAYS:
        return [Finding.issue(f"SSL Certificate expires in {cert.days_remaining} days", 10)]

    return [Finding.ok(
        f"SSL Certificate valid ({cert.days_remaining} days remaining, issued by {cert.issuer_organization})"
    )]


def dns_findings(outcome: ProbeOutcome) -> List[Finding]:
    if not outcome.ok:
        return [Finding.issue("DNS Lookup failed")]

    state: DNSPolicyState = outcome.data
    findings = []

    # +all overrides "present": one line, one deduction
    if state.spf_permissive:
        findings.append(Finding.issue("SPF Record allows 'anyone' to send email (Critical Risk)", 20))
    elif not state.spf_present:
        findings.append(Finding.issue("Missing SPF Record (High Phishing Risk)", 20))
    else:
        findings.append(Finding.ok("SPF Record Detected (Email Identity)"))

    if not state.dmarc_present:
        findings.append(Finding.issue("Missing DMARC Record (Email Spoofing Possible)", 30))
    elif state.dmarc_monitor_only:
        findings.append(Finding.issue("DMARC Policy is weak ('p=none')", 10))
    else:
        findings.append(Finding.ok("DMARC Record Active (Spoofing Protection)"))

    return findings


def header_findings(outcome: ProbeOutcome) -> List[Finding]:
    if not outcome.ok:
        # Degraded: omit header checks rather than assume the worst
        return [Finding.issue("Could not scan Website Headers (Site may be blocking bots)")]

    state = outcome.data.headers_state
    findings = []

    if state.hsts_present:
        findings.append(Finding.ok("HSTS Enabled (Secure Connections Only)"))
    else:
        findings.append(Finding.issue("Missing HSTS Header (Vulnerable to Downgrade Attacks)", 10))

    if state.nosniff_present:
        findings.append(Finding.ok("Content Sniffing Protection Active"))
    else:
        findings.append(Finding.issue("Missing X-Content-Type-Options (File Execution Risk)", 5))

    if state.frame_protected:
        findings.append(Finding.ok("Clickjacking Protection Active"))
    else:
        findings.append(Finding.issue("Missing Clickjacking Protection (X-Frame-Options or CSP)", 5))

    return findings


def detect_cms(outcome: ProbeOutcome) -> Optional[str]:
    if not outcome.ok:
        return None
    audit: HTTPAudit = outcome.data
    return identify(audit.body.lower(), audit.headers)


class Scorer:
    """Folds probe outcomes into a ScanReport."""

    def findings(self, outcomes: ScanOutcomes) -> List[Finding]:
        """All findings for a scan, in report order."""
        return (
            port_findings(outcomes.ports)
            + tls_findings(outcomes.tls)
            + dns_findings(outcomes.dns)
            + header_findings(outcomes.http)
        )

    def score(self, outcomes: ScanOutcomes) -> ScanReport:
        total = MAX_SCORE
        issues: List[str] = []
        passes: List[str] = []

        for finding in self.findings(outcomes):
            total -= finding.deduction
            if finding.passed:
                passes.append(finding.message)
            else:
                issues.append(finding.message)

        score = min(MAX_SCORE, max(0, total))
        cms = detect_cms(outcomes.http)

        logger.info(f"Scored {outcomes.domain}: {score}/100, "
                    f"{len(issues)} issues, {len(passes)} passes, cms={cms}")

        return ScanReport(score=score, issues=tuple(issues), passes=tuple(passes), cms=cms)
